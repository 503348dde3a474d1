from photovault.controllers.base_controller import BaseController
from photovault.controllers.album_controller import AlbumController
from photovault.controllers.photo_controller import PhotoController
