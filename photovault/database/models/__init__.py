from photovault.database.models.albums_model import AlbumDatabaseModel
from photovault.database.models.photos_model import PhotoDatabaseModel
