from photovault.database.db_base import Base
from photovault.database.change_bus import ChangeBus, ChangeSubscription
from photovault.database.models import AlbumDatabaseModel, PhotoDatabaseModel
