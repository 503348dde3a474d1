"""
Album controller module for database CRUD operations.
"""
import logging
from datetime import datetime
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from photovault.enums import ReservedAlbum
from photovault.errors import StorageError
from photovault.utils.dates import get_now
from photovault.database.change_bus import ChangeBus
from photovault.controllers.base_controller import BaseController
from photovault.database.models.albums_model import AlbumDatabaseModel
from photovault.controllers.photo_controller import PhotoController
from photovault.schemas import AlbumResponse, AlbumListResponse

class AlbumController(BaseController):
    """
    Controlador para la gestión de operaciones de base de datos de álbumes.
    Mantiene además los datos derivados (photo_count, cover_photo_path) cuando se le pide.
    """
    def __init__(self, session: Session, change_bus: Optional[ChangeBus] = None) -> None:
        super().__init__(session, change_bus)
        self.logger = logging.getLogger(self.__class__.__name__)

    def _visible_albums_stmt(self):
        return (
            select(AlbumDatabaseModel)
            .where(AlbumDatabaseModel.name.not_in(ReservedAlbum.get_hidden_names()))
            .order_by(AlbumDatabaseModel.created_date.desc(), AlbumDatabaseModel.id.desc())
        )

    # =========== CONSULTAS ===========
    def get_all_albums(self) -> AlbumListResponse:
        """
        Recupera todos los álbumes visibles, del más reciente al más antiguo.

        Returns:
            AlbumListResponse: Objeto con la lista de álbumes y el total.
        """
        albums_db = self.session.execute(self._visible_albums_stmt()).scalars().all()
        return AlbumListResponse(
            count=len(albums_db),
            albums=[AlbumResponse.model_validate(a) for a in albums_db]
        )

    def get_all_albums_except(self, album_id: int) -> AlbumListResponse:
        """
        Recupera los álbumes visibles salvo uno (destinos posibles de un movimiento).

        Args:
            album_id (int): ID del álbum a excluir.

        Returns:
            AlbumListResponse: Objeto con la lista de álbumes y el total.
        """
        stmt = self._visible_albums_stmt().where(AlbumDatabaseModel.id != album_id)
        albums_db = self.session.execute(stmt).scalars().all()
        return AlbumListResponse(
            count=len(albums_db),
            albums=[AlbumResponse.model_validate(a) for a in albums_db]
        )

    def get_album_by_id(self, album_id: int) -> Optional[AlbumResponse]:
        """
        Recupera un álbum por su ID.

        Args:
            album_id (int): ID del álbum.

        Returns:
            Optional[AlbumResponse]: El esquema de respuesta o None.
        """
        album_db = self._get_item_by_id(AlbumDatabaseModel, album_id)
        if album_db:
            return AlbumResponse.model_validate(album_db)
        return None

    def get_album_by_name(self, name: str) -> Optional[AlbumResponse]:
        """
        Busca un álbum por nombre exacto (sensible a mayúsculas).

        Args:
            name (str): Nombre del álbum.

        Returns:
            Optional[AlbumResponse]: El esquema de respuesta o None.
        """
        stmt = (
            select(AlbumDatabaseModel)
            .where(AlbumDatabaseModel.name == name)
            .order_by(AlbumDatabaseModel.id.asc())
            .limit(1)
        )
        album_db = self.session.execute(stmt).scalar_one_or_none()
        return AlbumResponse.model_validate(album_db) if album_db else None

    # =========== ESCRITURA ===========
    def create_album(self, name: str, created_date: Optional[datetime] = None) -> AlbumResponse:
        """
        Inserta un álbum nuevo. La unicidad del nombre la comprueba quien llama.

        Args:
            name (str): Nombre del álbum.
            created_date (Optional[datetime]): Fecha de creación; ahora por defecto.

        Returns:
            AlbumResponse: El álbum creado.

        Raises:
            StorageError: Si no se pudo persistir.
        """
        new_album = AlbumDatabaseModel(
            name=name,
            created_date=created_date or get_now(),
            photo_count=0,
            cover_photo_path=None,
            cover_is_auto=True
        )
        if not self._commit_or_rollback(new_album):
            raise StorageError(message="No se pudo crear el álbum", details={"name": name})

        self.session.refresh(new_album)
        return AlbumResponse.model_validate(new_album)

    def rename_album(self, album_id: int, new_name: str) -> Optional[AlbumResponse]:
        """
        Cambia el nombre de un álbum en su sitio.

        Args:
            album_id (int): ID del álbum.
            new_name (str): Nuevo nombre.

        Returns:
            Optional[AlbumResponse]: El álbum actualizado o None si no existe.
        """
        album = self._get_item_by_id(AlbumDatabaseModel, album_id)
        if not album:
            return None

        album.name = new_name
        if not self._commit_or_rollback(album):
            raise StorageError(message="No se pudo renombrar el álbum", details={"album_id": album_id})
        self.session.refresh(album)
        return AlbumResponse.model_validate(album)

    def delete_album(self, album_id: int) -> bool:
        """
        Elimina el registro del álbum de la DB. Las fotos no se tocan.

        Args:
            album_id (int): ID del álbum.

        Returns:
            bool: True si la eliminación fue exitosa, False si no existía.
        """
        album = self._get_item_by_id(AlbumDatabaseModel, album_id)
        if not album:
            return False

        if not self._delete_or_rollback(album):
            raise StorageError(message="No se pudo eliminar el álbum", details={"album_id": album_id})
        return True

    def update_photo_count(self, album_id: int) -> int:
        """
        Recalcula y guarda photo_count: fotos activas (no en papelera) del álbum.

        Args:
            album_id (int): ID del álbum.

        Returns:
            int: El nuevo valor, o 0 si el álbum no existe.
        """
        album = self._get_item_by_id(AlbumDatabaseModel, album_id)
        if not album:
            return 0

        try:
            count = PhotoController(self.session).count_active_photos(album_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(message="No se pudo contar las fotos", details={"album_id": album_id}) from e

        album.photo_count = count
        if not self._commit_or_rollback(album):
            raise StorageError(message="No se pudo actualizar el contador", details={"album_id": album_id})
        return count

    def update_cover_photo(self, album_id: int, cover_photo_path: Optional[str], is_auto: bool = True) -> bool:
        """
        Fija (o limpia con None) la portada de un álbum.

        Args:
            album_id (int): ID del álbum.
            cover_photo_path (Optional[str]): Ruta de la portada.
            is_auto (bool): False si la portada la elige el usuario.

        Returns:
            bool: True si el álbum existía y se actualizó.
        """
        album = self._get_item_by_id(AlbumDatabaseModel, album_id)
        if not album:
            return False

        album.cover_photo_path = cover_photo_path
        album.cover_is_auto = is_auto
        if not self._commit_or_rollback(album):
            raise StorageError(message="No se pudo actualizar la portada", details={"album_id": album_id})
        return True
