"""
Photo controller module for database CRUD operations.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional, List
from sqlalchemy import select, update, delete, func
from sqlalchemy.orm import Session

from photovault.errors import StorageError
from photovault.utils.dates import get_now
from photovault.database.change_bus import ChangeBus
from photovault.controllers.base_controller import BaseController
from photovault.database.models.photos_model import PhotoDatabaseModel
from photovault.schemas import PhotoResponse, PhotoResponseList

PHOTOS_TABLE = PhotoDatabaseModel.__tablename__

class PhotoController(BaseController):
    """
    Controlador para la gestión de operaciones de base de datos de fotos.
    Incluye la papelera (borrado lógico) y los favoritos.
    """

    def __init__(self, session: Session, change_bus: Optional[ChangeBus] = None) -> None:
        super().__init__(session, change_bus)
        self.logger = logging.getLogger(self.__class__.__name__)

    def _to_list(self, photos_db) -> PhotoResponseList:
        photos = [PhotoResponse.model_validate(p) for p in photos_db]
        return PhotoResponseList(count=len(photos), photos=photos)

    # =========== CREACIÓN ===========
    def create_photo(
        self,
        album_id: int,
        file_path: str,
        original_name: str,
        file_size: int,
        width: int = 0,
        height: int = 0,
        imported_date: Optional[datetime] = None
    ) -> PhotoResponse:
        """
        Crea un registro de foto activo (fuera de la papelera, no favorito).

        Args:
            album_id (int): ID del álbum propietario.
            file_path (str): Ruta de la copia privada.
            original_name (str): Nombre original.
            file_size (int): Tamaño en bytes.
            width (int): Ancho en píxeles.
            height (int): Alto en píxeles.
            imported_date (Optional[datetime]): Fecha de importación; ahora por defecto.

        Returns:
            PhotoResponse: El registro creado.

        Raises:
            StorageError: Si no se pudo persistir.
        """
        db_photo = PhotoDatabaseModel(
            album_id=album_id,
            file_path=file_path,
            original_name=original_name,
            file_size=file_size,
            width=width,
            height=height,
            imported_date=imported_date or get_now(),
            is_deleted=False,
            deleted_date=None,
            is_favorite=False
        )

        if not self._commit_or_rollback(db_photo):
            raise StorageError(message="No se pudo guardar la foto", details={"file_path": file_path})

        self.session.refresh(db_photo)
        return PhotoResponse.model_validate(db_photo)

    def create_photos(self, photos_data: List[Dict[str, Any]]) -> List[PhotoResponse]:
        """
        Inserta varios registros de foto en una sola transacción.

        Args:
            photos_data (List[Dict[str, Any]]): Argumentos de create_photo por cada foto.

        Returns:
            List[PhotoResponse]: Registros creados, en el mismo orden.
        """
        now = get_now()
        db_photos = [
            PhotoDatabaseModel(
                album_id=data["album_id"],
                file_path=data["file_path"],
                original_name=data["original_name"],
                file_size=data.get("file_size", 0),
                width=data.get("width", 0),
                height=data.get("height", 0),
                imported_date=data.get("imported_date") or now,
                is_deleted=False,
                is_favorite=False
            )
            for data in photos_data
        ]
        if not self._commit_all_or_rollback(db_photos):
            raise StorageError(message="No se pudieron guardar las fotos", details={"count": len(db_photos)})

        for photo in db_photos:
            self.session.refresh(photo)
        return [PhotoResponse.model_validate(p) for p in db_photos]

    # =========== CONSULTAS ===========
    def get_by_id(self, photo_id: int) -> Optional[PhotoResponse]:
        """
        Recupera una foto por su ID, esté o no en la papelera.

        Args:
            photo_id (int): ID de la foto.

        Returns:
            Optional[PhotoResponse]: El esquema de respuesta o None.
        """
        photo_db = self._get_item_by_id(PhotoDatabaseModel, photo_id)
        if photo_db:
            return PhotoResponse.model_validate(photo_db)
        return None

    def get_by_ids(self, photo_ids: List[int]) -> List[PhotoResponse]:
        """Recupera las fotos existentes de una lista de IDs, en orden de ID."""
        stmt = (
            select(PhotoDatabaseModel)
            .where(PhotoDatabaseModel.id.in_(photo_ids))
            .order_by(PhotoDatabaseModel.id.asc())
        )
        return [PhotoResponse.model_validate(p) for p in self.session.execute(stmt).scalars().all()]

    def get_active_photos_by_album(self, album_id: int) -> PhotoResponseList:
        """
        Fotos activas de un álbum, de la más reciente a la más antigua.

        Args:
            album_id (int): ID del álbum.

        Returns:
            PhotoResponseList: Objeto con la lista de fotos y el total.
        """
        stmt = (
            select(PhotoDatabaseModel)
            .where(
                PhotoDatabaseModel.album_id == album_id,
                PhotoDatabaseModel.is_deleted.is_(False)
            )
            .order_by(PhotoDatabaseModel.imported_date.desc(), PhotoDatabaseModel.id.desc())
        )
        return self._to_list(self.session.execute(stmt).scalars().all())

    def get_all_photos_by_album(self, album_id: int) -> PhotoResponseList:
        """
        Todas las fotos que referencian un álbum, incluidas las de la papelera.

        Args:
            album_id (int): ID del álbum.

        Returns:
            PhotoResponseList: Objeto con la lista de fotos y el total.
        """
        stmt = (
            select(PhotoDatabaseModel)
            .where(PhotoDatabaseModel.album_id == album_id)
            .order_by(PhotoDatabaseModel.imported_date.asc(), PhotoDatabaseModel.id.asc())
        )
        return self._to_list(self.session.execute(stmt).scalars().all())

    def count_active_photos(self, album_id: int) -> int:
        """Número de fotos activas de un álbum."""
        stmt = (
            select(func.count())
            .select_from(PhotoDatabaseModel)
            .where(
                PhotoDatabaseModel.album_id == album_id,
                PhotoDatabaseModel.is_deleted.is_(False)
            )
        )
        return self.session.execute(stmt).scalar() or 0

    def get_first_photo_in_album(self, album_id: int) -> Optional[PhotoResponse]:
        """
        Foto activa más antigua del álbum (importación ascendente, luego ID ascendente).
        Es la candidata a portada.

        Args:
            album_id (int): ID del álbum.

        Returns:
            Optional[PhotoResponse]: La foto o None si el álbum no tiene fotos activas.
        """
        stmt = (
            select(PhotoDatabaseModel)
            .where(
                PhotoDatabaseModel.album_id == album_id,
                PhotoDatabaseModel.is_deleted.is_(False)
            )
            .order_by(PhotoDatabaseModel.imported_date.asc(), PhotoDatabaseModel.id.asc())
            .limit(1)
        )
        photo_db = self.session.execute(stmt).scalar_one_or_none()
        return PhotoResponse.model_validate(photo_db) if photo_db else None

    def get_photos_in_bin(self) -> PhotoResponseList:
        """
        Contenido de la papelera, del borrado más reciente al más antiguo.

        Returns:
            PhotoResponseList: Objeto con la lista de fotos y el total.
        """
        stmt = (
            select(PhotoDatabaseModel)
            .where(PhotoDatabaseModel.is_deleted.is_(True))
            .order_by(PhotoDatabaseModel.deleted_date.desc(), PhotoDatabaseModel.id.desc())
        )
        return self._to_list(self.session.execute(stmt).scalars().all())

    def get_bin_photo_ids(self) -> List[int]:
        """IDs de todas las fotos en la papelera."""
        stmt = select(PhotoDatabaseModel.id).where(PhotoDatabaseModel.is_deleted.is_(True))
        return list(self.session.execute(stmt).scalars().all())

    def get_favorite_photos(self) -> PhotoResponseList:
        """
        Fotos favoritas activas, de la más reciente a la más antigua.

        Returns:
            PhotoResponseList: Objeto con la lista de fotos y el total.
        """
        stmt = (
            select(PhotoDatabaseModel)
            .where(
                PhotoDatabaseModel.is_favorite.is_(True),
                PhotoDatabaseModel.is_deleted.is_(False)
            )
            .order_by(PhotoDatabaseModel.imported_date.desc(), PhotoDatabaseModel.id.desc())
        )
        return self._to_list(self.session.execute(stmt).scalars().all())

    # =========== ACTUALIZACIÓN ===========
    def update_photo(self, photo_id: int, changes: Dict[str, Any]) -> Optional[PhotoResponse]:
        """
        Actualiza campos de una foto.

        Args:
            photo_id (int): ID de la foto.
            changes (Dict[str, Any]): Campos a modificar.

        Returns:
            Optional[PhotoResponse]: El esquema de respuesta o None si no existe.
        """
        photo_db = self._get_item_by_id(PhotoDatabaseModel, photo_id)
        if not photo_db:
            return None

        for field, value in changes.items():
            setattr(photo_db, field, value)

        if not self._commit_or_rollback(photo_db):
            raise StorageError(message="No se pudo actualizar la foto", details={"photo_id": photo_id})

        self.session.refresh(photo_db)
        return PhotoResponse.model_validate(photo_db)

    def set_album(self, photo_ids: List[int], album_id: int) -> int:
        """
        Reasigna el álbum de varias fotos.

        Args:
            photo_ids (List[int]): IDs de las fotos.
            album_id (int): Nuevo álbum.

        Returns:
            int: Número de fotos reasignadas.
        """
        if not photo_ids:
            return 0
        stmt = (
            update(PhotoDatabaseModel)
            .where(PhotoDatabaseModel.id.in_(photo_ids))
            .values(album_id=album_id)
        )
        return self._execute_or_rollback(stmt, {PHOTOS_TABLE})

    def set_favorite(self, photo_id: int, is_favorite: bool) -> Optional[PhotoResponse]:
        """Marca o desmarca una foto como favorita."""
        return self.update_photo(photo_id, {"is_favorite": is_favorite})

    # =========== PAPELERA ===========
    def move_to_bin(self, photo_ids: List[int], deleted_date: Optional[datetime] = None) -> int:
        """
        Marca fotos activas como borradas (Soft Delete).

        Args:
            photo_ids (List[int]): IDs de las fotos.
            deleted_date (Optional[datetime]): Fecha de borrado; ahora por defecto.

        Returns:
            int: Número de fotos enviadas a la papelera.
        """
        if not photo_ids:
            return 0
        stmt = (
            update(PhotoDatabaseModel)
            .where(
                PhotoDatabaseModel.id.in_(photo_ids),
                PhotoDatabaseModel.is_deleted.is_(False)
            )
            .values(is_deleted=True, deleted_date=deleted_date or get_now())
        )
        return self._execute_or_rollback(stmt, {PHOTOS_TABLE})

    def restore_photos(self, photo_ids: List[int]) -> int:
        """
        Saca fotos de la papelera. Las fotos que ya estaban activas no se tocan.

        Args:
            photo_ids (List[int]): IDs de las fotos.

        Returns:
            int: Número de fotos restauradas.
        """
        if not photo_ids:
            return 0
        stmt = (
            update(PhotoDatabaseModel)
            .where(
                PhotoDatabaseModel.id.in_(photo_ids),
                PhotoDatabaseModel.is_deleted.is_(True)
            )
            .values(is_deleted=False, deleted_date=None)
        )
        return self._execute_or_rollback(stmt, {PHOTOS_TABLE})

    # =========== ELIMINACIÓN ===========
    def delete_photo(self, photo_id: int) -> bool:
        """
        Elimina el registro de la foto de la DB.

        Args:
            photo_id (int): ID de la foto.

        Returns:
            bool: True si la eliminación fue exitosa, False si no existía.
        """
        photo_db = self._get_item_by_id(PhotoDatabaseModel, photo_id)
        if not photo_db:
            return False
        if not self._delete_or_rollback(photo_db):
            raise StorageError(message="No se pudo eliminar la foto", details={"photo_id": photo_id})
        return True

    def delete_photos_by_album(self, album_id: int) -> int:
        """
        Elimina todos los registros que referencian un álbum.

        Args:
            album_id (int): ID del álbum.

        Returns:
            int: Número de registros eliminados.
        """
        stmt = delete(PhotoDatabaseModel).where(PhotoDatabaseModel.album_id == album_id)
        return self._execute_or_rollback(stmt, {PHOTOS_TABLE})

    def permanently_delete_photos(self, photo_ids: List[int]) -> int:
        """
        Elimina definitivamente varios registros.

        Args:
            photo_ids (List[int]): IDs de las fotos.

        Returns:
            int: Número de registros eliminados.
        """
        if not photo_ids:
            return 0
        stmt = delete(PhotoDatabaseModel).where(PhotoDatabaseModel.id.in_(photo_ids))
        return self._execute_or_rollback(stmt, {PHOTOS_TABLE})
