"""
Módulo de servicio para el ciclo de vida de álbumes y fotos del baúl.

Todas las operaciones que modifican el baúl pasan por aquí: importación,
movimientos, papelera, restauración, borrado definitivo y mantenimiento
de los datos derivados de cada álbum (photo_count y cover_photo_path).
"""
import logging
from pathlib import Path
from sqlalchemy.orm import Session
from typing import Dict, Iterable, List, Optional, Set

from photovault.enums import ExportPolicy, ReservedAlbum
from photovault.utils.dates import get_now
from photovault.database.change_bus import ChangeBus
from photovault.services.storage_service import StorageService
from photovault.services.gallery_source import GallerySource
from photovault.controllers import AlbumController, PhotoController
from photovault.errors import (
    FileIOError,
    StorageError,
    ValidationError,
    NameConflictError,
    ResourceNotFoundError
)
from photovault.schemas import (
    AlbumResponse,
    PhotoResponse,
    SourcePhoto,
    ImportResult,
    ImportItemOutcome,
    OperationResult,
    OriginalsDeletionResult
)

class VaultService:
    """
    Motor del baúl. Las operaciones deben ejecutarse de una en una
    (ver VaultExecutor); cada una deja los datos derivados consistentes al terminar.
    """
    # Operaciones que modifican el baúl y que el ejecutor acepta
    MUTATIONS = (
        "import_photos",
        "move_photos",
        "move_to_bin",
        "restore_photos",
        "permanently_delete_photos",
        "empty_bin",
        "create_album",
        "rename_album",
        "delete_album",
        "set_cover_photo",
        "set_favorite",
        "toggle_favorite",
        "refresh_album_metadata",
        "remove_originals",
        "resume_original_removal",
        "export_photo",
    )

    def __init__(
            self,
            session: Session,
            storage_service: Optional[StorageService] = None,
            change_bus: Optional[ChangeBus] = None
        ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.session = session

        # Encapsulamiento de dependencias
        self.album_controller = AlbumController(session, change_bus)
        self.photo_controller = PhotoController(session, change_bus)
        self.storage_service = storage_service or StorageService()

    # =========== MÉTODOS PRIVADOS ===========
    def _require_album(self, album_id: int) -> AlbumResponse:
        album = self.album_controller.get_album_by_id(album_id)
        if not album:
            raise ResourceNotFoundError(message="Álbum no encontrado", details={"album_id": album_id})
        return album

    def _require_photo(self, photo_id: int) -> PhotoResponse:
        photo = self.photo_controller.get_by_id(photo_id)
        if not photo:
            raise ResourceNotFoundError(message="Foto no encontrada", details={"photo_id": photo_id})
        return photo

    def _validate_album_name(self, name: str) -> str:
        """
        Comprueba que un nombre sirva como álbum y como nombre de directorio.

        Raises:
            ValidationError: Si el nombre está vacío, es reservado o contiene separadores.
        """
        if name is None or not name.strip():
            raise ValidationError(message="El nombre del álbum no puede estar vacío")
        if name in ReservedAlbum.get_hidden_names():
            raise ValidationError(message="Nombre de álbum reservado", details={"name": name})
        if "/" in name or "\\" in name or name in (".", ".."):
            raise ValidationError(
                message="El nombre del álbum no puede contener separadores de ruta",
                details={"name": name}
            )
        return name

    def _get_or_create_album(self, name: str) -> AlbumResponse:
        """Devuelve el álbum con ese nombre exacto, creándolo si no existe."""
        album = self.album_controller.get_album_by_name(name)
        if album:
            return album
        self.logger.info(f"Creando el álbum del sistema '{name}'")
        return self.album_controller.create_album(name, get_now())

    def _rederive_cover(self, album_id: int) -> Optional[str]:
        """Fija como portada la foto activa más antigua, o None si no queda ninguna."""
        first = self.photo_controller.get_first_photo_in_album(album_id)
        cover = first.file_path if first else None
        self.album_controller.update_cover_photo(album_id, cover)
        return cover

    def _ensure_cover(self, album_id: int) -> None:
        """Asigna portada solo si el álbum no tiene una."""
        album = self.album_controller.get_album_by_id(album_id)
        if album and album.cover_photo_path is None:
            first = self.photo_controller.get_first_photo_in_album(album_id)
            if first:
                self.album_controller.update_cover_photo(album_id, first.file_path)

    def _snapshot_covers(self, photos: Iterable[PhotoResponse]) -> Dict[int, Optional[str]]:
        """Portada actual de cada álbum de origen de las fotos."""
        covers: Dict[int, Optional[str]] = {}
        for photo in photos:
            if photo.album_id not in covers:
                album = self.album_controller.get_album_by_id(photo.album_id)
                covers[photo.album_id] = album.cover_photo_path if album else None
        return covers

    def _import_one(self, album: AlbumResponse, source: SourcePhoto, gallery: GallerySource) -> ImportItemOutcome:
        copied_path: Optional[Path] = None
        try:
            with gallery.open(source.location) as stream:
                copied_path = self.storage_service.copy_into_vault(stream, album.name, source.display_name)

            width, height = self.storage_service.read_image_dimensions(copied_path)
            photo = self.photo_controller.create_photo(
                album_id=album.id,
                file_path=str(copied_path),
                original_name=source.display_name,
                file_size=copied_path.stat().st_size,
                width=width,
                height=height,
                imported_date=get_now()
            )
        except (FileIOError, StorageError, ValidationError, OSError) as e:
            if copied_path is not None:
                self.storage_service.delete_owned_file(copied_path)
            self.logger.warning(f"No se pudo importar '{source.display_name}': {e}")
            return ImportItemOutcome(source_id=source.source_id, success=False, error=str(e))

        return ImportItemOutcome(
            source_id=source.source_id,
            success=True,
            photo_id=photo.id,
            file_path=photo.file_path
        )

    # =========== ÁLBUMES ===========
    def create_album(self, name: str) -> AlbumResponse:
        """
        Crea un álbum vacío.

        Args:
            name (str): Nombre del álbum (único, sensible a mayúsculas).

        Returns:
            AlbumResponse: El álbum creado.

        Raises:
            ValidationError: Si el nombre no es válido.
            NameConflictError: Si ya existe un álbum con ese nombre.
        """
        name = self._validate_album_name(name)
        if self.album_controller.get_album_by_name(name):
            raise NameConflictError(message="Ya existe un álbum con ese nombre", details={"name": name})
        album = self.album_controller.create_album(name, get_now())
        self.logger.info(f"Álbum '{name}' creado con ID {album.id}")
        return album

    def rename_album(self, album_id: int, new_name: str) -> AlbumResponse:
        """
        Renombra un álbum. Las rutas de archivo existentes no cambian.

        Args:
            album_id (int): ID del álbum.
            new_name (str): Nuevo nombre.

        Returns:
            AlbumResponse: El álbum actualizado.

        Raises:
            ResourceNotFoundError: Si el álbum no existe.
            NameConflictError: Si otro álbum ya usa ese nombre.
        """
        album = self._require_album(album_id)
        new_name = self._validate_album_name(new_name)
        if album.name == new_name:
            return album

        existing = self.album_controller.get_album_by_name(new_name)
        if existing and existing.id != album_id:
            raise NameConflictError(message="Ya existe un álbum con ese nombre", details={"name": new_name})

        return self.album_controller.rename_album(album_id, new_name)

    def delete_album(self, album_id: int) -> OperationResult:
        """
        Elimina un álbum, sus fotos activas y su directorio.

        Las fotos del álbum que están en la papelera se reasignan al álbum 'Restored'
        para que sigan siendo restaurables.

        Args:
            album_id (int): ID del álbum.

        Returns:
            OperationResult: affected_count es el número de fotos activas eliminadas.
        """
        album = self.album_controller.get_album_by_id(album_id)
        if not album:
            self.logger.info(f"El álbum {album_id} ya no existe")
            return OperationResult(success=True, affected_count=0)

        photos = self.photo_controller.get_all_photos_by_album(album_id).photos
        bin_ids = [p.id for p in photos if p.is_deleted]
        if bin_ids:
            # Si se borra el propio 'Restored', sus fotos de papelera esperan en el álbum centinela
            if album.name == ReservedAlbum.RESTORED.value:
                keeper = self._get_or_create_album(ReservedAlbum.BIN_HOLDING.value)
            else:
                keeper = self._get_or_create_album(ReservedAlbum.RESTORED.value)
            self.photo_controller.set_album(bin_ids, keeper.id)
            self.logger.info(f"{len(bin_ids)} fotos de la papelera pasan al álbum '{keeper.name}'")

        removed = self.photo_controller.delete_photos_by_album(album_id)
        self.storage_service.delete_album_directory(album.name)
        self.album_controller.delete_album(album_id)

        self.logger.warning(f"Álbum '{album.name}' eliminado junto con {removed} fotos")
        return OperationResult(success=True, affected_count=removed)

    def set_cover_photo(self, album_id: int, photo_id: int) -> AlbumResponse:
        """
        Fija explícitamente la portada de un álbum.

        Args:
            album_id (int): ID del álbum.
            photo_id (int): Foto activa del mismo álbum.

        Returns:
            AlbumResponse: El álbum actualizado.

        Raises:
            ResourceNotFoundError: Si el álbum o la foto no existen.
            ValidationError: Si la foto no es una foto activa del álbum.
        """
        self._require_album(album_id)
        photo = self._require_photo(photo_id)
        if photo.album_id != album_id or photo.is_deleted:
            raise ValidationError(
                message="La portada debe ser una foto activa del álbum",
                details={"album_id": album_id, "photo_id": photo_id}
            )
        self.album_controller.update_cover_photo(album_id, photo.file_path, is_auto=False)
        return self.album_controller.get_album_by_id(album_id)

    def refresh_album_metadata(self) -> OperationResult:
        """
        Recalcula photo_count y repara portadas ausentes o que ya no apuntan a una foto activa.

        Returns:
            OperationResult: affected_count es el número de álbumes revisados.
        """
        albums = self.album_controller.get_all_albums().albums
        for album in albums:
            self.album_controller.update_photo_count(album.id)
            active_paths = {p.file_path for p in self.photo_controller.get_active_photos_by_album(album.id).photos}
            if album.cover_photo_path not in active_paths:
                self._rederive_cover(album.id)
        self.logger.info(f"Metadatos de {len(albums)} álbumes actualizados")
        return OperationResult(success=True, affected_count=len(albums))

    # =========== IMPORTACIÓN ===========
    def import_photos(self, album_id: int, sources: List[SourcePhoto], gallery: GallerySource) -> ImportResult:
        """
        Copia imágenes de la galería al álbum y crea sus registros.

        Los fallos por elemento se registran y no detienen el resto. Al terminar se
        recalcula photo_count y, si el álbum no tenía portada, se asigna la más antigua.

        Args:
            album_id (int): Álbum destino.
            sources (List[SourcePhoto]): Imágenes seleccionadas en la galería.
            gallery (GallerySource): Galería de la que se leen los bytes.

        Returns:
            ImportResult: Conteos y detalle por elemento.

        Raises:
            ResourceNotFoundError: Si el álbum no existe.
        """
        album = self._require_album(album_id)
        result = ImportResult(album_id=album_id)

        for index, source in enumerate(sources, start=1):
            outcome = self._import_one(album, source, gallery)
            result.items.append(outcome)
            if outcome.success:
                result.succeeded_count += 1
            else:
                result.failed_count += 1
            self.logger.debug(f"Importación {index}/{len(sources)}: {source.display_name}")

        self.album_controller.update_photo_count(album_id)
        self._ensure_cover(album_id)

        self.logger.info(
            f"Importación en '{album.name}': {result.succeeded_count} correctas, {result.failed_count} fallidas"
        )
        return result

    # =========== MOVIMIENTOS ===========
    def move_photos(self, photo_ids: List[int], target_album_id: int) -> OperationResult:
        """
        Mueve fotos a otro álbum. Los archivos no se mueven en disco.

        Args:
            photo_ids (List[int]): IDs de las fotos.
            target_album_id (int): Álbum destino.

        Returns:
            OperationResult: affected_count es el número de fotos movidas.

        Raises:
            ResourceNotFoundError: Si el álbum destino no existe.
        """
        self._require_album(target_album_id)
        photos = [p for p in self.photo_controller.get_by_ids(photo_ids) if p.album_id != target_album_id]
        if not photos:
            return OperationResult(success=True, affected_count=0)

        covers = self._snapshot_covers(photos)
        displaced: Set[int] = {
            p.album_id for p in photos
            if covers.get(p.album_id) is not None and covers[p.album_id] == p.file_path
        }

        moved = self.photo_controller.set_album([p.id for p in photos], target_album_id)

        for source_album_id in covers:
            if source_album_id in displaced:
                self._rederive_cover(source_album_id)
            self.album_controller.update_photo_count(source_album_id)

        self.album_controller.update_photo_count(target_album_id)
        self._ensure_cover(target_album_id)

        self.logger.info(f"{moved} fotos movidas al álbum {target_album_id}")
        return OperationResult(success=True, affected_count=moved)

    # =========== PAPELERA ===========
    def move_to_bin(self, photo_ids: List[int]) -> OperationResult:
        """
        Envía fotos activas a la papelera (Soft Delete).

        Si la portada de algún álbum va a la papelera se elige la foto activa más
        antigua que quede, o ninguna.

        Args:
            photo_ids (List[int]): IDs de las fotos.

        Returns:
            OperationResult: affected_count es el número de fotos enviadas.
        """
        photos = [p for p in self.photo_controller.get_by_ids(photo_ids) if not p.is_deleted]
        if not photos:
            return OperationResult(success=True, affected_count=0)

        covers = self._snapshot_covers(photos)
        displaced = {
            p.album_id for p in photos
            if covers.get(p.album_id) is not None and covers[p.album_id] == p.file_path
        }

        binned = self.photo_controller.move_to_bin([p.id for p in photos], get_now())

        for album_id in covers:
            if album_id in displaced:
                self._rederive_cover(album_id)
            self.album_controller.update_photo_count(album_id)

        self.logger.info(f"{binned} fotos enviadas a la papelera")
        return OperationResult(success=True, affected_count=binned)

    def restore_photos(self, photo_ids: List[int]) -> OperationResult:
        """
        Saca fotos de la papelera.

        Las fotos cuyo álbum ya no existe (o que pertenecen al álbum centinela de la
        papelera) se reasignan antes al álbum 'Restored'. Después se recalculan los
        contadores; la portada se asigna si faltaba y se vuelve a derivar si era
        automática, de modo que una portada desplazada a la papelera vuelve a su
        sitio. Una portada elegida con set_cover_photo no se toca.

        Args:
            photo_ids (List[int]): IDs de las fotos.

        Returns:
            OperationResult: affected_count es el número de fotos restauradas.
        """
        bin_photos = [p for p in self.photo_controller.get_by_ids(photo_ids) if p.is_deleted]
        if not bin_photos:
            return OperationResult(success=True, affected_count=0)

        holding = self.album_controller.get_album_by_name(ReservedAlbum.BIN_HOLDING.value)
        holding_id = holding.id if holding else None

        orphaned = [
            p.id for p in bin_photos
            if p.album_id == holding_id or self.album_controller.get_album_by_id(p.album_id) is None
        ]
        target_albums: Set[int] = {p.album_id for p in bin_photos if p.id not in orphaned}
        if orphaned:
            restored_album = self._get_or_create_album(ReservedAlbum.RESTORED.value)
            self.photo_controller.set_album(orphaned, restored_album.id)
            target_albums.add(restored_album.id)
            self.logger.info(f"{len(orphaned)} fotos huérfanas reasignadas a '{restored_album.name}'")

        target_albums.discard(holding_id)
        restored = self.photo_controller.restore_photos([p.id for p in bin_photos])

        for album_id in sorted(target_albums):
            self.album_controller.update_photo_count(album_id)
            album = self.album_controller.get_album_by_id(album_id)
            if album is None:
                continue
            if album.cover_photo_path is None or album.cover_is_auto:
                self._rederive_cover(album_id)

        self.logger.info(f"{restored} fotos restauradas")
        return OperationResult(success=True, affected_count=restored)

    def permanently_delete_photos(self, photo_ids: List[int]) -> OperationResult:
        """
        Borra definitivamente fotos: primero el archivo (sin fallar), luego el registro.

        Si alguna foto estaba activa se reparan el contador y la portada de su álbum.

        Args:
            photo_ids (List[int]): IDs de las fotos.

        Returns:
            OperationResult: affected_count es el número de registros eliminados.
        """
        photos = self.photo_controller.get_by_ids(photo_ids)
        deleted, failed = 0, 0
        deleted_paths: Set[str] = set()
        touched_albums: Set[int] = set()

        for photo in photos:
            if not self.storage_service.delete_owned_file(Path(photo.file_path)):
                self.logger.warning(f"El archivo de la foto {photo.id} no se pudo borrar")
            try:
                if self.photo_controller.delete_photo(photo.id):
                    deleted += 1
                    deleted_paths.add(photo.file_path)
                    if not photo.is_deleted:
                        touched_albums.add(photo.album_id)
            except StorageError as e:
                failed += 1
                self.logger.error(f"No se pudo eliminar el registro de la foto {photo.id}: {e}")

        for album_id in touched_albums:
            album = self.album_controller.get_album_by_id(album_id)
            if album is None:
                continue
            self.album_controller.update_photo_count(album_id)
            if album.cover_photo_path in deleted_paths:
                self._rederive_cover(album_id)

        self.logger.warning(f"{deleted} fotos eliminadas definitivamente ({failed} fallidas)")
        return OperationResult(success=not (failed and deleted == 0), affected_count=deleted)

    def empty_bin(self) -> OperationResult:
        """Borra definitivamente todo el contenido de la papelera."""
        return self.permanently_delete_photos(self.photo_controller.get_bin_photo_ids())

    # =========== FAVORITOS ===========
    def set_favorite(self, photo_id: int, is_favorite: bool) -> PhotoResponse:
        """
        Marca o desmarca una foto como favorita.

        Raises:
            ResourceNotFoundError: Si la foto no existe.
        """
        self._require_photo(photo_id)
        return self.photo_controller.set_favorite(photo_id, is_favorite)

    def toggle_favorite(self, photo_id: int) -> PhotoResponse:
        """Invierte la marca de favorita."""
        photo = self._require_photo(photo_id)
        return self.photo_controller.set_favorite(photo_id, not photo.is_favorite)

    # =========== ORIGINALES Y EXPORTACIÓN ===========
    def remove_originals(self, gallery: GallerySource, sources: List[SourcePhoto]) -> OriginalsDeletionResult:
        """
        Pide a la galería que borre los originales ya importados.

        Args:
            gallery (GallerySource): Galería propietaria de los originales.
            sources (List[SourcePhoto]): Imágenes a borrar.

        Returns:
            OriginalsDeletionResult: Éxito, fallo o permiso requerido.
        """
        return gallery.delete([s.location for s in sources])

    def resume_original_removal(self, gallery: GallerySource, grant_handle: str, granted: bool) -> OriginalsDeletionResult:
        """Completa un borrado de originales pendiente de permiso."""
        return gallery.complete_deletion(grant_handle, granted)

    def export_photo(self, photo_id: int, policy: ExportPolicy = ExportPolicy.ORIGINAL_NAME) -> Path:
        """
        Exporta una copia de la foto fuera del baúl.

        Args:
            photo_id (int): ID de la foto.
            policy (ExportPolicy): Nombre de la copia exportada.

        Returns:
            Path: Ruta de la copia.

        Raises:
            ResourceNotFoundError: Si la foto no existe.
            FileIOError: Si la copia falla.
        """
        photo = self._require_photo(photo_id)
        return self.storage_service.export_copy(photo, policy)
