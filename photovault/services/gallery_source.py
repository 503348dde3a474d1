"""
Colaborador de solo lectura que expone la galería pública de imágenes.
"""
import os
import stat
import uuid
import logging
import threading
from pathlib import Path
from datetime import datetime, timezone
from typing import BinaryIO, Dict, List, Optional, Protocol

from photovault.settings import settings
from photovault.enums import FormatImage
from photovault.errors import FileIOError
from photovault.schemas import (
    SourcePhoto,
    SourcePhotoList,
    DeletionSuccess,
    DeletionFailed,
    DeletionPermissionRequired,
    OriginalsDeletionResult
)

class GallerySource(Protocol):
    """Contrato de la galería externa usado por el motor del baúl."""

    def list_photos(self) -> SourcePhotoList: ...

    def get_photos(self, source_ids: List[str]) -> List[SourcePhoto]: ...

    def open(self, location: str) -> BinaryIO: ...

    def delete(self, locations: List[str]) -> OriginalsDeletionResult: ...

    def complete_deletion(self, grant_handle: str, granted: bool) -> OriginalsDeletionResult: ...

class LocalGallerySource:
    """
    Galería respaldada por un directorio del sistema de archivos (por defecto ~/Pictures).

    Los archivos que no se pueden borrar por falta de permisos quedan pendientes
    detrás de un manejador hasta que el usuario confirma o rechaza el borrado.
    """
    def __init__(self, root: Optional[Path] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.root = Path(root or settings.GALLERY_PATH)
        self._lock = threading.Lock()
        self._pending: Dict[str, List[Path]] = {}

    # =========== LECTURA ===========
    def _to_source_photo(self, path: Path) -> SourcePhoto:
        info = path.stat()
        return SourcePhoto(
            source_id=path.relative_to(self.root).as_posix(),
            location=str(path.absolute()),
            display_name=path.name,
            size=info.st_size,
            date_modified=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc)
        )

    def list_photos(self) -> SourcePhotoList:
        """
        Enumera las imágenes soportadas de la galería, de la más reciente a la más antigua.

        Returns:
            SourcePhotoList: Objeto con la lista de imágenes y el total.
        """
        extensions = FormatImage.get_extensions_list()
        photos: List[SourcePhoto] = []
        if not self.root.exists():
            self.logger.warning(f"La galería {self.root} no existe")
            return SourcePhotoList(count=0, photos=[])

        for path in self.root.rglob("*"):
            if not path.is_file() or path.suffix.lower() not in extensions:
                continue
            try:
                photos.append(self._to_source_photo(path))
            except OSError as e:
                self.logger.warning(f"No se pudo leer {path}: {e}")

        photos.sort(key=lambda p: (p.date_modified, p.source_id), reverse=True)
        return SourcePhotoList(count=len(photos), photos=photos)

    def get_photos(self, source_ids: List[str]) -> List[SourcePhoto]:
        """
        Resuelve identificadores de la galería. Los que no existen se omiten.

        Args:
            source_ids (List[str]): Rutas relativas a la raíz de la galería.

        Returns:
            List[SourcePhoto]: Imágenes encontradas, en el orden solicitado.
        """
        found = []
        root = self.root.resolve()
        for source_id in source_ids:
            path = (self.root / source_id)
            if not path.resolve().is_relative_to(root) or not path.is_file():
                self.logger.debug(f"Imagen de galería no encontrada: {source_id}")
                continue
            found.append(self._to_source_photo(path))
        return found

    def open(self, location: str) -> BinaryIO:
        """
        Abre una imagen de la galería para lectura.

        Raises:
            FileIOError: Si no se puede leer.
        """
        try:
            return open(location, "rb")
        except OSError as e:
            raise FileIOError(
                message="No se pudo leer la imagen de la galería",
                details={"location": location, "error": str(e)}
            ) from e

    # =========== BORRADO DE ORIGINALES ===========
    def _unlink(self, path: Path, force: bool = False) -> None:
        if force:
            parent = path.parent
            os.chmod(parent, parent.stat().st_mode | stat.S_IWUSR)
        path.unlink()

    def delete(self, locations: List[str]) -> OriginalsDeletionResult:
        """
        Intenta borrar los originales de la galería.

        Args:
            locations (List[str]): Ubicaciones de las imágenes.

        Returns:
            OriginalsDeletionResult: Éxito, o permiso requerido para los pendientes.
        """
        deleted, failed = 0, 0
        pending: List[Path] = []

        for location in locations:
            path = Path(location)
            try:
                self._unlink(path)
                deleted += 1
            except PermissionError:
                pending.append(path)
            except OSError as e:
                self.logger.warning(f"No se pudo borrar el original {path}: {e}")
                failed += 1

        if not pending:
            self.logger.info(f"Originales borrados: {deleted}, fallidos: {failed}")
            return DeletionSuccess(deleted_count=deleted, failed_count=failed)

        grant_handle = uuid.uuid4().hex
        with self._lock:
            self._pending[grant_handle] = pending
        self.logger.info(f"{len(pending)} originales requieren permiso del usuario ({grant_handle})")
        return DeletionPermissionRequired(
            grant_handle=grant_handle,
            deleted_count=deleted,
            pending_count=len(pending)
        )

    def complete_deletion(self, grant_handle: str, granted: bool) -> OriginalsDeletionResult:
        """
        Reanuda un borrado que esperaba el permiso del usuario.

        Args:
            grant_handle (str): Manejador devuelto por delete.
            granted (bool): Decisión del usuario.

        Returns:
            OriginalsDeletionResult: Resultado final del borrado.
        """
        with self._lock:
            pending = self._pending.pop(grant_handle, None)

        if pending is None:
            return DeletionFailed(reason="Manejador de permiso desconocido o ya utilizado")
        if not granted:
            self.logger.info(f"El usuario rechazó el borrado de {len(pending)} originales")
            return DeletionFailed(reason="Permiso denegado por el usuario")

        deleted, failed = 0, 0
        for path in pending:
            try:
                self._unlink(path, force=True)
                deleted += 1
            except OSError as e:
                self.logger.warning(f"No se pudo borrar el original {path}: {e}")
                failed += 1
        return DeletionSuccess(deleted_count=deleted, failed_count=failed)
