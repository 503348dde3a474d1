"""
Módulo de servicio para la gestión física del almacenamiento del baúl.
"""
import shutil
import random
import logging
from pathlib import Path
from PIL import Image
from typing import Optional, BinaryIO, Tuple

from photovault.settings import settings
from photovault.enums import ExportPolicy
from photovault.errors import FileIOError, ValidationError
from photovault.schemas import PhotoResponse
from photovault.utils.dates import get_now

class StorageService:
    """
    Servicio de alto nivel para las copias privadas de las fotos.
    Cada álbum tiene su directorio bajo la raíz del baúl.
    """
    # Reintentos para encontrar un nombre libre en el directorio del álbum
    MAX_NAME_ATTEMPTS: int = 20

    def __init__(self, base_path: Optional[Path] = None, export_path: Optional[Path] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.base_path = Path(base_path or settings.VAULT_PATH)
        self.export_path = Path(export_path or settings.EXPORT_PATH)
        self._ensure_base_path()

    # CREACIÓN DE RUTAS
    def _ensure_base_path(self) -> None:
        """Garantiza que el directorio raíz del baúl exista."""
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.critical(f"Error fatal: No se pudo crear VAULT_PATH: {e}")
            raise

    def get_album_path(self, album_name: str) -> Path:
        """
        Obtiene la ruta del directorio de un álbum.

        Args:
            album_name (str): Nombre del álbum.

        Returns:
            Path: Ruta al directorio del álbum.

        Raises:
            ValidationError: Si el nombre saldría de la raíz del baúl.
        """
        album_path = self.base_path / album_name
        if album_path.resolve().parent != self.base_path.resolve():
            raise ValidationError(
                message="Nombre de álbum no válido como directorio",
                details={"album_name": album_name}
            )
        return album_path

    def generate_unique_file_name(self, extension: str = ".jpg") -> str:
        """
        Genera un nombre del tipo IMG_<yyyyMMdd_HHmmss>_<aleatorio>.<ext>.

        Args:
            extension (str): Extensión con punto.

        Returns:
            str: Nombre de archivo.
        """
        timestamp = get_now().strftime("%Y%m%d_%H%M%S")
        suffix = random.randint(1000, 9999)
        return f"IMG_{timestamp}_{suffix}{extension.lower()}"

    def is_owned(self, file_path: Path) -> bool:
        """True si la ruta está dentro de la raíz del baúl."""
        try:
            return Path(file_path).resolve().is_relative_to(self.base_path.resolve())
        except OSError:
            return False

    # IMPORTACIÓN
    def copy_into_vault(self, file_stream: BinaryIO, album_name: str, original_filename: str = "") -> Path:
        """
        Copia un stream de la galería a un archivo nuevo y único en el directorio del álbum.

        El directorio se crea bajo demanda. Si la escritura falla, el archivo parcial se elimina.

        Args:
            file_stream (BinaryIO): Stream binario de la imagen de origen.
            album_name (str): Nombre del álbum destino.
            original_filename (str): Nombre original, para conservar la extensión.

        Returns:
            Path: Ruta absoluta de la copia.

        Raises:
            FileIOError: Si no se pudo leer el origen o escribir el destino.
        """
        album_dir = self.get_album_path(album_name)
        extension = Path(original_filename).suffix or ".jpg"

        try:
            album_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileIOError(
                message="No se pudo crear el directorio del álbum",
                details={"album": album_name, "error": str(e)}
            ) from e

        target_path = None
        for _ in range(self.MAX_NAME_ATTEMPTS):
            candidate = album_dir / self.generate_unique_file_name(extension)
            try:
                # 'xb' falla si el archivo ya existe: garantiza unicidad aun con importaciones rápidas
                with open(candidate, "xb") as buffer:
                    target_path = candidate
                    if file_stream.seekable():
                        file_stream.seek(0)
                    shutil.copyfileobj(file_stream, buffer)
                break
            except FileExistsError:
                continue
            except OSError as e:
                if target_path is not None:
                    target_path.unlink(missing_ok=True)
                self.logger.error(f"Error copiando '{original_filename}' al álbum {album_name}: {e}")
                raise FileIOError(
                    message="No se pudo copiar la foto al baúl",
                    details={"source": original_filename, "error": str(e)}
                ) from e

        if target_path is None:
            raise FileIOError(
                message="No se encontró un nombre de archivo libre",
                details={"album": album_name}
            )

        self.logger.info(f"Archivo copiado al baúl: {target_path.name}")
        return target_path.absolute()

    def read_image_dimensions(self, file_path: Path) -> Tuple[int, int]:
        """
        Lee ancho y alto sin decodificar la imagen completa.

        Args:
            file_path (Path): Ruta de la imagen.

        Returns:
            Tuple[int, int]: (ancho, alto), o (0, 0) si no se pudo leer.
        """
        try:
            with Image.open(file_path) as img:
                return img.size
        except Exception as e:
            self.logger.warning(f"No se pudieron leer las dimensiones de {file_path}: {e}")
            return 0, 0

    # ELIMINACIÓN
    def delete_owned_file(self, file_path: Path) -> bool:
        """
        Elimina una copia privada. Nunca lanza excepciones.

        Args:
            file_path (Path): Ruta al archivo a eliminar.

        Returns:
            bool: True si se eliminó; False si no existía, no es del baúl o falló.
        """
        file_path = Path(file_path)
        if not self.is_owned(file_path):
            self.logger.warning(f"Se ignora el borrado de un archivo ajeno al baúl: {file_path}")
            return False
        try:
            if file_path.exists():
                file_path.unlink()
                return True
            self.logger.warning(f"Archivo no encontrado: {file_path.name}")
            return False
        except OSError as e:
            self.logger.error(f"Error eliminando archivo {file_path}: {e}")
            return False

    def delete_album_directory(self, album_name: str) -> bool:
        """
        Elimina recursivamente el directorio de un álbum.

        Args:
            album_name (str): Nombre del álbum.

        Returns:
            bool: True si el directorio ya no existe.
        """
        try:
            album_path = self.get_album_path(album_name)
            if album_path.exists() and album_path.is_dir():
                shutil.rmtree(album_path)
                self.logger.warning(f"Directorio del álbum '{album_name}' eliminado.")
            return True
        except (OSError, ValidationError) as e:
            self.logger.error(f"Error deleting album directory {album_name}: {e}")
            return False

    # EXPORTACIÓN
    def export_copy(
            self,
            photo: PhotoResponse,
            policy: ExportPolicy = ExportPolicy.ORIGINAL_NAME,
            destination: Optional[Path] = None
        ) -> Path:
        """
        Escribe una copia de una foto del baúl en una ubicación compartible.

        Args:
            photo (PhotoResponse): Foto a exportar.
            policy (ExportPolicy): Cómo nombrar la copia.
            destination (Optional[Path]): Directorio destino; EXPORT_PATH por defecto.

        Returns:
            Path: Ruta de la copia exportada.

        Raises:
            FileIOError: Si el original no existe o la escritura falla.
        """
        source = Path(photo.file_path)
        if not source.exists():
            raise FileIOError(
                message="El archivo de la foto no existe en el baúl",
                details={"photo_id": photo.id, "file_path": photo.file_path}
            )

        target_dir = Path(destination or self.export_path)
        name = photo.original_name if policy == ExportPolicy.ORIGINAL_NAME else source.name
        name = Path(name).name or source.name

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            target = target_dir / name
            counter = 1
            while target.exists():
                target = target_dir / f"{Path(name).stem}_{counter}{Path(name).suffix}"
                counter += 1
            shutil.copy2(source, target)
        except OSError as e:
            raise FileIOError(
                message="No se pudo exportar la foto",
                details={"photo_id": photo.id, "error": str(e)}
            ) from e

        self.logger.info(f"Foto {photo.id} exportada a {target}")
        return target
