from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from photovault.enums import ExportPolicy

class PhotoResponse(BaseModel):
    """
    Modelo de respuesta de una foto del baúl.

    Args:
        id (int): ID de la foto.
        album_id (int): ID lógico del álbum propietario.
        file_path (str): Ruta absoluta de la copia privada.
        original_name (str): Nombre original en la galería.
        imported_date (datetime): Fecha de importación.
        file_size (int): Tamaño en bytes.
        width (int): Ancho en píxeles (0 si se desconoce).
        height (int): Alto en píxeles (0 si se desconoce).
        is_deleted (bool): True si la foto está en la papelera.
        deleted_date (Optional[datetime]): Fecha de envío a la papelera.
        is_favorite (bool): True si es favorita.
    """
    id: int
    album_id: int
    file_path: str
    original_name: str
    imported_date: datetime
    file_size: int
    width: int = 0
    height: int = 0
    is_deleted: bool = False
    deleted_date: Optional[datetime] = Field(None)
    is_favorite: bool = False

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "id": 1,
                    "album_id": 1,
                    "file_path": "/home/user/.PhotoVault/data/PhotoVault/Viaje/IMG_20260101_120000_1234.jpg",
                    "original_name": "playa.jpg",
                    "imported_date": "2026-01-01T12:00:00",
                    "file_size": 204800,
                    "width": 1920,
                    "height": 1080,
                    "is_deleted": False,
                    "deleted_date": None,
                    "is_favorite": False
                }
            ]
        }
    )

class PhotoResponseList(BaseModel):
    """
    Contenedor para listados de fotos.

    Args:
        count (int): Cantidad de fotos obtenidas.
        photos (List[PhotoResponse]): Lista de fotos.
    """
    count: int
    photos: List[PhotoResponse]

    model_config = ConfigDict(from_attributes=True)

class PhotoBulkAction(BaseModel):
    """
    Esquema para acciones en lote

    Args:
        photo_ids (List[int]): Lista de IDs de las fotos a operar.
    """
    photo_ids: List[int]

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"photo_ids": [1, 2, 3]}]}
    )

class PhotoMoveAction(PhotoBulkAction):
    """Mover fotos a otro álbum."""
    target_album_id: int

class FavoriteUpdate(BaseModel):
    """Marca o desmarca una foto como favorita."""
    is_favorite: bool

class ExportRequest(BaseModel):
    """Exportación de una copia fuera del baúl."""
    policy: ExportPolicy = ExportPolicy.ORIGINAL_NAME

class OperationResult(BaseModel):
    """
    Resultado visible de una operación por lotes.

    Args:
        success (bool): False solo si la operación completa falló.
        affected_count (int): Número de elementos afectados (0 no es un error).
    """
    success: bool
    affected_count: int
