from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

class AlbumResponse(BaseModel):
    """
    Modelo de respuesta para un álbum.

    Args:
        id (int): ID del álbum.
        name (str): Nombre del álbum.
        created_date (datetime): Fecha de creación.
        photo_count (int): Número de fotos activas (caché mantenida por el VaultService).
        cover_photo_path (Optional[str]): Ruta de la foto de portada.
        cover_is_auto (bool): True si la portada se derivó automáticamente.
    """
    id: int
    name: str
    created_date: datetime
    photo_count: int
    cover_photo_path: Optional[str] = None
    cover_is_auto: bool = True

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "id": 1,
                    "name": "Viaje",
                    "created_date": "2026-01-01T00:00:00",
                    "photo_count": 3,
                    "cover_photo_path": "/home/user/.PhotoVault/data/PhotoVault/Viaje/IMG_20260101_120000_1234.jpg",
                    "cover_is_auto": True
                }
            ]
        }
    )

class AlbumListResponse(BaseModel):
    """
    Contenedor para listados de álbumes.

    Args:
        count (int): Cantidad de álbumes.
        albums (List[AlbumResponse]): Álbumes ordenados por fecha de creación descendente.
    """
    count: int
    albums: List[AlbumResponse]

class AlbumCreate(BaseModel):
    """
    Modelo para crear un álbum.

    Args:
        name (str): Nombre del álbum.
    """
    name: str = Field(..., min_length=1, max_length=255)

class AlbumUpdate(BaseModel):
    """
    Modelo para renombrar un álbum.

    Args:
        name (str): Nuevo nombre.
    """
    name: str = Field(..., min_length=1, max_length=255)

class AlbumCoverUpdate(BaseModel):
    """Elección explícita de portada."""
    photo_id: int
