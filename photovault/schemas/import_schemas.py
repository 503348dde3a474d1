from typing import List, Optional
from pydantic import BaseModel, Field

class ImportItemOutcome(BaseModel):
    """
    Resultado individual de un elemento importado.

    Args:
        source_id (str): Identificador estable en la galería de origen.
        success (bool): True si se copió el archivo y se creó el registro.
        photo_id (Optional[int]): ID de la foto creada.
        file_path (Optional[str]): Ruta de la copia privada.
        error (Optional[str]): Motivo del fallo.
    """
    source_id: str
    success: bool
    photo_id: Optional[int] = None
    file_path: Optional[str] = None
    error: Optional[str] = None

class ImportResult(BaseModel):
    """
    Resultado de una importación. No es todo o nada: el éxito parcial es normal.
    """
    album_id: int
    succeeded_count: int = 0
    failed_count: int = 0
    items: List[ImportItemOutcome] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.succeeded_count > 0

class ImportRequest(BaseModel):
    """Selección de fotos de la galería a importar."""
    source_ids: List[str]
