from datetime import datetime
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field

class SourcePhoto(BaseModel):
    """
    Imagen disponible en la galería externa (solo lectura).

    Args:
        source_id (str): Identificador estable en la galería.
        location (str): Referencia desde la que se leen los bytes.
        display_name (str): Nombre visible.
        size (int): Tamaño en bytes.
        date_modified (datetime): Última modificación.
    """
    source_id: str
    location: str
    display_name: str
    size: int
    date_modified: datetime

class SourcePhotoList(BaseModel):
    count: int
    photos: List[SourcePhoto]

class DeletionSuccess(BaseModel):
    """Borrado de originales terminado (puede incluir fallos parciales)."""
    status: Literal["success"] = "success"
    deleted_count: int
    failed_count: int = 0

class DeletionFailed(BaseModel):
    """Borrado de originales imposible."""
    status: Literal["failed"] = "failed"
    reason: str

class DeletionPermissionRequired(BaseModel):
    """
    Algunos originales requieren confirmación del usuario.

    Args:
        grant_handle (str): Manejador opaco que el colaborador devuelve con la decisión.
        deleted_count (int): Originales ya borrados sin necesidad de permiso.
        pending_count (int): Originales a la espera del permiso.
    """
    status: Literal["permission_required"] = "permission_required"
    grant_handle: str
    deleted_count: int = 0
    pending_count: int

OriginalsDeletionResult = Union[DeletionSuccess, DeletionFailed, DeletionPermissionRequired]

class RemoveOriginalsRequest(BaseModel):
    source_ids: List[str]

class PermissionGrant(BaseModel):
    granted: bool = Field(..., description="Decisión del usuario sobre el borrado")
