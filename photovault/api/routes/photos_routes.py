"""
Módulo de rutas para la gestión de fotografías.
"""
from pathlib import Path
from fastapi.responses import FileResponse
from fastapi import APIRouter, Depends, status, HTTPException

from photovault.services import QueryService, VaultExecutor
from photovault.api.dependencies import get_query_service, get_vault_executor, run_in_vault
from photovault.schemas import (
    PhotoResponse,
    PhotoBulkAction,
    PhotoMoveAction,
    FavoriteUpdate,
    ExportRequest,
    OperationResult
)

router = APIRouter(prefix="/photos", tags=["Photos"])

@router.post("/move", response_model=OperationResult)
async def move_photos(
    action: PhotoMoveAction,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """Mueve fotos a otro álbum."""
    return await run_in_vault(executor, "move_photos", action.photo_ids, action.target_album_id)

@router.post("/bin", response_model=OperationResult)
async def move_photos_to_bin(
    action: PhotoBulkAction,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """Envía fotos a la papelera."""
    return await run_in_vault(executor, "move_to_bin", action.photo_ids)

@router.get("/{photo_id}", response_model=PhotoResponse)
async def get_photo_details(
    photo_id: int,
    query_service: QueryService = Depends(get_query_service)
):
    """Obtiene los metadatos de una foto."""
    photo = query_service.get_photo(photo_id)
    if photo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Foto no encontrada")
    return photo

@router.get("/{photo_id}/file")
async def get_photo_file(
    photo_id: int,
    query_service: QueryService = Depends(get_query_service)
):
    """Devuelve el archivo físico de la foto."""
    photo = query_service.get_photo(photo_id)
    if photo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Foto no encontrada")

    file_path = Path(photo.file_path)
    if not file_path.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Archivo físico no encontrado")

    return FileResponse(file_path)

@router.put("/{photo_id}/favorite", response_model=PhotoResponse)
async def set_favorite(
    photo_id: int,
    update: FavoriteUpdate,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """Marca o desmarca una foto como favorita."""
    return await run_in_vault(executor, "set_favorite", photo_id, update.is_favorite)

@router.post("/{photo_id}/export")
async def export_photo(
    photo_id: int,
    request: ExportRequest,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """Exporta una copia de la foto fuera del baúl."""
    exported_path = await run_in_vault(executor, "export_photo", photo_id, request.policy)
    return {"photo_id": photo_id, "exported_path": str(exported_path)}
