"""
Módulo de rutas para la papelera.
"""
from fastapi import APIRouter, Depends

from photovault.services import QueryService, VaultExecutor
from photovault.api.dependencies import get_query_service, get_vault_executor, run_in_vault
from photovault.schemas import PhotoResponseList, PhotoBulkAction, OperationResult

router = APIRouter(prefix="/bin", tags=["Bin"])

@router.get("/", response_model=PhotoResponseList)
async def get_bin(query_service: QueryService = Depends(get_query_service)):
    """Contenido de la papelera, del borrado más reciente al más antiguo."""
    return query_service.list_bin()

@router.post("/restore", response_model=OperationResult)
async def restore_photos(
    action: PhotoBulkAction,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """Restaura fotos de la papelera. Las huérfanas van al álbum 'Restored'."""
    return await run_in_vault(executor, "restore_photos", action.photo_ids)

@router.post("/delete", response_model=OperationResult)
async def permanently_delete_photos(
    action: PhotoBulkAction,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """Borra definitivamente fotos (archivo y registro)."""
    return await run_in_vault(executor, "permanently_delete_photos", action.photo_ids)

@router.delete("/", response_model=OperationResult)
async def empty_bin(executor: VaultExecutor = Depends(get_vault_executor)):
    """Vacía la papelera."""
    return await run_in_vault(executor, "empty_bin")
