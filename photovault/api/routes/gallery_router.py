"""
Módulo de rutas para la galería externa.
"""
from fastapi import APIRouter, Depends

from photovault.services import VaultExecutor, GallerySource
from photovault.api.dependencies import get_vault_executor, get_gallery_source, run_in_vault
from photovault.schemas import (
    SourcePhotoList,
    RemoveOriginalsRequest,
    PermissionGrant,
    OriginalsDeletionResult
)

router = APIRouter(prefix="/gallery", tags=["Gallery"])

@router.get("/", response_model=SourcePhotoList)
async def list_gallery(gallery: GallerySource = Depends(get_gallery_source)):
    """Imágenes de la galería disponibles para importar."""
    return gallery.list_photos()

@router.post("/remove-originals", response_model=OriginalsDeletionResult)
async def remove_originals(
    request: RemoveOriginalsRequest,
    executor: VaultExecutor = Depends(get_vault_executor),
    gallery: GallerySource = Depends(get_gallery_source)
):
    """
    Borra de la galería los originales indicados.

    Si alguno requiere permiso, la respuesta incluye un grant_handle que se
    devuelve a /remove-originals/{grant_handle} con la decisión del usuario.
    """
    sources = gallery.get_photos(request.source_ids)
    return await run_in_vault(executor, "remove_originals", gallery, sources)

@router.post("/remove-originals/{grant_handle}", response_model=OriginalsDeletionResult)
async def resume_original_removal(
    grant_handle: str,
    grant: PermissionGrant,
    executor: VaultExecutor = Depends(get_vault_executor),
    gallery: GallerySource = Depends(get_gallery_source)
):
    """Completa un borrado de originales pendiente de permiso."""
    return await run_in_vault(executor, "resume_original_removal", gallery, grant_handle, grant.granted)
