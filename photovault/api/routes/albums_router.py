"""
Módulo de rutas para la gestión de álbumes.
"""
from fastapi import APIRouter, status, HTTPException, Depends

from photovault.services import QueryService, VaultExecutor, GallerySource
from photovault.api.dependencies import (
    get_query_service,
    get_vault_executor,
    get_gallery_source,
    run_in_vault
)
from photovault.schemas import (
    AlbumResponse,
    AlbumListResponse,
    AlbumCreate,
    AlbumUpdate,
    AlbumCoverUpdate,
    PhotoResponseList,
    OperationResult,
    ImportRequest,
    ImportResult,
    ImportItemOutcome
)

router = APIRouter(prefix="/albums", tags=["Albums"])

# --- OPERACIONES DE COLECCIÓN ---

@router.get("/", response_model=AlbumListResponse)
async def get_albums(query_service: QueryService = Depends(get_query_service)):
    """Lista los álbumes, del más reciente al más antiguo."""
    return query_service.list_albums()

@router.post("/", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
async def create_album(
    album_create: AlbumCreate,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """Crea un álbum vacío."""
    return await run_in_vault(executor, "create_album", album_create.name)

@router.post("/refresh-metadata", response_model=OperationResult)
async def refresh_album_metadata(executor: VaultExecutor = Depends(get_vault_executor)):
    """Recalcula contadores y repara portadas de todos los álbumes."""
    return await run_in_vault(executor, "refresh_album_metadata")

# --- OPERACIONES DE RECURSO INDIVIDUAL ---

@router.get("/{album_id}", response_model=AlbumResponse)
async def get_album_detail(
    album_id: int,
    query_service: QueryService = Depends(get_query_service)
):
    """Obtiene el detalle de un álbum."""
    album = query_service.get_album(album_id)
    if album is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Álbum no encontrado")
    return album

@router.patch("/{album_id}", response_model=AlbumResponse)
async def rename_album(
    album_id: int,
    album_update: AlbumUpdate,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """Renombra un álbum."""
    return await run_in_vault(executor, "rename_album", album_id, album_update.name)

@router.delete("/{album_id}", response_model=OperationResult)
async def delete_album(
    album_id: int,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """
    Elimina un álbum, sus fotos activas y su directorio.
    Las fotos que estaban en la papelera pasan al álbum 'Restored'.
    """
    return await run_in_vault(executor, "delete_album", album_id)

@router.put("/{album_id}/cover", response_model=AlbumResponse)
async def set_album_cover(
    album_id: int,
    cover: AlbumCoverUpdate,
    executor: VaultExecutor = Depends(get_vault_executor)
):
    """Fija la portada de un álbum."""
    return await run_in_vault(executor, "set_cover_photo", album_id, cover.photo_id)

# --- CONTENIDO ---

@router.get("/{album_id}/photos", response_model=PhotoResponseList)
async def get_album_photos(
    album_id: int,
    query_service: QueryService = Depends(get_query_service)
):
    """Fotos activas del álbum, de la más reciente a la más antigua."""
    return query_service.list_album_photos(album_id)

@router.get("/{album_id}/move-targets", response_model=AlbumListResponse)
async def get_move_targets(
    album_id: int,
    query_service: QueryService = Depends(get_query_service)
):
    """Álbumes a los que se pueden mover fotos de este álbum."""
    return query_service.list_move_targets(album_id)

@router.post("/{album_id}/import", response_model=ImportResult)
async def import_photos(
    album_id: int,
    request: ImportRequest,
    executor: VaultExecutor = Depends(get_vault_executor),
    gallery: GallerySource = Depends(get_gallery_source)
):
    """
    Importa imágenes de la galería al álbum.

    El resultado no es todo o nada: incluye el detalle de cada elemento.
    """
    sources = gallery.get_photos(request.source_ids)
    result: ImportResult = await run_in_vault(executor, "import_photos", album_id, sources, gallery)

    found = {s.source_id for s in sources}
    for source_id in request.source_ids:
        if source_id not in found:
            result.items.append(
                ImportItemOutcome(source_id=source_id, success=False, error="No existe en la galería")
            )
            result.failed_count += 1
    return result
