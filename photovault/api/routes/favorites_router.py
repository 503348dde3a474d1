from fastapi import APIRouter, Depends

from photovault.services import QueryService
from photovault.schemas import PhotoResponseList
from photovault.api.dependencies import get_query_service

router = APIRouter(prefix="/favorites", tags=["Favorites"])

@router.get("/", response_model=PhotoResponseList)
async def get_favorites(query_service: QueryService = Depends(get_query_service)):
    """Fotos favoritas que no están en la papelera."""
    return query_service.list_favorites()
