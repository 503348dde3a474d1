"""
Módulo para las rutas de check healt y status
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from photovault.api.dependencies import get_settings_instance
from photovault.settings import Settings

router = APIRouter(prefix="/check", tags=["Check-Health"])

@router.get("/health", status_code=status.HTTP_200_OK)
def health_check():
    """Health check endpoint to verify API is running."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "OK",
            "message": "API is running",
        }
    )

@router.get("/server-info", status_code=status.HTTP_200_OK)
def get_server_info(settings: Settings = Depends(get_settings_instance)):
    """Endpoint para obtener información del servidor."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "server_name": settings.APP_NAME,
            "server_version": settings.APP_VERSION,
            "vault_path": str(settings.VAULT_PATH),
            "gallery_path": str(settings.GALLERY_PATH),
        }
    )
