import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from photovault.errors import (
    VaultError,
    ResourceNotFoundError,
    NameConflictError,
    StorageError,
    FileIOError,
    ValidationError,
    ConfigurationError
)

def register_error_handlers(app: FastAPI):
    """
    Registra los manejadores globales de excepciones para la aplicación.
    """

    @app.exception_handler(VaultError)
    async def global_vault_handler(request: Request, exc: VaultError):
        # Mapeo riguroso de excepciones a códigos HTTP
        error_mapping = {
            ResourceNotFoundError: status.HTTP_404_NOT_FOUND,
            NameConflictError: status.HTTP_409_CONFLICT,
            StorageError: status.HTTP_507_INSUFFICIENT_STORAGE,
            FileIOError: status.HTTP_500_INTERNAL_SERVER_ERROR,
            ValidationError: status.HTTP_400_BAD_REQUEST,
            ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
        }

        # Buscamos el código en el mapa, por defecto usamos 400
        http_status = error_mapping.get(type(exc), status.HTTP_400_BAD_REQUEST)

        return JSONResponse(
            status_code=http_status,
            content={
                "status": "error",
                "code": exc.__class__.__name__,
                "message": exc.message,
                "details": exc.details or {}
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """Captura cualquier error no controlado para evitar fugas de información."""
        logger = logging.getLogger("uvicorn.error")
        logger.error(f"Unhandled error: {str(exc)}", exc_info=True)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "error",
                "code": "InternalServerError",
                "message": "Ha ocurrido un error inesperado en el servidor."
            },
        )
