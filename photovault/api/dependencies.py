"""
Dependencias para inyectar en la API
"""
import asyncio
from typing import Any
from sqlalchemy.orm import Session
from fastapi import Depends, Request

from photovault.settings import Settings
from photovault.database.db_session import get_db
from photovault.services import QueryService, VaultExecutor, GallerySource

# ============ Proveedores de Servicios ============
def get_settings_instance(request: Request) -> Settings:
    """Provee la instancia de Settings con la que se creó la app."""
    return request.app.state.settings

def get_query_service(request: Request, db: Session = Depends(get_db)) -> QueryService:
    """
    Provee QueryService con la sesión de DB inyectada.

    Args:
        request (Request): Petición actual, para acceder a app.state.
        db (Session): Sesión de la base de datos.

    Returns:
        QueryService: Instancia de QueryService.
    """
    return QueryService(db, request.app.state.change_bus, request.app.state.session_factory)

def get_vault_executor(request: Request) -> VaultExecutor:
    """Provee el escritor único del baúl."""
    return request.app.state.executor

def get_gallery_source(request: Request) -> GallerySource:
    return request.app.state.gallery_source

# ============ Ejecución de operaciones ============
async def run_in_vault(executor: VaultExecutor, operation: str, *args: Any, **kwargs: Any) -> Any:
    """
    Encola una operación en el escritor único y espera su resultado sin bloquear el event loop.

    Las excepciones de la operación se propagan tal cual a los manejadores de errores.
    """
    return await asyncio.wrap_future(executor.submit(operation, *args, **kwargs))
