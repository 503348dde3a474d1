"""
FastAPI Application Factory module
"""
import logging
from typing import Optional
from contextlib import asynccontextmanager
from sqlalchemy import Engine
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from photovault.settings import Settings
from photovault.database import ChangeBus
from photovault.api.errors import register_error_handlers
from photovault.api.include_routes import include_routes
from photovault.database.db_config import build_engine, build_session_factory, init_db
from photovault.services import StorageService, LocalGallerySource, VaultExecutor, GallerySource

logger = logging.getLogger("AppFactory")

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    logger.info("Esperando a que terminen las operaciones pendientes del baúl...")
    app.state.executor.shutdown(wait=True)

def create_app(
        settings: Settings,
        engine: Optional[Engine] = None,
        gallery_source: Optional[GallerySource] = None,
        storage_service: Optional[StorageService] = None
    ) -> FastAPI:
    """
    Crea y configura la aplicación FastAPI.

    Construye las piezas compartidas del baúl (engine, fábrica de sesiones,
    bus de cambios, escritor único y galería) y las deja en app.state.

    Args:
        settings (Settings): Las configuraciones de la aplicación.
        engine (Optional[Engine]): Engine a usar; se crea desde settings si falta.
        gallery_source (Optional[GallerySource]): Galería externa; GALLERY_PATH por defecto.
        storage_service (Optional[StorageService]): Almacén de archivos; VAULT_PATH por defecto.

    Returns:
        FastAPI: Instancia de la aplicación FastAPI configurada.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=f"{settings.APP_NAME} API",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    # Piezas compartidas del baúl
    engine = engine or build_engine(settings)
    init_db(engine, settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.change_bus = ChangeBus()
    app.state.storage_service = storage_service or StorageService(settings.VAULT_PATH, settings.EXPORT_PATH)
    app.state.gallery_source = gallery_source or LocalGallerySource(settings.GALLERY_PATH)
    app.state.executor = VaultExecutor(
        app.state.session_factory,
        app.state.change_bus,
        app.state.storage_service
    )

    # Inicializamos los routers de la API
    include_routes(app, prefix="/api/v1")

    # Handler de manejo de errores de la API
    register_error_handlers(app)

    return app
