"""
Módulo de configuración de la base de datos
"""
import logging
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker

from photovault.settings import Settings
from photovault.database.db_base import Base
from photovault.database.models import albums_model, photos_model

logger = logging.getLogger("DatabaseSettings")

def build_engine(settings: Settings) -> Engine:
    """
    Crea el engine de SQLAlchemy a partir de la configuración.

    Args:
        settings (Settings): Configuración de la aplicación.

    Returns:
        Engine: Engine listo para usar.
    """
    logger.info("Creando engine...")
    return create_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        connect_args=settings.DATABASE_CONNECT_ARGS
    )

def build_session_factory(engine: Engine) -> sessionmaker:
    """Genera el sessionmaker ligado al engine."""
    logger.info("Generando SessionLocal...")
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db(engine: Engine, settings: Settings) -> None:
    """
    Inicializa la base de datos.

    Args:
        engine (Engine): Engine de la base de datos.
        settings (Settings): Configuración de la aplicación.

    Returns:
        None
    """
    settings.INSTANCE_PATH.mkdir(parents=True, exist_ok=True)
    try:
        Base.metadata.create_all(bind=engine)
        logger.info(f"Base de datos inicializada en: {settings.DATABASE_URL}")
    except Exception as e:
        logger.error(f"Error al inicializar la base de datos: {e}")
        raise
