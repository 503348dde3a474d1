""" 
Entrypoint de la API
"""
import uvicorn

from photovault.api.app_factory import create_app
from photovault.settings import settings, VaultLogger, bootstrap_config

# Configuración por defecto en el primer arranque
bootstrap_config()

# Nos aseguramos que los directorios se crean
settings.ensure_dirs()

# Inicializamos el logger
VaultLogger.setup_logging(level=settings.LOG_LEVEL)

# Creamos la app de la API (base de datos, escritor único y manejadores de errores)
app = create_app(settings=settings)

def run_server():
    """
    Run the FastAPI server.
    """
    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.API_LOG_LEVEL,
        reload=settings.API_RELOAD,
    )

if __name__ == "__main__":
    run_server()
