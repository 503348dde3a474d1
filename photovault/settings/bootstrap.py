import sys
import logging
from photovault.utils.get_environment_path import get_env_paths

logger = logging.getLogger("Bootstrap")


def bootstrap_config() -> None:
    """
    Prepara el entorno y escribe un .env por defecto en el primer arranque.
    """
    # Usamos la primera ruta de la tupla (la del usuario) para el bootstrap
    user_env = get_env_paths()[0]

    # Si el archivo ya existe, no hacemos nada, dejamos que Pydantic cargue
    if user_env.exists():
        return

    print(f"--- PRIMER ARRANQUE: Configurando entorno en {user_env.parent} ---")

    user_env.parent.mkdir(parents=True, exist_ok=True)

    default_env_content = """# PHOTOVAULT - AUTO-GENERATED CONFIG
APP_NAME=PhotoVault
API_HOST=127.0.0.1
API_PORT=8000
API_LOG_LEVEL=info
LOG_LEVEL=INFO

# Galería desde la que se importan las fotos (por defecto ~/Pictures)
# GALLERY_PATH=/home/usuario/Pictures
"""

    try:
        user_env.write_text(default_env_content, encoding="utf-8")
        logger.info("--- Configuración inicial creada con éxito ---")
    except OSError as e:
        print(f"Error crítico al escribir la configuración: {e}")
        sys.exit(1)
