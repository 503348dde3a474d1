import sys
from pathlib import Path
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from photovault.settings.version import __version__
from photovault.utils.get_environment_path import get_env_paths
from photovault.errors.config_errors import ConfigurationError


class Settings(BaseSettings):
    # Datos base
    APP_NAME: str = "PhotoVault"
    APP_VERSION: str = __version__

    # Directorios
    BASE_PATH: Path = Path.home() / f".{APP_NAME}"
    DATA_PATH: Path = BASE_PATH / "data"
    LOGS_PATH: Path = DATA_PATH / "logs"
    CONFIG_PATH: Path = BASE_PATH / "config"
    EXPORT_PATH: Path = DATA_PATH / "exports"

    # Raíz del baúl: aquí viven los directorios por álbum con las copias privadas
    VAULT_PATH: Path = DATA_PATH / "PhotoVault"

    # Galería externa desde la que se importan las fotos
    GALLERY_PATH: Path = Path.home() / "Pictures"

    # Database
    INSTANCE_PATH: Path = BASE_PATH / "instance"
    @property
    def DATABASE_URL(self) -> str:
        db_path = self.INSTANCE_PATH / f"{self.APP_NAME}.db"
        # sqlite://// para absoluto
        return f"sqlite:///{db_path.absolute()}"

    DATABASE_ECHO: bool = False
    DATABASE_CONNECT_ARGS: dict = {"check_same_thread": False}

    # API
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    API_RELOAD: bool = False
    API_LOG_LEVEL: str = "info"

    # Logs
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=get_env_paths(), env_file_encoding="utf-8", extra="ignore")

    def ensure_dirs(self) -> None:
        """Crea la estructura de directorios necesaria para el baúl."""
        dirs = [
            self.BASE_PATH, self.DATA_PATH, self.LOGS_PATH,
            self.CONFIG_PATH, self.INSTANCE_PATH,
            self.VAULT_PATH, self.EXPORT_PATH
        ]
        for directory in dirs:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                print(f" ERROR CRÍTICO: No se pudo crear el directorio {directory}. Revise permisos. ({e})")
                sys.exit(1)

def load_settings() -> Settings:
    """
    Instancia la configuración capturando errores de validación para
    presentar mensajes amigables al usuario.
    """
    try:
        instance = Settings()
        instance.ensure_dirs()
        return instance
    except ValidationError as e:
        invalid_vars = [str(err["loc"][0]) for err in e.errors() if err.get("loc")]

        message = (
            "\n" + "="*60 + "\n"
            " ERROR DE CONFIGURACIÓN EN PHOTOVAULT\n"
            "="*60 + "\n"
            "Hay variables de entorno con valores inválidos en tu archivo .env o sistema:\n"
            f"  {', '.join(invalid_vars)}\n\n"
            "Por favor, revisa el archivo de configuración y corrige\n"
            "estos valores para que el servicio pueda iniciar.\n"
            "="*60
        )
        print(message)
        raise ConfigurationError(message="Configuración inválida", invalid_fields=invalid_vars) from e

settings = load_settings()
