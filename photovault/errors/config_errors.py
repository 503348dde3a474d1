from photovault.errors.base import VaultError

class ConfigurationError(VaultError):
    """Excepción lanzada cuando faltan variables de entorno o la configuración es inválida."""
    def __init__(self, message: str, invalid_fields: list[str] = None):
        super().__init__(message=message, details={"invalid_fields": invalid_fields})
