from typing import Any, Dict, Optional

class VaultError(Exception):
    """Base para todos los errores de la aplicación."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ValidationError(VaultError):
    """Error de validación de datos o reglas de negocio."""
    pass

class ResourceNotFoundError(VaultError):
    """Cuando un recurso (Album, Photo) solicitado explícitamente no existe."""
    pass

class NameConflictError(VaultError):
    """Cuando ya existe un álbum con el nombre solicitado."""
    pass

class StorageError(VaultError):
    """Fallo del almacén de registros (base de datos inaccesible o corrupta)."""
    pass

class FileIOError(VaultError):
    """Fallo de lectura, copia o borrado de archivos físicos."""
    pass
