from photovault.errors.base import (
    VaultError,
    ValidationError,
    ResourceNotFoundError,
    NameConflictError,
    StorageError,
    FileIOError
)
from photovault.errors.config_errors import ConfigurationError
