"""
Escritor único del baúl: serializa todas las operaciones que lo modifican.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Optional
from sqlalchemy.orm import sessionmaker

from photovault.errors import ValidationError
from photovault.database.change_bus import ChangeBus
from photovault.services.vault_service import VaultService
from photovault.services.storage_service import StorageService

class VaultExecutor:
    """
    Ejecuta las operaciones de VaultService de una en una, en un hilo dedicado,
    cada una con su propia sesión. Quien llama recibe un Future y no se bloquea.
    """
    def __init__(
            self,
            session_factory: sessionmaker,
            change_bus: Optional[ChangeBus] = None,
            storage_service: Optional[StorageService] = None
        ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.session_factory = session_factory
        self.change_bus = change_bus
        self.storage_service = storage_service
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="vault-writer")

    def _run(self, operation: str, args: tuple, kwargs: dict) -> Any:
        session = self.session_factory()
        try:
            service = VaultService(session, self.storage_service, self.change_bus)
            return getattr(service, operation)(*args, **kwargs)
        except Exception as e:
            self.logger.error(f"La operación '{operation}' falló: {e}")
            raise
        finally:
            session.close()

    def submit(self, operation: str, *args: Any, **kwargs: Any) -> Future:
        """
        Encola una operación del baúl.

        Args:
            operation (str): Nombre de un método de VaultService.MUTATIONS.

        Returns:
            Future: Resultado de la operación, o su excepción.

        Raises:
            ValidationError: Si la operación no existe.
        """
        if operation not in VaultService.MUTATIONS:
            raise ValidationError(message="Operación desconocida", details={"operation": operation})
        self.logger.debug(f"Encolando operación '{operation}'")
        return self._executor.submit(self._run, operation, args, kwargs)

    def shutdown(self, wait: bool = True) -> None:
        """Espera a que terminen las operaciones encoladas y libera el hilo."""
        self._executor.shutdown(wait=wait)
