"""
Bus de cambios en proceso para las consultas en vivo.

Los controladores publican las tablas que tocan después de cada commit exitoso;
las consultas en vivo se suscriben por tabla y se recalculan al recibir el aviso.
"""
import logging
import threading
from typing import Callable, Dict, Iterable, List, Set

ChangeListener = Callable[[Set[str]], None]

class ChangeSubscription:
    """Manejador devuelto por ChangeBus.subscribe para dejar de recibir avisos."""

    def __init__(self, bus: "ChangeBus", listener_id: int) -> None:
        self._bus = bus
        self._listener_id = listener_id
        self.active = True

    def cancel(self) -> None:
        """Cancela la suscripción. Llamarlo más de una vez no tiene efecto."""
        if self.active:
            self._bus._remove(self._listener_id)
            self.active = False

class ChangeBus:
    """
    Publicador/suscriptor indexado por nombre de tabla.
    """
    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._lock = threading.RLock()
        self._listeners: Dict[int, tuple[frozenset, ChangeListener]] = {}
        self._next_id = 0

    def subscribe(self, tables: Iterable[str], listener: ChangeListener) -> ChangeSubscription:
        """
        Registra un listener para una o varias tablas.

        Args:
            tables (Iterable[str]): Tablas observadas, p. ej. {"albums", "photos"}.
            listener (ChangeListener): Función que recibe el conjunto de tablas modificadas.

        Returns:
            ChangeSubscription: Manejador para cancelar la suscripción.
        """
        with self._lock:
            listener_id = self._next_id
            self._next_id += 1
            self._listeners[listener_id] = (frozenset(tables), listener)
        return ChangeSubscription(self, listener_id)

    def publish(self, tables: Iterable[str]) -> None:
        """
        Notifica a los listeners interesados en alguna de las tablas modificadas.

        Un listener que falla se registra en el log y no interrumpe al escritor.
        """
        changed = set(tables)
        if not changed:
            return

        with self._lock:
            targets: List[ChangeListener] = [
                listener for watched, listener in self._listeners.values()
                if watched & changed
            ]

        for listener in targets:
            try:
                listener(changed)
            except Exception as e:
                self.logger.error(f"Listener falló al procesar cambios en {sorted(changed)}: {e}")

    def _remove(self, listener_id: int) -> None:
        with self._lock:
            self._listeners.pop(listener_id, None)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)
