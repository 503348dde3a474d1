"""
Módulo de servicio de lecturas del baúl, puntuales o en vivo.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, Optional, Set, TypeVar
from sqlalchemy.orm import Session, sessionmaker

from photovault.errors import VaultError
from photovault.database.change_bus import ChangeBus, ChangeSubscription
from photovault.controllers import AlbumController, PhotoController
from photovault.controllers.photo_controller import PHOTOS_TABLE
from photovault.database.models.albums_model import AlbumDatabaseModel
from photovault.schemas import AlbumResponse, AlbumListResponse, PhotoResponse, PhotoResponseList

ALBUMS_TABLE = AlbumDatabaseModel.__tablename__

T = TypeVar("T")

class Subscription:
    """Suscripción a una consulta en vivo. cancel() detiene las emisiones."""

    def __init__(self, change_subscription: ChangeSubscription) -> None:
        self._change_subscription = change_subscription

    @property
    def active(self) -> bool:
        return self._change_subscription.active

    def cancel(self) -> None:
        self._change_subscription.cancel()

class LiveQuery(Generic[T]):
    """
    Consulta que vuelve a ejecutarse cada vez que cambia alguna de sus tablas.

    Los suscriptores reciben el valor actual al suscribirse y después un valor
    nuevo tras cada commit que lo modifique. Las emisiones se producen en el
    hilo del escritor.
    """
    def __init__(self, change_bus: ChangeBus, tables: Set[str], fetch: Callable[[], T]) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.change_bus = change_bus
        self.tables = frozenset(tables)
        self._fetch = fetch

    def get(self) -> T:
        """Ejecuta la consulta una vez."""
        return self._fetch()

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        """
        Emite el valor actual y se suscribe a los cambios posteriores.

        Args:
            callback (Callable[[T], None]): Recibe cada valor nuevo.

        Returns:
            Subscription: Manejador para cancelar.
        """
        lock = threading.Lock()
        last = {"value": self._fetch()}

        def on_change(_tables: Set[str]) -> None:
            value = self._fetch()
            with lock:
                if value == last["value"]:
                    return
                last["value"] = value
            callback(value)

        subscription = Subscription(self.change_bus.subscribe(self.tables, on_change))
        callback(last["value"])
        return subscription

class QueryService:
    """
    Servicio de alto nivel para las vistas de solo lectura: álbumes, fotos de un
    álbum, papelera y favoritos.
    """
    def __init__(
            self,
            session: Session,
            change_bus: Optional[ChangeBus] = None,
            session_factory: Optional[sessionmaker] = None
        ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.session = session
        self.change_bus = change_bus
        self.session_factory = session_factory

        self.album_controller = AlbumController(session)
        self.photo_controller = PhotoController(session)

    # =========== MÉTODOS PRIVADOS ===========
    @contextmanager
    def _reader(self) -> Iterator[Session]:
        """
        Sesión para recalcular una consulta en vivo: una nueva por cada evaluación
        si hay fábrica, o la propia sesión expirada para no servir datos en caché.
        """
        if self.session_factory is None:
            self.session.expire_all()
            yield self.session
            return
        session = self.session_factory()
        try:
            yield session
        finally:
            session.close()

    def _live(self, tables: Set[str], query: Callable[[Session], T]) -> LiveQuery[T]:
        if self.change_bus is None:
            raise VaultError(message="Las consultas en vivo requieren un ChangeBus")

        def fetch() -> T:
            with self._reader() as session:
                return query(session)

        return LiveQuery(self.change_bus, tables, fetch)

    # =========== CONSULTAS PUNTUALES ===========
    def list_albums(self) -> AlbumListResponse:
        """Álbumes visibles, del más reciente al más antiguo."""
        return self.album_controller.get_all_albums()

    def get_album(self, album_id: int) -> Optional[AlbumResponse]:
        return self.album_controller.get_album_by_id(album_id)

    def list_move_targets(self, album_id: int) -> AlbumListResponse:
        """Álbumes a los que se pueden mover fotos desde album_id."""
        return self.album_controller.get_all_albums_except(album_id)

    def list_album_photos(self, album_id: int) -> PhotoResponseList:
        """Fotos activas de un álbum, de la más reciente a la más antigua."""
        return self.photo_controller.get_active_photos_by_album(album_id)

    def get_photo(self, photo_id: int) -> Optional[PhotoResponse]:
        return self.photo_controller.get_by_id(photo_id)

    def list_bin(self) -> PhotoResponseList:
        """Contenido de la papelera, del borrado más reciente al más antiguo."""
        return self.photo_controller.get_photos_in_bin()

    def list_favorites(self) -> PhotoResponseList:
        return self.photo_controller.get_favorite_photos()

    # =========== CONSULTAS EN VIVO ===========
    def live_albums(self) -> LiveQuery[AlbumListResponse]:
        return self._live({ALBUMS_TABLE}, lambda s: AlbumController(s).get_all_albums())

    def live_album_photos(self, album_id: int) -> LiveQuery[PhotoResponseList]:
        return self._live(
            {PHOTOS_TABLE},
            lambda s: PhotoController(s).get_active_photos_by_album(album_id)
        )

    def live_bin(self) -> LiveQuery[PhotoResponseList]:
        return self._live({PHOTOS_TABLE}, lambda s: PhotoController(s).get_photos_in_bin())

    def live_favorites(self) -> LiveQuery[PhotoResponseList]:
        return self._live({PHOTOS_TABLE}, lambda s: PhotoController(s).get_favorite_photos())
