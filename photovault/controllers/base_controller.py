"""
Controlador base con métodos comunes a todos los controladores.
"""
import logging
from typing import Any, Iterable, Optional, Type
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from photovault.errors import StorageError
from photovault.database.change_bus import ChangeBus

class BaseController:
    """
    Controlador base para manejar operaciones de base de datos con gestión de sesiones explícita.
    Tras cada commit exitoso publica las tablas tocadas en el ChangeBus (si hay uno).
    """
    def __init__(self, session: Session, change_bus: Optional[ChangeBus] = None) -> None:
        """
        Inicializa el controlador con una sesión de base de datos dedicada y un registrador.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.session = session
        self.change_bus = change_bus

    def _notify(self, tables: Iterable[str]) -> None:
        """Avisa a las consultas en vivo de que las tablas han cambiado."""
        if self.change_bus is not None:
            self.change_bus.publish(tables)

    def _commit_or_rollback(self, record: Any) -> bool:
        """
        Helper interno para confirmar un nuevo registro o revertirlo en caso de error.

        Args:
            record (object): La instancia del modelo SQLAlchemy que se guardará.

        Returns:
            bool: Verdadero si la operación fue exitosa, falso en caso contrario.
        """
        try:
            self.session.add(record)
            self.session.commit()
            self.logger.info(f"Successfully committed: {record}")
        except SQLAlchemyError as e:
            self.session.rollback()
            self.logger.error(f"SQLAlchemy Error during commit: {e}")
            return False
        self._notify({record.__tablename__})
        return True

    def _commit_all_or_rollback(self, records: list) -> bool:
        """
        Helper interno para confirmar varios registros en una sola transacción.

        Args:
            records (list): Instancias del modelo SQLAlchemy a guardar.

        Returns:
            bool: Verdadero si la operación fue exitosa, falso en caso contrario.
        """
        if not records:
            return True
        try:
            self.session.add_all(records)
            self.session.commit()
            self.logger.info(f"Successfully committed {len(records)} records")
        except SQLAlchemyError as e:
            self.session.rollback()
            self.logger.error(f"SQLAlchemy Error during bulk commit: {e}")
            return False
        self._notify({record.__tablename__ for record in records})
        return True

    def _delete_or_rollback(self, record: Any) -> bool:
        """
        Helper interno para eliminar un registro o revertirlo en caso de error.

        Args:
            record (object): La instancia del modelo SQLAlchemy que se eliminará.

        Returns:
            bool: True si la eliminación fue exitosa, False en caso contrario.
        """
        try:
            self.session.delete(record)
            self.session.commit()
            self.logger.info(f"Successfully deleted: {record}")
        except SQLAlchemyError as e:
            self.session.rollback()
            self.logger.error(f"SQLAlchemy Error during deletion: {e}")
            return False
        self._notify({record.__tablename__})
        return True

    def _execute_or_rollback(self, statement: Executable, tables: Iterable[str]) -> int:
        """
        Ejecuta una sentencia masiva (UPDATE/DELETE) en su propia transacción.

        Args:
            statement (Executable): Sentencia SQLAlchemy a ejecutar.
            tables (Iterable[str]): Tablas afectadas, para el aviso de cambios.

        Returns:
            int: Número de filas afectadas.

        Raises:
            StorageError: Si la base de datos rechaza la operación.
        """
        try:
            result = self.session.execute(statement)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            self.logger.error(f"SQLAlchemy Error during bulk statement: {e}")
            raise StorageError(
                message="Fallo del almacén de registros",
                details={"error": str(e)}
            ) from e
        self._notify(tables)
        return result.rowcount or 0

    def _get_item_by_id(self, model: Type[Any], item_id: int) -> Optional[Any]:
        """
        Recupera un elemento por su ID de la base de datos utilizando el Mapa de identidad.

        La ausencia del registro no es un error: se devuelve None.

        Args:
            model (Type[Any]): La clase de modelo SQLAlchemy para consultar.
            item_id (int): La ID primaria del elemento.

        Returns:
            Optional[Any]: La instancia del modelo recuperada o None si no se encuentra.

        Raises:
            StorageError: Si la consulta falla.
        """
        try:
            item = self.session.get(model, item_id)
        except SQLAlchemyError as e:
            self.logger.error(f"SQLAlchemy Error during retrieval of {model.__tablename__}: {e}")
            raise StorageError(
                message=f"No se pudo consultar {model.__tablename__}",
                details={"id": item_id}
            ) from e

        if item is None:
            self.logger.debug(f"{model.__tablename__} with ID {item_id} not found.")
        return item

