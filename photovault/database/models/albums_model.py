from typing import Optional
from datetime import datetime
from sqlalchemy import Boolean, Integer, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from photovault.utils.dates import get_now
from photovault.database.db_base import Base

class AlbumDatabaseModel(Base):
    """
    Modelo de tabla para álbumes.

    El nombre es único por convención (se comprueba antes de insertar o renombrar),
    no por restricción de la base de datos. photo_count y cover_photo_path son
    datos derivados que mantiene el VaultService tras cada mutación.
    """
    __tablename__ = "albums"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    created_date: Mapped[datetime] = mapped_column(DateTime, default=get_now)
    photo_count: Mapped[int] = mapped_column(Integer, default=0)
    cover_photo_path: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # False cuando la portada la eligió el usuario con set_cover_photo
    cover_is_auto: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self) -> str:
        return f"<Album id={self.id} name={self.name!r}>"
