from typing import Optional
from datetime import datetime
from sqlalchemy import Integer, BigInteger, DateTime, String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from photovault.utils.dates import get_now
from photovault.database.db_base import Base

class PhotoDatabaseModel(Base):
    """Modelo de tabla para fotos."""
    __tablename__ = "photos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Referencia lógica al álbum: sin ForeignKey para que las fotos en papelera
    # sobrevivan al borrado de su álbum.
    album_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # Almacenamiento
    file_path: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    original_name: Mapped[str] = mapped_column(String, nullable=False)
    imported_date: Mapped[datetime] = mapped_column(DateTime, default=get_now)
    file_size: Mapped[int] = mapped_column(BigInteger, default=0)
    width: Mapped[int] = mapped_column(Integer, default=0)
    height: Mapped[int] = mapped_column(Integer, default=0)

    # Papelera y favoritos
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    deleted_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<Photo id={self.id} album_id={self.album_id} deleted={self.is_deleted}>"
