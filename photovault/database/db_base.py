from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    """Base declarativa para todos los modelos de tablas."""
    pass
