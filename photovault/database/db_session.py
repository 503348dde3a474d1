from typing import Generator
from fastapi import Request
from sqlalchemy.orm import Session

# Dependency
def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Generador de sesión de base de datos a partir del sessionmaker de la app.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
