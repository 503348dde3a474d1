import os
import pytest
from PIL import Image
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from photovault.settings import settings
from photovault.database import Base, ChangeBus
from photovault.services import StorageService, LocalGallerySource, VaultService, QueryService

def _create_image(path: Path, size=(64, 48), color="red") -> Path:
    Image.new("RGB", size, color).save(path)
    return path

@pytest.fixture
def make_image():
    """Crea imágenes reales con Pillow."""
    return _create_image

@pytest.fixture
def engine():
    """Engine SQLite en memoria compartido por todas las sesiones del test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session(session_factory):
    """Sesión de DB en memoria para aislamiento total."""
    session = session_factory()
    yield session
    session.close()

@pytest.fixture
def change_bus():
    return ChangeBus()

@pytest.fixture
def temp_vault(tmp_path, monkeypatch):
    """Directorios temporales para el baúl, las exportaciones y la instancia."""
    vault_dir = tmp_path / "vault"
    monkeypatch.setattr(settings, "VAULT_PATH", vault_dir)
    monkeypatch.setattr(settings, "EXPORT_PATH", tmp_path / "exports")
    monkeypatch.setattr(settings, "INSTANCE_PATH", tmp_path / "instance")
    return vault_dir

@pytest.fixture
def storage_service(temp_vault):
    return StorageService()

@pytest.fixture
def gallery_dir(tmp_path):
    """Galería con tres imágenes de fechas de modificación distintas."""
    gallery = tmp_path / "gallery"
    gallery.mkdir()
    for index, (name, color) in enumerate([("beach.jpg", "blue"), ("forest.png", "green"), ("city.jpg", "gray")]):
        path = _create_image(gallery / name, size=(64 + index, 48), color=color)
        os.utime(path, (1_700_000_000 + index * 60, 1_700_000_000 + index * 60))
    return gallery

@pytest.fixture
def gallery(gallery_dir):
    return LocalGallerySource(gallery_dir)

@pytest.fixture
def vault_service(db_session, storage_service, change_bus):
    return VaultService(db_session, storage_service, change_bus)

@pytest.fixture
def query_service(db_session, change_bus, session_factory):
    return QueryService(db_session, change_bus, session_factory)

@pytest.fixture
def trip_album(vault_service, gallery):
    """Álbum 'Trip' con tres fotos importadas en orden: beach, forest, city."""
    album = vault_service.create_album("Trip")
    sources = gallery.get_photos(["beach.jpg", "forest.png", "city.jpg"])
    result = vault_service.import_photos(album.id, sources, gallery)
    assert result.succeeded_count == 3
    photo_ids = [item.photo_id for item in result.items]
    return album, photo_ids
