from pathlib import Path

from photovault.schemas import DeletionSuccess, DeletionFailed, DeletionPermissionRequired
from photovault.services import LocalGallerySource

def _deny_first_attempt(monkeypatch, gallery, protected_names):
    """Simula archivos protegidos: el primer intento de borrado falla por permisos."""
    original_unlink = LocalGallerySource._unlink

    def fake_unlink(self, path: Path, force: bool = False):
        if path.name in protected_names and not force:
            raise PermissionError(f"protected: {path}")
        original_unlink(self, path, force)

    monkeypatch.setattr(LocalGallerySource, "_unlink", fake_unlink)

def test_list_photos_newest_first(gallery, gallery_dir):
    (gallery_dir / "notes.txt").write_text("not an image")

    listing = gallery.list_photos()

    assert listing.count == 3
    assert [p.display_name for p in listing.photos] == ["city.jpg", "forest.png", "beach.jpg"]
    assert listing.photos[0].location == str((gallery_dir / "city.jpg").absolute())

def test_list_photos_of_missing_gallery(tmp_path):
    assert LocalGallerySource(tmp_path / "nowhere").list_photos().count == 0

def test_get_photos_skips_unknown_and_outside_ids(gallery):
    photos = gallery.get_photos(["beach.jpg", "ghost.jpg", "../secret.jpg"])

    assert [p.source_id for p in photos] == ["beach.jpg"]

def test_delete_without_permission_prompt(gallery, gallery_dir):
    locations = [p.location for p in gallery.get_photos(["beach.jpg", "city.jpg"])]
    locations.append(str(gallery_dir / "already-gone.jpg"))

    result = gallery.delete(locations)

    assert isinstance(result, DeletionSuccess)
    assert (result.deleted_count, result.failed_count) == (2, 1)

def test_delete_requiring_permission_then_granted(monkeypatch, gallery, gallery_dir):
    _deny_first_attempt(monkeypatch, gallery, {"forest.png"})
    locations = [p.location for p in gallery.get_photos(["beach.jpg", "forest.png"])]

    result = gallery.delete(locations)

    assert isinstance(result, DeletionPermissionRequired)
    assert (result.deleted_count, result.pending_count) == (1, 1)
    assert (gallery_dir / "forest.png").exists()

    final = gallery.complete_deletion(result.grant_handle, granted=True)

    assert isinstance(final, DeletionSuccess) and final.deleted_count == 1
    assert not (gallery_dir / "forest.png").exists()
    # El manejador solo se puede usar una vez
    assert isinstance(gallery.complete_deletion(result.grant_handle, granted=True), DeletionFailed)

def test_delete_requiring_permission_then_denied(monkeypatch, gallery, gallery_dir):
    _deny_first_attempt(monkeypatch, gallery, {"forest.png"})
    result = gallery.delete([p.location for p in gallery.get_photos(["forest.png"])])

    final = gallery.complete_deletion(result.grant_handle, granted=False)

    assert isinstance(final, DeletionFailed)
    assert (gallery_dir / "forest.png").exists()
