import pytest
from pathlib import Path
from datetime import datetime, timezone

from photovault.enums import ExportPolicy, ReservedAlbum
from photovault.schemas import SourcePhoto
from photovault.database import AlbumDatabaseModel
from photovault.errors import NameConflictError, ResourceNotFoundError, ValidationError

def _album(vault_service, album_id):
    return vault_service.album_controller.get_album_by_id(album_id)

def _photo(vault_service, photo_id):
    return vault_service.photo_controller.get_by_id(photo_id)

def _assert_derived_data(vault_service):
    """photo_count = fotos activas y la portada es una foto activa del álbum (o None si está vacío)."""
    for album in vault_service.album_controller.get_all_albums().albums:
        active = vault_service.photo_controller.get_active_photos_by_album(album.id).photos
        assert album.photo_count == len(active)
        if not active:
            assert album.cover_photo_path is None
        else:
            assert album.cover_photo_path in {p.file_path for p in active}

# =========== ÁLBUMES ===========
def test_create_album_validations(vault_service):
    vault_service.create_album("Trip")

    with pytest.raises(NameConflictError):
        vault_service.create_album("Trip")
    with pytest.raises(ValidationError):
        vault_service.create_album("   ")
    with pytest.raises(ValidationError):
        vault_service.create_album(ReservedAlbum.BIN_HOLDING.value)
    with pytest.raises(ValidationError):
        vault_service.create_album("a/b")

    # Los nombres distinguen mayúsculas
    assert vault_service.create_album("trip").name == "trip"

def test_new_album_is_empty(vault_service):
    album = vault_service.create_album("Empty")

    assert album.photo_count == 0
    assert album.cover_photo_path is None

def test_rename_album(vault_service, trip_album):
    album, photo_ids = trip_album
    vault_service.create_album("Work")
    path_before = _photo(vault_service, photo_ids[0]).file_path

    renamed = vault_service.rename_album(album.id, "Road trip")

    assert renamed.name == "Road trip"
    # Las rutas de archivo no cambian al renombrar
    assert _photo(vault_service, photo_ids[0]).file_path == path_before
    with pytest.raises(NameConflictError):
        vault_service.rename_album(album.id, "Work")
    with pytest.raises(ResourceNotFoundError):
        vault_service.rename_album(999, "Nope")

# =========== IMPORTACIÓN ===========
def test_import_sets_count_cover_and_metadata(vault_service, trip_album, temp_vault):
    album, photo_ids = trip_album
    album = _album(vault_service, album.id)
    beach = _photo(vault_service, photo_ids[0])

    assert album.photo_count == 3
    assert album.cover_photo_path == beach.file_path
    assert beach.original_name == "beach.jpg"
    assert (beach.width, beach.height) == (64, 48)
    assert beach.file_size == Path(beach.file_path).stat().st_size
    assert Path(beach.file_path).parent == (temp_vault / "Trip").absolute()
    assert beach.is_favorite is False and beach.is_deleted is False

def test_import_keeps_existing_cover(vault_service, trip_album, gallery):
    album, photo_ids = trip_album
    cover_before = _album(vault_service, album.id).cover_photo_path

    vault_service.import_photos(album.id, gallery.get_photos(["city.jpg"]), gallery)

    album = _album(vault_service, album.id)
    assert album.photo_count == 4
    assert album.cover_photo_path == cover_before

def test_import_is_not_all_or_nothing(vault_service, gallery, tmp_path):
    album = vault_service.create_album("Mixed")
    missing = SourcePhoto(
        source_id="missing.jpg",
        location=str(tmp_path / "missing.jpg"),
        display_name="missing.jpg",
        size=0,
        date_modified=datetime.now(timezone.utc)
    )
    sources = [missing] + gallery.get_photos(["beach.jpg"])

    result = vault_service.import_photos(album.id, sources, gallery)

    assert result.success is True
    assert (result.succeeded_count, result.failed_count) == (1, 1)
    assert result.items[0].success is False and result.items[0].error
    assert _album(vault_service, album.id).photo_count == 1

def test_import_of_unreadable_image_records_zero_dimensions(vault_service, gallery, gallery_dir):
    (gallery_dir / "corrupt.jpg").write_bytes(b"not really a jpeg")
    album = vault_service.create_album("Corrupt")

    result = vault_service.import_photos(album.id, gallery.get_photos(["corrupt.jpg"]), gallery)

    photo = _photo(vault_service, result.items[0].photo_id)
    assert (photo.width, photo.height) == (0, 0)

def test_import_into_missing_album(vault_service, gallery):
    with pytest.raises(ResourceNotFoundError):
        vault_service.import_photos(42, gallery.get_photos(["beach.jpg"]), gallery)

# =========== PAPELERA ===========
def test_bin_cover_and_restore_round_trip(vault_service, trip_album):
    album, (beach, forest, city) = trip_album
    beach_path = _photo(vault_service, beach).file_path
    forest_path = _photo(vault_service, forest).file_path

    result = vault_service.move_to_bin([beach])

    assert result.affected_count == 1
    binned_album = _album(vault_service, album.id)
    assert binned_album.photo_count == 2
    assert binned_album.cover_photo_path == forest_path
    # El archivo sigue en disco mientras está en la papelera
    assert Path(beach_path).exists()

    vault_service.restore_photos([beach])

    restored_album = _album(vault_service, album.id)
    assert restored_album.photo_count == 3
    assert restored_album.cover_photo_path == beach_path
    _assert_derived_data(vault_service)

def test_restore_keeps_explicit_cover(vault_service, trip_album):
    album, (beach, forest, city) = trip_album
    vault_service.set_cover_photo(album.id, city)
    vault_service.move_to_bin([beach])

    vault_service.restore_photos([beach])

    assert _album(vault_service, album.id).cover_photo_path == _photo(vault_service, city).file_path

def test_restore_keeps_explicit_cover_that_became_oldest(vault_service, trip_album):
    album, (beach, forest, _) = trip_album
    vault_service.set_cover_photo(album.id, forest)
    vault_service.move_to_bin([beach])

    vault_service.restore_photos([beach])

    album = _album(vault_service, album.id)
    assert album.cover_photo_path == _photo(vault_service, forest).file_path
    assert album.cover_is_auto is False

def test_displaced_explicit_cover_becomes_automatic(vault_service, trip_album):
    album, (beach, forest, _) = trip_album
    vault_service.set_cover_photo(album.id, forest)

    vault_service.move_to_bin([forest])
    album_after_bin = _album(vault_service, album.id)
    assert album_after_bin.cover_photo_path == _photo(vault_service, beach).file_path
    assert album_after_bin.cover_is_auto is True

    vault_service.move_to_bin([beach])
    vault_service.restore_photos([beach, forest])
    assert _album(vault_service, album.id).cover_photo_path == _photo(vault_service, beach).file_path

def test_binning_every_photo_clears_cover(vault_service, trip_album):
    album, photo_ids = trip_album

    vault_service.move_to_bin(photo_ids)

    album = _album(vault_service, album.id)
    assert album.photo_count == 0
    assert album.cover_photo_path is None
    assert vault_service.photo_controller.get_photos_in_bin().count == 3

def test_bin_is_idempotent_and_ignores_unknown_ids(vault_service, trip_album):
    album, (beach, _, _) = trip_album

    assert vault_service.move_to_bin([beach, 9999]).affected_count == 1
    assert vault_service.move_to_bin([beach]).affected_count == 0
    assert vault_service.restore_photos([9999]).affected_count == 0

def test_restore_of_active_photo_changes_nothing(vault_service, trip_album):
    album, (beach, _, _) = trip_album
    before = _album(vault_service, album.id)

    result = vault_service.restore_photos([beach])

    assert result.affected_count == 0
    assert _photo(vault_service, beach).album_id == album.id
    after = _album(vault_service, album.id)
    assert after.photo_count == before.photo_count == 3
    assert after.cover_photo_path == before.cover_photo_path

def test_restore_orphan_goes_to_restored_album(vault_service, trip_album):
    album, (beach, _, _) = trip_album
    controller = vault_service.photo_controller
    orphan = controller.create_photo(album_id=777, file_path="/elsewhere/orphan.jpg", original_name="orphan.jpg", file_size=1)
    controller.move_to_bin([orphan.id])

    vault_service.restore_photos([orphan.id])

    restored = vault_service.album_controller.get_album_by_name(ReservedAlbum.RESTORED.value)
    assert restored is not None
    assert _photo(vault_service, orphan.id).album_id == restored.id
    assert restored.photo_count == 1
    assert restored.cover_photo_path == "/elsewhere/orphan.jpg"

def test_restore_from_bin_holding_album(vault_service):
    holding = vault_service.album_controller.create_album(ReservedAlbum.BIN_HOLDING.value)
    controller = vault_service.photo_controller
    photo = controller.create_photo(album_id=holding.id, file_path="/held/p.jpg", original_name="p.jpg", file_size=1)
    controller.move_to_bin([photo.id])

    vault_service.restore_photos([photo.id])

    restored = vault_service.album_controller.get_album_by_name(ReservedAlbum.RESTORED.value)
    assert _photo(vault_service, photo.id).album_id == restored.id
    visible = [a.name for a in vault_service.album_controller.get_all_albums().albums]
    assert ReservedAlbum.BIN_HOLDING.value not in visible
    assert ReservedAlbum.RESTORED.value in visible

def test_restored_album_is_reused(vault_service):
    controller = vault_service.photo_controller
    first = controller.create_photo(album_id=501, file_path="/x/1.jpg", original_name="1.jpg", file_size=1)
    second = controller.create_photo(album_id=502, file_path="/x/2.jpg", original_name="2.jpg", file_size=1)
    controller.move_to_bin([first.id, second.id])

    vault_service.restore_photos([first.id])
    vault_service.restore_photos([second.id])

    names = [a.name for a in vault_service.album_controller.get_all_albums().albums]
    assert names.count(ReservedAlbum.RESTORED.value) == 1

def test_permanent_delete_of_bin_photo(vault_service, trip_album):
    album, (beach, _, _) = trip_album
    beach_path = Path(_photo(vault_service, beach).file_path)
    vault_service.move_to_bin([beach])

    result = vault_service.permanently_delete_photos([beach])

    assert result.success is True and result.affected_count == 1
    assert _photo(vault_service, beach) is None
    assert not beach_path.exists()
    assert _album(vault_service, album.id).photo_count == 2

def test_permanent_delete_of_active_cover_repairs_album(vault_service, trip_album):
    album, (beach, forest, _) = trip_album

    vault_service.permanently_delete_photos([beach])

    album = _album(vault_service, album.id)
    assert album.photo_count == 2
    assert album.cover_photo_path == _photo(vault_service, forest).file_path

def test_permanent_delete_with_missing_file_still_removes_record(vault_service, trip_album):
    album, (beach, _, _) = trip_album
    Path(_photo(vault_service, beach).file_path).unlink()
    vault_service.move_to_bin([beach])

    assert vault_service.permanently_delete_photos([beach]).affected_count == 1
    assert _photo(vault_service, beach) is None

def test_empty_bin(vault_service, trip_album):
    album, (beach, forest, _) = trip_album
    vault_service.move_to_bin([beach, forest])

    result = vault_service.empty_bin()

    assert result.affected_count == 2
    assert vault_service.photo_controller.get_photos_in_bin().count == 0
    assert _album(vault_service, album.id).photo_count == 1
    _assert_derived_data(vault_service)

# =========== MOVIMIENTOS ===========
def test_move_photos_updates_both_albums(vault_service, trip_album):
    album, (beach, forest, city) = trip_album
    target = vault_service.create_album("Best of")

    result = vault_service.move_photos([beach, city], target.id)

    assert result.affected_count == 2
    source = _album(vault_service, album.id)
    target = _album(vault_service, target.id)
    assert source.photo_count == 1
    assert source.cover_photo_path == _photo(vault_service, forest).file_path
    assert target.photo_count == 2
    assert target.cover_photo_path == _photo(vault_service, beach).file_path
    # Los archivos no cambian de directorio
    assert "/Trip/" in _photo(vault_service, beach).file_path
    _assert_derived_data(vault_service)

def test_move_to_same_album_is_noop(vault_service, trip_album):
    album, photo_ids = trip_album

    assert vault_service.move_photos(photo_ids, album.id).affected_count == 0
    assert _album(vault_service, album.id).photo_count == 3

def test_move_keeps_target_cover(vault_service, trip_album, gallery):
    album, (beach, _, _) = trip_album
    other = vault_service.create_album("Other")
    vault_service.import_photos(other.id, gallery.get_photos(["city.jpg"]), gallery)
    other_cover = _album(vault_service, other.id).cover_photo_path

    vault_service.move_photos([beach], other.id)

    assert _album(vault_service, other.id).cover_photo_path == other_cover

def test_move_to_missing_album(vault_service, trip_album):
    _, photo_ids = trip_album

    with pytest.raises(ResourceNotFoundError):
        vault_service.move_photos(photo_ids, 999)

# =========== BORRADO DE ÁLBUMES ===========
def test_delete_album_preserves_bin_members(vault_service, trip_album, temp_vault):
    album, (beach, forest, city) = trip_album
    vault_service.move_to_bin([forest])

    result = vault_service.delete_album(album.id)

    assert result.affected_count == 2
    assert _album(vault_service, album.id) is None
    assert _photo(vault_service, beach) is None and _photo(vault_service, city) is None
    assert not (temp_vault / "Trip").exists()

    restored = vault_service.album_controller.get_album_by_name(ReservedAlbum.RESTORED.value)
    survivor = _photo(vault_service, forest)
    assert survivor.is_deleted is True
    assert survivor.album_id == restored.id
    assert restored.photo_count == 0 and restored.cover_photo_path is None

    vault_service.restore_photos([forest])
    restored = _album(vault_service, restored.id)
    assert restored.photo_count == 1
    assert restored.cover_photo_path == survivor.file_path

def test_delete_album_removes_files_of_photos_moved_out(vault_service, trip_album):
    album, (beach, _, _) = trip_album
    best = vault_service.create_album("Best")
    vault_service.move_photos([beach], best.id)
    moved_path = Path(_photo(vault_service, beach).file_path)
    assert moved_path.parent.name == "Trip"

    vault_service.delete_album(album.id)

    # El registro sigue activo en Best pero su archivo vivía en el directorio de Trip
    survivor = _photo(vault_service, beach)
    assert survivor.album_id == best.id and survivor.is_deleted is False
    assert not moved_path.exists()
    best = _album(vault_service, best.id)
    assert best.photo_count == 1
    assert best.cover_photo_path == str(moved_path)

def test_delete_restored_album_parks_bin_members(vault_service):
    restored = vault_service.create_album(ReservedAlbum.RESTORED.value)
    controller = vault_service.photo_controller
    photo = controller.create_photo(album_id=restored.id, file_path="/r/p.jpg", original_name="p.jpg", file_size=1)
    controller.move_to_bin([photo.id])

    vault_service.delete_album(restored.id)

    holding = vault_service.album_controller.get_album_by_name(ReservedAlbum.BIN_HOLDING.value)
    assert _photo(vault_service, photo.id).album_id == holding.id

    vault_service.restore_photos([photo.id])
    new_restored = vault_service.album_controller.get_album_by_name(ReservedAlbum.RESTORED.value)
    assert _photo(vault_service, photo.id).album_id == new_restored.id

def test_delete_missing_album_is_not_an_error(vault_service):
    result = vault_service.delete_album(404)

    assert result.success is True and result.affected_count == 0

# =========== PORTADAS, FAVORITOS Y MANTENIMIENTO ===========
def test_set_cover_photo_rules(vault_service, trip_album):
    album, (beach, forest, _) = trip_album
    other = vault_service.create_album("Other")

    updated = vault_service.set_cover_photo(album.id, forest)
    assert updated.cover_photo_path == _photo(vault_service, forest).file_path

    with pytest.raises(ValidationError):
        vault_service.set_cover_photo(other.id, forest)
    vault_service.move_to_bin([beach])
    with pytest.raises(ValidationError):
        vault_service.set_cover_photo(album.id, beach)
    with pytest.raises(ResourceNotFoundError):
        vault_service.set_cover_photo(album.id, 999)

def test_favorites(vault_service, trip_album):
    _, (beach, _, _) = trip_album

    assert vault_service.set_favorite(beach, True).is_favorite is True
    assert vault_service.toggle_favorite(beach).is_favorite is False
    with pytest.raises(ResourceNotFoundError):
        vault_service.set_favorite(999, True)

def test_refresh_album_metadata_repairs_drift(vault_service, trip_album):
    album, (beach, _, _) = trip_album
    album_db = vault_service.session.get(AlbumDatabaseModel, album.id)
    album_db.photo_count = 99
    album_db.cover_photo_path = "/stale/path.jpg"
    vault_service.session.commit()

    result = vault_service.refresh_album_metadata()

    assert result.affected_count == 1
    repaired = _album(vault_service, album.id)
    assert repaired.photo_count == 3
    assert repaired.cover_photo_path == _photo(vault_service, beach).file_path

def test_export_photo(vault_service, trip_album, tmp_path):
    _, (beach, _, _) = trip_album

    exported = vault_service.export_photo(beach, ExportPolicy.ORIGINAL_NAME)

    assert exported.name == "beach.jpg"
    assert exported.parent == tmp_path / "exports"
    assert exported.read_bytes() == Path(_photo(vault_service, beach).file_path).read_bytes()

def test_remove_originals_through_vault(vault_service, gallery, gallery_dir):
    sources = gallery.get_photos(["beach.jpg"])

    result = vault_service.remove_originals(gallery, sources)

    assert result.status == "success" and result.deleted_count == 1
    assert not (gallery_dir / "beach.jpg").exists()
