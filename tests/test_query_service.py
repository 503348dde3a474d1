import pytest

from photovault.errors import VaultError
from photovault.services import QueryService

def test_live_albums_emits_current_value_then_changes(query_service, vault_service):
    emissions = []
    subscription = query_service.live_albums().subscribe(emissions.append)

    vault_service.create_album("Trip")
    vault_service.create_album("Work")

    assert emissions[0].count == 0
    assert [a.name for a in emissions[-1].albums] == ["Work", "Trip"]
    assert subscription.active is True

def test_live_query_stops_after_cancel(query_service, vault_service):
    emissions = []
    subscription = query_service.live_albums().subscribe(emissions.append)

    subscription.cancel()
    vault_service.create_album("Trip")

    assert len(emissions) == 1
    assert subscription.active is False

def test_live_album_photos_follow_bin_and_restore(query_service, vault_service, trip_album):
    album, (beach, _, _) = trip_album
    emissions = []
    query_service.live_album_photos(album.id).subscribe(emissions.append)

    vault_service.move_to_bin([beach])
    assert emissions[-1].count == 2

    vault_service.restore_photos([beach])
    assert emissions[-1].count == 3

def test_live_bin_and_favorites(query_service, vault_service, trip_album):
    _, (beach, forest, _) = trip_album
    bin_emissions, favorite_emissions = [], []
    query_service.live_bin().subscribe(bin_emissions.append)
    query_service.live_favorites().subscribe(favorite_emissions.append)

    vault_service.set_favorite(forest, True)
    vault_service.move_to_bin([beach])

    assert [p.id for p in bin_emissions[-1].photos] == [beach]
    assert [p.id for p in favorite_emissions[-1].photos] == [forest]

def test_live_query_skips_unchanged_results(query_service, vault_service, trip_album):
    _, (beach, _, _) = trip_album
    emissions = []
    query_service.live_favorites().subscribe(emissions.append)

    # Cambia la tabla de fotos pero no el resultado de favoritos
    vault_service.move_to_bin([beach])

    assert len(emissions) == 1

def test_live_query_without_session_factory(db_session, change_bus, vault_service):
    query_service = QueryService(db_session, change_bus)
    emissions = []
    query_service.live_albums().subscribe(emissions.append)

    vault_service.create_album("Trip")

    assert emissions[-1].count == 1

def test_live_query_requires_change_bus(db_session):
    with pytest.raises(VaultError):
        QueryService(db_session).live_albums()

def test_one_shot_reads(query_service, vault_service, trip_album):
    album, photo_ids = trip_album
    other = vault_service.create_album("Other")

    assert query_service.list_albums().count == 2
    assert [a.id for a in query_service.list_move_targets(album.id).albums] == [other.id]
    assert query_service.list_album_photos(album.id).count == 3
    assert query_service.get_photo(photo_ids[0]).original_name == "beach.jpg"
    assert query_service.get_album(999) is None
    assert query_service.list_bin().count == 0
