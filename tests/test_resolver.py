"""Tests for playlist resolution."""

from pharma_pitch.playlist.resolver import (
    confirm_selection,
    playlist_slide_ids,
    resolve_saved_playlist,
    resolve_selection,
)


def _pairs(playlist):
    return [(item.slide.id, item.brand.id) for item in playlist]


class TestResolveSelection:
    def test_catalog_order_regardless_of_pick_order(self, catalog):
        assert _pairs(resolve_selection(["s3", "s1"], catalog)) == [("s1", "A"), ("s3", "B")]
        assert _pairs(resolve_selection({"s1", "s3"}, catalog)) == [("s1", "A"), ("s3", "B")]

    def test_follows_stored_slide_order(self, make_brand):
        brand = make_brand("A", "Cardiovex", ["s2", "s1"])
        assert _pairs(resolve_selection({"s1", "s2"}, [brand])) == [("s2", "A"), ("s1", "A")]

    def test_empty_and_unknown(self, catalog):
        assert resolve_selection(set(), catalog) == []
        assert resolve_selection({"nope"}, catalog) == []


class TestResolveSavedPlaylist:
    def test_saved_order_with_stale_id_dropped(self, catalog):
        playlist = resolve_saved_playlist(["s2", "s9", "s1"], catalog)
        assert _pairs(playlist) == [("s2", "A"), ("s1", "A")]

    def test_saved_order_can_cross_brands_backwards(self, catalog):
        assert _pairs(resolve_saved_playlist(["s3", "s1"], catalog)) == [("s3", "B"), ("s1", "A")]

    def test_none_or_empty(self, catalog):
        assert resolve_saved_playlist(None, catalog) == []
        assert resolve_saved_playlist([], catalog) == []

    def test_duplicate_slide_id_resolves_to_first_brand(self, make_brand):
        first = make_brand("A", "Cardiovex", ["dup"])
        second = make_brand("B", "Neurolax", ["dup"])
        assert _pairs(resolve_saved_playlist(["dup"], [first, second])) == [("dup", "A")]


class TestConfirmSelection:
    def test_save_as_default_writes_resolved_ids(self, store):
        playlist = confirm_selection(store, ["s3", "s2"], doctor_id="d1", save_as_default=True)
        assert playlist_slide_ids(playlist) == ["s2", "s3"]
        assert store.get_doctor("d1").saved_slide_ids == ("s2", "s3")

    def test_without_save_leaves_doctor_alone(self, store):
        confirm_selection(store, ["s3"], doctor_id="d1")
        assert store.get_doctor("d1").saved_slide_ids is None

    def test_save_needs_a_doctor(self, store):
        events = []
        store.subscribe(events.append)
        confirm_selection(store, ["s3"], save_as_default=True)
        assert events == []
