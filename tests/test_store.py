"""Tests for NotamStore."""

import pytest
from datetime import timedelta

from vfr_notams.collections.notam_list import NotamList
from vfr_notams.models.region import GeoCircle
from vfr_notams.serialization import NotamFormatError
from vfr_notams.store import MAGIC, NotamStore


def numbers(notam_list):
    return [n.number for n in notam_list]


class TestNotamStoreAdd:

    def test_add_returns_cleaned_list(self, region, now, make_item, make_document):
        store = NotamStore()
        document = make_document(
            make_item(number="A0002/24", notam_type="C", icao_message="A0002/24 NOTAMC A0001/24"),
            make_item(number="A0001/24"),
            make_item(number="A0003/24"),
        )
        added = store.add(document, region, now=now)

        assert numbers(added) == ["A0003/24"]
        assert store.cancelled == {"A0001/24"}
        assert len(store) == 1

    def test_later_cancellation_cleans_earlier_list(self, region, center, now, make_item, make_document):
        store = NotamStore()
        store.add(make_document(make_item(number="A0001/24"), make_item(number="A0003/24")), region, now=now)

        elsewhere = GeoCircle(center=center.point_from_bearing_distance(90, 300), radius_nm=100)
        store.add(
            make_document(make_item(number="A0002/24", notam_type="C", icao_message="A0002/24 NOTAMC A0001/24")),
            elsewhere,
            now=now,
        )

        assert len(store) == 2
        assert store.notam_lists[0].region == elsewhere
        assert numbers(store.notam_lists[1]) == ["A0003/24"]

    def test_covered_list_replaced(self, center, now, make_item, make_document):
        store = NotamStore()
        small = GeoCircle(center=center, radius_nm=50)
        big = GeoCircle(center=center, radius_nm=150)
        store.add(make_document(make_item(number="A0001/24")), small, now=now)
        store.add(make_document(make_item(number="A0002/24")), big, now=now)

        assert len(store) == 1
        assert store.notam_lists[0].region == big
        assert store.known_numbers() == {"A0002/24"}

    def test_clean_drops_outdated_lists(self, region, now, make_item, make_document):
        store = NotamStore()
        store.add(make_document(make_item()), region, now=now)
        store.clean(now=now + NotamList.MAX_AGE + timedelta(minutes=1))
        assert len(store) == 0


class TestNotamStoreQueries:

    def test_notams_near(self, region, center, now, make_item, make_document, read_state_factory):
        store = NotamStore()
        store.add(make_document(make_item(number="A0001/24")), region, now=now)

        result = store.notams_near(center, read_state_factory(), now=now)

        assert numbers(result) == ["A0001/24"]
        assert result.region.center == center

    def test_waypoint_too_close_to_boundary(self, region, center, now, make_item, make_document, read_state_factory):
        store = NotamStore()
        store.add(make_document(make_item(number="A0001/24")), region, now=now)

        waypoint = center.point_from_bearing_distance(180, 90)
        result = store.notams_near(waypoint, read_state_factory(), now=now)

        assert result.is_empty()
        assert not result.is_valid()

    def test_outdated_list_ignored(self, region, center, now, make_item, make_document, read_state_factory):
        store = NotamStore()
        store.add(make_document(make_item(number="A0001/24", end="PERM")), region, now=now)

        later = now + NotamList.MAX_AGE + timedelta(hours=1)
        assert store.notams_near(center, read_state_factory(), now=later).is_empty()

    def test_newest_list_wins(self, center, now, make_item, make_document, read_state_factory):
        store = NotamStore()
        west = GeoCircle(center=center.point_from_bearing_distance(270, 10), radius_nm=100)
        east = GeoCircle(center=center.point_from_bearing_distance(90, 10), radius_nm=100)
        store.add(make_document(make_item(number="A0001/24")), west, now=now)
        store.add(make_document(make_item(number="A0002/24")), east, now=now)

        assert numbers(store.notams_near(center, read_state_factory(), now=now)) == ["A0002/24"]


class TestNotamStorePersistence:

    def test_save_and_load(self, tmp_path, region, now, make_item, make_document):
        store = NotamStore()
        store.add(make_document(
            make_item(number="A0001/24"),
            make_item(number="A0002/24", notam_type="C", icao_message="A0002/24 NOTAMC A0009/24"),
        ), region, now=now)
        path = tmp_path / "notams.bin"
        store.save(path)

        loaded = NotamStore.load(path)

        assert loaded.notam_lists == store.notam_lists
        assert loaded.cancelled == {"A0009/24"}
        assert path.read_bytes().startswith(MAGIC)

    def test_load_missing_file(self, tmp_path):
        assert len(NotamStore.load(tmp_path / "missing.bin")) == 0

    def test_load_wrong_magic(self, tmp_path):
        path = tmp_path / "notams.bin"
        path.write_bytes(b"NOTNOTAM\x00\x01")
        with pytest.raises(NotamFormatError):
            NotamStore.load(path)

    def test_load_wrong_version(self, tmp_path):
        path = tmp_path / "notams.bin"
        path.write_bytes(MAGIC + b"\x00\x63\x00\x00\x00\x00\x00\x00\x00\x00")
        with pytest.raises(NotamFormatError):
            NotamStore.load(path)

    def test_load_truncated(self, tmp_path, region, now, make_item, make_document):
        store = NotamStore()
        store.add(make_document(make_item()), region, now=now)
        path = tmp_path / "notams.bin"
        store.save(path)
        path.write_bytes(path.read_bytes()[:-3])

        with pytest.raises(NotamFormatError):
            NotamStore.load(path)
