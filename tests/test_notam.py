"""Tests for parsing a Notam from a NOTAM API item."""

import pytest
from datetime import datetime, timedelta, timezone

from vfr_notams.models.notam import Notam
from vfr_notams.models.region import GeoArea, GeoCircle

from tests.conftest import NOW


class TestNotamFromJson:
    """Tests for Notam.from_json."""

    def test_basic_fields(self, make_item):
        notam = Notam.from_json(make_item(number="A0123/24", traffic="iv", text="PJE"))

        assert notam.number == "A0123/24"
        assert notam.traffic == "IV"
        assert notam.cancels == ""
        assert notam.text == "PJE"
        assert notam.location == "ELLX"
        assert notam.fir == "ELLX"
        assert notam.maximum_fl == "050"
        assert notam.is_valid()

    def test_times_are_utc(self, make_item):
        notam = Notam.from_json(make_item())
        assert notam.effective_start == NOW - timedelta(days=1)
        assert notam.effective_end == NOW + timedelta(days=7)
        assert notam.effective_start.tzinfo is not None
        assert notam.effective_start.utcoffset() == timedelta(0)

    def test_circle_region(self, make_item, center):
        notam = Notam.from_json(make_item(radius="005"))
        assert isinstance(notam.region, GeoCircle)
        assert notam.region.radius_nm == 5
        assert notam.region.center == notam.coordinate
        assert notam.coordinate.latitude == pytest.approx(center.latitude)

    def test_polygon_region(self, make_item):
        square = {
            'type': 'Polygon',
            'coordinates': [[[6.0, 49.4], [6.4, 49.4], [6.4, 49.8], [6.0, 49.8], [6.0, 49.4]]],
        }
        notam = Notam.from_json(make_item(geometry=square))
        assert isinstance(notam.region, GeoArea)
        assert notam.is_valid()

    def test_permanent(self, make_item):
        notam = Notam.from_json(make_item(end="PERM"))
        assert notam.is_permanent
        assert notam.effective_end is None
        assert notam.is_valid()
        assert not notam.is_outdated(NOW + timedelta(days=10000))

    def test_cancellation_from_icao_message(self, make_item):
        notam = Notam.from_json(make_item(
            number="A0002/24",
            notam_type="C",
            icao_message="A0002/24 NOTAMC A0001/24\nQ) ELLX/QRTXX/IV/BO/W/000/050/4937N00612E010",
        ))
        assert notam.cancels == "A0001/24"

    def test_cancellation_from_text(self, make_item):
        notam = Notam.from_json(make_item(number="A0002/24", notam_type="C", text="A0001/24 CANCELLED"))
        assert notam.cancels == "A0001/24"

    def test_replacement_is_not_cancellation(self, make_item):
        notam = Notam.from_json(make_item(notam_type="R", text="REPLACES A0001/24"))
        assert notam.cancels == ""


class TestNotamValidity:
    """Tests for is_valid and is_outdated."""

    @pytest.mark.parametrize("item", [
        {},
        None,
        "not an object",
        {'properties': {'coreNOTAMData': {}}},
    ])
    def test_garbage_is_invalid(self, item):
        assert not Notam.from_json(item).is_valid()

    def test_missing_number(self, make_item):
        assert not Notam.from_json(make_item(number="")).is_valid()

    def test_missing_coordinates(self, make_item):
        notam = Notam.from_json(make_item(coordinates=None))
        assert notam.coordinate is None
        assert not notam.is_valid()

    def test_bad_coordinates(self, make_item):
        assert not Notam.from_json(make_item(coordinates="9999N99999E")).is_valid()

    def test_missing_radius_without_area(self, make_item):
        notam = Notam.from_json(make_item(radius=None))
        assert notam.region is None
        assert not notam.is_valid()

    def test_bad_start(self, make_item):
        item = make_item()
        item['properties']['coreNOTAMData']['notam']['effectiveStart'] = "yesterday"
        assert not Notam.from_json(item).is_valid()

    def test_bad_end(self, make_item):
        assert not Notam.from_json(make_item(end="soon")).is_valid()

    def test_outdated(self, make_item):
        notam = Notam.from_json(make_item(start=NOW - timedelta(days=3), end=NOW - timedelta(hours=1)))
        assert notam.is_valid()
        assert notam.is_outdated(NOW)
        assert not notam.is_outdated(NOW - timedelta(hours=2))

    def test_outdated_defaults_to_current_time(self):
        notam = Notam(number="A0001/24", effective_end=datetime(2000, 1, 1, tzinfo=timezone.utc))
        assert notam.is_outdated()

    def test_vfr_relevance(self, make_item):
        assert Notam.from_json(make_item(traffic="V")).is_vfr_relevant()
        assert Notam.from_json(make_item(traffic="IV")).is_vfr_relevant()
        assert not Notam.from_json(make_item(traffic="I")).is_vfr_relevant()
        assert not Notam.from_json(make_item(traffic="K")).is_vfr_relevant()

    def test_active_at(self, make_item):
        notam = Notam.from_json(make_item(start=NOW + timedelta(days=1), end=NOW + timedelta(days=2)))
        assert not notam.is_active_at(NOW)
        assert notam.is_active_at(NOW + timedelta(days=1, hours=1))
        assert not notam.is_active_at(NOW + timedelta(days=3))


class TestNotamExport:

    def test_to_dict(self, make_item):
        data = Notam.from_json(make_item(number="A0123/24")).to_dict()
        assert data['number'] == "A0123/24"
        assert data['region']['type'] == 'circle'
        assert data['effective_start'].startswith("2024-05-31T12:00:00")

    def test_str_truncates(self, make_item):
        notam = Notam.from_json(make_item(text="X" * 80))
        assert str(notam).endswith("...")
        assert str(notam).startswith("A0123/24 (ELLX): ")
