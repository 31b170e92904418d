import pytest
from datetime import datetime, timedelta, timezone
from typing import Optional

from vfr_notams.models.navpoint import NavPoint
from vfr_notams.models.region import GeoCircle

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

# 49°37'N 006°12'E
CENTER_TEXT = "4937N00612E"


def iso(dt: datetime) -> str:
    """Format like the FAA API does."""
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def build_item(
    number: str = "A0123/24",
    traffic: str = "IV",
    coordinates: Optional[str] = CENTER_TEXT,
    radius: Optional[str] = "010",
    start: Optional[datetime] = None,
    end=None,
    notam_type: str = "N",
    icao_message: Optional[str] = None,
    text: str = "AIRSPACE RESTRICTED",
    location: str = "ELLX",
    fir: str = "ELLX",
    geometry: Optional[dict] = None,
    reference: datetime = NOW,
) -> dict:
    """One FAA NOTAM API feature; times default to a window around ``reference``."""
    start = start if start is not None else reference - timedelta(days=1)
    end = end if end is not None else reference + timedelta(days=7)
    notam = {
        'number': number,
        'type': notam_type,
        'traffic': traffic,
        'effectiveStart': iso(start),
        'effectiveEnd': end if isinstance(end, str) else iso(end),
        'text': text,
        'icaoLocation': location,
        'affectedFIR': fir,
        'minimumFL': '000',
        'maximumFL': '050',
        'schedule': '',
    }
    if coordinates is not None:
        notam['coordinates'] = coordinates
    if radius is not None:
        notam['radius'] = radius
    if icao_message is not None:
        notam['icaoMessage'] = icao_message
    return {
        'type': 'Feature',
        'properties': {'coreNOTAMData': {'notam': notam}},
        'geometry': geometry or {'type': 'Point', 'coordinates': [6.2, 49.6167]},
    }


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def center() -> NavPoint:
    return NavPoint.from_icao_coordinates(CENTER_TEXT)


@pytest.fixture
def region(center) -> GeoCircle:
    """100 NM query region around the center."""
    return GeoCircle(center=center, radius_nm=100)


@pytest.fixture
def make_item():
    return build_item


@pytest.fixture
def make_document():
    def _make_document(*items) -> dict:
        return {'items': list(items)}
    return _make_document


class StubReadState:
    """Read-state oracle backed by a fixed set of numbers."""

    def __init__(self, read=()):
        self.read = set(read)
        self.calls = []

    def is_read(self, number: str) -> bool:
        self.calls.append(number)
        return number in self.read


@pytest.fixture
def read_state_factory():
    return StubReadState
