"""NOTAM data model."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dateutil.parser import isoparse

from vfr_notams.models.navpoint import NavPoint
from vfr_notams.models.region import GeoArea, GeoCircle, NotamRegion

logger = logging.getLogger(__name__)

VFR_TRAFFIC = "V"
PERMANENT = "PERM"

# "A0123/24 NOTAMC A0001/24" -> "A0001/24"
_CANCELS_PATTERN = re.compile(r"NOTAMC\s+([A-Z]\d{4}/\d{2})")
_NUMBER_PATTERN = re.compile(r"\b([A-Z]\d{4}/\d{2})\b")


@dataclass(frozen=True)
class Notam:
    """
    NOTAM (Notice to Airmen) record.

    Immutable. Built from one item of the FAA NOTAM API GeoJSON response via
    ``Notam.from_json``; parsing never raises, fields that cannot be decoded
    are left empty so that ``is_valid()`` reports False.

    Attributes:
        number: NOTAM identifier (e.g., "A0123/24")
        cancels: Number of the NOTAM this one cancels, "" if it cancels nothing
        traffic: Q-line traffic codes, "V" marks VFR relevance
        coordinate: Q-line reference point
        region: Area the NOTAM applies to
        effective_start: Start of validity (aware, UTC)
        effective_end: End of validity (aware, UTC); None for permanent NOTAMs

    Example:
        notam = Notam.from_json(item)
        if notam.is_valid() and not notam.is_outdated():
            print(notam.number, notam.text)
    """

    number: str
    cancels: str = ""
    traffic: str = ""
    coordinate: Optional[NavPoint] = None
    region: Optional[NotamRegion] = None
    effective_start: Optional[datetime] = None
    effective_end: Optional[datetime] = None
    is_permanent: bool = False
    text: str = ""
    location: str = ""
    fir: str = ""
    schedule: str = ""
    minimum_fl: str = ""
    maximum_fl: str = ""

    @classmethod
    def from_json(cls, item: Any) -> 'Notam':
        """
        Create a Notam from one item of the ``items`` array.

        Args:
            item: GeoJSON feature with ``properties.coreNOTAMData.notam``

        Returns:
            Notam instance, possibly invalid
        """
        data = _notam_object(item)
        geometry = item.get('geometry') if isinstance(item, dict) else None

        number = _text(data.get('number'))
        icao_message = _text(data.get('icaoMessage'))
        text = _text(data.get('text'))

        cancels = ""
        match = _CANCELS_PATTERN.search(icao_message)
        if match:
            cancels = match.group(1)
        elif _text(data.get('type')).upper() == 'C':
            found = [n for n in _NUMBER_PATTERN.findall(text) if n != number]
            if found:
                cancels = found[0]

        coordinate = None
        coordinates_text = _text(data.get('coordinates'))
        if coordinates_text:
            try:
                coordinate = NavPoint.from_icao_coordinates(coordinates_text, name=number or None)
            except ValueError as e:
                logger.debug(f"NOTAM {number}: bad coordinates: {e}")

        region: Optional[NotamRegion] = GeoArea.from_geojson(geometry)
        if region is None and coordinate is not None:
            radius = _parse_radius(data.get('radius'))
            if radius is not None:
                region = GeoCircle(center=coordinate, radius_nm=radius)

        end_text = _text(data.get('effectiveEnd'))
        is_permanent = end_text.upper().startswith(PERMANENT)

        return cls(
            number=number,
            cancels=cancels,
            traffic=_text(data.get('traffic')).upper(),
            coordinate=coordinate,
            region=region,
            effective_start=_parse_time(data.get('effectiveStart')),
            effective_end=None if is_permanent else _parse_time(end_text),
            is_permanent=is_permanent,
            text=text,
            location=_text(data.get('icaoLocation') or data.get('location')),
            fir=_text(data.get('affectedFIR')),
            schedule=_text(data.get('schedule')),
            minimum_fl=_text(data.get('minimumFL')),
            maximum_fl=_text(data.get('maximumFL')),
        )

    def is_valid(self) -> bool:
        """True if the record carries everything the list filters rely on."""
        if not self.number:
            return False
        if self.coordinate is None or self.region is None or not self.region.is_valid():
            return False
        if self.effective_start is None:
            return False
        return self.is_permanent or self.effective_end is not None

    def is_outdated(self, now: Optional[datetime] = None) -> bool:
        """True once the effective end lies in the past."""
        if self.effective_end is None:
            return False
        now = as_utc(now)
        return self.effective_end < now

    def is_vfr_relevant(self) -> bool:
        return VFR_TRAFFIC in self.traffic

    def is_active_at(self, dt: datetime) -> bool:
        dt = as_utc(dt)
        if self.effective_start is not None and self.effective_start > dt:
            return False
        return self.effective_end is None or self.effective_end >= dt

    def to_dict(self) -> dict:
        """
        Serialize to dictionary for JSON export.

        Returns:
            Dictionary representation suitable for JSON serialization.
        """
        return {
            'number': self.number,
            'cancels': self.cancels,
            'traffic': self.traffic,
            'coordinates': [self.coordinate.latitude, self.coordinate.longitude] if self.coordinate else None,
            'region': self.region.to_dict() if self.region else None,
            'effective_start': self.effective_start.isoformat() if self.effective_start else None,
            'effective_end': self.effective_end.isoformat() if self.effective_end else None,
            'is_permanent': self.is_permanent,
            'text': self.text,
            'location': self.location,
            'fir': self.fir,
            'schedule': self.schedule,
            'minimum_fl': self.minimum_fl,
            'maximum_fl': self.maximum_fl,
        }

    def __str__(self) -> str:
        message = self.text if len(self.text) <= 50 else f"{self.text[:50]}..."
        return f"{self.number} ({self.location}): {message}"


def _notam_object(item: Any) -> Dict[str, Any]:
    """Dig ``properties.coreNOTAMData.notam`` out of a feature, {} if absent."""
    if not isinstance(item, dict):
        return {}
    node: Any = item
    for key in ('properties', 'coreNOTAMData', 'notam'):
        node = node.get(key) if isinstance(node, dict) else None
    return node if isinstance(node, dict) else {}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_radius(value: Any) -> Optional[float]:
    try:
        radius = float(_text(value))
    except ValueError:
        return None
    return radius if radius >= 0 else None


def _parse_time(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp to an aware UTC datetime, None on failure."""
    text = _text(value)
    if not text:
        return None
    try:
        parsed = isoparse(text)
    except (ValueError, OverflowError):
        return None
    return as_utc(parsed)


def as_utc(dt: Optional[datetime]) -> datetime:
    """Aware UTC version of dt; naive values are taken as UTC, None means now."""
    if dt is None:
        return datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
