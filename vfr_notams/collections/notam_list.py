"""NOTAM list for a circular region, as retrieved in one batch."""

import io
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional, Set, Tuple, Union

from vfr_notams import config
from vfr_notams.models.navpoint import NavPoint
from vfr_notams.models.notam import Notam, as_utc
from vfr_notams.models.queryable_collection import QueryableCollection
from vfr_notams.models.region import GeoCircle
from vfr_notams.read_state import ReadStateOracle
from vfr_notams.serialization import BinaryReader, BinaryWriter, NotamFormatError

logger = logging.getLogger(__name__)

FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


class NotamList(QueryableCollection[Notam]):
    """
    Curated list of NOTAMs for a circular region.

    A list is built from a JSON document with ``from_json``, which keeps only
    valid, current, VFR-relevant notices, one per number. ``cleaned`` and
    ``restricted`` derive new lists; a list is never modified after
    construction.

    Attributes:
        region: Area the NOTAMs were requested for
        retrieved: When the batch was fetched (aware UTC), None if unknown

    Example:
        notams, cancelled = NotamList.from_json(document, GeoCircle(center, 100))
        notams = notams.cleaned(cancelled)
        nearby = notams.restricted(waypoint, read_state)
        print(nearby.summary())
    """

    RESTRICTION_RADIUS_NM = config.RESTRICTION_RADIUS_NM
    MAX_AGE = timedelta(hours=config.MAX_AGE_HOURS)

    def __init__(
        self,
        notams: Iterable[Notam] = (),
        region: Optional[GeoCircle] = None,
        retrieved: Optional[datetime] = None,
    ):
        super().__init__(notams)
        self.region = region if region is not None else GeoCircle(center=None)
        self.retrieved = retrieved

    def _new_collection(self, items: Iterable[Notam]) -> 'NotamList':
        """Create new list preserving region and retrieval time."""
        return NotamList(items, region=self.region, retrieved=self.retrieved)

    @property
    def notams(self) -> Tuple[Notam, ...]:
        return self._items

    # --- Construction ---

    @classmethod
    def from_json(
        cls,
        document: Union[dict, str, bytes, None],
        region: GeoCircle,
        now: Optional[datetime] = None,
    ) -> Tuple['NotamList', Set[str]]:
        """
        Build a list from a NOTAM API response.

        Items are dropped silently when they do not parse to a valid NOTAM,
        are cancellation notices, are outdated, do not concern VFR traffic,
        or repeat a number already kept. The API repeats a NOTAM once per
        FIR it affects, so duplicates are expected.

        Args:
            document: Parsed JSON object with an ``items`` array, or its text
            region: Region the document was requested for
            now: Reference time, defaults to the current UTC time

        Returns:
            Tuple of the new list and the numbers cancelled by cancellation
            notices found in the document
        """
        now = as_utc(now)
        cancelled: Set[str] = set()
        notams: List[Notam] = []
        numbers_seen: Set[str] = set()
        skipped = {'invalid': 0, 'outdated': 0, 'not_vfr': 0, 'duplicate': 0}

        for item in _items(document):
            notam = Notam.from_json(item)
            if not notam.is_valid():
                skipped['invalid'] += 1
                continue
            if notam.cancels:
                cancelled.add(notam.cancels)
                continue
            if notam.is_outdated(now):
                skipped['outdated'] += 1
                continue
            if not notam.is_vfr_relevant():
                skipped['not_vfr'] += 1
                continue
            if notam.number in numbers_seen:
                skipped['duplicate'] += 1
                continue
            notams.append(notam)
            numbers_seen.add(notam.number)

        logger.debug(
            f"Kept {len(notams)} NOTAMs, {len(cancelled)} cancellations, skipped {skipped}"
        )
        return cls(notams, region=region, retrieved=now), cancelled

    # --- Derived lists ---

    def cleaned(self, cancelled_numbers: Iterable[str], now: Optional[datetime] = None) -> 'NotamList':
        """
        Drop invalid, outdated, cancelled and duplicate NOTAMs.

        Args:
            cancelled_numbers: Numbers cancelled by notices seen since this
                list was built
            now: Reference time, defaults to the current UTC time

        Returns:
            New list with the same region and retrieval time
        """
        now = as_utc(now)
        cancelled = set(cancelled_numbers)
        kept: List[Notam] = []
        numbers_seen: Set[str] = set()

        for notam in self._items:
            if not notam.is_valid():
                continue
            if notam.is_outdated(now):
                continue
            if notam.number in cancelled:
                continue
            if notam.number in numbers_seen:
                continue
            kept.append(notam)
            numbers_seen.add(notam.number)

        return NotamList(kept, region=self.region, retrieved=self.retrieved)

    def restricted(
        self,
        waypoint: NavPoint,
        read_state: ReadStateOracle,
        now: Optional[datetime] = None,
    ) -> 'NotamList':
        """
        NOTAMs relevant at a waypoint, most pressing first.

        A NOTAM is kept if its reference point is within
        RESTRICTION_RADIUS_NM of the waypoint and its region contains the
        waypoint. The result is sorted unread before read, then by effective
        start (starts in the past count as now), then by effective end.

        The region of the result is centered on the waypoint and never
        reaches beyond the region of this list.

        Args:
            waypoint: Point of interest
            read_state: Tells which NOTAMs the user has already seen
            now: Reference time, defaults to the current UTC time
        """
        now = as_utc(now)
        radius = self.RESTRICTION_RADIUS_NM
        if self.region.is_valid():
            margin = self.region.radius_nm - self.region.center.distance_to(waypoint)
            radius = min(radius, max(0.0, margin))
        else:
            radius = 0.0

        kept: List[Notam] = []
        numbers_seen: Set[str] = set()
        for notam in self._items:
            if not notam.is_valid():
                continue
            if notam.is_outdated(now):
                continue
            if notam.coordinate.distance_to(waypoint) > self.RESTRICTION_RADIUS_NM:
                continue
            if notam.number in numbers_seen:
                continue
            if not notam.region.contains(waypoint):
                continue
            kept.append(notam)
            numbers_seen.add(notam.number)

        def sort_key(notam: Notam) -> Tuple[bool, datetime, datetime]:
            return (
                read_state.is_read(notam.number),
                max(notam.effective_start, now),
                notam.effective_end or FAR_FUTURE,
            )

        return NotamList(
            sorted(kept, key=sort_key),
            region=GeoCircle(center=waypoint, radius_nm=radius),
            retrieved=self.retrieved,
        )

    # --- Query helpers ---

    def for_location(self, icao: str) -> 'NotamList':
        """NOTAMs whose location or FIR is the given ICAO code."""
        icao_upper = icao.upper()
        return self.filter(lambda n: icao_upper in (n.location.upper(), n.fir.upper()))

    def active_at(self, dt: datetime) -> 'NotamList':
        """NOTAMs in effect at a given time."""
        return self.filter(lambda n: n.is_active_at(dt))

    def containing(self, text: str) -> 'NotamList':
        """NOTAMs whose text contains ``text``, case-insensitive."""
        text_upper = text.upper()
        return self.filter(lambda n: text_upper in n.text.upper())

    # --- State ---

    def age(self, now: Optional[datetime] = None) -> timedelta:
        """Time since retrieval, zero if the retrieval time is unknown."""
        if self.retrieved is None:
            return timedelta(0)
        now = as_utc(now)
        return now - self.retrieved

    def is_valid(self) -> bool:
        return self.retrieved is not None and self.region.is_valid()

    def is_outdated(self, now: Optional[datetime] = None) -> bool:
        return self.age(now) > self.MAX_AGE

    def summary(self, now: Optional[datetime] = None) -> str:
        """Short status line, e.g. "NOTAMs available • Update requested." """
        results = ["No NOTAMs known" if self.is_empty() else "NOTAMs available"]
        if not self.is_valid() or self.is_outdated(now):
            results.append("Update requested.")
        return " • ".join(results)

    # --- Serialization ---

    def write(self, writer: BinaryWriter) -> None:
        """Write NOTAMs, region and retrieval time, in that order."""
        writer.write_uint32(len(self._items))
        for notam in self._items:
            writer.write_notam(notam)
        writer.write_circle(self.region)
        writer.write_datetime(self.retrieved)

    @classmethod
    def read(cls, reader: BinaryReader) -> 'NotamList':
        """Read a list written by ``write``; raises NotamFormatError on corrupt data."""
        count = reader.read_uint32()
        notams = [reader.read_notam() for _ in range(count)]
        region = reader.read_circle()
        retrieved = reader.read_datetime()
        return cls(notams, region=region, retrieved=retrieved)

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.write(BinaryWriter(buffer))
        return buffer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> 'NotamList':
        buffer = io.BytesIO(data)
        notam_list = cls.read(BinaryReader(buffer))
        if buffer.read(1):
            raise NotamFormatError("Trailing data after NOTAM list")
        return notam_list

    def to_dict(self) -> dict:
        return {
            'notams': [n.to_dict() for n in self._items],
            'region': self.region.to_dict(),
            'retrieved': self.retrieved.isoformat() if self.retrieved else None,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NotamList):
            return NotImplemented
        return (
            self._items == other._items
            and self.region == other.region
            and self.retrieved == other.retrieved
        )

    __hash__ = None  # type: ignore[assignment]


def _items(document: Union[dict, str, bytes, None]) -> List[Any]:
    """The ``items`` array of a document, [] if there is none."""
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except ValueError as e:
            logger.warning(f"Invalid NOTAM JSON document: {e}")
            return []
    if not isinstance(document, dict):
        return []
    items = document.get('items')
    return items if isinstance(items, list) else []
