"""Keeps the NOTAM lists retrieved so far and answers queries across them."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

from vfr_notams import config
from vfr_notams.collections.notam_list import NotamList
from vfr_notams.models.navpoint import NavPoint
from vfr_notams.models.region import GeoCircle
from vfr_notams.read_state import ReadStateOracle
from vfr_notams.serialization import BinaryReader, BinaryWriter, NotamFormatError

logger = logging.getLogger(__name__)

MAGIC = b"VFRNOTAM"
FORMAT_VERSION = 1


class NotamStore:
    """
    NOTAM lists for several regions plus every cancellation seen so far.

    Lists are kept newest first. Cancellations learned from one fetch are
    applied to all lists, so a NOTAM cancelled in a later batch disappears
    from earlier ones too.

    Example:
        store = NotamStore.load("notams.bin")
        store.add(source.fetch(region), region)
        nearby = store.notams_near(waypoint, read_state)
        store.save("notams.bin")
    """

    MINIMUM_RADIUS_POINT_NM = config.MINIMUM_RADIUS_POINT_NM

    def __init__(self, notam_lists: Iterable[NotamList] = (), cancelled: Iterable[str] = ()):
        self._lists: List[NotamList] = list(notam_lists)
        self._cancelled: Set[str] = set(cancelled)

    @property
    def notam_lists(self) -> List[NotamList]:
        return list(self._lists)

    @property
    def cancelled(self) -> Set[str]:
        return set(self._cancelled)

    def add(self, document, region: GeoCircle, now: Optional[datetime] = None) -> NotamList:
        """
        Add a freshly retrieved JSON document.

        Lists whose region lies entirely inside the new region are dropped,
        the new list becomes the first one.

        Returns:
            The new list, cleaned against all known cancellations
        """
        new_list, cancelled = NotamList.from_json(document, region, now=now)
        self._cancelled |= cancelled

        kept = [
            notam_list.cleaned(self._cancelled, now=now)
            for notam_list in self._lists
            if not region.contains_circle(notam_list.region)
        ]
        new_list = new_list.cleaned(self._cancelled, now=now)
        self._lists = [new_list] + kept
        logger.info(
            f"Added {len(new_list)} NOTAMs for {region.center} ({region.radius_nm:.0f} NM), "
            f"{len(self._lists)} lists, {len(self._cancelled)} cancellations known"
        )
        return new_list

    def clean(self, now: Optional[datetime] = None) -> None:
        """Re-filter every list and forget lists that are out of date."""
        self._lists = [
            notam_list.cleaned(self._cancelled, now=now)
            for notam_list in self._lists
            if not notam_list.is_outdated(now)
        ]

    def notams_near(
        self,
        waypoint: NavPoint,
        read_state: ReadStateOracle,
        now: Optional[datetime] = None,
    ) -> NotamList:
        """
        NOTAMs relevant at a waypoint, taken from the newest list covering it.

        A list covers the waypoint if it is not outdated and the waypoint
        lies at least MINIMUM_RADIUS_POINT_NM inside its region. Returns an
        empty list if no list qualifies.
        """
        for notam_list in self._lists:
            if notam_list.is_outdated(now) or not notam_list.region.is_valid():
                continue
            region = notam_list.region
            margin = region.radius_nm - region.center.distance_to(waypoint)
            if margin < self.MINIMUM_RADIUS_POINT_NM:
                continue
            return notam_list.cleaned(self._cancelled, now=now).restricted(waypoint, read_state, now=now)
        return NotamList()

    def known_numbers(self) -> Set[str]:
        """Numbers of all NOTAMs in all lists."""
        return {notam.number for notam_list in self._lists for notam in notam_list}

    def save(self, path: Union[str, Path]) -> None:
        with open(path, 'wb') as f:
            writer = BinaryWriter(f)
            f.write(MAGIC)
            writer.write_uint16(FORMAT_VERSION)
            writer.write_uint32(len(self._lists))
            for notam_list in self._lists:
                notam_list.write(writer)
            writer.write_uint32(len(self._cancelled))
            for number in sorted(self._cancelled):
                writer.write_string(number)
        logger.debug(f"Saved {len(self._lists)} NOTAM lists to {path}")

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'NotamStore':
        """
        Load a store written by ``save``. A missing file gives an empty store.

        Raises:
            NotamFormatError: If the file is not a store file or is corrupt
        """
        path = Path(path)
        if not path.exists():
            return cls()
        with open(path, 'rb') as f:
            if f.read(len(MAGIC)) != MAGIC:
                raise NotamFormatError(f"{path} is not a NOTAM store file")
            reader = BinaryReader(f)
            version = reader.read_uint16()
            if version != FORMAT_VERSION:
                raise NotamFormatError(f"Unsupported NOTAM store version {version}")
            lists = [NotamList.read(reader) for _ in range(reader.read_uint32())]
            cancelled = [reader.read_text() for _ in range(reader.read_uint32())]
            if f.read(1):
                raise NotamFormatError(f"Trailing data in {path}")
        logger.debug(f"Loaded {len(lists)} NOTAM lists from {path}")
        return cls(lists, cancelled)

    def __len__(self) -> int:
        return len(self._lists)

    def __repr__(self) -> str:
        return f"NotamStore(lists={len(self._lists)}, cancelled={len(self._cancelled)})"
