"""
Binary stream primitives for the on-disk NOTAM cache.

All values are big-endian. Strings are a uint32 byte length followed by
UTF-8 data, with 0xFFFFFFFF marking None. Datetimes are a presence byte
followed by int64 microseconds since the Unix epoch (UTC), which makes the
round trip exact.
"""

import struct
from datetime import datetime, timedelta, timezone
from typing import BinaryIO, Optional

from shapely.errors import ShapelyError

from vfr_notams.models.navpoint import NavPoint
from vfr_notams.models.notam import Notam
from vfr_notams.models.region import GeoArea, GeoCircle, NotamRegion

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
NULL_LENGTH = 0xFFFFFFFF

REGION_NONE = 0
REGION_CIRCLE = 1
REGION_AREA = 2


class NotamFormatError(ValueError):
    """Raised when a persisted NOTAM stream is truncated or corrupt."""


class BinaryWriter:
    """Write primitive values to a binary stream."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def _pack(self, fmt: str, *values) -> None:
        self.stream.write(struct.pack('>' + fmt, *values))

    def write_bool(self, value: bool) -> None:
        self._pack('?', bool(value))

    def write_uint8(self, value: int) -> None:
        self._pack('B', value)

    def write_uint16(self, value: int) -> None:
        self._pack('H', value)

    def write_uint32(self, value: int) -> None:
        self._pack('I', value)

    def write_double(self, value: float) -> None:
        self._pack('d', value)

    def write_bytes(self, value: Optional[bytes]) -> None:
        if value is None:
            self.write_uint32(NULL_LENGTH)
            return
        self.write_uint32(len(value))
        self.stream.write(value)

    def write_string(self, value: Optional[str]) -> None:
        self.write_bytes(None if value is None else value.encode('utf-8'))

    def write_datetime(self, value: Optional[datetime]) -> None:
        self.write_bool(value is not None)
        if value is not None:
            delta = value.astimezone(timezone.utc) - EPOCH
            micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
            self._pack('q', micros)

    def write_navpoint(self, point: Optional[NavPoint]) -> None:
        self.write_bool(point is not None)
        if point is not None:
            self.write_double(point.latitude)
            self.write_double(point.longitude)
            self.write_string(point.name)

    def write_circle(self, circle: GeoCircle) -> None:
        self.write_navpoint(circle.center)
        self.write_double(circle.radius_nm)

    def write_region(self, region: Optional[NotamRegion]) -> None:
        if region is None:
            self.write_uint8(REGION_NONE)
        elif isinstance(region, GeoCircle):
            self.write_uint8(REGION_CIRCLE)
            self.write_circle(region)
        else:
            self.write_uint8(REGION_AREA)
            self.write_bytes(region.to_wkb())

    def write_notam(self, notam: Notam) -> None:
        self.write_string(notam.number)
        self.write_string(notam.cancels)
        self.write_string(notam.traffic)
        self.write_navpoint(notam.coordinate)
        self.write_region(notam.region)
        self.write_datetime(notam.effective_start)
        self.write_datetime(notam.effective_end)
        self.write_bool(notam.is_permanent)
        for value in (notam.text, notam.location, notam.fir, notam.schedule,
                      notam.minimum_fl, notam.maximum_fl):
            self.write_string(value)


class BinaryReader:
    """Read values written by BinaryWriter; raises NotamFormatError on bad data."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def _read_exact(self, size: int) -> bytes:
        data = self.stream.read(size)
        if data is None or len(data) != size:
            raise NotamFormatError(f"Unexpected end of stream: wanted {size} bytes")
        return data

    def _unpack(self, fmt: str):
        fmt = '>' + fmt
        return struct.unpack(fmt, self._read_exact(struct.calcsize(fmt)))[0]

    def read_bool(self) -> bool:
        value = self._unpack('B')
        if value > 1:
            raise NotamFormatError(f"Invalid boolean byte {value}")
        return bool(value)

    def read_uint8(self) -> int:
        return self._unpack('B')

    def read_uint16(self) -> int:
        return self._unpack('H')

    def read_uint32(self) -> int:
        return self._unpack('I')

    def read_double(self) -> float:
        return self._unpack('d')

    def read_bytes(self) -> Optional[bytes]:
        length = self.read_uint32()
        if length == NULL_LENGTH:
            return None
        return self._read_exact(length)

    def read_string(self) -> Optional[str]:
        data = self.read_bytes()
        if data is None:
            return None
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise NotamFormatError(f"Invalid UTF-8 string: {e}") from e

    def read_text(self) -> str:
        """Read a string field that must be present."""
        value = self.read_string()
        if value is None:
            raise NotamFormatError("Missing string field")
        return value

    def read_datetime(self) -> Optional[datetime]:
        if not self.read_bool():
            return None
        micros = self._unpack('q')
        try:
            return EPOCH + timedelta(microseconds=micros)
        except OverflowError as e:
            raise NotamFormatError(f"Timestamp out of range: {micros}") from e

    def read_navpoint(self) -> Optional[NavPoint]:
        if not self.read_bool():
            return None
        latitude = self.read_double()
        longitude = self.read_double()
        name = self.read_string()
        try:
            return NavPoint(latitude=latitude, longitude=longitude, name=name)
        except ValueError as e:
            raise NotamFormatError(str(e)) from e

    def read_circle(self) -> GeoCircle:
        center = self.read_navpoint()
        return GeoCircle(center=center, radius_nm=self.read_double())

    def read_region(self) -> Optional[NotamRegion]:
        tag = self.read_uint8()
        if tag == REGION_NONE:
            return None
        if tag == REGION_CIRCLE:
            return self.read_circle()
        if tag == REGION_AREA:
            data = self.read_bytes()
            if data is None:
                raise NotamFormatError("Missing area geometry")
            try:
                return GeoArea.from_wkb(data)
            except (ShapelyError, ValueError, TypeError) as e:
                raise NotamFormatError(f"Invalid area geometry: {e}") from e
        raise NotamFormatError(f"Unknown region tag {tag}")

    def read_notam(self) -> Notam:
        number = self.read_text()
        cancels = self.read_text()
        traffic = self.read_text()
        coordinate = self.read_navpoint()
        region = self.read_region()
        effective_start = self.read_datetime()
        effective_end = self.read_datetime()
        is_permanent = self.read_bool()
        text, location, fir, schedule, minimum_fl, maximum_fl = (self.read_text() for _ in range(6))
        return Notam(
            number=number,
            cancels=cancels,
            traffic=traffic,
            coordinate=coordinate,
            region=region,
            effective_start=effective_start,
            effective_end=effective_end,
            is_permanent=is_permanent,
            text=text,
            location=location,
            fir=fir,
            schedule=schedule,
            minimum_fl=minimum_fl,
            maximum_fl=maximum_fl,
        )
