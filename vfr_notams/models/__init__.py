"""NOTAM data models."""

from vfr_notams.models.navpoint import NavPoint
from vfr_notams.models.region import GeoArea, GeoCircle
from vfr_notams.models.notam import Notam

__all__ = [
    'NavPoint',
    'GeoArea',
    'GeoCircle',
    'Notam',
]
