"""
VFR NOTAM briefing.

This package provides tools for:
- Parsing NOTAMs from FAA NOTAM API JSON documents
- Keeping only valid, current, VFR-relevant NOTAMs, one per number
- Showing the NOTAMs that matter at a waypoint, unread and most pressing first
- Caching NOTAM lists on disk in a compact binary format

Example usage:
    from vfr_notams import NotamList, GeoCircle, NavPoint, NotamReadState

    region = GeoCircle(NavPoint(49.62, 6.20), 100)
    notams, cancelled = NotamList.from_json(document, region)
    notams = notams.cleaned(cancelled)

    waypoint = NavPoint(49.70, 6.30, name="ELLX")
    for notam in notams.restricted(waypoint, NotamReadState()):
        print(notam.number, notam.text)
"""

from vfr_notams.models.navpoint import NavPoint
from vfr_notams.models.region import GeoArea, GeoCircle
from vfr_notams.models.notam import Notam
from vfr_notams.collections.notam_list import NotamList
from vfr_notams.read_state import NotamReadState, ReadStateOracle
from vfr_notams.serialization import NotamFormatError
from vfr_notams.store import NotamStore
from vfr_notams.sources.faa import FAANotamSource

__all__ = [
    # Models
    'NavPoint',
    'GeoArea',
    'GeoCircle',
    'Notam',
    # Collections
    'NotamList',
    'NotamStore',
    # Read state
    'NotamReadState',
    'ReadStateOracle',
    # Sources
    'FAANotamSource',
    # Errors
    'NotamFormatError',
]
