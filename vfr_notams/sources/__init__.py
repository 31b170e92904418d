"""NOTAM data sources."""

from vfr_notams.sources.faa import FAANotamSource

__all__ = ['FAANotamSource']
