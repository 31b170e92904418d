"""FAA NOTAM API source."""

import logging
from typing import Any, Dict, Optional

import requests

from vfr_notams import config
from vfr_notams.collections.notam_list import NotamList
from vfr_notams.models.region import GeoCircle

logger = logging.getLogger(__name__)


class FAANotamSource:
    """
    Fetch NOTAMs around a point from the FAA NOTAM API.

    The API answers with a GeoJSON feature collection, one page at a time.
    ``fetch`` walks all pages and returns a single document whose ``items``
    hold every feature, ready for ``NotamList.from_json``.

    Example:
        source = FAANotamSource()
        region = GeoCircle(NavPoint(49.62, 6.2), 100)
        notams, cancelled = source.fetch_list(region)
    """

    USER_AGENT = "vfr-notams/1.0"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: int = config.FAA_TIMEOUT,
        url: str = config.FAA_API_URL,
        client_id: str = config.FAA_CLIENT_ID,
        client_secret: str = config.FAA_CLIENT_SECRET,
        page_size: int = config.FAA_PAGE_SIZE,
    ):
        """
        Args:
            session: Optional requests.Session for dependency injection (testing).
            timeout: HTTP request timeout in seconds.
        """
        self._session = session or requests.Session()
        self._timeout = timeout
        self._url = url
        self._page_size = page_size
        self._session.headers.setdefault("User-Agent", self.USER_AGENT)
        if client_id:
            self._session.headers["client_id"] = client_id
        if client_secret:
            self._session.headers["client_secret"] = client_secret

    def fetch(self, region: GeoCircle) -> Dict[str, Any]:
        """
        Fetch every NOTAM within a region.

        Returns:
            Document with an ``items`` list. Empty on any HTTP or decoding
            error; items of pages fetched before the error are dropped too,
            since a partial batch would look complete to the list.
        """
        items = []
        page = 1
        while True:
            data = self._fetch_page(region, page)
            if data is None:
                return {'items': []}
            page_items = data.get('items') or []
            items.extend(page_items)
            total_pages = data['totalPages']
            if page >= total_pages or not page_items:
                break
            page += 1
        logger.info(f"Fetched {len(items)} NOTAM items in {page} page(s) for {region.center}")
        return {'items': items}

    def fetch_list(self, region: GeoCircle):
        """Fetch and build a NotamList; returns (list, cancelled numbers)."""
        return NotamList.from_json(self.fetch(region), region)

    def _fetch_page(self, region: GeoCircle, page: int) -> Optional[Dict[str, Any]]:
        params = {
            'locationLatitude': f"{region.center.latitude:.4f}",
            'locationLongitude': f"{region.center.longitude:.4f}",
            'locationRadius': f"{region.radius_nm:.0f}",
            'pageSize': str(self._page_size),
            'pageNum': str(page),
        }
        try:
            response = self._session.get(self._url, params=params, timeout=self._timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("FAA NOTAM fetch failed for page %d: %s", page, e)
            return None
        if not isinstance(data, dict):
            logger.warning("FAA NOTAM response for page %d is not an object", page)
            return None
        try:
            data['totalPages'] = int(data.get('totalPages') or 1)
        except (TypeError, ValueError):
            logger.warning("FAA NOTAM response for page %d has a bad totalPages: %r", page, data.get('totalPages'))
            return None
        return data
