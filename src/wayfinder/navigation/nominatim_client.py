# nominatim_client.py
# Async search / reverse-geocoding backend on top of the Nominatim HTTP API.
# Returns raw JSON candidates; mapping to GeocodingResult happens in geocoding.py.

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .nav_config import NavConfig

logger = logging.getLogger(__name__)


class GeocodingError(RuntimeError):
    """Raised when a geocoding request fails or returns an unexpected shape."""


class NominatimClient:
    """
    Thin async wrapper around Nominatim's /search and /reverse endpoints.

    Args:
        config:      NavConfig instance (base URL, language, user agent, timeout).
        http_client: Optional pre-built httpx.AsyncClient (tests pass one with a MockTransport).
    """

    def __init__(self, config: Optional[NavConfig] = None, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self.config = config or NavConfig()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.config.nominatim_base_url,
            timeout=self.config.search_timeout_s,
            headers={
                "Accept-Language": self.config.accept_language,
                "User-Agent": self.config.user_agent,
            },
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "NominatimClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def search(
        self,
        query: str,
        country_codes: str,
        viewbox: Tuple[float, float, float, float],
        limit: int,
        bounded: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Free-text place search.

        Args:
            query:         Text typed by the user.
            country_codes: Comma-separated ISO codes ("ke").
            viewbox:       (minLon, minLat, maxLon, maxLat) preferred region.
            limit:         Maximum number of candidates.
            bounded:       Restrict results to the viewbox.

        Returns:
            Raw Nominatim candidates.
        """
        params = {
            "q": query,
            "format": "json",
            "addressdetails": "1",
            "limit": str(limit),
            "countrycodes": country_codes,
            "viewbox": ",".join(str(v) for v in viewbox),
            "bounded": "1" if bounded else "0",
        }
        payload = await self._get_json("/search", params)
        if not isinstance(payload, list):
            raise GeocodingError(f"Unexpected search payload: {type(payload).__name__}")
        return payload

    async def reverse(self, lat: float, lng: float) -> Optional[Dict[str, Any]]:
        """
        Reverse-geocode a coordinate.

        Returns:
            Raw Nominatim place, or None when nothing is found at that point.
        """
        params = {"lat": str(lat), "lon": str(lng), "format": "json", "addressdetails": "1"}
        payload = await self._get_json("/reverse", params)
        if not isinstance(payload, dict):
            raise GeocodingError(f"Unexpected reverse payload: {type(payload).__name__}")
        if payload.get("error"):
            logger.info(f"Reverse geocode found nothing at ({lat}, {lng}): {payload['error']}")
            return None
        return payload

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _get_json(self, path: str, params: Dict[str, str]) -> Any:
        try:
            response = await self._http.get(path, params=params)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise GeocodingError(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            raise GeocodingError(f"Request to {path} failed: {e}") from e
        try:
            return response.json()
        except ValueError as e:
            raise GeocodingError(f"Invalid JSON from {path}") from e
