# geocoding.py
# Debounced, cancelable place search for one input field.
# Run two controllers for a "from" / "to" pair; they share nothing.
#
# Usage (inside a running asyncio loop):
#   controller = GeocodingSearchController(NominatimClient(config), config)
#   controller.search("sarit")        # call on every keystroke
#   ...
#   controller.results                # newest results only

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

import httpx

from .models import Coord, GeocodingResult, SearchState
from .nav_config import NavConfig, PRINCIPAL_CITY
from .nominatim_client import GeocodingError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Short-name derivation — ordered rules, first match wins
# ---------------------------------------------------------------------------

# Main label: amenity → shop → building → road → source-provided name
PRIMARY_NAME_RULES: List[Callable[[Dict[str, Any], Dict[str, Any]], Optional[str]]] = [
    lambda address, item: address.get("amenity"),
    lambda address, item: address.get("shop"),
    lambda address, item: address.get("building"),
    lambda address, item: address.get("road"),
    lambda address, item: item.get("name"),
]

LOCALITY_KEYS = ("suburb", "neighbourhood")

MAX_SHORT_NAME_PARTS = 3

_UNSET = object()


def format_short_name(item: Dict[str, Any], principal_city: str = PRINCIPAL_CITY) -> str:
    """
    Compact label for a raw geocoding candidate.

    "Sarit Centre, Westlands" rather than the full display name. The city is
    left out when it is the region's principal city.

    Args:
        item:           Raw candidate with optional "address", "name", "display_name".
        principal_city: City name that is implied and therefore omitted.

    Returns:
        At most three comma-joined parts, or the first two display-name segments.
    """
    address = item.get("address") or {}
    parts: List[str] = []

    for rule in PRIMARY_NAME_RULES:
        value = rule(address, item)
        if value:
            parts.append(value)
            break

    for key in LOCALITY_KEYS:
        value = address.get(key)
        if value and value not in parts:
            parts.append(value)
            break

    city = address.get("city")
    if city and city != principal_city:
        parts.append(city)
    elif address.get("town"):
        parts.append(address["town"])

    if not parts:
        segments = [p.strip() for p in (item.get("display_name") or "").split(",")]
        return ", ".join(segments[:2])

    return ", ".join(parts[:MAX_SHORT_NAME_PARTS])


def to_geocoding_result(
    item: Dict[str, Any],
    principal_city: str = PRINCIPAL_CITY,
    importance: Optional[float] = None,
) -> GeocodingResult:
    """Map a raw Nominatim candidate to a GeocodingResult."""
    return GeocodingResult(
        place_id=str(item["place_id"]),
        display_name=item.get("display_name", ""),
        short_name=format_short_name(item, principal_city),
        location=Coord(float(item["lat"]), float(item["lon"])),
        type=item.get("type", ""),
        importance=float(importance if importance is not None else item.get("importance") or 0.0),
        address=item.get("address"),
    )


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class GeocodingSearchController:
    """
    Turns keystrokes into at most one backend request per quiet period.

    Every search() call bumps a request token; a response is applied only if
    its token is still the newest, so superseded requests can never overwrite
    newer state even if cancellation arrives too late.

    Args:
        backend:   Object with async search(query, country_codes, viewbox, limit, bounded)
                   and async reverse(lat, lng), e.g. NominatimClient.
        config:    NavConfig instance.
        on_change: Optional callback receiving a SearchState after every visible change.
    """

    def __init__(
        self,
        backend,
        config: Optional[NavConfig] = None,
        on_change: Optional[Callable[[SearchState], None]] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._backend = backend
        self._on_change = on_change

        self._results: List[GeocodingResult] = []
        self._is_loading: bool = False
        self._last_error: Optional[str] = None

        self._token: int = 0
        self._debounce: Optional[asyncio.TimerHandle] = None
        self._request: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def results(self) -> List[GeocodingResult]:
        return list(self._results)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def state(self) -> SearchState:
        return SearchState(list(self._results), self._is_loading, self._last_error)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def search(self, query: str) -> None:
        """
        Schedule a search for query, superseding any earlier call.

        Must be called from within the running event loop. Queries shorter
        than search_min_chars clear the results without a request.
        """
        self._token += 1
        self._cancel_pending()

        if not query or len(query) < self.config.search_min_chars:
            self._set_state(results=[], is_loading=False)
            return

        self._set_state(is_loading=True, last_error=None)
        loop = asyncio.get_running_loop()
        self._debounce = loop.call_later(self.config.search_debounce_s, self._fire, query, self._token)

    def clear_results(self) -> None:
        """Drop results and error; in-flight work is left alone."""
        self._set_state(results=[], last_error=None)

    async def reverse_geocode(self, lat: float, lng: float) -> Optional[GeocodingResult]:
        """
        Look up the place at a coordinate. Not debounced, does not touch results.

        Returns:
            GeocodingResult, or None if nothing was found or the request failed.
        """
        try:
            item = await asyncio.wait_for(self._backend.reverse(lat, lng), self.config.search_timeout_s)
            if not item:
                return None
            return to_geocoding_result(item, self.config.principal_city, importance=1.0)
        except (GeocodingError, httpx.HTTPError, asyncio.TimeoutError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Reverse geocoding ({lat}, {lng}) failed: {e!r}")
            return None

    async def settle(self) -> None:
        """Wait until no debounce timer or request is outstanding."""
        while self._debounce is not None or (self._request is not None and not self._request.done()):
            if self._debounce is not None:
                await asyncio.sleep(self.config.search_debounce_s / 2)
            else:
                await asyncio.wait({self._request})

    def close(self) -> None:
        """Cancel everything outstanding; late responses are ignored."""
        self._token += 1
        self._cancel_pending()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _cancel_pending(self) -> None:
        if self._debounce is not None:
            self._debounce.cancel()
            self._debounce = None
        if self._request is not None and not self._request.done():
            self._request.cancel()
        self._request = None

    def _fire(self, query: str, token: int) -> None:
        self._debounce = None
        if token != self._token:
            return
        logger.info(f"Searching for {query!r}")
        self._request = asyncio.ensure_future(self._run(query, token))

    async def _run(self, query: str, token: int) -> None:
        cfg = self.config
        try:
            raw = await asyncio.wait_for(
                self._backend.search(
                    query, cfg.search_country_codes, cfg.search_viewbox, cfg.search_limit, cfg.search_bounded,
                ),
                cfg.search_timeout_s,
            )
            results = [to_geocoding_result(item, cfg.principal_city) for item in raw]
        except (GeocodingError, httpx.HTTPError, asyncio.TimeoutError, KeyError, TypeError, ValueError) as e:
            if token != self._token:
                return
            message = str(e) or "Search failed"
            logger.warning(f"Search for {query!r} failed: {message}")
            self._set_state(results=[], is_loading=False, last_error=message)
            return
        except Exception as e:
            if token != self._token:
                return
            logger.exception(f"Unexpected error searching for {query!r}")
            self._set_state(results=[], is_loading=False, last_error=str(e) or "Search failed")
            return

        if token != self._token:
            logger.debug(f"Dropped stale results for {query!r}")
            return
        logger.info(f"{len(results)} results for {query!r}")
        self._set_state(results=results, is_loading=False)

    def _set_state(self, results=_UNSET, is_loading=_UNSET, last_error=_UNSET) -> None:
        before = self.state
        if results is not _UNSET:
            self._results = list(results)
        if is_loading is not _UNSET:
            self._is_loading = is_loading
        if last_error is not _UNSET:
            self._last_error = last_error
        after = self.state
        if self._on_change is not None and after != before:
            self._on_change(after)
