"""
Place-name geocoding through OpenStreetMap Nominatim.

Results are remembered in a JSON file (place -> [lat, lng]). The cache
never expires and is never trimmed; misses are not cached.
"""

import json
import logging
from pathlib import Path

import requests

from ordertracker.models.base import LatLng
from ordertracker.providers.base import Geocoder, ProviderUnavailable

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


class GeocodeCache:
    """Persistent place -> coordinates map."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._entries: dict[str, LatLng] | None = None

    @staticmethod
    def _key(place: str) -> str:
        return " ".join(place.lower().split())

    def _load(self) -> dict[str, LatLng]:
        if self._entries is None:
            self._entries = {}
            if self.path.exists():
                try:
                    raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
                    self._entries = {k: (float(v[0]), float(v[1])) for k, v in raw.items()}
                except (ValueError, TypeError, IndexError) as e:
                    logger.warning("Ignoring unreadable geocode cache %s: %s", self.path, e)
        return self._entries

    def get(self, place: str) -> LatLng | None:
        return self._load().get(self._key(place))

    def put(self, place: str, coordinates: LatLng) -> None:
        entries = self._load()
        entries[self._key(place)] = coordinates
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({k: list(v) for k, v in entries.items()}, indent=2),
            encoding="utf-8",
        )


class NominatimGeocoder(Geocoder):
    """Geocoder backed by Nominatim with a file cache in front."""

    def __init__(
        self,
        cache: GeocodeCache,
        user_agent: str = "order-tracker-demo",
        url: str = NOMINATIM_URL,
        timeout: int = 10,
    ):
        self.cache = cache
        self.user_agent = user_agent
        self.url = url
        self.timeout = timeout

    def geocode(self, place: str) -> LatLng | None:
        place = (place or "").strip()
        if not place:
            return None

        cached = self.cache.get(place)
        if cached is not None:
            return cached

        try:
            response = requests.get(
                self.url,
                params={"q": place, "format": "json", "limit": 1},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
            results = response.json()
        except requests.RequestException as e:
            raise ProviderUnavailable(f"Geocoding request failed: {e}") from e
        except ValueError as e:
            raise ProviderUnavailable("Failed to parse geocoding response") from e

        if not isinstance(results, list):
            raise ProviderUnavailable(f"Unexpected geocoding response: {results!r}")
        if not results:
            logger.info("No geocoding result for %r", place)
            return None

        try:
            coordinates = (float(results[0]["lat"]), float(results[0]["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderUnavailable(f"Malformed geocoding result for {place!r}") from e

        try:
            self.cache.put(place, coordinates)
        except OSError as e:
            logger.warning("Could not write geocode cache %s: %s", self.cache.path, e)
        return coordinates
