"""ZIP code geocoding for radius searches.

RIDB only searches around coordinates, so a ZIP code entered by the user is first
resolved to a point with geopy's Nominatim geocoder.
"""

import logging

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from recreation_finder.config import GeocoderSettings

logger = logging.getLogger(__name__)


class GeocodingError(ValueError):
    """Raised when a ZIP code cannot be resolved to coordinates."""


class ZipGeocoder:
    """Resolve US ZIP codes to (latitude, longitude).

    Lookups are memoized per instance since ZIP centroids do not change while the
    application runs and Nominatim's usage policy asks clients to avoid repeats.

    Attributes:
        settings (GeocoderSettings): Geocoder configuration.
        geolocator (Nominatim): The geopy geocoder instance.
    """

    def __init__(self, settings: GeocoderSettings, geolocator: Nominatim | None = None) -> None:
        """Initialize the geocoder.

        Args:
            settings: Geocoder settings (user agent, timeout, country).
            geolocator: Optional pre-built geocoder, mainly for tests.
        """
        self.settings = settings
        self.geolocator = geolocator or Nominatim(
            user_agent=settings.user_agent, timeout=settings.timeout
        )
        self._cache: dict[str, tuple[float, float]] = {}

    def geocode(self, zip_code: str) -> tuple[float, float]:
        """Resolve a ZIP code to its centroid.

        Args:
            zip_code: Five-digit US ZIP code.

        Returns:
            A (latitude, longitude) tuple.

        Raises:
            GeocodingError: If the ZIP code is unknown or the geocoder fails.
        """
        zip_code = zip_code.strip()
        if zip_code in self._cache:
            return self._cache[zip_code]

        try:
            location = self.geolocator.geocode(
                {"postalcode": zip_code, "country": self.settings.country},
                exactly_one=True,
                country_codes=self.settings.country,
            )
        except GeopyError as exception:
            logger.error(f"Geocoder failed for ZIP code '{zip_code}': {exception}")
            raise GeocodingError(
                f"Could not geocode ZIP code '{zip_code}': {exception}"
            ) from exception

        if location is None:
            logger.warning(f"ZIP code '{zip_code}' not found by geocoder.")
            raise GeocodingError(f"ZIP code '{zip_code}' was not found")

        coordinates = (float(location.latitude), float(location.longitude))
        logger.info(f"Geocoded ZIP code '{zip_code}' to {coordinates}")
        self._cache[zip_code] = coordinates
        return coordinates
