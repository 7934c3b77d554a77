"""Backend package for Recreation Finder."""

from .client import RidbApiError, RidbClient
from .geocoder import GeocodingError, ZipGeocoder
from .service import RecreationService

__all__ = ["GeocodingError", "RecreationService", "RidbApiError", "RidbClient", "ZipGeocoder"]
