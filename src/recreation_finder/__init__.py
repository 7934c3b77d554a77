"""Recreation facility search and visualization over the RIDB API."""

from .backend.client import RidbApiError, RidbClient
from .backend.geocoder import GeocodingError, ZipGeocoder
from .backend.service import RecreationService
from .config import GeocoderSettings, RidbSettings, SearchSettings, Settings, get_settings
from .frontend.app import main
from .frontend.plots import (
    create_contingency_table,
    create_explore_plot,
    create_facilities_map,
    create_summary_table,
)
from .logger import configure_logging
from .models import Activity, Campsite, Facility, FacilityAddress, FacilityDetails, FacilitySearch
from .utils import normalize_coordinates

__version__ = "0.1.0"

__all__ = [
    "Activity",
    "Campsite",
    "Facility",
    "FacilityAddress",
    "FacilityDetails",
    "FacilitySearch",
    "GeocoderSettings",
    "GeocodingError",
    "RecreationService",
    "RidbApiError",
    "RidbClient",
    "RidbSettings",
    "SearchSettings",
    "Settings",
    "ZipGeocoder",
    "configure_logging",
    "create_contingency_table",
    "create_explore_plot",
    "create_facilities_map",
    "create_summary_table",
    "get_settings",
    "main",
    "normalize_coordinates",
]
