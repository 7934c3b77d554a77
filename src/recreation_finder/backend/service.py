"""Module for the Recreation Finder service business logic.

This module provides the core service class `RecreationService` which orchestrates
the interaction between the RIDB client, the ZIP geocoder and the flattening of
API responses into DataFrames.
"""

import logging
from collections.abc import Callable
from typing import Any

import pandas as pd

from recreation_finder.backend.client import RidbClient
from recreation_finder.backend.geocoder import ZipGeocoder
from recreation_finder.backend.transform import (
    activities_to_frame,
    addresses_to_frame,
    campsites_to_frame,
    facilities_to_frame,
)
from recreation_finder.config import Settings
from recreation_finder.models import FacilityDetails, FacilitySearch

# Create a module-level logger
logger = logging.getLogger(__name__)


class RecreationService:
    """Core business logic for the Recreation Finder application.

    Attributes:
        settings (Settings): Application configuration settings.
        client (RidbClient): Interface to the RIDB REST API.
        geocoder (ZipGeocoder): Resolves ZIP codes for radius searches.
    """

    def __init__(
        self,
        settings: Settings,
        client: RidbClient | None = None,
        geocoder: ZipGeocoder | None = None,
    ) -> None:
        """Initialize the RecreationService.

        Args:
            settings: Application configuration object containing RIDB and
                geocoder settings.
            client: Optional RIDB client; built from settings when omitted.
            geocoder: Optional ZIP geocoder; built from settings when omitted.
        """
        self.settings = settings
        self.client = client or RidbClient(settings.ridb)
        self.geocoder = geocoder or ZipGeocoder(settings.geocoder)

    def get_activities(self) -> pd.DataFrame:
        """Fetch every RIDB activity.

        Returns:
            pd.DataFrame: Activities with ``ActivityID`` and ``ActivityName``
            columns, sorted by name.
        """
        df = activities_to_frame(self.client.list_activities())
        logger.info(f"Loaded {len(df)} activities.")
        return df

    def search_facilities(
        self,
        zip_code: str | None = None,
        radius_miles: float = 25,
        state: str | None = None,
        activities: list[int] | None = None,
        progress_callback: Callable[[float], Any] | None = None,
    ) -> pd.DataFrame:
        """Search facilities around a ZIP code and/or within a state.

        A ZIP code is geocoded and searched with ``radius_miles``; a state is
        passed straight to RIDB. Selected activities narrow either search.

        Args:
            zip_code: Five-digit US ZIP code to search around.
            radius_miles: Search radius in miles (1 to 50).
            state: Two-letter US state abbreviation.
            activities: RIDB activity identifiers facilities must offer.
            progress_callback: Optional callback for progress updates.

        Returns:
            pd.DataFrame: The flattened facilities; empty when nothing matches.

        Raises:
            pydantic.ValidationError: If the criteria are invalid or missing.
            GeocodingError: If the ZIP code cannot be resolved.
            RidbApiError: If the RIDB request fails.
        """
        criteria = FacilitySearch(
            zip_code=zip_code,
            radius_miles=radius_miles,
            state=state,
            activities=activities,
        )

        params: dict[str, Any] = {"state": criteria.state, "activity": criteria.activity_param}
        if criteria.zip_code:
            lat, lng = self.geocoder.geocode(criteria.zip_code)
            params.update(latitude=lat, longitude=lng, radius=criteria.radius_miles)

        logger.info(f"Searching facilities with {criteria.model_dump(exclude_none=True)}")
        records = self.client.search_facilities(params, progress_callback=progress_callback)
        df = facilities_to_frame(records)

        if df.empty:
            logger.info("No facilities found for the selected criteria.")
        else:
            logger.info(f"Found {len(df)} facilities.")
        return df

    def get_facility_details(self, facility_id: str) -> FacilityDetails:
        """Fetch the addresses and campsites of a facility.

        Args:
            facility_id: RIDB facility identifier.

        Returns:
            FacilityDetails: Address and campsite frames (either may be empty).
        """
        facility_id = str(facility_id).strip()
        logger.info(f"Fetching details for facility {facility_id}")
        addresses = addresses_to_frame(self.client.list_facility_addresses(facility_id))
        campsites = campsites_to_frame(self.client.list_facility_campsites(facility_id))
        logger.info(
            f"Facility {facility_id}: {len(addresses)} addresses, {len(campsites)} campsites."
        )
        return FacilityDetails(facility_id=facility_id, addresses=addresses, campsites=campsites)
