"""Tests for the RecreationService orchestration."""

from typing import Any
from unittest.mock import MagicMock

import pandas as pd
import pytest
from pydantic import ValidationError

from recreation_finder.backend.client import RidbApiError
from recreation_finder.backend.geocoder import GeocodingError
from recreation_finder.backend.service import RecreationService
from recreation_finder.config import Settings


@pytest.fixture
def client() -> MagicMock:
    """Mocked RIDB client."""
    return MagicMock()


@pytest.fixture
def geocoder() -> MagicMock:
    """Mocked ZIP geocoder returning Gatlinburg, TN."""
    mock = MagicMock()
    mock.geocode.return_value = (35.7143, -83.5102)
    return mock


@pytest.fixture
def service(settings: Settings, client: MagicMock, geocoder: MagicMock) -> RecreationService:
    """Service wired to mocked collaborators."""
    return RecreationService(settings, client=client, geocoder=geocoder)


class TestServiceInitialization:
    """Tests for service construction."""

    def test_builds_collaborators(self, settings: Settings) -> None:
        service = RecreationService(settings)
        assert service.client.settings is settings.ridb
        assert service.geocoder.settings is settings.geocoder


class TestGetActivities:
    """Tests for activity loading."""

    def test_returns_frame(self, service: RecreationService, client: MagicMock) -> None:
        client.list_activities.return_value = [
            {"ActivityID": 14, "ActivityName": "HIKING"},
            {"ActivityID": 9, "ActivityName": "CAMPING"},
        ]
        df = service.get_activities()
        assert df["ActivityName"].tolist() == ["Camping", "Hiking"]


class TestSearchFacilities:
    """Tests for facility searches."""

    def test_zip_search(
        self,
        service: RecreationService,
        client: MagicMock,
        geocoder: MagicMock,
        facility_records: list[dict[str, Any]],
    ) -> None:
        client.search_facilities.return_value = facility_records
        progress = MagicMock()

        df = service.search_facilities(
            zip_code="37738", radius_miles=10, progress_callback=progress
        )

        geocoder.geocode.assert_called_once_with("37738")
        params = client.search_facilities.call_args.args[0]
        assert params["latitude"] == 35.7143
        assert params["longitude"] == -83.5102
        assert params["radius"] == 10
        assert params["state"] is None
        assert params["activity"] is None
        assert client.search_facilities.call_args.kwargs["progress_callback"] is progress
        assert len(df) == 5

    def test_state_search_with_activities(
        self, service: RecreationService, client: MagicMock, geocoder: MagicMock
    ) -> None:
        client.search_facilities.return_value = []

        df = service.search_facilities(state="tn", activities=[9, 14])

        geocoder.geocode.assert_not_called()
        params = client.search_facilities.call_args.args[0]
        assert params["state"] == "TN"
        assert params["activity"] == "9,14"
        assert "latitude" not in params
        assert df.empty
        assert "FacilityName" in df.columns

    def test_requires_location(self, service: RecreationService, client: MagicMock) -> None:
        with pytest.raises(ValidationError):
            service.search_facilities()
        client.search_facilities.assert_not_called()

    def test_geocoding_error_propagates(
        self, service: RecreationService, client: MagicMock, geocoder: MagicMock
    ) -> None:
        geocoder.geocode.side_effect = GeocodingError("ZIP code '00000' was not found")
        with pytest.raises(GeocodingError):
            service.search_facilities(zip_code="00000")
        client.search_facilities.assert_not_called()

    def test_api_error_propagates(self, service: RecreationService, client: MagicMock) -> None:
        client.search_facilities.side_effect = RidbApiError("boom", status_code=500)
        with pytest.raises(RidbApiError):
            service.search_facilities(state="CO")


class TestFacilityDetails:
    """Tests for facility detail lookups."""

    def test_details(self, service: RecreationService, client: MagicMock) -> None:
        client.list_facility_addresses.return_value = [
            {"FacilityAddressID": "1", "City": "Gatlinburg", "AddressStateCode": "TN"}
        ]
        client.list_facility_campsites.return_value = [
            {"CampsiteID": "81", "CampsiteName": "A001", "Loop": "A"},
            {"CampsiteID": "82", "CampsiteName": "A002", "Loop": "A"},
        ]

        details = service.get_facility_details(" 232447 ")

        client.list_facility_addresses.assert_called_once_with("232447")
        client.list_facility_campsites.assert_called_once_with("232447")
        assert details.facility_id == "232447"
        assert details.addresses.iloc[0]["FullAddress"] == "Gatlinburg, TN"
        assert len(details.campsites) == 2

    def test_details_without_records(self, service: RecreationService, client: MagicMock) -> None:
        client.list_facility_addresses.return_value = []
        client.list_facility_campsites.return_value = []

        details = service.get_facility_details("10084")

        assert isinstance(details.addresses, pd.DataFrame)
        assert details.addresses.empty
        assert details.campsites.empty
