"""Tests for the RIDB record models and search criteria."""

import pytest
from pydantic import ValidationError

from recreation_finder.models import (
    Activity,
    Campsite,
    Facility,
    FacilityAddress,
    FacilitySearch,
)


class TestFacility:
    """Tests for Facility coercion of loosely typed RIDB fields."""

    def test_coerces_ids_blanks_and_lists(self) -> None:
        facility = Facility.model_validate(
            {
                "FacilityID": 233618,
                "FacilityName": None,
                "Reservable": "",
                "Enabled": "",
                "FacilityLatitude": "",
                "FacilityLongitude": "-83.2",
                "GEOJSON": "",
                "ACTIVITY": None,
                "UNEXPECTED": "ignored",
            }
        )
        assert facility.facility_id == "233618"
        assert facility.facility_name == ""
        assert facility.reservable is False
        assert facility.enabled is None
        assert facility.latitude is None
        assert facility.longitude == -83.2
        assert facility.geojson is None
        assert facility.activities == []

    def test_to_dict_uses_ridb_names(self) -> None:
        facility = Facility(facility_id="1", facility_name="Camp")
        data = facility.to_dict()
        assert data["FacilityID"] == "1"
        assert data["FacilityName"] == "Camp"
        assert data["ORGANIZATION"] == []

    def test_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            Facility.model_validate({"FacilityName": "No ID"})

    @pytest.mark.parametrize("facility_id", [None, "", "   "])
    def test_rejects_null_or_blank_id(self, facility_id: object) -> None:
        with pytest.raises(ValidationError):
            Facility.model_validate({"FacilityID": facility_id, "FacilityName": "Camp"})


class TestActivity:
    """Tests for Activity parsing."""

    def test_name_is_tidied(self) -> None:
        activity = Activity.model_validate(
            {"ActivityID": "9", "ActivityName": "  WILDLIFE   VIEWING ", "ActivityParentID": ""}
        )
        assert activity.activity_id == 9
        assert activity.activity_name == "Wildlife Viewing"
        assert activity.activity_parent_id is None


class TestFacilityAddress:
    """Tests for address formatting."""

    def test_full_address(self) -> None:
        address = FacilityAddress.model_validate(
            {
                "FacilityStreetAddress1": "107 Park Headquarters Rd",
                "FacilityStreetAddress2": None,
                "City": "Gatlinburg",
                "AddressStateCode": "TN",
                "PostalCode": 37738,
            }
        )
        assert address.postal_code == "37738"
        assert address.full_address == "107 Park Headquarters Rd, Gatlinburg, TN 37738"

    def test_partial_address(self) -> None:
        address = FacilityAddress.model_validate({"City": "Townsend"})
        assert address.full_address == "Townsend"


class TestCampsite:
    """Tests for Campsite parsing."""

    def test_coercions(self) -> None:
        campsite = Campsite.model_validate(
            {
                "CampsiteID": 81,
                "CampsiteName": "A001",
                "Loop": None,
                "CampsiteAccessible": "",
                "CampsiteLatitude": "35.65",
                "ATTRIBUTES": None,
            }
        )
        assert campsite.campsite_id == "81"
        assert campsite.loop == ""
        assert campsite.accessible is None
        assert campsite.latitude == 35.65
        assert campsite.attributes == []

    @pytest.mark.parametrize("campsite_id", [None, ""])
    def test_rejects_null_or_blank_id(self, campsite_id: object) -> None:
        with pytest.raises(ValidationError):
            Campsite.model_validate({"CampsiteID": campsite_id, "CampsiteName": "A001"})


class TestFacilitySearch:
    """Tests for search criteria validation."""

    def test_zip_search(self) -> None:
        criteria = FacilitySearch(zip_code=" 37738 ", radius_miles=10)
        assert criteria.zip_code == "37738"
        assert criteria.state is None
        assert criteria.activity_param is None

    def test_state_is_uppercased(self) -> None:
        criteria = FacilitySearch(state="tn", activities=[9, 14])
        assert criteria.state == "TN"
        assert criteria.activity_param == "9,14"

    def test_blank_values_count_as_missing(self) -> None:
        criteria = FacilitySearch(zip_code="", state="CO", activities=None)
        assert criteria.zip_code is None
        assert criteria.activities == []

    @pytest.mark.parametrize(
        "kwargs",
        [
            {},
            {"zip_code": "3773"},
            {"zip_code": "37738-1234"},
            {"state": "XX"},
            {"state": "DC"},
            {"zip_code": "37738", "radius_miles": 0},
            {"zip_code": "37738", "radius_miles": 51},
        ],
    )
    def test_invalid_criteria(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            FacilitySearch(**kwargs)  # type: ignore[arg-type]
