"""Shared fixtures: RIDB-shaped sample records and settings."""

from collections.abc import Callable
from typing import Any

import pandas as pd
import pytest

from recreation_finder.backend.transform import facilities_to_frame
from recreation_finder.config import RidbSettings, Settings

NPS = {"OrgID": "128", "OrgName": "National Park Service"}
USFS = {"OrgID": "131", "OrgName": "USDA Forest Service"}
SMOKIES = {"RecAreaID": "2900", "RecAreaName": "Great Smoky Mountains National Park"}


def _ridb_page(records: list[dict[str, Any]], total: int | None = None) -> dict[str, Any]:
    metadata: dict[str, Any] = {"RESULTS": {"CURRENT_COUNT": len(records)}}
    if total is not None:
        metadata["RESULTS"]["TOTAL_COUNT"] = total
    return {"RECDATA": records, "METADATA": metadata}


@pytest.fixture
def ridb_page() -> Callable[..., dict[str, Any]]:
    """Helper wrapping records in the RIDB response envelope."""
    return _ridb_page


@pytest.fixture
def ridb_settings() -> RidbSettings:
    """RIDB settings with a fake key."""
    return RidbSettings(api_key="test-key")


@pytest.fixture
def settings(ridb_settings: RidbSettings) -> Settings:
    """Application settings with a fake key."""
    return Settings(ridb=ridb_settings)


@pytest.fixture
def facility_records() -> list[dict[str, Any]]:
    """Five facilities covering the coordinate corrections RIDB data needs."""
    return [
        {
            "FacilityID": "232447",
            "FacilityName": "Elkmont Campground",
            "FacilityTypeDescription": "Campground",
            "FacilityDescription": (
                "<p>Elkmont is the <b>largest</b> campground</p>\n<p>in the park.</p>"
            ),
            "FacilityPhone": "865-436-1271",
            "FacilityEmail": "",
            "FacilityReservationURL": "",
            "Reservable": True,
            "Enabled": True,
            "LastUpdatedDate": "2024-05-01",
            "FacilityLatitude": 35.6556,
            "FacilityLongitude": -83.5819,
            "GEOJSON": {"TYPE": "Point", "COORDINATES": [-83.5819, 35.6556]},
            "ORGANIZATION": [NPS],
            "RECAREA": [SMOKIES],
            "ACTIVITY": [
                {"ActivityID": 9, "ActivityName": "CAMPING"},
                {"ActivityID": 14, "ActivityName": "HIKING"},
                {"ActivityID": 11, "ActivityName": "FISHING"},
            ],
            "CAMPSITE": [{"CampsiteID": "1"}, {"CampsiteID": "2"}],
            "FACILITYADDRESS": [
                {"FacilityAddressType": "Mailing", "City": "Knoxville", "AddressStateCode": "TN"},
                {"FacilityAddressType": "Physical", "City": "Gatlinburg", "AddressStateCode": "TN"},
            ],
            "MEDIA": [{"URL": "https://cdn.recreation.gov/elkmont.jpg"}],
        },
        {
            "FacilityID": 233618,
            "FacilityName": "Cosby Campground",
            "FacilityTypeDescription": "Campground",
            "FacilityReservationURL": "https://www.recreation.gov/camping/campgrounds/233618",
            "Reservable": False,
            "FacilityLatitude": 0,
            "FacilityLongitude": 0,
            "GEOJSON": {"TYPE": "Point", "COORDINATES": [-83.2086, 35.7542]},
            "ORGANIZATION": [NPS],
            "RECAREA": [SMOKIES],
            "ACTIVITY": [{"ActivityID": 9, "ActivityName": "CAMPING"}],
            "CAMPSITE": [],
            "FACILITYADDRESS": [],
        },
        {
            "FacilityID": "10084",
            "FacilityName": "Clingmans Dome Trailhead",
            "FacilityTypeDescription": "Trailhead",
            "Reservable": False,
            "FacilityLatitude": -83.4985,
            "FacilityLongitude": 35.5628,
            "ORGANIZATION": [NPS],
            "RECAREA": [SMOKIES],
            "ACTIVITY": [
                {"ActivityID": 14, "ActivityName": "HIKING"},
                {"ActivityID": 26, "ActivityName": "VISITOR CENTER"},
            ],
        },
        {
            "FacilityID": "250860",
            "FacilityName": "Indian Boundary Day Use",
            "FacilityTypeDescription": "Facility",
            "Reservable": None,
            "FacilityLatitude": "35.3",
            "FacilityLongitude": "84.1",
            "ORGANIZATION": [USFS],
            "RECAREA": [],
            "ACTIVITY": None,
        },
        {
            "FacilityID": "999",
            "FacilityName": "Unmapped Site",
            "FacilityTypeDescription": "",
            "Reservable": False,
            "FacilityLatitude": "",
            "FacilityLongitude": "",
            "ORGANIZATION": [USFS],
            "RECAREA": [],
            "ACTIVITY": [{"ActivityID": 5, "ActivityName": "BIKING"}],
        },
    ]


@pytest.fixture
def facilities_df(facility_records: list[dict[str, Any]]) -> pd.DataFrame:
    """Flattened sample facilities."""
    return facilities_to_frame(facility_records)
