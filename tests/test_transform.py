"""Tests for flattening RIDB records into DataFrames."""

from typing import Any

import pandas as pd
import pytest

from recreation_finder.backend.transform import (
    ACTIVITY_COLUMNS,
    ADDRESS_COLUMNS,
    CAMPSITE_COLUMNS,
    FACILITY_COLUMNS,
    LIST_COLUMNS,
    RESERVATION_URL,
    activities_to_frame,
    addresses_to_frame,
    campsites_to_frame,
    facilities_to_frame,
)


class TestActivitiesToFrame:
    """Tests for activity flattening."""

    def test_dedupes_and_sorts(self) -> None:
        records = [
            {"ActivityID": 9, "ActivityName": "CAMPING"},
            {"ActivityID": 9, "ActivityName": "Camping"},
            {"ActivityID": 14, "ActivityName": "hiking"},
            {"ActivityID": 5, "ActivityName": "BIKING", "ActivityParentID": 0},
            {"ActivityID": 7, "ActivityName": ""},
        ]
        df = activities_to_frame(records)
        assert list(df.columns) == ACTIVITY_COLUMNS
        assert df["ActivityName"].tolist() == ["Biking", "Camping", "Hiking"]
        assert df["ActivityID"].tolist() == [5, 9, 14]

    def test_empty(self) -> None:
        df = activities_to_frame([])
        assert df.empty
        assert list(df.columns) == ACTIVITY_COLUMNS


class TestFacilitiesToFrame:
    """Tests for facility flattening."""

    def test_columns(self, facilities_df: pd.DataFrame) -> None:
        assert list(facilities_df.columns) == FACILITY_COLUMNS + list(LIST_COLUMNS)
        assert len(facilities_df) == 5

    def test_first_facility(self, facilities_df: pd.DataFrame) -> None:
        row = facilities_df.iloc[0]
        assert row["FacilityID"] == "232447"
        assert row["OrgName"] == "National Park Service"
        assert row["RecAreaName"] == "Great Smoky Mountains National Park"
        assert row["ActivityCount"] == 3
        assert row["ActivityNames"] == "Camping, Fishing, Hiking"
        assert row["CampsiteCount"] == 2
        assert row["City"] == "Gatlinburg"
        assert row["AddressStateCode"] == "TN"
        assert row["CoordinateSource"] == "facility"
        assert row["FacilityDescription"] == "Elkmont is the largest campground in the park."
        assert row["FacilityReservationURL"] == f"{RESERVATION_URL}/232447"
        assert len(row["ACTIVITY"]) == 3

    def test_reservation_url_is_kept(self, facilities_df: pd.DataFrame) -> None:
        row = facilities_df.iloc[1]
        assert row["FacilityID"] == "233618"
        assert row["FacilityReservationURL"].endswith("/233618")

    def test_non_reservable_without_url(self, facilities_df: pd.DataFrame) -> None:
        assert facilities_df.iloc[2]["FacilityReservationURL"] == ""

    @pytest.mark.parametrize(
        ("index", "lat", "lon", "source"),
        [
            (0, 35.6556, -83.5819, "facility"),
            (1, 35.7542, -83.2086, "geojson"),
            (2, 35.5628, -83.4985, "swapped"),
            (3, 35.3, -84.1, "sign_corrected"),
        ],
    )
    def test_coordinates(
        self, facilities_df: pd.DataFrame, index: int, lat: float, lon: float, source: str
    ) -> None:
        row = facilities_df.iloc[index]
        assert row["FacilityLatitude"] == pytest.approx(lat)
        assert row["FacilityLongitude"] == pytest.approx(lon)
        assert row["CoordinateSource"] == source

    def test_missing_coordinates(self, facilities_df: pd.DataFrame) -> None:
        row = facilities_df.iloc[4]
        assert pd.isna(row["FacilityLatitude"])
        assert pd.isna(row["FacilityLongitude"])
        assert row["CoordinateSource"] == "missing"
        assert facilities_df["FacilityLatitude"].dtype.kind == "f"

    def test_unknown_defaults(self, facilities_df: pd.DataFrame) -> None:
        boundary = facilities_df.iloc[3]
        assert boundary["RecAreaName"] == "Unknown"
        assert bool(boundary["Reservable"]) is False
        assert boundary["ActivityCount"] == 0
        assert boundary["ActivityNames"] == ""
        assert boundary["City"] == ""
        assert facilities_df.iloc[4]["FacilityTypeDescription"] == "Unknown"

    def test_duplicates_and_malformed_records(
        self, facility_records: list[dict[str, Any]]
    ) -> None:
        records = [*facility_records, dict(facility_records[0]), {"FacilityName": "No ID"}, "x"]
        df = facilities_to_frame(records)
        assert len(df) == 5
        assert df["FacilityID"].is_unique

    def test_null_ids_are_skipped(self, facility_records: list[dict[str, Any]]) -> None:
        records = [{**facility_records[0], "FacilityID": None}, facility_records[1]]
        df = facilities_to_frame(records)
        assert df["FacilityID"].tolist() == ["233618"]

    def test_empty(self) -> None:
        df = facilities_to_frame([])
        assert df.empty
        assert list(df.columns) == FACILITY_COLUMNS + list(LIST_COLUMNS)


class TestAddressesToFrame:
    """Tests for address flattening."""

    def test_full_address_and_dedupe(self) -> None:
        record = {
            "FacilityAddressID": "55",
            "FacilityAddressType": "Physical",
            "FacilityStreetAddress1": "1 Elkmont Rd",
            "City": "Gatlinburg",
            "AddressStateCode": "TN",
            "PostalCode": "37738",
        }
        df = addresses_to_frame([record, dict(record)])
        assert list(df.columns) == ADDRESS_COLUMNS
        assert len(df) == 1
        assert df.iloc[0]["FullAddress"] == "1 Elkmont Rd, Gatlinburg, TN 37738"

    def test_empty(self) -> None:
        assert list(addresses_to_frame([]).columns) == ADDRESS_COLUMNS


class TestCampsitesToFrame:
    """Tests for campsite flattening."""

    def test_sorted_with_readable_nested_lists(self) -> None:
        records = [
            {"CampsiteID": "3", "CampsiteName": "B001", "Loop": "B"},
            {
                "CampsiteID": "2",
                "CampsiteName": "A002",
                "Loop": "A",
                "ATTRIBUTES": [
                    {"AttributeName": "Max Num of People", "AttributeValue": "6"},
                    {"AttributeName": "Shade", "AttributeValue": ""},
                ],
                "PERMITTEDEQUIPMENT": [
                    {"EquipmentName": "Tent", "MaxLength": 0},
                    {"EquipmentName": "RV", "MaxLength": "35"},
                ],
            },
            {"CampsiteID": "1", "CampsiteName": "A001", "Loop": "A"},
        ]
        df = campsites_to_frame(records)

        assert list(df.columns) == CAMPSITE_COLUMNS
        assert df["CampsiteName"].tolist() == ["A001", "A002", "B001"]
        a002 = df.iloc[1]
        assert a002["Attributes"] == "Max Num of People: 6; Shade"
        assert a002["PermittedEquipment"] == "Tent; RV (max 35 ft)"
        assert df.iloc[0]["Attributes"] == ""

    def test_null_ids_are_skipped(self) -> None:
        records = [
            {"CampsiteID": None, "CampsiteName": "A001"},
            {"CampsiteID": None, "CampsiteName": "A002"},
            {"CampsiteID": "3", "CampsiteName": "A003"},
        ]
        df = campsites_to_frame(records)
        assert df["CampsiteID"].tolist() == ["3"]

    def test_empty(self) -> None:
        assert list(campsites_to_frame([]).columns) == CAMPSITE_COLUMNS
