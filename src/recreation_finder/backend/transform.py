"""Flatten nested RIDB records into pandas DataFrames.

RIDB returns deeply nested JSON: a facility carries lists of organizations,
recreation areas, activities, campsites and addresses. The functions here turn
raw records into one-row-per-entity frames with RIDB-named columns that the
tables, plots and map consume.
"""

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

import pandas as pd
from pydantic import ValidationError

from recreation_finder.models import Activity, Campsite, Facility, FacilityAddress, RidbRecord
from recreation_finder.utils import clean_text, join_names, normalize_coordinates

logger = logging.getLogger(__name__)

RESERVATION_URL = "https://www.recreation.gov/camping/campgrounds"

ACTIVITY_COLUMNS = ["ActivityID", "ActivityName", "ActivityParentID", "ActivityLevel"]

# Nested record lists kept on the facilities frame but never displayed or exported.
LIST_COLUMNS = ("ACTIVITY", "ORGANIZATION", "CAMPSITE", "RECAREA", "ATTRIBUTES", "FACILITYADDRESS")

FACILITY_COLUMNS = [
    "FacilityID",
    "FacilityName",
    "FacilityTypeDescription",
    "OrgName",
    "RecAreaName",
    "Reservable",
    "Enabled",
    "ActivityCount",
    "ActivityNames",
    "CampsiteCount",
    "City",
    "AddressStateCode",
    "FacilityLatitude",
    "FacilityLongitude",
    "CoordinateSource",
    "FacilityPhone",
    "FacilityEmail",
    "FacilityReservationURL",
    "FacilityDescription",
    "LastUpdatedDate",
]

ADDRESS_COLUMNS = [
    "FacilityAddressID",
    "FacilityAddressType",
    "FullAddress",
    "FacilityStreetAddress1",
    "FacilityStreetAddress2",
    "FacilityStreetAddress3",
    "City",
    "AddressStateCode",
    "PostalCode",
    "AddressCountryCode",
]

CAMPSITE_COLUMNS = [
    "CampsiteID",
    "CampsiteName",
    "CampsiteType",
    "TypeOfUse",
    "Loop",
    "CampsiteAccessible",
    "CampsiteReservable",
    "CampsiteLatitude",
    "CampsiteLongitude",
    "Attributes",
    "PermittedEquipment",
]

RecordT = TypeVar("RecordT", bound=RidbRecord)


def _parse_records(records: Iterable[Any], model: type[RecordT]) -> list[RecordT]:
    """Validate raw records, skipping (and logging) the ones that don't fit the model."""
    parsed: list[RecordT] = []
    for index, record in enumerate(records):
        try:
            parsed.append(model.model_validate(record))
        except ValidationError as exception:
            logger.warning(f"Skipping malformed {model.__name__} record {index}: {exception}")
    return parsed


def activities_to_frame(records: Iterable[dict[str, Any]]) -> pd.DataFrame:
    """Flatten RIDB activity records.

    Args:
        records: Raw records from the ``/activities`` endpoint.

    Returns:
        pd.DataFrame: One row per activity, deduplicated by ID and sorted by name.
    """
    activities = [a for a in _parse_records(records, Activity) if a.activity_name]
    if not activities:
        return pd.DataFrame(columns=ACTIVITY_COLUMNS)

    df = pd.DataFrame([activity.to_dict() for activity in activities])
    df = df.drop_duplicates(subset="ActivityID")
    return df.sort_values("ActivityName").reset_index(drop=True)[ACTIVITY_COLUMNS]


def _primary_address(addresses: list[dict[str, Any]]) -> FacilityAddress | None:
    """Pick the physical address of a facility, or the first one when none is physical."""
    parsed = _parse_records(addresses, FacilityAddress)
    for address in parsed:
        if address.address_type.lower() == "physical":
            return address
    return parsed[0] if parsed else None


def _activity_names(activities: list[dict[str, Any]]) -> list[str]:
    names = {
        " ".join(str(activity.get("ActivityName") or "").split()).title()
        for activity in activities
        if isinstance(activity, dict)
    }
    return sorted(name for name in names if name)


def _facility_row(facility: Facility) -> dict[str, Any]:
    """Build the flat row for one facility, normalizing coordinates on the way."""
    latitude, longitude, source = normalize_coordinates(
        facility.latitude, facility.longitude, facility.geojson
    )
    activity_names = _activity_names(facility.activities)
    address = _primary_address(facility.addresses)

    reservation_url = facility.reservation_url
    if not reservation_url and facility.reservable:
        reservation_url = f"{RESERVATION_URL}/{facility.facility_id}"

    return {
        "FacilityID": facility.facility_id,
        "FacilityName": facility.facility_name,
        "FacilityTypeDescription": facility.facility_type or "Unknown",
        "OrgName": join_names(facility.organizations, "OrgName"),
        "RecAreaName": join_names(facility.rec_areas, "RecAreaName"),
        "Reservable": bool(facility.reservable),
        "Enabled": facility.enabled,
        "ActivityCount": len(activity_names),
        "ActivityNames": ", ".join(activity_names),
        "CampsiteCount": len(facility.campsites),
        "City": address.city if address else "",
        "AddressStateCode": address.state_code if address else "",
        "FacilityLatitude": latitude,
        "FacilityLongitude": longitude,
        "CoordinateSource": source,
        "FacilityPhone": facility.phone,
        "FacilityEmail": facility.email,
        "FacilityReservationURL": reservation_url,
        "FacilityDescription": clean_text(facility.description),
        "LastUpdatedDate": facility.last_updated,
        "ACTIVITY": facility.activities,
        "ORGANIZATION": facility.organizations,
        "CAMPSITE": facility.campsites,
        "RECAREA": facility.rec_areas,
        "ATTRIBUTES": facility.attributes,
        "FACILITYADDRESS": facility.addresses,
    }


def facilities_to_frame(records: Iterable[dict[str, Any]]) -> pd.DataFrame:
    """Flatten RIDB facility records (fetched with ``full=true``).

    Args:
        records: Raw records from the ``/facilities`` endpoint.

    Returns:
        pd.DataFrame: One row per facility with the ``FACILITY_COLUMNS`` scalar
        columns followed by the nested ``LIST_COLUMNS``. Empty input yields an
        empty frame with the same columns.
    """
    columns = FACILITY_COLUMNS + list(LIST_COLUMNS)
    facilities = _parse_records(records, Facility)
    if not facilities:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([_facility_row(facility) for facility in facilities], columns=columns)

    # Paginated searches can return the same facility twice when RIDB reorders results
    before = len(df)
    df = df.drop_duplicates(subset="FacilityID", keep="first").reset_index(drop=True)
    if len(df) < before:
        logger.debug(f"Dropped {before - len(df)} duplicate facilities.")

    df["FacilityLatitude"] = pd.to_numeric(df["FacilityLatitude"], errors="coerce")
    df["FacilityLongitude"] = pd.to_numeric(df["FacilityLongitude"], errors="coerce")

    fixed = df["CoordinateSource"].isin(["geojson", "swapped", "sign_corrected"]).sum()
    missing = (df["CoordinateSource"] == "missing").sum()
    if fixed or missing:
        logger.info(f"Coordinates corrected for {fixed} facilities; {missing} have none.")

    return df


def addresses_to_frame(records: Iterable[dict[str, Any]]) -> pd.DataFrame:
    """Flatten RIDB facility address records.

    Args:
        records: Raw records from ``/facilities/{id}/facilityaddresses``.

    Returns:
        pd.DataFrame: One row per address with a combined ``FullAddress`` column.
    """
    addresses = _parse_records(records, FacilityAddress)
    if not addresses:
        return pd.DataFrame(columns=ADDRESS_COLUMNS)

    rows = [{**address.to_dict(), "FullAddress": address.full_address} for address in addresses]
    df = pd.DataFrame(rows)
    df = df.drop_duplicates(subset=["FacilityAddressID", "FullAddress"])
    return df.reset_index(drop=True)[ADDRESS_COLUMNS]


def _format_attributes(attributes: list[dict[str, Any]]) -> str:
    parts = []
    for attribute in attributes:
        name = str(attribute.get("AttributeName") or "").strip()
        value = str(attribute.get("AttributeValue") or "").strip()
        if name:
            parts.append(f"{name}: {value}" if value else name)
    return "; ".join(parts)


def _format_equipment(equipment: list[dict[str, Any]]) -> str:
    parts = []
    for item in equipment:
        name = str(item.get("EquipmentName") or "").strip()
        if not name:
            continue
        max_length = item.get("MaxLength")
        try:
            length = float(max_length) if max_length not in (None, "") else 0.0
        except (TypeError, ValueError):
            length = 0.0
        parts.append(f"{name} (max {length:g} ft)" if length > 0 else name)
    return "; ".join(parts)


def campsites_to_frame(records: Iterable[dict[str, Any]]) -> pd.DataFrame:
    """Flatten RIDB campsite records.

    Nested ATTRIBUTES and PERMITTEDEQUIPMENT lists are rendered as readable
    strings since the details view shows them as plain table cells.

    Args:
        records: Raw records from ``/facilities/{id}/campsites``.

    Returns:
        pd.DataFrame: One row per campsite sorted by loop and campsite name.
    """
    campsites = _parse_records(records, Campsite)
    if not campsites:
        return pd.DataFrame(columns=CAMPSITE_COLUMNS)

    rows = []
    for campsite in campsites:
        row = campsite.to_dict()
        row["Attributes"] = _format_attributes(campsite.attributes)
        row["PermittedEquipment"] = _format_equipment(campsite.permitted_equipment)
        rows.append(row)

    df = pd.DataFrame(rows).drop_duplicates(subset="CampsiteID")
    df = df.sort_values(["Loop", "CampsiteName"], kind="stable").reset_index(drop=True)
    return df[CAMPSITE_COLUMNS]
