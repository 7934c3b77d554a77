"""Pydantic models for the recreation_finder package.

This module defines the data models used throughout the application to represent
records returned by the Recreation Information Database (RIDB) API and the
criteria of a facility search. Field names are snake_case and aliased to the
PascalCase / upper-case keys RIDB uses, so ``model_dump(by_alias=True)`` yields
RIDB-named columns.
"""

import re
from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from recreation_finder.utils import US_STATES, to_float

_ZIP_PATTERN = re.compile(r"^\d{5}$")


def _require_id(value: Any, name: str) -> str:
    """Normalize a RIDB identifier to a string, rejecting null or blank ones."""
    identifier = "" if value is None else str(value).strip()
    if not identifier:
        raise ValueError(f"{name} is required")
    return identifier


class RidbRecord(BaseModel):
    """Base class for RIDB records.

    RIDB is loose about types: identifiers arrive as strings or integers and
    missing text arrives as null. Subclasses list which fields need coercion.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_dict(self) -> dict[str, Any]:
        """Convert the model to a dictionary using RIDB aliases.

        Returns:
            dict[str, Any]: A dictionary representation of the record.
        """
        return self.model_dump(by_alias=True)


class Activity(RidbRecord):
    """A recreational activity (e.g. Camping, Hiking) that facilities can offer.

    Attributes:
        activity_id: RIDB activity identifier.
        activity_name: Display name of the activity.
        activity_parent_id: Identifier of the parent activity, if any.
        activity_level: Depth in the RIDB activity hierarchy.
    """

    activity_id: int = Field(..., alias="ActivityID", description="RIDB activity identifier.")
    activity_name: str = Field(..., alias="ActivityName", description="Activity name.")
    activity_parent_id: int | None = Field(
        default=None, alias="ActivityParentID", description="Parent activity identifier."
    )
    activity_level: int | None = Field(
        default=None, alias="ActivityLevel", description="Level in the activity hierarchy."
    )

    @field_validator("activity_name", mode="before")
    @classmethod
    def _tidy_name(cls, value: Any) -> str:
        return " ".join(str(value or "").split()).title()

    @field_validator("activity_parent_id", "activity_level", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if value in ("", None) else value


class Facility(RidbRecord):
    """A recreation facility (campground, trailhead, visitor center, ...).

    Only the fields the application uses are modelled; nested lists are kept as
    raw dictionaries because their shape varies between agencies.

    Attributes:
        facility_id: RIDB facility identifier.
        facility_name: Name of the facility.
        facility_type: Facility type description (e.g. "Campground").
        description: HTML description of the facility.
        phone: Contact phone number.
        email: Contact email address.
        reservation_url: URL for making reservations.
        reservable: Whether the facility can be reserved on recreation.gov.
        enabled: Whether the facility is enabled in RIDB.
        last_updated: Date the record was last updated.
        latitude: Reported latitude (unnormalized).
        longitude: Reported longitude (unnormalized).
        geojson: GEOJSON point of the facility.
        organizations: Nested ORGANIZATION records.
        rec_areas: Nested RECAREA records.
        activities: Nested ACTIVITY records.
        campsites: Nested CAMPSITE records.
        addresses: Nested FACILITYADDRESS records.
        attributes: Nested ATTRIBUTES records.
    """

    facility_id: str = Field(..., alias="FacilityID")
    facility_name: str = Field(default="", alias="FacilityName")
    facility_type: str = Field(default="", alias="FacilityTypeDescription")
    description: str = Field(default="", alias="FacilityDescription")
    phone: str = Field(default="", alias="FacilityPhone")
    email: str = Field(default="", alias="FacilityEmail")
    reservation_url: str = Field(default="", alias="FacilityReservationURL")
    reservable: bool = Field(default=False, alias="Reservable")
    enabled: bool | None = Field(default=None, alias="Enabled")
    last_updated: str = Field(default="", alias="LastUpdatedDate")
    latitude: float | None = Field(default=None, alias="FacilityLatitude")
    longitude: float | None = Field(default=None, alias="FacilityLongitude")
    geojson: dict[str, Any] | None = Field(default=None, alias="GEOJSON")

    organizations: list[dict[str, Any]] = Field(default_factory=list, alias="ORGANIZATION")
    rec_areas: list[dict[str, Any]] = Field(default_factory=list, alias="RECAREA")
    activities: list[dict[str, Any]] = Field(default_factory=list, alias="ACTIVITY")
    campsites: list[dict[str, Any]] = Field(default_factory=list, alias="CAMPSITE")
    addresses: list[dict[str, Any]] = Field(default_factory=list, alias="FACILITYADDRESS")
    attributes: list[dict[str, Any]] = Field(default_factory=list, alias="ATTRIBUTES")

    @field_validator("facility_id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> str:
        return _require_id(value, "FacilityID")

    @field_validator(
        "facility_name",
        "facility_type",
        "description",
        "phone",
        "email",
        "reservation_url",
        "last_updated",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("reservable", mode="before")
    @classmethod
    def _none_to_false(cls, value: Any) -> Any:
        return False if value in ("", None) else value

    @field_validator("enabled", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_float(cls, value: Any) -> float | None:
        return to_float(value)

    @field_validator("geojson", mode="before")
    @classmethod
    def _non_dict_to_none(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @field_validator(
        "organizations",
        "rec_areas",
        "activities",
        "campsites",
        "addresses",
        "attributes",
        mode="before",
    )
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


class FacilityAddress(RidbRecord):
    """A postal or physical address of a facility.

    Attributes:
        address_id: RIDB facility address identifier.
        facility_id: Identifier of the facility the address belongs to.
        address_type: Address type (e.g. "Physical", "Mailing").
        street1: First street line.
        street2: Second street line.
        street3: Third street line.
        city: City name.
        postal_code: ZIP code.
        state_code: Two-letter state code.
        country_code: Country code.
    """

    address_id: str = Field(default="", alias="FacilityAddressID")
    facility_id: str = Field(default="", alias="FacilityID")
    address_type: str = Field(default="", alias="FacilityAddressType")
    street1: str = Field(default="", alias="FacilityStreetAddress1")
    street2: str = Field(default="", alias="FacilityStreetAddress2")
    street3: str = Field(default="", alias="FacilityStreetAddress3")
    city: str = Field(default="", alias="City")
    postal_code: str = Field(default="", alias="PostalCode")
    state_code: str = Field(default="", alias="AddressStateCode")
    country_code: str = Field(default="", alias="AddressCountryCode")

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @property
    def full_address(self) -> str:
        """Single-line address in the form ``street, city, ST zip``."""
        street = " ".join(part for part in (self.street1, self.street2, self.street3) if part)
        region = " ".join(part for part in (self.state_code, self.postal_code) if part)
        return ", ".join(part for part in (street, self.city, region) if part)


class Campsite(RidbRecord):
    """A single campsite within a facility.

    Attributes:
        campsite_id: RIDB campsite identifier.
        facility_id: Identifier of the parent facility.
        name: Campsite name or number.
        campsite_type: Campsite type (e.g. "STANDARD NONELECTRIC").
        type_of_use: Type of use (e.g. "Overnight").
        loop: Loop the campsite sits on.
        accessible: Whether the campsite is accessible.
        reservable: Whether the campsite can be reserved.
        latitude: Campsite latitude.
        longitude: Campsite longitude.
        attributes: Nested ATTRIBUTES records (name/value pairs).
        permitted_equipment: Nested PERMITTEDEQUIPMENT records.
    """

    campsite_id: str = Field(..., alias="CampsiteID")
    facility_id: str = Field(default="", alias="FacilityID")
    name: str = Field(default="", alias="CampsiteName")
    campsite_type: str = Field(default="", alias="CampsiteType")
    type_of_use: str = Field(default="", alias="TypeOfUse")
    loop: str = Field(default="", alias="Loop")
    accessible: bool | None = Field(default=None, alias="CampsiteAccessible")
    reservable: bool | None = Field(default=None, alias="CampsiteReservable")
    latitude: float | None = Field(default=None, alias="CampsiteLatitude")
    longitude: float | None = Field(default=None, alias="CampsiteLongitude")
    attributes: list[dict[str, Any]] = Field(default_factory=list, alias="ATTRIBUTES")
    permitted_equipment: list[dict[str, Any]] = Field(
        default_factory=list, alias="PERMITTEDEQUIPMENT"
    )

    @field_validator("campsite_id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> str:
        return _require_id(value, "CampsiteID")

    @field_validator(
        "facility_id",
        "name",
        "campsite_type",
        "type_of_use",
        "loop",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("accessible", "reservable", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_float(cls, value: Any) -> float | None:
        return to_float(value)

    @field_validator("attributes", "permitted_equipment", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


class FacilitySearch(BaseModel):
    """Validated criteria for a facility search.

    Attributes:
        zip_code: Five-digit US ZIP code to search around.
        radius_miles: Search radius around the ZIP code, in miles.
        state: Two-letter US state abbreviation.
        activities: RIDB activity identifiers that facilities must offer.
    """

    zip_code: str | None = Field(default=None, description="Five-digit ZIP code.")
    radius_miles: float = Field(default=25.0, ge=1, le=50, description="Radius in miles.")
    state: str | None = Field(default=None, description="Two-letter state abbreviation.")
    activities: list[int] = Field(default_factory=list, description="Activity identifiers.")

    @field_validator("zip_code", mode="before")
    @classmethod
    def _check_zip(cls, value: Any) -> str | None:
        if value is None or not str(value).strip():
            return None
        zip_code = str(value).strip()
        if not _ZIP_PATTERN.match(zip_code):
            raise ValueError(f"ZIP code must be 5 digits, got '{zip_code}'")
        return zip_code

    @field_validator("state", mode="before")
    @classmethod
    def _check_state(cls, value: Any) -> str | None:
        if value is None or not str(value).strip():
            return None
        state = str(value).strip().upper()
        if state not in US_STATES:
            raise ValueError(f"Unknown US state abbreviation '{state}'")
        return state

    @field_validator("activities", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def _require_location(self) -> "FacilitySearch":
        if self.zip_code is None and self.state is None:
            raise ValueError("A ZIP code or a state is required to search facilities")
        return self

    @property
    def activity_param(self) -> str | None:
        """Activity identifiers in the comma-separated form RIDB expects."""
        if not self.activities:
            return None
        return ",".join(str(activity_id) for activity_id in self.activities)


class FacilityDetails(BaseModel):
    """Addresses and campsites fetched for a single facility.

    Attributes:
        facility_id: RIDB facility identifier.
        addresses: Flattened FacilityAddress rows.
        campsites: Flattened Campsite rows.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    facility_id: str
    addresses: pd.DataFrame
    campsites: pd.DataFrame
