"""Utility functions for the recreation_finder package."""

import html
import math
import re
from collections.abc import Iterable
from typing import Any

# Two-letter abbreviations of the 50 US states, in alphabetical order of the state name.
US_STATES: tuple[str, ...] = (
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
)  # fmt: skip

# Latitudes covered by US states and territories north of the equator.
_US_LATITUDE_BAND = (15.0, 75.0)
# Eastern longitudes where no US facility can lie (Guam and the Aleutians are outside it).
_SIGN_ERROR_LONGITUDE_BAND = (50.0, 130.0)

_TAG_PATTERN = re.compile(r"<[^>]+>")
_WHITESPACE_PATTERN = re.compile(r"\s+")

CoordinateResult = tuple[float | None, float | None, str]


def to_float(value: Any) -> float | None:
    """Convert a RIDB numeric field to float.

    RIDB encodes missing numbers as empty strings, nulls or occasionally text.

    Args:
        value: The raw value.

    Returns:
        The float value, or None if the value is blank, non-numeric or NaN.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _geojson_point(geojson: Any) -> tuple[float | None, float | None]:
    """Extract (lat, lon) from a RIDB GEOJSON point, whose COORDINATES are [lon, lat]."""
    if not isinstance(geojson, dict):
        return None, None
    coordinates = geojson.get("COORDINATES") or geojson.get("coordinates")
    if not isinstance(coordinates, list | tuple) or len(coordinates) < 2:
        return None, None
    return to_float(coordinates[1]), to_float(coordinates[0])


def _is_blank(lat: float | None, lon: float | None) -> bool:
    return lat is None or lon is None or (lat == 0 and lon == 0)


def normalize_coordinates(lat: Any, lon: Any, geojson: Any = None) -> CoordinateResult:
    """Normalize the inconsistent coordinates RIDB reports for a facility.

    RIDB facility coordinates are entered by many agencies and are frequently
    blank, zeroed, swapped or missing the western-hemisphere sign. Corrections
    are applied in this order:

    1. Blank, non-numeric or (0, 0) coordinates fall back to the GEOJSON point.
    2. A latitude outside [-90, 90] paired with a longitude inside it, or a far
       southern latitude paired with a longitude in the US latitude band, is a
       swapped pair.
    3. A positive longitude in the 50..130 band is a dropped minus sign.
    4. Coordinates still out of range are discarded.

    Args:
        lat: Raw FacilityLatitude value.
        lon: Raw FacilityLongitude value.
        geojson: Raw GEOJSON object of the facility, if any.

    Returns:
        A tuple of (latitude, longitude, source) where source is one of
        "facility", "geojson", "swapped", "sign_corrected" or "missing".
    """
    latitude, longitude = to_float(lat), to_float(lon)
    source = "facility"

    if _is_blank(latitude, longitude):
        latitude, longitude = _geojson_point(geojson)
        source = "geojson"
    if latitude is None or longitude is None or _is_blank(latitude, longitude):
        return None, None, "missing"

    band_low, band_high = _US_LATITUDE_BAND
    if (abs(latitude) > 90 and abs(longitude) <= 90) or (
        latitude < -band_low and band_low <= longitude <= band_high
    ):
        latitude, longitude = longitude, latitude
        source = "swapped"

    sign_low, sign_high = _SIGN_ERROR_LONGITUDE_BAND
    if sign_low <= longitude <= sign_high:
        longitude = -longitude
        source = "sign_corrected"

    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        return None, None, "missing"

    return latitude, longitude, source


def clean_text(text: Any) -> str:
    """Strip HTML markup and collapse whitespace in a RIDB free-text field.

    Args:
        text: The raw text, possibly containing HTML.

    Returns:
        Plain text, or an empty string for blank input.
    """
    if not isinstance(text, str) or not text:
        return ""
    # Tags become spaces so adjacent paragraphs don't run together
    plain = html.unescape(_TAG_PATTERN.sub(" ", text))
    return _WHITESPACE_PATTERN.sub(" ", plain).strip()


def join_names(items: Iterable[Any], key: str, sep: str = "; ", default: str = "Unknown") -> str:
    """Join the distinct, non-blank values of ``key`` across nested RIDB records.

    Args:
        items: Nested records (e.g. the ORGANIZATION list of a facility).
        key: The field to collect from each record.
        sep: Separator placed between names.
        default: Value returned when no names are found.

    Returns:
        The joined names in first-seen order, or ``default``.
    """
    names: list[str] = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        name = str(item.get(key) or "").strip()
        if name and name not in names:
            names.append(name)
    return sep.join(names) if names else default
