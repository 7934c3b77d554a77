"""Scratch script exercising the RIDB wrapper functions outside the app.

Usage::

    RIDB__API_KEY=... python examples/ridb_scratch.py --state TN --activity 9
    RIDB__API_KEY=... python examples/ridb_scratch.py --zip 37738 --radius 10 --details
"""

import argparse

from recreation_finder.backend.service import RecreationService
from recreation_finder.config import get_settings
from recreation_finder.frontend.plots import create_contingency_table, create_summary_table
from recreation_finder.logger import configure_logging, get_logger

logger = get_logger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Query RIDB and print summaries")
    parser.add_argument("--state", help="Two-letter state abbreviation")
    parser.add_argument("--zip", dest="zip_code", help="Five-digit ZIP code")
    parser.add_argument("--radius", type=float, default=25, help="Radius in miles (ZIP search)")
    parser.add_argument("--activity", type=int, action="append", help="Activity ID (repeatable)")
    parser.add_argument("--list-activities", action="store_true", help="Print the activity list")
    parser.add_argument("--details", action="store_true", help="Fetch details of the first hit")
    args = parser.parse_args()

    configure_logging()
    service = RecreationService(get_settings())

    if args.list_activities:
        print(service.get_activities().to_string(index=False))
        return

    facilities = service.search_facilities(
        zip_code=args.zip_code,
        radius_miles=args.radius,
        state=args.state,
        activities=args.activity,
    )
    if facilities.empty:
        print("No facilities found.")
        return

    columns = ["FacilityID", "FacilityName", "FacilityTypeDescription", "RecAreaName"]
    print(facilities[columns].head(20))
    print(facilities["CoordinateSource"].value_counts())
    print(create_summary_table(facilities, "OrgName"))
    print(create_contingency_table(facilities, "orgXtype"))

    if args.details:
        first = facilities.iloc[0]
        details = service.get_facility_details(first["FacilityID"])
        logger.info(f"Details for {first['FacilityName']}")
        print(details.addresses)
        print(details.campsites.head(20))


if __name__ == "__main__":
    main()
