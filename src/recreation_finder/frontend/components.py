"""Frontend components for the Recreation Finder application.

This module contains reusable UI components for the Streamlit interface:
the search sidebar, the facility table, the map widget and the details view.
"""

from typing import Any, cast

import folium
import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

from recreation_finder.config import SearchSettings
from recreation_finder.frontend.tables import (
    download_filename,
    filter_rows,
    selectable_columns,
    table_view,
    to_csv_bytes,
)
from recreation_finder.models import FacilityDetails
from recreation_finder.utils import US_STATES

ABOUT_MARKDOWN = """
**Recreation Finder** explores recreational facilities across the United States using
data from the [Recreation Information Database (RIDB)](https://ridb.recreation.gov/),
part of the federal Recreation One Stop (R1S) program.

Use it to:

- Search for recreation facilities by **state**, **ZIP code** and **activity**
- View and download detailed facility data
- Summarize the results with plots, contingency tables and statistical summaries

**Tabs**

- **Search Facilities**: query RIDB by ZIP code or state, optionally narrowed to
  activities (the list is loaded from the API). Pick columns and download the results.
- **Explore**: plot the results or view them on a map. Clicking a facility marker
  fetches its campsites and addresses into **Facility Details**.

Some agencies report inaccurate coordinates, so a few facilities can appear outside
the searched state. Obvious errors (swapped or unsigned coordinates) are corrected.
"""


def render_about() -> None:
    """Render the About tab."""
    st.header("About This App")
    st.markdown(ABOUT_MARKDOWN)
    st.caption("Data Source: RIDB (Recreation.gov API)")


def render_activity_selector(activities: pd.DataFrame) -> list[int]:
    """Render the activity multiselect.

    Args:
        activities: Activities frame with ``ActivityID`` and ``ActivityName``.

    Returns:
        The selected activity IDs.
    """
    names = dict(zip(activities["ActivityID"], activities["ActivityName"], strict=True))
    selected = st.multiselect(
        "Select Activity",
        options=list(names),
        format_func=lambda activity_id: names.get(activity_id, str(activity_id)),
    )
    return [int(activity_id) for activity_id in selected]


def render_state_search() -> tuple[str, bool]:
    """Render the state selector and its search button.

    Returns:
        A tuple of (state, clicked).
    """
    state = st.selectbox("Enter State", US_STATES)
    clicked = st.button("Search Facilities by State")
    return state, clicked


def render_zip_search(defaults: SearchSettings) -> tuple[str, int, bool]:
    """Render the ZIP code and radius inputs and their search button.

    Args:
        defaults: Default ZIP code and radius.

    Returns:
        A tuple of (zip_code, radius_miles, clicked).
    """
    zip_code = st.text_input("Enter Zip Code", value=defaults.default_zip_code)
    radius = st.number_input(
        "Search Radius (miles)",
        min_value=1,
        max_value=50,
        value=defaults.default_radius_miles,
    )
    clicked = st.button("Search Facilities by Zip")
    return zip_code, int(radius), clicked


def render_facility_table(df: pd.DataFrame, max_chars: int) -> None:
    """Render the column picker, row filter, CSV download and facility table.

    Args:
        df: Facilities frame.
        max_chars: Maximum characters shown per text cell.
    """
    if df.empty:
        st.dataframe(table_view(df), hide_index=True)
        return

    choices = selectable_columns(df)
    columns = st.multiselect("Select Columns to Keep", options=choices, default=choices)
    text = st.text_input("Filter rows containing")
    rows = filter_rows(df, text)

    st.download_button(
        "Download CSV",
        data=to_csv_bytes(df, columns, rows),
        file_name=download_filename(),
        mime="text/csv",
    )
    st.caption(f"Showing {len(rows)} of {len(df)} facilities")
    st.dataframe(table_view(df.iloc[rows], columns, max_chars), hide_index=True)


def display_facility_map(folium_map: folium.Map, height: int = 600) -> dict[str, Any]:
    """Display a Folium map and report which marker was clicked.

    Args:
        folium_map: The facilities map.
        height: Map height in pixels.

    Returns:
        Data returned by st_folium; ``last_object_clicked_tooltip`` holds the
        tooltip of the last clicked marker.
    """
    return cast(
        dict[str, Any],
        st_folium(
            folium_map,
            returned_objects=["last_object_clicked_tooltip"],
            height=height,
        ),
    )


def render_facility_details(details: FacilityDetails | None, facility_name: str | None) -> None:
    """Render the addresses and campsites of the selected facility.

    Args:
        details: Fetched details, or None before any facility was selected.
        facility_name: Display name of the facility.
    """
    if details is None:
        st.info("Click a facility marker on the Explore map to fetch its details.")
        return

    st.subheader(f"{facility_name or details.facility_id} | Details")

    st.markdown("**Addresses**")
    if details.addresses.empty:
        st.write("No addresses listed for this facility.")
    else:
        st.dataframe(details.addresses, hide_index=True)

    st.markdown("**Campsites**")
    if details.campsites.empty:
        st.write("No campsites listed for this facility.")
    else:
        st.dataframe(details.campsites, hide_index=True)
