"""Main application module for Recreation Finder."""

import logging
import sys

import pandas as pd
import streamlit as st
from pydantic import ValidationError

from recreation_finder.backend.client import RidbApiError
from recreation_finder.backend.geocoder import GeocodingError
from recreation_finder.backend.service import RecreationService
from recreation_finder.config import Settings, get_settings
from recreation_finder.frontend.components import (
    display_facility_map,
    render_about,
    render_activity_selector,
    render_facility_details,
    render_facility_table,
    render_state_search,
    render_zip_search,
)
from recreation_finder.frontend.plots import (
    CONTINGENCY_LABELS,
    MAP_COLOR_GROUPS,
    PLOT_TYPES,
    create_contingency_table,
    create_explore_plot,
    create_facilities_map,
    create_summary_table,
    facility_id_from_tooltip,
    plot_options,
)
from recreation_finder.logger import configure_logging

logger = logging.getLogger(__name__)

# --- Configuration Loading ---


def load_config() -> Settings:
    """Loads the application configuration.

    Returns:
        Settings: The application settings object.

    Raises:
        RuntimeError: If the configuration cannot be loaded.
    """
    try:
        return get_settings()
    except Exception as e:
        raise RuntimeError(f"Failed to load configuration: {e}") from e


@st.cache_resource
def get_service(_settings: Settings) -> RecreationService:
    """Creates and caches the RecreationService instance.

    Args:
        _settings: The application settings object. The underscore keeps
            Streamlit from hashing it.

    Returns:
        RecreationService: The initialized service.
    """
    return RecreationService(_settings)


@st.cache_data(ttl=3600)
def load_activities(_service: RecreationService) -> pd.DataFrame:
    """Loads and caches the RIDB activity list used by the activity selector."""
    return _service.get_activities()


# --- Main App Logic ---


def _init_session_state() -> None:
    """Initialize session state variables with default values."""
    for key in ("facilities", "details", "selected_facility"):
        if key not in st.session_state:
            st.session_state[key] = None


def _run_search(service: RecreationService, message: str, **criteria: object) -> None:
    """Run a facility search and store the results in session state.

    Args:
        service: The application service.
        message: Progress message shown while searching.
        **criteria: Keyword arguments for ``RecreationService.search_facilities``.
    """
    progress_bar = st.progress(0.1, text=message)
    try:
        df = service.search_facilities(
            progress_callback=lambda x: progress_bar.progress(x, text=message),
            **criteria,  # type: ignore[arg-type]
        )
    except ValidationError as e:
        st.error("; ".join(error["msg"] for error in e.errors()))
        return
    except GeocodingError as e:
        st.error(str(e))
        return
    except RidbApiError as e:
        logger.error(f"Facility search failed: {e}")
        st.error(f"Could not reach the Recreation Information Database: {e}")
        return
    finally:
        progress_bar.empty()

    st.session_state["facilities"] = df
    st.session_state["details"] = None
    st.session_state["selected_facility"] = None


def _fetch_details(service: RecreationService, facility_id: str) -> None:
    """Fetch details for a facility unless they are already loaded."""
    if facility_id == st.session_state["selected_facility"]:
        return
    with st.spinner("Fetching facility details..."):
        try:
            st.session_state["details"] = service.get_facility_details(facility_id)
        except RidbApiError as e:
            st.error(f"Could not fetch facility details: {e}")
            return
    st.session_state["selected_facility"] = facility_id
    st.success("Details loaded. Open the Facility Details tab to view them.")


def _render_search_tab(service: RecreationService, settings: Settings) -> None:
    """Render the Search Facilities tab."""
    sidebar, main_panel = st.columns([1, 3])

    with sidebar:
        st.subheader("Search for Recreation Facilities")
        st.markdown("##### Optionally Select Activities")
        try:
            activities = load_activities(service)
        except RidbApiError as e:
            st.warning(f"Could not load activities: {e}")
            activities = pd.DataFrame(columns=["ActivityID", "ActivityName"])
        activity_ids = render_activity_selector(activities)

        st.divider()
        st.markdown("##### Search by State or Zip Code")
        state, state_clicked = render_state_search()
        st.divider()
        zip_code, radius, zip_clicked = render_zip_search(settings.search)

    if state_clicked:
        _run_search(
            service, "Searching for facilities...", state=state, activities=activity_ids
        )
    if zip_clicked:
        _run_search(
            service,
            "Searching for facilities...",
            zip_code=zip_code,
            radius_miles=radius,
            activities=activity_ids,
        )

    with main_panel:
        facilities = st.session_state["facilities"]
        if facilities is None:
            st.info("Search by state or ZIP code to see facilities.")
        else:
            render_facility_table(facilities, settings.search.truncate_chars)


def _render_plot_mode(facilities: pd.DataFrame) -> None:
    controls, output = st.columns([1, 3])
    with controls:
        plot_type = st.selectbox("Plot Type", PLOT_TYPES)
        x_choices, group_choices = plot_options(plot_type)
        x_var = st.selectbox("X Variable", x_choices, disabled=len(x_choices) == 1)
        group_var = st.selectbox(
            "Group / Fill Variable", group_choices, disabled=len(group_choices) == 1
        )
        facet = st.checkbox("Facet by Group?", value=False, disabled=len(group_choices) == 1)

    with output:
        fig = create_explore_plot(facilities, x_var, group_var, plot_type, facet)
        if fig is None:
            st.warning("No facilities to plot.")
        else:
            st.plotly_chart(fig, use_container_width=True)
        st.divider()
        st.dataframe(create_summary_table(facilities, x_var), hide_index=True)


def _render_map_mode(service: RecreationService, facilities: pd.DataFrame) -> None:
    controls, output = st.columns([1, 3])
    with controls:
        st.markdown("##### Color Grouping")
        color_label = st.selectbox("Color Map Markers By:", list(MAP_COLOR_GROUPS), index=1)
        st.markdown("##### Contingency Table")
        table_label = st.selectbox("Select Contingency Table", list(CONTINGENCY_LABELS))
        st.dataframe(create_contingency_table(facilities, CONTINGENCY_LABELS[table_label]))

    with output:
        folium_map = create_facilities_map(facilities, MAP_COLOR_GROUPS[color_label])
        map_data = display_facility_map(folium_map)
        facility_id = facility_id_from_tooltip((map_data or {}).get("last_object_clicked_tooltip"))
        if facility_id:
            _fetch_details(service, facility_id)


def _render_explore_tab(service: RecreationService) -> None:
    """Render the Explore tab."""
    facilities = st.session_state["facilities"]
    if facilities is None or facilities.empty:
        st.info("Run a search first to explore facilities.")
        return

    mode = st.radio("Choose View", ["Map", "Plot"], horizontal=True)
    if mode == "Plot":
        _render_plot_mode(facilities)
    else:
        _render_map_mode(service, facilities)


def _render_details_tab() -> None:
    """Render the Facility Details tab."""
    facilities = st.session_state["facilities"]
    facility_id = st.session_state["selected_facility"]
    facility_name = None
    if facilities is not None and facility_id is not None:
        names = facilities.loc[facilities["FacilityID"] == facility_id, "FacilityName"]
        facility_name = names.iloc[0] if not names.empty else None
    render_facility_details(st.session_state["details"], facility_name)


def main() -> None:
    """Entry point for the application.

    Checks if running within Streamlit and relaunches if necessary.
    """
    if st.runtime.exists():
        _main_app_logic()
    else:
        from streamlit.web import cli as stcli

        sys.argv = ["streamlit", "run", __file__] + sys.argv[1:]
        sys.exit(stcli.main())


def _main_app_logic() -> None:
    """Core logic for the Streamlit application."""
    st.set_page_config(layout="wide", page_title="Recreation Finder")
    configure_logging()
    st.title("Recreation Finder")

    # --- Initialization ---
    try:
        settings = load_config()
    except RuntimeError as e:
        st.error(str(e))
        st.stop()

    service = get_service(settings)
    _init_session_state()

    about_tab, search_tab, explore_tab, details_tab = st.tabs(
        ["About", "Search Facilities", "Explore", "Facility Details"]
    )
    with about_tab:
        render_about()
    with search_tab:
        _render_search_tab(service, settings)
    with explore_tab:
        _render_explore_tab(service)
    with details_tab:
        _render_details_tab()


if __name__ == "__main__":
    main()
