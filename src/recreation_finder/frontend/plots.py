"""Plots, map and summary tables for the Explore view.

Every function takes the facilities frame produced by
``backend.transform.facilities_to_frame`` and returns a Plotly figure, a Folium
map or a DataFrame, leaving the rendering to the Streamlit layer.
"""

import html
import math
import re
from typing import Any

import folium
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

PLOT_ACTIVITY_COUNT = "Activity Count by X"
PLOT_TOP_AREAS = "Top Recreation Areas"
PLOT_HEATMAP = "Heatmap: Facility Type vs Recreation Area"
PLOT_TYPES = (PLOT_ACTIVITY_COUNT, PLOT_TOP_AREAS, PLOT_HEATMAP)

NONE_OPTION = "None"
X_OPTIONS = ("OrgName", "RecAreaName")
GROUP_OPTIONS = (NONE_OPTION, "OrgName", "RecAreaName", "FacilityTypeDescription", "Reservable")

# Label -> facilities column used to color map markers
MAP_COLOR_GROUPS = {
    "Organization": "OrgName",
    "Recreation Area": "RecAreaName",
    "Facility Type": "FacilityTypeDescription",
}

# Choice key -> (row column, column column)
CONTINGENCY_TABLES = {
    "orgXtype": ("OrgName", "FacilityTypeDescription"),
    "areaXtype": ("RecAreaName", "FacilityTypeDescription"),
    "orgXarea": ("OrgName", "RecAreaName"),
}
CONTINGENCY_LABELS = {
    "Org x Facility Type": "orgXtype",
    "Rec Area x Facility Type": "areaXtype",
    "Org x Rec Area": "orgXarea",
}

US_CENTER = (39.8283, -98.5795)
_MARKER_PALETTE = px.colors.qualitative.Dark24
_TOOLTIP_ID_PATTERN = re.compile(r"\(ID ([^)]+)\)\s*$")
FACET_COLUMNS = 3
FACET_ROW_HEIGHT = 220


def plot_options(plot_type: str) -> tuple[list[str], list[str]]:
    """Return the X and group variable choices that make sense for a plot type.

    Args:
        plot_type: One of ``PLOT_TYPES``.

    Returns:
        A tuple of (x_choices, group_choices).

    Raises:
        ValueError: If the plot type is unknown.
    """
    if plot_type == PLOT_ACTIVITY_COUNT:
        return list(X_OPTIONS), list(GROUP_OPTIONS)
    if plot_type == PLOT_TOP_AREAS:
        return [NONE_OPTION], ["RecAreaName"]
    if plot_type == PLOT_HEATMAP:
        return [NONE_OPTION], [NONE_OPTION]
    raise ValueError(f"Unknown plot type '{plot_type}'")


def create_explore_plot(
    df: pd.DataFrame,
    x_var: str,
    group_var: str = NONE_OPTION,
    plot_type: str = PLOT_ACTIVITY_COUNT,
    facet: bool = False,
    top_n: int = 10,
) -> go.Figure | None:
    """Create the figure for the Explore view.

    Args:
        df: Facilities frame.
        x_var: Column on the x axis (activity count plot only).
        group_var: Column used for color/facets, or ``"None"``.
        plot_type: One of ``PLOT_TYPES``.
        facet: Split the activity count plot into one panel per group.
        top_n: Number of recreation areas shown by the top areas plot.

    Returns:
        The Plotly figure, or None if there is no data to plot.

    Raises:
        ValueError: If the plot type or a referenced column is unknown.
    """
    if plot_type not in PLOT_TYPES:
        raise ValueError(f"Unknown plot type '{plot_type}'")
    if df.empty:
        return None

    if plot_type == PLOT_ACTIVITY_COUNT:
        return _activity_count_plot(df, x_var, group_var, facet)
    if plot_type == PLOT_TOP_AREAS:
        return _top_recreation_areas_plot(df, top_n)
    return _facility_type_heatmap(df)


def _activity_count_plot(df: pd.DataFrame, x_var: str, group_var: str, facet: bool) -> go.Figure:
    """Stacked bars of the total number of activities offered per category."""
    group = group_var if group_var and group_var != NONE_OPTION else None
    for column in (x_var, group):
        if column is not None and column not in df.columns:
            raise ValueError(f"Unknown column '{column}'")

    keys = [x_var] if group in (None, x_var) else [x_var, group]
    data = df.groupby(keys, dropna=False)["ActivityCount"].sum().reset_index()
    # Booleans such as Reservable read better as discrete labels
    data[keys] = data[keys].astype(str)

    order = data.groupby(x_var)["ActivityCount"].sum().sort_values(ascending=False).index.tolist()
    options: dict[str, Any] = {}
    if group:
        options["color"] = group
        if facet:
            rows = math.ceil(data[group].nunique() / FACET_COLUMNS)
            options["facet_col"] = group
            options["facet_col_wrap"] = FACET_COLUMNS
            height = max(450, FACET_ROW_HEIGHT * rows)
            options["height"] = height
            # Plotly rejects row spacing above 1 / (rows - 1)
            options["facet_row_spacing"] = min(0.07, 0.9 / max(rows - 1, 1), 50 / height)

    fig = px.bar(
        data,
        x=x_var,
        y="ActivityCount",
        category_orders={x_var: order},
        labels={"ActivityCount": "Activities"},
        title=f"Activity Count by {x_var}",
        **options,
    )
    fig.update_layout(barmode="stack", xaxis_tickangle=-45)
    return fig


def _top_recreation_areas_plot(df: pd.DataFrame, top_n: int) -> go.Figure:
    """Horizontal bars of the recreation areas with the most facilities."""
    counts = (
        df["RecAreaName"]
        .value_counts()
        .head(top_n)
        .rename_axis("RecAreaName")
        .reset_index(name="Facilities")
    )
    fig = px.bar(
        counts,
        x="Facilities",
        y="RecAreaName",
        orientation="h",
        labels={"RecAreaName": "Recreation Area"},
        title=f"Top {len(counts)} Recreation Areas by Facility Count",
    )
    fig.update_yaxes(categoryorder="total ascending")
    return fig


def _facility_type_heatmap(df: pd.DataFrame) -> go.Figure:
    """Heatmap of facility counts per facility type and recreation area."""
    table = pd.crosstab(df["FacilityTypeDescription"], df["RecAreaName"])
    return px.imshow(
        table,
        labels={"x": "Recreation Area", "y": "Facility Type", "color": "Facilities"},
        color_continuous_scale="ylorbr",
        aspect="auto",
        text_auto=True,
        title="Facility Type vs Recreation Area",
    )


def create_summary_table(df: pd.DataFrame, x_var: str = "RecAreaName") -> pd.DataFrame:
    """Summarize facilities and activity counts per category.

    Args:
        df: Facilities frame.
        x_var: Column to group by; ``"None"`` or an unknown column falls back to
            ``RecAreaName``.

    Returns:
        pd.DataFrame: One row per category with facility, reservable and
        activity statistics, sorted by facility count.
    """
    by = x_var if x_var in df.columns else "RecAreaName"
    columns = [
        by,
        "Facilities",
        "Reservable Facilities",
        "Mean Activities",
        "Median Activities",
        "Max Activities",
    ]
    if df.empty:
        return pd.DataFrame(columns=columns)

    data = df.assign(_reservable=df["Reservable"].fillna(False).astype(bool).astype(int))
    summary = data.groupby(by, dropna=False).agg(
        **{
            "Facilities": ("FacilityID", "count"),
            "Reservable Facilities": ("_reservable", "sum"),
            "Mean Activities": ("ActivityCount", "mean"),
            "Median Activities": ("ActivityCount", "median"),
            "Max Activities": ("ActivityCount", "max"),
        },
    )
    summary["Mean Activities"] = summary["Mean Activities"].astype(float).round(2)
    summary = summary.sort_values("Facilities", ascending=False, kind="stable")
    return summary.reset_index()[columns]


def create_contingency_table(df: pd.DataFrame, choice: str) -> pd.DataFrame:
    """Cross-tabulate facility counts for a pair of categorical columns.

    Args:
        df: Facilities frame.
        choice: One of ``CONTINGENCY_TABLES`` (``orgXtype``, ``areaXtype``, ``orgXarea``).

    Returns:
        pd.DataFrame: Counts with ``Total`` row and column margins; empty when
        there are no facilities.

    Raises:
        ValueError: If the choice is unknown.
    """
    if choice not in CONTINGENCY_TABLES:
        raise ValueError(f"Unknown contingency table '{choice}'")
    if df.empty:
        return pd.DataFrame()

    rows, cols = CONTINGENCY_TABLES[choice]
    return pd.crosstab(df[rows], df[cols], margins=True, margins_name="Total")


def facility_tooltip(name: Any, facility_id: Any) -> str:
    """Tooltip text for a facility marker; ``facility_id_from_tooltip`` reverses it."""
    return f"{html.escape(str(name))} (ID {facility_id})"


def facility_id_from_tooltip(text: str | None) -> str | None:
    """Recover the facility ID from a clicked marker tooltip.

    Args:
        text: Tooltip text as returned by the map widget.

    Returns:
        The facility ID, or None if the text is not a facility tooltip.
    """
    if not text:
        return None
    match = _TOOLTIP_ID_PATTERN.search(text.strip())
    return match.group(1).strip() if match else None


def _popup_html(row: pd.Series) -> str:
    """Build the marker popup for a facility."""
    lines = [
        f"<b>{html.escape(str(row['FacilityName']))}</b>",
        f"Type: {html.escape(str(row['FacilityTypeDescription']))}",
        f"Organization: {html.escape(str(row['OrgName']))}",
        f"Recreation Area: {html.escape(str(row['RecAreaName']))}",
        f"Reservable: {'Yes' if row['Reservable'] else 'No'}",
        f"Activities: {row['ActivityCount']}",
    ]
    url = row.get("FacilityReservationURL")
    if isinstance(url, str) and url:
        lines.append(f'<a href="{html.escape(url)}" target="_blank">Recreation.gov</a>')
    lines.append("<i>Click the marker to fetch campsites and addresses.</i>")
    return "<br>".join(lines)


def create_facilities_map(
    df: pd.DataFrame, color_group: str = "RecAreaName", zoom_start: int = 7
) -> folium.Map:
    """Create a Folium map of facilities colored by a categorical column.

    Each category becomes its own toggleable layer whose name doubles as the
    legend entry. Facilities without usable coordinates are left off the map.

    Args:
        df: Facilities frame.
        color_group: Column used to color markers (see ``MAP_COLOR_GROUPS``).
        zoom_start: Initial zoom level before fitting to the markers.

    Returns:
        folium.Map: The map, fitted to the markers when there are any.

    Raises:
        ValueError: If ``color_group`` is not a column of ``df``.
    """
    if df.empty:
        return folium.Map(location=list(US_CENTER), zoom_start=4)
    if color_group not in df.columns:
        raise ValueError(f"Unknown color group '{color_group}'")

    mappable = df.dropna(subset=["FacilityLatitude", "FacilityLongitude"])
    if mappable.empty:
        return folium.Map(location=list(US_CENTER), zoom_start=4)

    folium_map = folium.Map(
        location=[mappable["FacilityLatitude"].mean(), mappable["FacilityLongitude"].mean()],
        zoom_start=zoom_start,
    )

    labels = mappable[color_group].astype(str)
    groups = sorted(labels.unique())
    colors = {group: _MARKER_PALETTE[i % len(_MARKER_PALETTE)] for i, group in enumerate(groups)}

    for group in groups:
        color = colors[group]
        layer = folium.FeatureGroup(
            name=f'<span style="color:{color}">&#9679;</span> {html.escape(group)}'
        )
        for _, row in mappable[labels == group].iterrows():
            folium.CircleMarker(
                location=[row["FacilityLatitude"], row["FacilityLongitude"]],
                radius=7,
                color=color,
                fill=True,
                fill_color=color,
                fill_opacity=0.8,
                popup=folium.Popup(_popup_html(row), max_width=300),
                tooltip=facility_tooltip(row["FacilityName"], row["FacilityID"]),
            ).add_to(layer)
        layer.add_to(folium_map)

    folium.LayerControl(collapsed=False).add_to(folium_map)
    folium_map.fit_bounds(
        [
            [mappable["FacilityLatitude"].min(), mappable["FacilityLongitude"].min()],
            [mappable["FacilityLatitude"].max(), mappable["FacilityLongitude"].max()],
        ]
    )
    return folium_map
