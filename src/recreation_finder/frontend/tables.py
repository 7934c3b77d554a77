"""Helpers for the facility table and its CSV download."""

import datetime as dt
from collections.abc import Sequence

import pandas as pd

from recreation_finder.backend.transform import LIST_COLUMNS

NO_RESULTS_NOTE = "No facilities found for the selected criteria."


def selectable_columns(df: pd.DataFrame) -> list[str]:
    """Columns the user may show or export; nested record lists are excluded."""
    return [column for column in df.columns if column not in LIST_COLUMNS]


def _resolve_columns(df: pd.DataFrame, columns: Sequence[str] | None) -> list[str]:
    """Keep the requested columns that exist and are displayable, in frame order."""
    allowed = selectable_columns(df)
    if columns is None:
        return allowed
    requested = set(columns)
    return [column for column in allowed if column in requested]


def filter_rows(df: pd.DataFrame, text: str | None) -> list[int]:
    """Positional indices of rows where any displayable column contains ``text``.

    Matching is case-insensitive; blank text matches every row.
    """
    if not text or not text.strip():
        return list(range(len(df)))
    needle = text.strip().lower()
    haystack = df[selectable_columns(df)].astype(str).apply(lambda column: column.str.lower())
    mask = haystack.apply(lambda column: column.str.contains(needle, regex=False)).any(axis=1)
    return [position for position, matched in enumerate(mask.tolist()) if matched]


def truncate_text(value: object, max_chars: int = 50) -> object:
    """Shorten long strings with a trailing ellipsis; other values pass through."""
    if isinstance(value, str) and len(value) > max_chars:
        return value[: max_chars - 1].rstrip() + "…"
    return value


def table_view(
    df: pd.DataFrame, columns: Sequence[str] | None = None, max_chars: int = 50
) -> pd.DataFrame:
    """Prepare the facilities frame for on-screen display.

    Args:
        df: Facilities frame.
        columns: Columns to show; all selectable columns when None.
        max_chars: Maximum characters per text cell.

    Returns:
        pd.DataFrame: The selected columns with long text truncated, or a
        single-cell ``Note`` frame when there are no facilities.
    """
    if df.empty:
        return pd.DataFrame({"Note": [NO_RESULTS_NOTE]})

    view = df[_resolve_columns(df, columns)].copy()
    for column in view.select_dtypes(include=["object", "string"]).columns:
        view[column] = view[column].map(lambda value: truncate_text(value, max_chars))
    return view


def to_csv_bytes(
    df: pd.DataFrame,
    columns: Sequence[str] | None = None,
    rows: Sequence[int] | None = None,
) -> bytes:
    """Export facilities to CSV.

    Args:
        df: Facilities frame.
        columns: Columns to export; all selectable columns when None. Nested
            record lists are never exported.
        rows: Positional row indices to export (e.g. the rows left after
            filtering); all rows when None.

    Returns:
        The UTF-8 encoded CSV, without the index.
    """
    data = df if rows is None else df.iloc[list(rows)]
    return data[_resolve_columns(df, columns)].to_csv(index=False).encode("utf-8")


def download_filename(day: dt.date | None = None) -> str:
    """Name of the CSV download, e.g. ``facilities_2025-07-08.csv``."""
    return f"facilities_{(day or dt.date.today()).isoformat()}.csv"
