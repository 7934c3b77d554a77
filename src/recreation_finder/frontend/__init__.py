"""Frontend package for Recreation Finder."""

from .app import main
from .components import display_facility_map, render_facility_details, render_facility_table

__all__ = ["main", "display_facility_map", "render_facility_details", "render_facility_table"]
