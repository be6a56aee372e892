"""Rendering surfaces and widgets for the debris dashboard."""

from .assets import (
    FontBook,
    get_text_surface,
    load_font,
)
from .charts import AltitudeChart, ChartView, HeatmapChart, TimelineChart
from .controller import ViewController
from .globe import GlobeSurface, compose_globe_frame
from .planar import PlanarMapSurface, reconcile_markers
from .search import SearchBox
from .surface import SurfaceSession, SurfaceState, TrackerContext
from .ui import (
    Button,
    ButtonVisualStyle,
    Tooltip,
    build_text_panel,
)

__all__ = [
    "AltitudeChart",
    "Button",
    "ButtonVisualStyle",
    "ChartView",
    "FontBook",
    "GlobeSurface",
    "HeatmapChart",
    "PlanarMapSurface",
    "SearchBox",
    "SurfaceSession",
    "SurfaceState",
    "TimelineChart",
    "Tooltip",
    "TrackerContext",
    "ViewController",
    "build_text_panel",
    "compose_globe_frame",
    "get_text_surface",
    "load_font",
    "reconcile_markers",
]
