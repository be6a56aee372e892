"""Configuration dataclasses for the debris tracker."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TrackerCfg:
    default_time_warp: float = 100.0
    time_warp_options: tuple[float, ...] = (1.0, 10.0, 100.0, 500.0, 1000.0, 5000.0)
    default_display_budget: int = 5000
    display_budget_min: int = 100
    display_budget_max: int = 20000
    display_budget_step: int = 100
    hover_radius_px: float = 12.0
    map_refresh_ms: float = 500.0
    resize_debounce_ms: float = 150.0
    wall_clock_refresh_ms: float = 1000.0
    globe_scale_divisor: float = 2.3
    initial_rotation: tuple[float, float] = (0.0, -20.0)
    drag_sensitivity: float = 75.0
    leo_upper_km: float = 2000.0
    meo_upper_km: float = 35786.0
    earth_radius_km: float = 6371.0
    search_min_chars: int = 2
    search_max_results: int = 10
    catalog_source: str = "data/space_debris.csv"
    land_source: str = (
        "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/"
        "master/geojson/ne_110m_land.geojson"
    )
    fetch_timeout_s: float = 30.0


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1280
    height: int = 800
    frame_cap: int = 60
    page_color: tuple[int, int, int] = (6, 9, 20)
    sphere_color: tuple[int, int, int] = (11, 16, 38)
    graticule_color: tuple[int, int, int] = (26, 35, 64)
    land_fill_color: tuple[int, int, int] = (28, 48, 24)
    land_stroke_color: tuple[int, int, int] = (42, 64, 32)
    leo_color: tuple[int, int, int] = (0, 255, 136)
    meo_color: tuple[int, int, int] = (245, 166, 35)
    geo_color: tuple[int, int, int] = (255, 77, 77)
    hover_ring_color: tuple[int, int, int] = (79, 172, 254)
    target_color: tuple[int, int, int] = (255, 255, 255)
    status_text_color: tuple[int, int, int] = (85, 85, 102)
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_muted_color: tuple[int, int, int] = (140, 150, 175)
    error_text_color: tuple[int, int, int] = (231, 76, 60)
    globe_marker_radius: float = 1.5
    globe_target_radius: float = 4.0
    globe_target_ring_radius: int = 8
    globe_hover_ring_radius: int = 6
    map_marker_radius: float = 1.8
    map_target_radius: float = 5.0
    map_hover_radius: float = 5.0
    marker_alpha: int = int(255 * 0.8)
    tooltip_background_color: tuple[int, int, int, int] = (13, 21, 37, int(255 * 0.92))
    tooltip_title_color: tuple[int, int, int] = (255, 255, 255)
    tooltip_text_color: tuple[int, int, int] = (200, 210, 230)
    tooltip_offset: int = 15
    tooltip_margin: int = 10
    tab_bar_height: int = 44
    hud_height: int = 28
    button_width: int = 132
    button_height: int = 30
    button_gap: int = 8
    button_color: tuple[int, int, int, int] = (30, 40, 60, 200)
    button_hover_color: tuple[int, int, int, int] = (50, 70, 100, 220)
    button_active_color: tuple[int, int, int, int] = (0, 120, 215, 255)
    button_text_color: tuple[int, int, int] = (234, 241, 255)
    button_border_color: tuple[int, int, int, int] = (70, 90, 120, 255)
    button_radius: int = 10
    font_names: tuple[str, ...] = ("segoeui", "dejavusans", "arial")
    mono_font_names: tuple[str, ...] = ("consolas", "dejavusansmono", "couriernew")


@dataclass(frozen=True)
class ChartCfg:
    dpi: int = 100
    leo_range_km: tuple[float, float] = (150.0, 2000.0)
    leo_bins: int = 50
    full_range_km: tuple[float, float] = (150.0, 45000.0)
    full_bins: int = 80
    symlog_min_count: int = 100
    symlog_constant: float = 10.0
    heatmap_altitude_max_km: float = 2000.0
    heatmap_altitude_bins: int = 40
    heatmap_inclination_bins: int = 36
    timeline_first_year: int = 1957
    timeline_last_year: int = 2025
    leo_reference_lines: tuple[tuple[float, str, str], ...] = (
        (408.0, "ISS (~408 km)", "#2ecc71"),
        (800.0, "SSO (~800 km)", "#e74c3c"),
        (550.0, "Starlink (~550 km)", "#f5a623"),
    )
    full_reference_lines: tuple[tuple[float, str, str], ...] = (
        (408.0, "ISS", "#2ecc71"),
        (2000.0, "LEO/MEO boundary", "#f5a623"),
        (20200.0, "GPS (~20,200 km)", "#f5a623"),
        (35786.0, "GEO (~35,786 km)", "#e74c3c"),
    )
    heatmap_annotations: tuple[tuple[float, float, str, str], ...] = (
        (51.6, 408.0, "ISS", "#2ecc71"),
        (98.7, 800.0, "SSO", "#e74c3c"),
        (53.0, 550.0, "Starlink", "#f5a623"),
    )
    timeline_events: tuple[tuple[int, str, str], ...] = (
        (1999, "Peak launch\nactivity", "#4facfe"),
    )
    face_color: str = "#0d1525"
    text_color: str = "#c8d2e6"
    muted_color: str = "#667"
    bar_color: str = "#4facfe"
    year_bar_color: str = "#e74c3c"
    empty_cell_color: str = "#0a0f1c"


TRACKER_CFG = TrackerCfg()
RENDER_CFG = RenderCfg()
CHART_CFG = ChartCfg()


__all__ = ["CHART_CFG", "RENDER_CFG", "TRACKER_CFG", "ChartCfg", "RenderCfg", "TrackerCfg"]
