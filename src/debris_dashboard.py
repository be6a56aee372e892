"""
Debris Dashboard
================

Interactive view of a catalog of tracked orbital objects: a live globe or map
driven by a time-warped clock, plus altitude, congestion and launch-year charts.
"""
from __future__ import annotations

import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Sequence

import pygame
from pygame.locals import DOUBLEBUF, RESIZABLE

from debris_tracker.core.commands import (
    AdjustDisplayBudget,
    CycleTimeWarp,
    PinTarget,
    SetAltitudeRange,
    SetTimelineMode,
    ToggleRegime,
    clamp_budget,
)
from debris_tracker.core.config import RENDER_CFG, TRACKER_CFG
from debris_tracker.core.logging_utils import configure_logging, get_logger
from debris_tracker.core.model import (
    ActiveView,
    AltitudeRange,
    ProjectionMode,
    Regime,
    ResourceLoadError,
    TimelineMode,
    ViewState,
)
from debris_tracker.core.timekeeping import Scheduler, SimulationClock
from debris_tracker.data.catalog import Catalog, load_catalog
from debris_tracker.data.land import LandAtlas
from debris_tracker.render import (
    Button,
    ButtonVisualStyle,
    FontBook,
    SearchBox,
    Tooltip,
    TrackerContext,
    ViewController,
    get_text_surface,
)

logger = get_logger("debris_dashboard")

TABS = (
    (ActiveView.TRACKER, "Live Tracker"),
    (ActiveView.ALTITUDE, "Altitude"),
    (ActiveView.HEATMAP, "Heatmap"),
    (ActiveView.TIMELINE, "Timeline"),
)
VIEW_KEYS = {
    pygame.K_1: ActiveView.TRACKER,
    pygame.K_2: ActiveView.ALTITUDE,
    pygame.K_3: ActiveView.HEATMAP,
    pygame.K_4: ActiveView.TIMELINE,
}
REGIME_KEYS = {pygame.K_l: Regime.LEO, pygame.K_m: Regime.MEO, pygame.K_g: Regime.GEO}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Orbital debris catalog dashboard")
    parser.add_argument("--catalog", default=TRACKER_CFG.catalog_source, help="CSV path or URL of the element-set catalog")
    parser.add_argument("--land", default=TRACKER_CFG.land_source, help="GeoJSON path or URL of land boundaries, or 'none'")
    parser.add_argument("--budget", type=int, default=TRACKER_CFG.default_display_budget, help="initial display budget")
    parser.add_argument("--warp", type=float, default=TRACKER_CFG.default_time_warp, help="initial time warp factor")
    parser.add_argument("--size", default=f"{RENDER_CFG.width}x{RENDER_CFG.height}", help="window size as WIDTHxHEIGHT")
    parser.add_argument("--fps", type=int, default=RENDER_CFG.frame_cap, help="frame cap")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    args = parser.parse_args(argv)
    try:
        width, height = (int(part) for part in args.size.lower().split("x", 1))
    except ValueError:
        parser.error(f"invalid --size {args.size!r}, expected WIDTHxHEIGHT")
    args.size = (width, height)
    return args


def _set_display_mode_with_vsync(size: tuple[int, int], flags: int = 0) -> pygame.Surface:
    """Create the display surface with double buffering and vsync when available."""

    flags |= DOUBLEBUF
    try:
        return pygame.display.set_mode(size, flags, vsync=1)
    except pygame.error:
        return pygame.display.set_mode(size, flags)


def draw_message_screen(
    screen: pygame.Surface,
    fonts: FontBook,
    title: str,
    message: str,
    color: tuple[int, int, int],
) -> None:
    screen.fill(RENDER_CFG.page_color)
    center_x, center_y = screen.get_width() // 2, screen.get_height() // 2
    heading = get_text_surface(fonts.title, title, color)
    screen.blit(heading, heading.get_rect(center=(center_x, center_y - 20)))
    body = get_text_surface(fonts.body, message, RENDER_CFG.hud_text_color)
    screen.blit(body, body.get_rect(center=(center_x, center_y + 14)))
    pygame.display.flip()


def show_error_screen(screen: pygame.Surface, fonts: FontBook, error: ResourceLoadError) -> None:
    """Block on an error message until the window is closed or Escape is pressed."""

    logger.error("Startup failed: %s", error)
    clock = pygame.time.Clock()
    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return
        draw_message_screen(screen, fonts, "Failed to load data", str(error), RENDER_CFG.error_text_color)
        clock.tick(15)


class Dashboard:
    """Window chrome, keyboard handling and the HUD around the view controller."""

    def __init__(
        self,
        screen: pygame.Surface,
        fonts: FontBook,
        catalog: Catalog,
        land: LandAtlas,
        *,
        budget: int,
        warp: float,
    ) -> None:
        self.screen = screen
        self.fonts = fonts
        self.land = land
        self.scheduler = Scheduler()
        clock = SimulationClock.start(time_warp=warp, now_perf_ms=self.scheduler.now_ms())
        view_state = ViewState(display_budget=clamp_budget(budget))
        self.tooltip = Tooltip()
        self.context = TrackerContext(
            catalog=catalog,
            clock=clock,
            view_state=view_state,
            land=land,
            tooltip=self.tooltip,
            fonts=fonts,
            index=catalog.index,
        )
        self.controller = ViewController(self.scheduler, self.context, self.content_rect())
        self.search = SearchBox(catalog, lambda name: self.controller.dispatch(PinTarget(name)))
        self.buttons: list[Button] = []
        self.wall_text = ""
        self.running = True
        self._build_buttons()
        self._refresh_wall_clock()
        self.scheduler.set_interval(self._refresh_wall_clock, TRACKER_CFG.wall_clock_refresh_ms)

    @property
    def view_state(self) -> ViewState:
        return self.context.view_state

    def content_rect(self) -> pygame.Rect:
        width, height = self.screen.get_size()
        top = RENDER_CFG.tab_bar_height
        return pygame.Rect(0, top, width, max(1, height - top - RENDER_CFG.hud_height))

    def _build_buttons(self) -> None:
        cfg = RENDER_CFG
        style = ButtonVisualStyle.from_cfg(cfg)
        y = (cfg.tab_bar_height - cfg.button_height) // 2
        buttons: list[Button] = []
        x = cfg.button_gap
        for view, label in TABS:
            buttons.append(
                Button(
                    (x, y, cfg.button_width, cfg.button_height),
                    label,
                    lambda view=view: self.controller.switch_view(view),
                    style=style,
                    is_active=lambda view=view: self.view_state.active_view is view,
                )
            )
            x += cfg.button_width + cfg.button_gap
        right = self.screen.get_width() - cfg.button_gap - cfg.button_width
        buttons.append(
            Button(
                (right, y, cfg.button_width, cfg.button_height),
                "",
                self.controller.toggle_projection,
                text_getter=lambda: "Globe 3D" if self.view_state.projection is ProjectionMode.PERSPECTIVE else "Map 2D",
                style=style,
            )
        )
        self.buttons = buttons

    def _refresh_wall_clock(self) -> None:
        self.wall_text = datetime.now(timezone.utc).strftime("%H:%M:%S")

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
            return
        if event.type == pygame.VIDEORESIZE:
            self.screen = pygame.display.get_surface()
            self._build_buttons()
            self.controller.on_resize(self.content_rect())
            return
        if self.search.handle_event(event):
            return
        if event.type == pygame.TEXTINPUT and event.text == "/":
            self.search.open()
            return
        if event.type == pygame.KEYDOWN:
            self.handle_key(event)
            return
        for button in self.buttons:
            if button.handle_event(event):
                return
        self.controller.handle_event(event)

    def handle_key(self, event: pygame.event.Event) -> None:
        key = event.key
        view_state = self.view_state
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key in VIEW_KEYS:
            self.controller.switch_view(VIEW_KEYS[key])
        elif key == pygame.K_p:
            self.controller.toggle_projection()
        elif key in REGIME_KEYS:
            self.controller.dispatch(ToggleRegime(REGIME_KEYS[key]))
        elif key == pygame.K_LEFTBRACKET:
            self.controller.dispatch(AdjustDisplayBudget(-1))
        elif key == pygame.K_RIGHTBRACKET:
            self.controller.dispatch(AdjustDisplayBudget(1))
        elif key == pygame.K_w:
            direction = -1 if event.mod & pygame.KMOD_SHIFT else 1
            self.controller.dispatch(CycleTimeWarp(direction))
        elif key == pygame.K_r:
            full = view_state.altitude_range is AltitudeRange.LEO
            self.controller.dispatch(SetAltitudeRange(AltitudeRange.FULL if full else AltitudeRange.LEO))
        elif key == pygame.K_c:
            cumulative = view_state.timeline_mode is TimelineMode.YEARLY
            self.controller.dispatch(SetTimelineMode(TimelineMode.CUMULATIVE if cumulative else TimelineMode.YEARLY))

    def hud_text(self) -> str:
        view_state = self.view_state
        clock = self.context.clock
        regimes = " ".join(
            f"{regime.label}:{'on' if view_state.regime_visibility.get(regime, True) else 'off'}" for regime in Regime
        )
        parts = [
            f"SIM {clock.format_utc()} UTC",
            f"WALL {self.wall_text} UTC",
            f"Budget {view_state.display_budget}",
            f"Warp {clock.time_warp:g}x",
            regimes,
        ]
        if view_state.pinned_target:
            parts.append(f"Target {view_state.pinned_target}")
        return "   ".join(parts)

    def draw(self) -> None:
        cfg = RENDER_CFG
        screen = self.screen
        screen.fill(cfg.page_color)
        self.controller.draw(screen)
        mouse_pos = pygame.mouse.get_pos() if pygame.mouse.get_focused() else None
        for button in self.buttons:
            button.draw(screen, self.fonts.body, mouse_pos)
        hud = get_text_surface(self.fonts.mono, self.hud_text(), cfg.hud_text_color)
        hud_rect = hud.get_rect()
        hud_rect.midleft = (cfg.button_gap, screen.get_height() - cfg.hud_height // 2)
        screen.blit(hud, hud_rect)
        self.search.draw(screen, self.fonts.body, (cfg.button_gap, cfg.tab_bar_height + cfg.button_gap))
        self.tooltip.draw(screen, self.fonts.body, self.fonts.bold)
        pygame.display.flip()

    def run(self, fps: int) -> int:
        self.controller.start()
        frame_clock = pygame.time.Clock()
        while self.running:
            for event in pygame.event.get():
                self.handle_event(event)
            error = self.land.error
            if error is not None:
                show_error_screen(self.screen, self.fonts, error)
                return 1
            self.scheduler.run_pending()
            self.draw()
            frame_clock.tick(fps)
        return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(getattr(logging, args.log_level), args.log_file)

    pygame.init()
    pygame.display.set_caption("Orbital Debris Dashboard")
    screen = _set_display_mode_with_vsync(args.size, RESIZABLE)
    fonts = FontBook(RENDER_CFG.font_names, RENDER_CFG.mono_font_names)
    pygame.key.start_text_input()

    land_source = None if args.land.lower() == "none" else args.land
    land = LandAtlas(land_source)
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="land")
    try:
        land.request(executor)
        draw_message_screen(screen, fonts, "Loading catalog", args.catalog, RENDER_CFG.hud_muted_color)
        pygame.event.pump()
        try:
            catalog = load_catalog(args.catalog)
        except ResourceLoadError as exc:
            show_error_screen(screen, fonts, exc)
            return 1
        dashboard = Dashboard(screen, fonts, catalog, land, budget=args.budget, warp=args.warp)
        return dashboard.run(args.fps)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
        pygame.quit()


if __name__ == "__main__":
    sys.exit(main())
