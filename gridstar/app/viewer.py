#!/usr/bin/env python3
"""
gridstar viewer: A* stepping with minimal controls

- Mouse:
    click/drag empty cell -> paint obstacles
    click/drag obstacle   -> erase obstacles
    drag start / goal     -> move it
- Keyboard:
    [SPACE]      -> run/pause (starts a fresh search when idle or finished)
    [N]          -> single step
    [R]          -> reset search (keep obstacles)
    [C]          -> clear everything
    [O]          -> add random obstacles
    [+]/[-]      -> steps/sec
    [1]..[9]     -> switch bundled map
    [Q]/[ESC]    -> quit

Settings come from gridstar.app.config (env vars / --flags).
"""

import logging
import sys
from typing import Dict, List, Optional, Tuple

import pygame

from gridstar.app.config import ViewerConfig, resolve_config
from gridstar.app.controller import Controller
from gridstar.core.errors import MapFormatError
from gridstar.core.grid import Grid
from gridstar.core.heuristics import by_name
from gridstar.core.maps import bundled_maps, load_map, resolve_map
from gridstar.core.types import Coord, Tag

logger = logging.getLogger(__name__)

# ---------- Layout ----------
PANEL_W = 300            # right band: metrics + buttons
GRID_MARGIN = 16
MIN_CELL = 8
FPS = 60
FONT_NAME = None  # default pygame font

# Colors
BLACK       = (  0,  0,  0)
GRID_LINE   = (128,128,128)
BG_TOP      = ( 24, 26, 32)
BG_BOTTOM   = ( 36, 40, 48)
CARD_BG     = ( 24, 28, 36,220)
CARD_HI     = (255,255,255, 18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,  0)

TAG_COLORS: Dict[Tag, Tuple[int, int, int]] = {
    Tag.BLANK:    (255,255,255),
    Tag.OBSTACLE: (  0,  0,  0),
    Tag.START:    ( 50,205, 50),
    Tag.GOAL:     (255,  0,  0),
    Tag.OPEN:     (144,238,144),
    Tag.CLOSED:   (173,216,230),
    Tag.PATH:     (255,215,  0),
}


def cell_at(pos: Tuple[int, int], origin: Tuple[int, int], cell_size: int) -> Coord:
    """Pixel -> grid coordinate (may be out of bounds)."""
    px, py = pos
    ox, oy = origin
    return ((px - ox) // cell_size, (py - oy) // cell_size)


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)
        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255), self.rect, width=2, border_radius=10)
        text = font.render(self.label, True, (235, 238, 242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid: Grid, cfg: ViewerConfig, map_key: str = "custom"):
        pygame.init()
        self.cfg = cfg
        self.ctl = Controller(grid, steps_per_sec=cfg.steps_per_sec,
                              heuristic=by_name(cfg.heuristic), strict=cfg.strict)
        self.maps = bundled_maps()
        self.map_key = map_key

        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 24)

        win_w = GRID_MARGIN * 2 + grid.width * 24 + PANEL_W
        win_h = max(GRID_MARGIN * 2 + grid.height * 24, 560)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"gridstar — {map_key}")

        self._buttons: List[UIButton] = []
        self._dragging = False
        self.clock = pygame.time.Clock()
        self._layout(win_w, win_h)

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Pick the largest integer cell size that fits and rebuild the panel."""
        grid = self.ctl.grid
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = max(MIN_CELL, min(avail_w // grid.width, avail_h // grid.height))
        self._grid_origin = (GRID_MARGIN, GRID_MARGIN + max(0, (avail_h - grid.height * self.cell_size) // 2))
        grid_right = GRID_MARGIN * 2 + grid.width * self.cell_size
        self._right_band = pygame.Rect(grid_right, 0, max(PANEL_W, win_w - grid_right), win_h)
        self._build_buttons()

    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x, y = rb.x + 16, rb.y + 230
        w, h, gap = max(160, rb.width - 32), 36, 8

        def add(label, cb, *, togglable=False):
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            return btn

        self.btn_run = add("Run / Pause", self.ctl.toggle_run, togglable=True); y += h + gap
        add("Step Once", self.ctl.do_step); y += h + gap
        add("Reset Search", self.ctl.reset); y += h + gap
        add("Clear All", self.ctl.clear_all); y += h + gap
        add("Random Obstacles", lambda: self.ctl.add_random_obstacles(self.cfg.random_obstacles)); y += h + gap

        half = (w - 8) // 2
        self._buttons.append(UIButton("Speed -", pygame.Rect(x, y, half, h), lambda: self.ctl.bump_speed(-5)))
        self._buttons.append(UIButton("Speed +", pygame.Rect(x + half + 8, y, half, h), lambda: self.ctl.bump_speed(+5)))

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            self.ctl.tick()
            self._draw()
            self.clock.tick(FPS)

    def _switch_map(self, key: str):
        if key not in self.maps:
            return
        try:
            grid = load_map(self.maps[key])
        except (OSError, MapFormatError) as ex:
            logger.error("failed to load map %s: %s", key, ex)
            return
        self.ctl.switch_map(grid)
        self.map_key = key
        pygame.display.set_caption(f"gridstar — {key}")
        self._layout(*self.screen.get_size())

    def _mouse_cell(self, pos) -> Optional[Coord]:
        x, y = cell_at(pos, self._grid_origin, self.cell_size)
        return (x, y) if self.ctl.grid.in_bounds(x, y) else None

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(480, e.w), max(360, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                if any(b.handle_mouse(e) for b in self._buttons):
                    continue
                cell = self._mouse_cell(e.pos)
                if cell is not None:
                    self._dragging = True
                    self.ctl.press(*cell)
            elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
                self._dragging = False
            elif e.type == pygame.MOUSEMOTION:
                for b in self._buttons:
                    b.handle_mouse(e)
                if self._dragging:
                    cell = self._mouse_cell(e.pos)
                    if cell is not None:
                        self.ctl.drag(*cell)

    def _handle_key(self, e):
        if e.key in (pygame.K_ESCAPE, pygame.K_q):
            pygame.quit(); sys.exit(0)
        elif e.key == pygame.K_SPACE:
            self.ctl.toggle_run()
        elif e.key == pygame.K_n:
            self.ctl.do_step()
        elif e.key == pygame.K_r:
            self.ctl.reset()
        elif e.key == pygame.K_c:
            self.ctl.clear_all()
        elif e.key == pygame.K_o:
            self.ctl.add_random_obstacles(self.cfg.random_obstacles)
        elif e.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self.ctl.bump_speed(+5)
        elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE, pygame.K_KP_MINUS):
            self.ctl.bump_speed(-5)
        elif pygame.K_1 <= e.key <= pygame.K_9:
            keys = list(self.maps)
            i = e.key - pygame.K_1
            if i < len(keys):
                self._switch_map(keys[i])

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        for y in range(h):
            t = y / max(1, h - 1)
            c = tuple(int(a + (b - a) * t) for a, b in zip(BG_TOP, BG_BOTTOM))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        for cell in self.ctl.grid.cells():
            rect = pygame.Rect(ox + cell.x * cs, oy + cell.y * cs, cs, cs)
            pygame.draw.rect(self.screen, TAG_COLORS[cell.tag], rect)
            pygame.draw.rect(self.screen, GRID_LINE, rect, 1)

        if len(self.ctl.path) >= 2:
            pts = [(ox + c.x * cs + cs // 2, oy + c.y * cs + cs // 2) for c in self.ctl.path]
            pygame.draw.lines(self.screen, BLACK, False, pts, max(2, cs // 6))

    def _draw_metrics_and_buttons(self):
        rb = self._right_band
        card = pygame.Surface((rb.width - 20, 210), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        pygame.draw.rect(card, CARD_HI, pygame.Rect(0, 0, card.get_width(), 24), border_radius=14)
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0, y0 = rb.x + 24, rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            surf = (self.font_big if big else self.font).render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 5

        m = self.ctl.metrics()
        line(f"{self.ctl.state}", big=True, color=ACCENT_GOLD)
        line(f"Popped: {m['popped']}")
        line(f"Open: {m['open_size']}   Closed: {m['closed_count']}")
        line(f"Path Len: {m['path_len']}")
        if m["total_cost"] is not None:
            line(f"Total Cost: {m['total_cost']:.1f}")
        line(f"Map: {self.map_key}")
        line(f"Heuristic: {self.cfg.heuristic}")
        line(f"Speed: {self.ctl.steps_per_sec} steps/s")

        self.btn_run.active = self.ctl.running
        for b in self._buttons:
            b.draw(self.screen, self.font_small)


# ---------- main ----------
def main(argv=None):
    cfg = resolve_config(argv)
    logging.basicConfig(level=getattr(logging, cfg.log_level, logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        path = resolve_map(cfg.map_name)
        grid = load_map(path)
    except (OSError, MapFormatError) as ex:
        logger.error("failed to load map %s: %s", cfg.map_name, ex)
        sys.exit(1)
    Viewer(grid, cfg, map_key=path.stem).run()


if __name__ == "__main__":
    main()
