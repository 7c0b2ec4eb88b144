# visualization.py
"""
Handles the pygame window, user controls and the drawing surface.

PygameCanvas adapts a pygame.Surface to the Canvas interface the compositor
draws through. Visualizer owns the window, turns keyboard and window events
into configuration changes, and presents each finished frame.
"""
import logging
import pygame
from typing import Tuple, Optional
from config import StarfieldConfig, Viewport
from utils import WindowOptions
from constants import (
    FPS, BACKGROUND_COLOR, WINDOW_TITLE,
    OVERLAY_BACKGROUND, OVERLAY_TEXT_COLOR, OVERLAY_PADDING, STAR_COUNT_STEP,
    SPEED_STEP, STAR_SIZE_STEP, TRAIL_LENGTH_STEP, DEPTH_STEP, STAR_COLOR_PALETTE
)

# --- Data Contracts ---
#
# class PygameCanvas:
#   - __init__(self, surface: pygame.Surface)
#   - fill_rect / stroke_line / fill_circle: see compositor.Canvas.
#
# class Visualizer:
#   - __init__(self, window: Optional[WindowOptions] = None):
#     - Inputs: the validated "visualization" section of config.json.
#     - Side Effects: Initializes pygame and creates a display window.
#
#   - handle_events(self, config: StarfieldConfig) -> Tuple[StarfieldConfig, Optional[str]]:
#     - Outputs: the (possibly adjusted) configuration and an action, one of
#       ACTION_QUIT, ACTION_RESET or None.
#     - Side Effects: Toggles pause and overlay state, resizes the canvas.
#
#   - present(self, config: StarfieldConfig, frame: int) -> None:
#     - Side Effects: Blits the star canvas and overlay to the window, flips
#       the display and waits for the next frame tick.

ACTION_QUIT = "quit"
ACTION_RESET = "reset"

# Key -> (config field, step). Each pair of keys nudges one parameter down/up.
_ADJUST_KEYS = {
    pygame.K_RIGHT: ("star_count", STAR_COUNT_STEP),
    pygame.K_LEFT: ("star_count", -STAR_COUNT_STEP),
    pygame.K_UP: ("speed", SPEED_STEP),
    pygame.K_DOWN: ("speed", -SPEED_STEP),
    pygame.K_RIGHTBRACKET: ("trail_length", TRAIL_LENGTH_STEP),
    pygame.K_LEFTBRACKET: ("trail_length", -TRAIL_LENGTH_STEP),
    pygame.K_EQUALS: ("depth", DEPTH_STEP),
    pygame.K_MINUS: ("depth", -DEPTH_STEP),
    pygame.K_PERIOD: ("star_size", STAR_SIZE_STEP),
    pygame.K_COMMA: ("star_size", -STAR_SIZE_STEP),
}


class PygameCanvas:
    """
    Immediate-mode drawing on a pygame Surface.
    """
    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        # Reused translucent overlay for fade fills; rebuilt when the size changes.
        self._overlay: Optional[pygame.Surface] = None

    def fill_rect(self, rect, color, alpha: float) -> None:
        rect = pygame.Rect(rect)
        if alpha >= 1.0:
            self.surface.fill(color, rect)
            return

        if self._overlay is None or self._overlay.get_size() != rect.size:
            self._overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
        # Never fully transparent, so every fill erases something.
        self._overlay.fill((color[0], color[1], color[2], max(1, round(alpha * 255))))
        self.surface.blit(self._overlay, rect.topleft)

    def stroke_line(self, start, end, color, width: float) -> None:
        line_width = max(1, int(round(width)))
        pygame.draw.line(self.surface, color, start, end, line_width)
        # pygame lines have square ends; cap them with discs.
        if line_width > 2:
            cap_radius = line_width / 2
            pygame.draw.circle(self.surface, color, start, cap_radius)
            pygame.draw.circle(self.surface, color, end, cap_radius)

    def fill_circle(self, center, radius: float, color) -> None:
        pygame.draw.circle(self.surface, color, center, max(1.0, radius))


class Visualizer:
    """
    Opens the window, applies user controls and presents finished frames.
    """
    def __init__(self, window: Optional[WindowOptions] = None):
        """
        Initializes pygame and the display window.
        """
        window = window if window is not None else WindowOptions()
        pygame.init()
        pygame.font.init()

        if window.fullscreen:
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = window.window_width
            height = window.window_height
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()

        # Stars are drawn on their own surface so the overlay never leaves trails.
        self.star_surface = pygame.Surface((width, height))
        self.star_surface.fill(BACKGROUND_COLOR)
        self.canvas = PygameCanvas(self.star_surface)

        self.paused = False
        self.show_controls = window.show_controls

        try:
            self.font = pygame.font.SysFont("Segoe UI", 14)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font = pygame.font.SysFont(None, 18)

        logging.info(f"Visualizer initialized with pygame display ({width}x{height}).")

    @property
    def viewport(self) -> Viewport:
        width, height = self.star_surface.get_size()
        return Viewport(width, height)

    def _resize(self, width: int, height: int) -> None:
        """Replaces the star surface after the window changed size."""
        self.star_surface = pygame.Surface((max(0, width), max(0, height)))
        self.star_surface.fill(BACKGROUND_COLOR)
        self.canvas.surface = self.star_surface
        logging.info(f"Window resized to {width}x{height}.")

    def _next_color(self, current: str) -> str:
        try:
            index = STAR_COLOR_PALETTE.index(current.lower())
        except ValueError:
            index = -1
        return STAR_COLOR_PALETTE[(index + 1) % len(STAR_COLOR_PALETTE)]

    def handle_events(self, config: StarfieldConfig) -> Tuple[StarfieldConfig, Optional[str]]:
        """
        Processes pending pygame events.

        Returns:
            Tuple[StarfieldConfig, Optional[str]]: The updated configuration and
            ACTION_QUIT, ACTION_RESET or None.
        """
        action = None
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return config, ACTION_QUIT

            if event.type == pygame.VIDEORESIZE:
                self._resize(event.w, event.h)

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return config, ACTION_QUIT
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                    logging.info("Paused." if self.paused else "Resumed.")
                elif event.key == pygame.K_r:
                    action = ACTION_RESET
                elif event.key == pygame.K_h:
                    self.show_controls = not self.show_controls
                elif event.key == pygame.K_c:
                    config = config.adjusted(star_color=self._next_color(config.star_color))
                    logging.info(f"Star color set to {config.star_color}.")
                elif event.key in _ADJUST_KEYS:
                    field, step = _ADJUST_KEYS[event.key]
                    old_value = getattr(config, field)
                    config = config.adjusted(**{field: old_value + step})
                    logging.info(f"{field} changed. Old: {old_value}, New: {getattr(config, field)}")
        return config, action

    def _draw_controls(self, config: StarfieldConfig, frame: int) -> None:
        """Renders the parameter overlay in the top-left corner."""
        lines = [
            f"Stars: {config.star_count}   (Left/Right)",
            f"Speed: {config.speed:.0f}   (Down/Up)",
            f"Star size: {config.star_size:.1f}   (, / .)",
            f"Trail: {config.trail_length:.1f}   ([ / ])",
            f"Depth: {config.depth:.0f}   (- / =)",
            f"Color: {config.star_color}   (C)",
            f"{'Paused' if self.paused else 'Running'}   (Space)   Reset (R)   Hide (H)",
            f"Frame {frame}   {self.clock.get_fps():.0f} fps",
        ]
        surfaces = [self.font.render(line, True, OVERLAY_TEXT_COLOR) for line in lines]
        line_height = self.font.get_linesize()
        panel_width = max(s.get_width() for s in surfaces) + OVERLAY_PADDING * 2
        panel_height = line_height * len(surfaces) + OVERLAY_PADDING * 2

        panel = pygame.Surface((panel_width, panel_height), pygame.SRCALPHA)
        panel.fill(OVERLAY_BACKGROUND)
        self.screen.blit(panel, (OVERLAY_PADDING, OVERLAY_PADDING))

        y = OVERLAY_PADDING * 2
        for surf in surfaces:
            self.screen.blit(surf, (OVERLAY_PADDING * 2, y))
            y += line_height

    def present(self, config: StarfieldConfig, frame: int) -> None:
        """Shows the current star canvas and waits for the next frame."""
        self.screen.blit(self.star_surface, (0, 0))
        if self.show_controls:
            self._draw_controls(config, frame)
        pygame.display.flip()
        self.clock.tick(FPS)

    def close(self):
        """Shuts down pygame."""
        pygame.font.quit()
        pygame.quit()
