# compositor.py
"""
Composites one starfield frame onto a drawing surface.

Each frame fades the previous one with a translucent black fill, advances
every star, and draws it with a pinhole perspective projection: a trail from
its previous projected position and a round head whose size and brightness
grow as the star approaches the viewer.
"""
import logging
import re
import numpy as np
from typing import Tuple, Protocol, Optional
from particle import ParticleSystem
from config import StarfieldConfig, Viewport
from constants import (
    TRAIL_FADE_SLOPE, MIN_FADE_ALPHA, STAR_SIZE_SCALE, FALLBACK_STAR_COLOR,
    BACKGROUND_COLOR
)

# --- Data Contracts ---
#
# class Canvas (protocol):
#   - fill_rect(rect, color, alpha): fill (x, y, w, h) with an RGB color at
#     alpha in (0, 1].
#   - stroke_line(start, end, color, width): round-capped line segment.
#   - fill_circle(center, radius, color): filled disc.
#
# class FrameCompositor:
#   - composite(self, particles, config, viewport) -> int:
#     - Inputs: the star collection, a configuration snapshot, the viewport.
#     - Outputs: int, number of stars drawn.
#     - Side Effects: Fades the canvas, advances all stars by one frame,
#       draws them, and clears their respawn flags.
#     - Invariants: never raises for out-of-range numbers; stars whose
#       projection is non-finite are skipped.

Color = Tuple[int, int, int]

_HEX_COLOR = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)


class Canvas(Protocol):
    def fill_rect(self, rect: Tuple[float, float, float, float], color: Color, alpha: float) -> None: ...

    def stroke_line(self, start: Tuple[float, float], end: Tuple[float, float],
                    color: Color, width: float) -> None: ...

    def fill_circle(self, center: Tuple[float, float], radius: float, color: Color) -> None: ...


def _match_hex_color(text: str) -> Optional[Color]:
    """Returns the (r, g, b) channels of a hex color, or None if it is malformed."""
    match = _HEX_COLOR.match(text) if isinstance(text, str) else None
    if match is None:
        return None
    return tuple(int(channel, 16) for channel in match.groups())


def parse_hex_color(text: str) -> Color:
    """
    Parses "#RRGGBB" or "RRGGBB" into an (r, g, b) tuple.

    Anything else falls back to opaque white.
    """
    color = _match_hex_color(text)
    return FALLBACK_STAR_COLOR if color is None else color


def fade_alpha(trail_length: float) -> float:
    """
    Opacity of the black fill drawn over the previous frame.

    A trail length of 0 clears completely; longer trails erase less, down to
    MIN_FADE_ALPHA.
    """
    return min(1.0, max(MIN_FADE_ALPHA, 1.0 - trail_length * TRAIL_FADE_SLOPE))


class FrameCompositor:
    """
    Fades, advances and draws the starfield onto a Canvas, one frame per call.
    """
    def __init__(self, canvas: Canvas):
        self.canvas = canvas
        self._color_text: Optional[str] = None
        self._color: Color = FALLBACK_STAR_COLOR

    def _star_color(self, text: str) -> Color:
        """Parses the configured color, caching it until the setting changes."""
        if text != self._color_text:
            color = _match_hex_color(text)
            if color is None:
                logging.warning(f"Invalid star color {text!r}. Falling back to white.")
                color = FALLBACK_STAR_COLOR
            self._color = color
            self._color_text = text
        return self._color

    def clear(self, viewport: Viewport) -> None:
        """Wipes the canvas to solid black."""
        self.canvas.fill_rect((0, 0, viewport.width, viewport.height), BACKGROUND_COLOR, 1.0)

    def fade(self, trail_length: float, viewport: Viewport) -> float:
        """Partially erases the previous frame and returns the alpha used."""
        alpha = fade_alpha(trail_length)
        self.canvas.fill_rect((0, 0, viewport.width, viewport.height), BACKGROUND_COLOR, alpha)
        return alpha

    def composite(self, particles: ParticleSystem, config: StarfieldConfig, viewport: Viewport) -> int:
        """
        Runs one fade + update + draw pass.

        Returns:
            int: The number of stars drawn this frame.
        """
        width, height = viewport.width, viewport.height
        center_x, center_y = viewport.center

        # 1. Fade the previous frame before anything is drawn.
        self.fade(config.trail_length, viewport)

        # 2. Advance the stars.
        particles.update(config.speed, config.depth, width, height)

        # 3. Project current and previous positions. A zero-size viewport
        #    yields inf/nan here, which the finite mask filters out.
        x = particles.positions[:, 0]
        y = particles.positions[:, 1]
        z = particles.depths
        pz = particles.prev_depths
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            sx = (x / z) * width + center_x
            sy = (y / z) * height + center_y
            px = (x / pz) * width + center_x
            py = (y / pz) * height + center_y
            nearness = 1.0 - z / width

        sizes = nearness * config.star_size * STAR_SIZE_SCALE
        brightness = np.clip(nearness, 0.0, 1.0)
        finite = np.isfinite(sx) & np.isfinite(sy) & np.isfinite(sizes)
        trail_ok = np.isfinite(px) & np.isfinite(py)

        # 4. Brightness-scaled color per star.
        base_color = np.array(self._star_color(config.star_color), dtype=np.float64)
        with np.errstate(invalid='ignore'):
            colors = np.floor(np.nan_to_num(brightness)[:, np.newaxis] * base_color).astype(np.int64)

        draw_trails = config.trail_length > 0
        drawn = 0
        for i in range(particles.count):
            if not finite[i]:
                continue
            color = (int(colors[i, 0]), int(colors[i, 1]), int(colors[i, 2]))
            head = (float(sx[i]), float(sy[i]))
            size = float(sizes[i])

            if draw_trails and trail_ok[i] and not particles.just_respawned[i]:
                self.canvas.stroke_line((float(px[i]), float(py[i])), head, color, size)

            self.canvas.fill_circle(head, size / 2, color)
            drawn += 1

        skipped = particles.count - drawn
        if skipped:
            logging.debug(f"Skipped {skipped} stars with non-finite projections.")

        # 5. Trails render normally again from the next frame.
        particles.just_respawned[:] = False
        return drawn
