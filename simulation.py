# simulation.py
"""
The starfield core driven by the application loop.

This module defines the Starfield class, which pairs the ParticleSystem with
a FrameCompositor and exposes the four calls the Driver makes: initialize,
set_particle_count, render_frame and clear_and_reset. Configuration and
viewport are passed in on every call; nothing is read from global state.
"""
import logging
from typing import Optional, Any
from particle import ParticleSystem
from compositor import FrameCompositor, Canvas
from config import StarfieldConfig, Viewport

# --- Data Contracts ---
#
# class Starfield:
#   - __init__(self, canvas: Canvas, rng=None, seed=None):
#     - Side Effects: Creates an empty ParticleSystem and a FrameCompositor.
#
#   - render_frame(self, config: StarfieldConfig, viewport: Viewport) -> int:
#     - Outputs: int, number of stars drawn.
#     - Side Effects: Resizes the collection to config.star_count if needed,
#       then fades, advances and draws one frame. Each call advances state;
#       it must be called exactly once per displayed frame.
#     - Invariants: len(self.particles) == max(0, config.star_count) after
#       the call.


class Starfield:
    """
    Owns the star collection and the compositor for the duration of a run.
    """
    def __init__(self, canvas: Canvas, rng: Optional[Any] = None, seed: Optional[int] = None):
        self.particles = ParticleSystem(0, 0, 0, rng=rng, seed=seed)
        self.compositor = FrameCompositor(canvas)
        self.frame_count = 0

    def initialize(self, particle_count: int, viewport: Viewport) -> None:
        """(Re)builds the star collection for the given viewport."""
        self.particles.initialize(particle_count, viewport.width, viewport.height)

    def set_particle_count(self, n: int) -> None:
        """Grows or truncates the live collection without touching survivors."""
        self.particles.set_particle_count(n)

    def render_frame(self, config: StarfieldConfig, viewport: Viewport) -> int:
        """
        Runs one fade + update + draw pass.

        Returns:
            int: The number of stars drawn.
        """
        if self.particles.count != max(0, config.star_count):
            self.set_particle_count(config.star_count)

        drawn = self.compositor.composite(self.particles, config, viewport)
        self.frame_count += 1
        return drawn

    def clear_and_reset(self, config: StarfieldConfig, viewport: Viewport) -> None:
        """Wipes the surface to black and respawns every star from `config`."""
        self.compositor.clear(viewport)
        self.initialize(config.star_count, viewport)
        self.frame_count = 0
        logging.info("Starfield reset.")
