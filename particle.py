# particle.py
"""
Manages the state of all stars in the starfield.

This module defines the ParticleSystem class, which stores per-star state
(lateral offset, depth, previous depth, respawn flag) in NumPy arrays and
advances it one frame at a time. Depth decreases every frame at a rate scaled
by a parallax multiplier; a star that reaches the viewer respawns at the far
plane with a new Gaussian lateral position.
"""
import logging
import numpy as np
from typing import Optional, Any, Iterable
from numba import jit
from constants import (
    MIN_DEPTH, LATERAL_SIGMA_RATIO, PARALLAX_CENTER_GAIN, PARALLAX_EDGE_DRAG,
    DEPTH_RANGE
)

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, count: int, width: int, height: int, rng=None, seed=None):
#     - Inputs:
#       - count: int, initial number of stars. Negative values clamp to 0.
#       - width, height: int, viewport size used for the initial spawn.
#       - rng: Optional random source with a `random(size)` method returning
#         floats in [0, 1). Defaults to numpy.random.default_rng(seed).
#     - Side Effects: Initializes internal NumPy arrays for star state.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.depths and self.prev_depths are arrays of shape (N,), float64.
#       - self.just_respawned is an array of shape (N,), bool.
#       - After update(): 0 < depths <= width, prev_depths >= depths, unless
#         the viewport has zero width.
#
#   - update(self, speed: float, depth: float, width: int, height: int) -> int:
#     - Outputs: int, number of stars respawned this frame.
#     - Side Effects: Advances every star one frame and respawns expired ones.


@jit(nopython=True)
def parallax_multiplier(dist_from_center, depth_effect):
    """
    Speed multiplier for a star at a normalized off-axis distance.

    Stars near the axis speed up and stars at the edge slow down as the depth
    effect grows. With no depth effect every star moves at the base speed.
    """
    return (1.0
            + depth_effect * (1.0 - dist_from_center) * PARALLAX_CENTER_GAIN
            - depth_effect * PARALLAX_EDGE_DRAG)


@jit(nopython=True)
def _advance_depths_numba(positions, depths, prev_depths, speed, depth_effect, width, min_depth):
    """
    Numba-jitted per-star depth update.

    Records the previous depth, moves each star toward the viewer and flags
    the ones that reached it. Returns a boolean mask of expired stars.
    """
    count = depths.shape[0]
    expired = np.zeros(count, dtype=np.bool_)
    half_width = width / 2.0

    for i in range(count):
        prev_depths[i] = depths[i]

        if half_width > 0.0:
            offset = np.sqrt(positions[i, 0] ** 2 + positions[i, 1] ** 2)
            dist_from_center = min(1.0, offset / half_width)
        else:
            dist_from_center = 1.0

        depths[i] -= speed * parallax_multiplier(dist_from_center, depth_effect)

        if depths[i] < min_depth:
            expired[i] = True
        elif depths[i] > width:
            # The viewport shrank since the star spawned.
            depths[i] = width
    return expired


def depth_effect(depth: float) -> float:
    """Maps the depth setting (1-10) to a parallax strength in [0, 1]."""
    low, high = DEPTH_RANGE
    return min(1.0, max(0.0, (depth - low) / (high - low)))


def standard_normal(rng: Any, n: int) -> np.ndarray:
    """
    Draws n standard normal samples with the Box-Muller transform.

    u1 is taken from (0, 1] so the logarithm is always defined.
    """
    u1 = 1.0 - np.asarray(rng.random(n), dtype=np.float64)
    u2 = np.asarray(rng.random(n), dtype=np.float64)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def gaussian_lateral(rng: Any, n: int, width: int, height: int) -> np.ndarray:
    """
    Samples n lateral offsets centered on the viewing axis.

    Returns an (n, 2) array; x has standard deviation width/6 and y has
    height/6, so nearly all stars land within half a screen of the center.
    """
    lateral = np.empty((n, 2), dtype=np.float64)
    lateral[:, 0] = standard_normal(rng, n) * width * LATERAL_SIGMA_RATIO
    lateral[:, 1] = standard_normal(rng, n) * height * LATERAL_SIGMA_RATIO
    return lateral


class ParticleSystem:
    """
    A container for all stars, managing their state via NumPy arrays.
    """
    def __init__(self, count: int, width: int, height: int,
                 rng: Optional[Any] = None, seed: Optional[int] = None):
        """
        Initializes the particle system.

        Args:
            count (int): The initial number of stars.
            width (int): The width of the viewport.
            height (int): The height of the viewport.
            rng: Random source with a `random(size)` method. Created from
                `seed` when omitted.
            seed (Optional[int]): Seed for the default random source.
        """
        # All randomness flows through a single source so runs can be replayed.
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.initialize(count, width, height)

    @property
    def count(self) -> int:
        return self.depths.shape[0]

    def __len__(self) -> int:
        return self.count

    def initialize(self, count: int, width: int, height: int) -> None:
        """Discards all stars and spawns `count` fresh ones."""
        count = max(0, int(count))
        self.width = width
        self.height = height
        self.positions, self.depths = self._spawn(count, width, height)
        # Matching depths means no trail is drawn from the spawn point.
        self.prev_depths = self.depths.copy()
        self.just_respawned = np.zeros(count, dtype=np.bool_)

        # An empty placeholder collection is not worth an INFO line.
        log = logging.info if count else logging.debug
        log(f"ParticleSystem initialized with {count} stars ({width}x{height}).")
        logging.debug(
            f"Star data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Depths shape: {self.depths.shape}"
        )

    def _spawn(self, count: int, width: int, height: int):
        positions = gaussian_lateral(self.rng, count, width, height)
        # Uniform over (0, width].
        depths = width * (1.0 - np.asarray(self.rng.random(count), dtype=np.float64))
        return positions, depths

    def set_particle_count(self, n: int) -> None:
        """
        Grows or shrinks the collection to `n` stars.

        Surviving stars keep their state. New stars are appended using the
        viewport size from the last update; removed stars are discarded.
        """
        n = max(0, int(n))
        current = self.count
        if n == current:
            return

        if n > current:
            added = n - current
            positions, depths = self._spawn(added, self.width, self.height)
            self.positions = np.concatenate([self.positions, positions])
            self.depths = np.concatenate([self.depths, depths])
            self.prev_depths = np.concatenate([self.prev_depths, depths])
            self.just_respawned = np.concatenate(
                [self.just_respawned, np.zeros(added, dtype=np.bool_)]
            )
        else:
            self.positions = self.positions[:n].copy()
            self.depths = self.depths[:n].copy()
            self.prev_depths = self.prev_depths[:n].copy()
            self.just_respawned = self.just_respawned[:n].copy()

        logging.info(f"Star count changed from {current} to {n}.")

    def respawn(self, indices: Iterable[int], width: int, height: int) -> None:
        """Sends the given stars back to the far plane at new lateral positions."""
        indices = np.asarray(indices, dtype=np.int64)
        if indices.size == 0:
            return
        self.positions[indices] = gaussian_lateral(self.rng, indices.size, width, height)
        self.depths[indices] = width
        self.prev_depths[indices] = width
        self.just_respawned[indices] = True

    def update(self, speed: float, depth: float, width: int, height: int) -> int:
        """
        Advances every star by one frame.

        Args:
            speed (float): Base depth decrease per frame.
            depth (float): Parallax setting in [1, 10].
            width (int): Current viewport width (the far plane).
            height (int): Current viewport height.

        Returns:
            int: The number of stars respawned during this call.
        """
        self.width = width
        self.height = height
        expired = _advance_depths_numba(
            self.positions, self.depths, self.prev_depths,
            float(speed), depth_effect(depth), float(width), MIN_DEPTH
        )
        expired_indices = np.flatnonzero(expired)
        self.respawn(expired_indices, width, height)
        return int(expired_indices.size)
