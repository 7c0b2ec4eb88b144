# config.py
"""
User-tunable starfield configuration and the viewport it is rendered into.

The Driver owns and mutates these values between frames; the core only reads
them, receiving a fresh reference on every render call.
"""
import logging
from dataclasses import dataclass, fields, replace
from typing import Dict, Any, Tuple
from constants import (
    DEFAULT_STAR_COUNT, DEFAULT_SPEED, DEFAULT_STAR_SIZE, DEFAULT_TRAIL_LENGTH,
    DEFAULT_DEPTH, DEFAULT_STAR_COLOR, STAR_COUNT_RANGE, SPEED_RANGE,
    STAR_SIZE_RANGE, TRAIL_LENGTH_RANGE, DEPTH_RANGE
)

# --- Data Contracts ---
#
# class StarfieldConfig:
#   - star_count: int >= 0, number of live particles.
#   - speed: float > 0, base depth decrease per frame.
#   - star_size: float > 0, head diameter scale.
#   - trail_length: float in [0, 2], trail persistence (0 disables trails).
#   - depth: float in [1, 10], parallax strength (1 disables parallax).
#   - star_color: str, "#RRGGBB" or "RRGGBB". Malformed values render white.
#
# class Viewport:
#   - width, height: int, current drawing surface size. May be 0 while hidden.

_RANGES = {
    "star_count": STAR_COUNT_RANGE,
    "speed": SPEED_RANGE,
    "star_size": STAR_SIZE_RANGE,
    "trail_length": TRAIL_LENGTH_RANGE,
    "depth": DEPTH_RANGE,
}


@dataclass
class StarfieldConfig:
    """
    The parameters a user can tune while the starfield is running.
    """
    star_count: int = DEFAULT_STAR_COUNT
    speed: float = DEFAULT_SPEED
    star_size: float = DEFAULT_STAR_SIZE
    trail_length: float = DEFAULT_TRAIL_LENGTH
    depth: float = DEFAULT_DEPTH
    star_color: str = DEFAULT_STAR_COLOR

    @classmethod
    def defaults(cls) -> "StarfieldConfig":
        """Returns the factory reset configuration."""
        return cls()

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "StarfieldConfig":
        """
        Builds a configuration from the "starfield" section of config.json.

        Missing keys keep their defaults. Unknown keys are ignored with a warning.

        Raises:
            ValueError: If a numeric parameter cannot be converted.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            logging.warning(f"Ignoring unknown starfield parameters: {unknown}")

        config = cls()
        try:
            for key in known & set(params):
                default = getattr(config, key)
                value = params[key]
                if key == "star_color":
                    value = str(value)
                elif isinstance(default, int):
                    value = int(value)
                else:
                    value = float(value)
                setattr(config, key, value)
        except (TypeError, ValueError) as e:
            msg = f"Configuration error: invalid starfield parameter value ({e})."
            logging.critical(msg)
            raise ValueError(msg) from e

        logging.debug(f"Starfield configuration loaded: {config}")
        return config

    def adjusted(self, **changes: Any) -> "StarfieldConfig":
        """
        Returns a copy with the given changes applied, each numeric value
        clamped to its slider range.
        """
        for key, value in changes.items():
            if key in _RANGES:
                low, high = _RANGES[key]
                changes[key] = type(low)(min(max(value, low), high))
        return replace(self, **changes)


@dataclass
class Viewport:
    """The current size of the drawing surface."""
    width: int
    height: int

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2, self.height / 2
