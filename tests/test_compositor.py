"""
Test Suite: Frame Compositor
============================
Unit tests for color parsing, the trail fade and per-star drawing.

Tests:
- Hex color parsing and white fallback
- Fade alpha curve
- Projection, size and brightness of drawn stars
- Trail suppression and non-finite guards
"""

import logging

import numpy as np
import pytest

from compositor import FrameCompositor, fade_alpha, parse_hex_color
from config import StarfieldConfig, Viewport
from particle import ParticleSystem


def make_system(positions, depths, width=800, height=600):
    system = ParticleSystem(0, width, height, seed=0)
    system.positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
    system.depths = np.array(depths, dtype=np.float64)
    system.prev_depths = system.depths.copy()
    system.just_respawned = np.zeros(len(depths), dtype=np.bool_)
    return system


@pytest.fixture
def compositor(canvas):
    return FrameCompositor(canvas)


@pytest.fixture
def viewport():
    return Viewport(800, 600)


class TestParseHexColor:
    """Tests for star color parsing"""

    @pytest.mark.parametrize("text, expected", [
        ("#ffffff", (255, 255, 255)),
        ("#000000", (0, 0, 0)),
        ("#1a2B3c", (26, 43, 60)),
        ("ff8000", (255, 128, 0)),
        ("#9BB0FF", (155, 176, 255)),
    ])
    def test_valid_colors(self, text, expected):
        assert parse_hex_color(text) == expected

    @pytest.mark.parametrize("text", ["notacolor", "#12", "", "#12345g", "#1234567", "# 123456", None])
    def test_invalid_colors_fall_back_to_white(self, text):
        assert parse_hex_color(text) == (255, 255, 255)

    def test_channels_match_hex_pairs(self):
        rng = np.random.default_rng(7)
        for r, g, b in rng.integers(0, 256, size=(50, 3)):
            assert parse_hex_color(f"#{r:02x}{g:02x}{b:02x}") == (r, g, b)


class TestFadeAlpha:
    """Tests for the trail persistence curve"""

    def test_no_trail_clears_fully(self):
        assert fade_alpha(0.0) == 1.0

    def test_linear_slope(self):
        assert fade_alpha(1.0) == pytest.approx(0.5)
        assert fade_alpha(0.5) == pytest.approx(0.75)

    def test_floor_at_maximum_trail(self):
        assert fade_alpha(2.0) == pytest.approx(0.05)

    def test_stays_in_unit_interval(self):
        values = [fade_alpha(t) for t in np.linspace(-1, 5, 61)]
        assert all(0 < v <= 1 for v in values)
        assert all(a >= b for a, b in zip(values, values[1:]))


class TestComposite:
    """Tests for a full fade + update + draw pass"""

    def test_fade_runs_before_drawing(self, canvas, compositor, viewport):
        system = ParticleSystem(20, 800, 600, seed=1)
        compositor.composite(system, StarfieldConfig(trail_length=1.0), viewport)

        assert canvas.calls[0] == ("rect", (0, 0, 800, 600), (0, 0, 0), pytest.approx(0.5))
        assert len(canvas.of("rect")) == 1

    def test_projection_size_and_color(self, canvas, compositor, viewport):
        """x=100, y=50 moving from z=400 to z=300"""
        system = make_system([[100, 50]], [400])
        config = StarfieldConfig(speed=100, depth=1, star_size=2, trail_length=0.5)

        drawn = compositor.composite(system, config, viewport)

        assert drawn == 1
        (_, start, end, line_color, line_width), = canvas.of("line")
        (_, center, radius, color), = canvas.of("circle")

        assert center == pytest.approx((100 / 300 * 800 + 400, 50 / 300 * 600 + 300))
        assert start == pytest.approx((600.0, 375.0))
        assert end == center
        # size = (1 - 300/800) * 2 * 3
        assert line_width == pytest.approx(3.75)
        assert radius == pytest.approx(1.875)
        # brightness 0.625 of white, floored
        assert color == (159, 159, 159)
        assert line_color == color

    def test_color_scaled_per_channel(self, canvas, compositor, viewport):
        system = make_system([[0, 0]], [500])
        config = StarfieldConfig(speed=100, depth=1, star_color="#ff8040")
        compositor.composite(system, config, viewport)

        (_, _, _, color), = canvas.of("circle")
        # brightness 0.5
        assert color == (127, 64, 32)

    def test_closer_stars_are_bigger_and_brighter(self, canvas, compositor, viewport):
        system = make_system([[10, 10], [10, 10], [10, 10]], [700, 400, 100])
        compositor.composite(system, StarfieldConfig(speed=1, depth=1), viewport)

        circles = canvas.of("circle")
        radii = [c[2] for c in circles]
        reds = [c[3][0] for c in circles]
        assert radii[0] < radii[1] < radii[2]
        assert reds[0] < reds[1] < reds[2]

    def test_no_trail_scenario(self, canvas, compositor, viewport):
        system = ParticleSystem(50, 800, 600, seed=2)
        compositor.composite(system, StarfieldConfig(trail_length=0), viewport)

        assert canvas.calls[0][3] == 1.0
        assert canvas.of("line") == []
        assert len(canvas.of("circle")) == 50

    def test_respawned_star_draws_no_trail(self, canvas, compositor, viewport):
        system = make_system([[0, 0], [50, 50]], [400, 3])
        compositor.composite(system, StarfieldConfig(speed=10, depth=1, trail_length=1), viewport)

        # Only the surviving star has a trail
        assert len(canvas.of("line")) == 1
        assert len(canvas.of("circle")) == 2
        assert not system.just_respawned.any()

    def test_trail_returns_on_following_frame(self, canvas, compositor, viewport):
        system = make_system([[50, 50]], [3])
        config = StarfieldConfig(speed=10, depth=1, trail_length=1)
        compositor.composite(system, config, viewport)
        assert canvas.of("line") == []

        compositor.composite(system, config, viewport)
        assert len(canvas.of("line")) == 1

    def test_zero_viewport_draws_nothing(self, canvas, compositor):
        system = ParticleSystem(30, 800, 600, seed=4)
        drawn = compositor.composite(system, StarfieldConfig(), Viewport(0, 0))

        assert drawn == 0
        assert canvas.of("circle") == []
        assert canvas.of("line") == []
        assert len(canvas.of("rect")) == 1

    def test_malformed_color_renders_white(self, canvas, compositor, viewport, caplog):
        system = make_system([[0, 0]], [500])
        with caplog.at_level(logging.WARNING):
            compositor.composite(system, StarfieldConfig(speed=100, depth=1, star_color="bogus"), viewport)

        (_, _, _, color), = canvas.of("circle")
        assert color == (127, 127, 127)
        assert "bogus" in caplog.text

    def test_invalid_color_warns_once_per_change(self, canvas, compositor, viewport, caplog):
        system = ParticleSystem(5, 800, 600, seed=8)
        with caplog.at_level(logging.WARNING):
            for _ in range(3):
                compositor.composite(system, StarfieldConfig(star_color="#12"), viewport)
            compositor.composite(system, StarfieldConfig(star_color="#00ff00"), viewport)

        warnings = [r for r in caplog.records if "Invalid star color" in r.getMessage()]
        assert len(warnings) == 1

    def test_clear_is_opaque_black(self, canvas, compositor, viewport):
        compositor.clear(viewport)
        assert canvas.calls == [("rect", (0, 0, 800, 600), (0, 0, 0), 1.0)]
