import os
import sys
from pathlib import Path

import pytest

# Headless pygame for canvas tests.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

# Make the application modules importable without installing.
sys.path.insert(0, str(Path(__file__).parent.parent))


class RecordingCanvas:
    """Canvas that records every draw call in order."""

    def __init__(self):
        self.calls = []

    def fill_rect(self, rect, color, alpha):
        self.calls.append(("rect", rect, color, alpha))

    def stroke_line(self, start, end, color, width):
        self.calls.append(("line", start, end, color, width))

    def fill_circle(self, center, radius, color):
        self.calls.append(("circle", center, radius, color))

    def of(self, kind):
        return [call for call in self.calls if call[0] == kind]


@pytest.fixture
def make_canvas():
    """Factory for recording canvases, for tests that need more than one."""
    return RecordingCanvas


@pytest.fixture
def canvas(make_canvas):
    return make_canvas()
