# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They cover the
framework (window, frame rate, overlay styling) and the tuned constants of
the starfield motion model. The user-tunable parameters live in config.json.
"""

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a resizable window (WINDOW_WIDTH x WINDOW_HEIGHT).
FULLSCREEN = False
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)  # Black
WINDOW_TITLE = "Starfield"

# --- Default Starfield Parameters ---
# Factory reset values for the user-tunable configuration.
DEFAULT_STAR_COUNT = 300
DEFAULT_SPEED = 5.0
DEFAULT_STAR_SIZE = 2.0
DEFAULT_TRAIL_LENGTH = 0.5
DEFAULT_DEPTH = 5.0
DEFAULT_STAR_COLOR = "#ffffff"

# Slider ranges (min, max) for each tunable parameter.
STAR_COUNT_RANGE = (0, 2000)
SPEED_RANGE = (1.0, 50.0)
STAR_SIZE_RANGE = (0.5, 10.0)
TRAIL_LENGTH_RANGE = (0.0, 2.0)
DEPTH_RANGE = (1.0, 10.0)

# --- Motion Model ---
# A particle closer than this depth has reached the viewer and respawns.
MIN_DEPTH = 1.0
# Standard deviation of the lateral spawn distribution as a fraction of the
# viewport dimension. 1/6 puts ~99.7% of stars within half a screen of center.
LATERAL_SIGMA_RATIO = 1.0 / 6.0
# Parallax blend: center stars gain up to CENTER_GAIN, every star loses EDGE_DRAG.
# At full depth effect: center x1.9, edge x0.1.
PARALLAX_CENTER_GAIN = 1.8
PARALLAX_EDGE_DRAG = 0.9

# --- Frame Compositing ---
# Fade alpha lost per unit of trail length.
TRAIL_FADE_SLOPE = 0.5
# The fade never drops below this, so old frames always erase eventually.
MIN_FADE_ALPHA = 0.05
# Head/trail width per unit of star size at zero depth.
STAR_SIZE_SCALE = 3.0
FALLBACK_STAR_COLOR = (255, 255, 255)

# --- Control Overlay ---
OVERLAY_BACKGROUND = (40, 40, 40, 160)
OVERLAY_TEXT_COLOR = (220, 220, 220)
OVERLAY_PADDING = 10

# Keyboard adjustment steps.
STAR_COUNT_STEP = 50
SPEED_STEP = 1.0
STAR_SIZE_STEP = 0.5
TRAIL_LENGTH_STEP = 0.1
DEPTH_STEP = 1.0

# Colors cycled by the color key, as hex strings like the config file uses.
STAR_COLOR_PALETTE = [
    "#ffffff",  # White
    "#9bb0ff",  # Blue-white
    "#ffd2a1",  # Warm yellow
    "#ff6666",  # Red
    "#66ffcc",  # Mint
    "#cc99ff"   # Violet
]
