# utils.py
"""
Application settings and logging setup.

config.json is read once at startup into an AppSettings value: the starfield
tunables as a StarfieldConfig, the run control and window options with their
defaults filled in, and the logging section used by setup_logging.
"""
import logging
import logging.handlers
import json
import os
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from config import StarfieldConfig
from constants import FULLSCREEN, WINDOW_WIDTH, WINDOW_HEIGHT

# --- Data Contracts ---
#
# load_settings(path: str) -> AppSettings:
#   - Inputs: path to a JSON file with optional "seed", "starfield",
#     "run_control", "visualization" and "logging" sections.
#   - Outputs: AppSettings with every section validated and defaulted.
#   - Raises: FileNotFoundError, json.JSONDecodeError (logged first),
#     ValueError for values of the wrong type or sign.
#
# setup_logging(log_config: Dict[str, Any]) -> None:
#   - Inputs: the "logging" section ("level", "format", "log_file").
#     An empty "log_file" logs to the console only.
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and, optionally, a rotating file handler.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/starfield.log'


@dataclass
class RunControl:
    """How long the frame loop runs and what it reports."""
    max_frames: int = 0  # 0 runs until the user quits
    log_throttle_frames: int = 600
    profile: bool = False


@dataclass
class WindowOptions:
    """Initial window state for the Visualizer."""
    fullscreen: bool = FULLSCREEN
    window_width: int = WINDOW_WIDTH
    window_height: int = WINDOW_HEIGHT
    show_controls: bool = True


@dataclass
class AppSettings:
    starfield: StarfieldConfig = field(default_factory=StarfieldConfig)
    seed: Optional[int] = None
    run_control: RunControl = field(default_factory=RunControl)
    window: WindowOptions = field(default_factory=WindowOptions)
    logging: Dict[str, Any] = field(default_factory=dict)


def _config_error(msg: str) -> ValueError:
    logging.critical(msg)
    return ValueError(msg)


def _read_section(document: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = document.get(name) or {}
    if not isinstance(section, dict):
        raise _config_error(f"Configuration error: section '{name}' must be an object.")
    return section


def _non_negative_int(section: Dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise _config_error(f"Configuration error: '{key}' must be a non-negative integer, got {value!r}.")
    return value


def _parse_run_control(section: Dict[str, Any]) -> RunControl:
    defaults = RunControl()
    return RunControl(
        max_frames=_non_negative_int(section, 'max_frames', defaults.max_frames),
        # A zero throttle would divide by zero in the frame loop.
        log_throttle_frames=max(1, _non_negative_int(
            section, 'log_throttle_frames', defaults.log_throttle_frames)),
        profile=bool(section.get('profile', defaults.profile)),
    )


def _parse_window(section: Dict[str, Any]) -> WindowOptions:
    defaults = WindowOptions()
    width = _non_negative_int(section, 'window_width', defaults.window_width)
    height = _non_negative_int(section, 'window_height', defaults.window_height)
    if width == 0 or height == 0:
        raise _config_error(f"Configuration error: window size {width}x{height} must be positive.")
    return WindowOptions(
        fullscreen=bool(section.get('fullscreen', defaults.fullscreen)),
        window_width=width,
        window_height=height,
        show_controls=bool(section.get('show_controls', defaults.show_controls)),
    )


def load_settings(path: str) -> AppSettings:
    """Loads and validates the JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            document = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(document, dict):
        raise _config_error(f"Configuration error: {path} must contain a JSON object.")

    seed = document.get('seed')
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise _config_error(f"Configuration error: 'seed' must be an integer or null, got {seed!r}.")

    settings = AppSettings(
        starfield=StarfieldConfig.from_dict(_read_section(document, 'starfield')),
        seed=seed,
        run_control=_parse_run_control(_read_section(document, 'run_control')),
        window=_parse_window(_read_section(document, 'visualization')),
        logging=_read_section(document, 'logging'),
    )
    logging.info("Configuration loaded successfully.")
    return settings


def setup_logging(log_config: Dict[str, Any]) -> None:
    """
    Configures the root logger from the "logging" section of the settings.
    """
    log_level = log_config.get('level', 'INFO').upper()
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_config.get('format', DEFAULT_LOG_FORMAT))
    handlers = [logging.StreamHandler()]

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # 1MB per file, 5 backups.
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level {log_level}, log file: {log_file_path or '(console only)'}")
