"""Configuration constants, user settings and logging setup."""

import os
import json
import logging
from dataclasses import dataclass, field, fields, asdict
from typing import Optional, Union, get_args, get_origin


# Configuration constants
CLAUDE_URL = "https://api.anthropic.com/v1/messages"
CLAUDE_MODEL = "claude-3-7-sonnet-latest"
OPENAI_IMAGE_URL = "https://api.openai.com/v1/images/generations"
CONFIG_DIR = os.path.expanduser("~/.config/storytyper")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")
CACHE_DIR = os.path.expanduser("~/.cache/storytyper")
KEY_CACHE = os.path.join(CACHE_DIR, "api_keys.json")
LOG_FILE = os.path.join(CACHE_DIR, "storytyper.log")
DATA_DIR = os.path.expanduser("~/.local/share/storytyper/images")
CACHE_DAYS = 2


class StoryTyperError(Exception):
    """Base class for all storytyper errors."""


class ConfigError(StoryTyperError):
    pass


@dataclass
class Settings:
    model: str = CLAUDE_MODEL
    max_tokens: int = 300
    language: str = "English"
    image_model: str = "dall-e-2"
    image_size: str = "256x256"
    image_prefix: str = "Storybook illustration."
    data_dir: str = DATA_DIR
    characters_per_story: int = 3
    image_retry_limit: Optional[int] = None  # None retries forever
    image_retry_backoff: float = 0.0
    image_retry_backoff_max: float = 30.0
    request_timeout: Optional[float] = 60.0
    wait_image: Optional[str] = None
    characters: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        """Build settings from a parsed config object, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration was ill-formed.")
        known = {f.name: f.type for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        for name, value in values.items():
            if not _accepts(known[name], value):
                raise ConfigError(f"Configuration was ill-formed: {name!r} cannot be {value!r}")
        return cls(**values)

    def to_dict(self):
        return asdict(self)


def _accepts(ftype, value):
    if get_origin(ftype) is Union:
        return any(_accepts(t, value) for t in get_args(ftype))
    if ftype is type(None):
        return value is None
    if isinstance(value, bool):
        return ftype is bool
    if ftype is float:
        return isinstance(value, (int, float))
    return isinstance(value, ftype)


def load_settings(path=None) -> Settings:
    """Read settings from *path* (or the default config file).

    A missing file gives the defaults; anything unreadable or not a JSON
    object raises ConfigError.
    """
    path = path or CONFIG_FILE
    if not os.path.exists(path):
        return Settings()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return Settings.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        raise ConfigError(f"Configuration was ill-formed: {path}") from e


def setup_logging(debug=False, log_file=None):
    """Send log records to a file, since curses owns the terminal."""
    log_file = log_file or LOG_FILE
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s", "%H:%M:%S"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    # Keep HTTP and imaging noise out of the log
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    return handler
