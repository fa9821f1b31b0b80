# Configuration for ARW preview extractor
"""Configuration constants and config.ini management."""

import configparser
from pathlib import Path
from typing import Optional


# Reverse engineered from Sony a1 files on firmware 1.31. Not stable across
# models or firmware; the real location lives in the TIFF IFDs.
OFFSET_POSITION = 0x21c18
LENGTH_POSITION = 0x21c24

RAW_SUFFIX = '.ARW'
OUTPUT_EXTENSION = '.jpg'

ON_ERROR_CHOICES = ('halt', 'continue')

# Default config values
DEFAULTS = {
    'layout': {
        'offset_position': hex(OFFSET_POSITION),
        'length_position': hex(LENGTH_POSITION),
    },
    'scan': {
        'suffix': RAW_SUFFIX,
    },
    'output': {
        'extension': OUTPUT_EXTENSION,
    },
    'batch': {
        'on_error': 'halt',
    },
    'progress': {
        'show_progress': 'true',
    },
}

# Configuration parameter descriptions for the ini file
COMMENTS = {
    'offset_position': '# Absolute file offset of the u32 (little-endian) holding the preview start.',
    'length_position': '# Absolute file offset of the u32 (little-endian) holding the preview length.',
    'suffix': '# Case-sensitive filename suffix of the raw files to process.',
    'on_error': '# halt = stop at the first failed file, continue = process every file and report failures.',
}

# Config file path
CONFIG_FILE = Path('config.ini')


def get_default_config() -> configparser.ConfigParser:
    """Create a ConfigParser with default values."""
    config = configparser.ConfigParser()
    for section, values in DEFAULTS.items():
        config[section] = values
    return config


def create_config_file(path: Path = CONFIG_FILE) -> None:
    """Create config.ini with default values and descriptive comments."""
    with open(path, 'w') as f:
        for section, values in DEFAULTS.items():
            f.write(f"[{section}]\n")
            for key, val in values.items():
                if key in COMMENTS:
                    f.write(f"{COMMENTS[key]}\n")
                f.write(f"{key} = {val}\n\n" if key in COMMENTS else f"{key} = {val}\n")
            f.write("\n")


def load_config(path: Path = CONFIG_FILE, required: bool = False) -> configparser.ConfigParser:
    """
    Load config from file, falling back to defaults.

    A missing file is only an error when `required` is set (an explicit path).
    """
    config = get_default_config()
    if required and not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")
    if path.exists():
        config.read(path)
    return config


class Config:
    """Configuration wrapper with typed access."""

    def __init__(self, config_path: Optional[Path] = None):
        self._config = load_config(config_path or CONFIG_FILE, required=config_path is not None)

    def _getint(self, section: str, key: str) -> int:
        # Accepts 0x-prefixed values
        raw = self._config.get(section, key)
        try:
            value = int(raw, 0)
        except ValueError:
            raise ValueError(f"Invalid {key} value {raw!r}, expected an integer") from None
        if value < 0:
            raise ValueError(f"Invalid {key} value {raw!r}, must not be negative")
        return value

    @property
    def offset_position(self) -> int:
        return self._getint('layout', 'offset_position')

    @property
    def length_position(self) -> int:
        return self._getint('layout', 'length_position')

    @property
    def suffix(self) -> str:
        return self._config.get('scan', 'suffix')

    @property
    def extension(self) -> str:
        return self._config.get('output', 'extension')

    @property
    def on_error(self) -> str:
        value = self._config.get('batch', 'on_error').strip().lower()
        if value not in ON_ERROR_CHOICES:
            raise ValueError(
                f"Invalid on_error value {value!r}, expected one of {', '.join(ON_ERROR_CHOICES)}"
            )
        return value

    @property
    def show_progress(self) -> bool:
        return self._config.getboolean('progress', 'show_progress')

    def validate(self) -> None:
        """
        Read every setting once so bad values fail before any file is touched.

        Raises:
            ValueError: on a malformed or empty value
        """
        self.offset_position
        self.length_position
        self.on_error
        self.show_progress
        if not self.suffix:
            raise ValueError("Invalid suffix value '', must not be empty")
        if not self.extension:
            raise ValueError("Invalid extension value '', must not be empty")


# Global config instance (lazy loaded)
_config: Optional[Config] = None


def get_config(config_path: Optional[Path] = None) -> Config:
    """
    Get the global config instance.

    Passing a path replaces the global instance with one read from that file.
    """
    global _config
    if _config is None or config_path is not None:
        _config = Config(config_path)
    return _config


def reset_config() -> None:
    """Drop the global config instance so the next get_config() reloads it."""
    global _config
    _config = None
