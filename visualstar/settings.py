"""
Visual star search settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

from .errors import SettingsError


logger = logging.getLogger(__name__)


@dataclass
class SearchSettings:
    """Settings for the verbatim search engine."""
    hlsearch: bool = True
    wrapscan: bool = True
    ignore_case: bool = False


@dataclass
class MappingSettings:
    """Settings for the visual mode key mappings."""
    use_default_mappings: bool = True
    forward_keys: str = "*"
    reverse_keys: str = "#"
    log_last_search: bool = True


@dataclass
class VisualStarSettings:
    """Main settings container."""
    search: SearchSettings = field(default_factory=SearchSettings)
    mappings: MappingSettings = field(default_factory=MappingSettings)

    def to_dict(self) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'VisualStarSettings':
        """
        Build settings from a dictionary, ignoring unknown keys.

        Raises:
            SettingsError: a known key holds a value of the wrong type
        """
        def pick(section_class: type, section: Any) -> Any:
            if not isinstance(section, dict):
                return section_class()
            defaults = section_class()
            values = {}
            for name in section_class.__dataclass_fields__:
                if name not in section:
                    continue
                value = section[name]
                expected = type(getattr(defaults, name))
                # bool is an int subclass, so compare exact types
                if type(value) is not expected:
                    raise SettingsError(
                        f"Setting {section_class.__name__}.{name} must be "
                        f"{expected.__name__}, got {value!r}")
                values[name] = value
            return section_class(**values)

        return cls(
            search=pick(SearchSettings, data.get('search', {})),
            mappings=pick(MappingSettings, data.get('mappings', {})),
        )


def default_settings_path() -> Path:
    """Get the default settings file path."""
    if os.name == 'nt':
        app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
        return Path(app_data) / 'VisualStar' / 'settings.json'
    config_home = os.environ.get('XDG_CONFIG_HOME',
                                 os.path.expanduser('~/.config'))
    return Path(config_home) / 'visualstar' / 'settings.json'


def load_settings(path: Optional[Path] = None) -> VisualStarSettings:
    """
    Load settings from disk.

    A missing file yields the defaults. A file that exists but is not a JSON
    object raises SettingsError.
    """
    path = Path(path) if path is not None else default_settings_path()
    if not path.exists():
        logger.debug("No settings file at %s, using defaults", path)
        return VisualStarSettings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise SettingsError(f"Cannot read settings from {path}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} does not hold a JSON object")
    return VisualStarSettings.from_dict(data)


def save_settings(settings: VisualStarSettings, path: Optional[Path] = None) -> Path:
    """Save settings to disk and return the path written."""
    path = Path(path) if path is not None else default_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(settings.to_dict(), f, indent=2)
    logger.debug("Saved settings to %s", path)
    return path


__all__ = [
    'SearchSettings',
    'MappingSettings',
    'VisualStarSettings',
    'default_settings_path',
    'load_settings',
    'save_settings',
]
