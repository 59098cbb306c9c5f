"""
Visual star search feature modules.

In visual mode ``*`` and ``#`` search forward and backward for the selected
text, taken literally.
"""

from .errors import VisualStarError, PatternError, KeyMapError, SettingsError
from .pattern_feature import Direction, build_pattern
from .search_feature import VerbatimSearchEngine
from .selection_feature import TextBuffer, VisualModeController
from .keymap_feature import KeyMap, VISUAL_MODE
from .settings import VisualStarSettings, load_settings, save_settings
from .visual_star_feature import (
    VisualStarSearch,
    SearchRequest,
    plan_search,
    install_visual_star_feature,
    __version__,
)

__all__ = [
    'VisualStarError',
    'PatternError',
    'KeyMapError',
    'SettingsError',
    'Direction',
    'build_pattern',
    'VerbatimSearchEngine',
    'TextBuffer',
    'VisualModeController',
    'KeyMap',
    'VISUAL_MODE',
    'VisualStarSettings',
    'load_settings',
    'save_settings',
    'VisualStarSearch',
    'SearchRequest',
    'plan_search',
    'install_visual_star_feature',
]
