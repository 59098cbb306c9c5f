#!/usr/bin/env python3
"""
Self-contained Visual Star Search Feature Module

Port of vim-visual-star-search (https://github.com/bronson/vim-visual-star-search).
In visual mode, ``*`` searches forward for the selected text and ``#``
searches backward, then the editor goes back to normal mode.

The selection is turned into a ``\\V`` verbatim pattern by pattern_feature,
handed to an injected search service together with a repeat count, and the
search service remembers it as the last search so ``n``/``N`` repeat it.

Usage:
    from visualstar.keymap_feature import KeyMap
    from visualstar.search_feature import VerbatimSearchEngine
    from visualstar.visual_star_feature import install_visual_star_feature

    keymap = KeyMap()
    engine = VerbatimSearchEngine()
    install_visual_star_feature(keymap, engine)
    keymap.dispatch("x", "*", buffer)
"""

import logging
from typing import Any, Callable, NamedTuple, Optional, Protocol

from .keymap_feature import KeyMap, VISUAL_MODE
from .pattern_feature import Direction, build_pattern
from .selection_feature import VisualModeController
from .settings import VisualStarSettings


logger = logging.getLogger(__name__)

FEATURE_NAME = "VisualStarSearch"

PLUG_SEARCH_FORWARD = "<Plug>VisualStarSearchForward"
PLUG_SEARCH_REVERSED = "<Plug>VisualStarSearchReversed"

# Reverse searches start from the cursor inside the selected occurrence, so
# the first step lands on that occurrence itself.
SEARCH_COUNTS = {
    Direction.FORWARD: 1,
    Direction.REVERSE: 2,
}


# ============================================================
#   PROTOCOL DEFINITIONS
# ============================================================

class SelectionSource(Protocol):
    """Protocol for the editor handle the selection is read from"""

    def get_selected_text(self) -> Optional[str]:
        """Return the selected characters, or None without a selection"""
        ...


class SearchService(Protocol):
    """Protocol for the search engine that owns the last search"""

    last_search: Optional[str]

    def search(self, editor: Any, pattern: str, count: int,
               direction: Direction, move_cursor: bool) -> Any:
        """Search, highlight matches and remember pattern as last search"""
        ...


class ModeController(Protocol):
    """Protocol for leaving visual mode"""

    def exit_visual_mode(self, editor: Any) -> None:
        ...


# ============================================================
#   SEARCH PLANNING
# ============================================================

class SearchRequest(NamedTuple):
    """What a visual star action asks the search service to do"""
    pattern: str
    count: int
    direction: Direction


def search_count(direction: Direction) -> int:
    return SEARCH_COUNTS[direction]


def plan_search(selected_text: Optional[str], direction: Direction) -> Optional[SearchRequest]:
    """
    Work out the search for a selection without touching the editor.

    Returns:
        The SearchRequest to dispatch, or None when nothing is selected
    """
    if not selected_text:
        return None
    return SearchRequest(build_pattern(selected_text, direction),
                         search_count(direction),
                         direction)


# ============================================================
#   SEARCH INVOKER
# ============================================================

class VisualStarSearch:
    """Runs a visual star search against an editor handle"""

    def __init__(self, search_engine: SearchService,
                 mode_controller: Optional[ModeController] = None,
                 log_last_search: bool = True,
                 log_level: int = logging.DEBUG):
        """
        Args:
            search_engine: Search service that owns the last search state
            mode_controller: Used to leave visual mode after searching
            log_last_search: Log the engine's last search after each action
            log_level: Level the last search is logged at
        """
        self.search_engine = search_engine
        self.mode_controller = mode_controller or VisualModeController()
        self.log_last_search = log_last_search
        self.log_level = log_level

    def invoke(self, editor: SelectionSource, direction: Direction) -> Optional[SearchRequest]:
        """
        Search for the selection of editor in direction.

        Without a selection nothing else is called. Errors raised by the
        search service propagate unchanged, before the mode is touched.

        Returns:
            The SearchRequest dispatched, or None without a selection
        """
        request = plan_search(editor.get_selected_text(), direction)
        if request is None:
            return None

        self.search_engine.search(editor, request.pattern, request.count,
                                  request.direction, True)
        self.mode_controller.exit_visual_mode(editor)

        if self.log_last_search:
            self._log_last_search(request.direction)
        return request

    def _log_last_search(self, direction: Direction) -> None:
        try:
            logger.log(self.log_level, "Last search: '%s' (%s)",
                       self.search_engine.last_search, direction.delimiter)
        except Exception:
            logger.warning("Could not read back the last search", exc_info=True)

    def search_forward(self, editor: SelectionSource) -> Optional[SearchRequest]:
        return self.invoke(editor, Direction.FORWARD)

    def search_reverse(self, editor: SelectionSource) -> Optional[SearchRequest]:
        return self.invoke(editor, Direction.REVERSE)

    def handler(self, direction: Direction) -> Callable[[SelectionSource], Optional[SearchRequest]]:
        """Return the key map handler for direction"""
        if direction is Direction.FORWARD:
            return self.search_forward
        return self.search_reverse


# ============================================================
#   INSTALLATION / INTEGRATION
# ============================================================

def has_visual_star_support() -> bool:
    """Check if all dependencies are available for visual star search"""
    # This module has no external dependencies beyond Python stdlib
    return True


def install_visual_star_feature(keymap: KeyMap, search_engine: SearchService,
                                mode_controller: Optional[ModeController] = None,
                                settings: Optional[VisualStarSettings] = None) -> VisualStarSearch:
    """
    Register the visual star actions in a key map.

    Both actions are bound to their <Plug> names in visual mode. The default
    keys are mapped onto them unless the user already mapped some key to the
    same <Plug> name, or default mappings are turned off in settings.

    Args:
        keymap: Mapping table to register into
        search_engine: Search service the actions call
        mode_controller: Used to leave visual mode, VisualModeController if None
        settings: Mapping settings, defaults if None

    Returns:
        The VisualStarSearch the handlers are bound to
    """
    settings = settings or VisualStarSettings()
    star = VisualStarSearch(search_engine, mode_controller,
                            log_last_search=settings.mappings.log_last_search)

    keymap.put_handler_mapping(VISUAL_MODE, PLUG_SEARCH_FORWARD,
                               star.search_forward, owner=FEATURE_NAME)
    keymap.put_handler_mapping(VISUAL_MODE, PLUG_SEARCH_REVERSED,
                               star.search_reverse, owner=FEATURE_NAME)

    if settings.mappings.use_default_mappings:
        defaults = (
            (settings.mappings.forward_keys, PLUG_SEARCH_FORWARD),
            (settings.mappings.reverse_keys, PLUG_SEARCH_REVERSED),
        )
        for keys, plug in defaults:
            if keymap.has_mapping_to(VISUAL_MODE, plug):
                logger.debug("%s already mapped, keeping user mapping", plug)
                continue
            keymap.put_key_mapping(VISUAL_MODE, keys, plug,
                                   recursive=True, owner=FEATURE_NAME)

    print(f"✓ {FEATURE_NAME} feature installed successfully")
    return star


__version__ = "1.0.0"
__all__ = [
    'FEATURE_NAME',
    'PLUG_SEARCH_FORWARD',
    'PLUG_SEARCH_REVERSED',
    'SEARCH_COUNTS',
    'SearchRequest',
    'SelectionSource',
    'SearchService',
    'ModeController',
    'VisualStarSearch',
    'plan_search',
    'search_count',
    'install_visual_star_feature',
    'has_visual_star_support',
]
