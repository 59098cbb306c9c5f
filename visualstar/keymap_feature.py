#!/usr/bin/env python3
"""
Self-contained Key Mapping Feature Module

Provides a vim-style mapping table. Actions are registered under stable
``<Plug>`` names and keys are mapped onto those names, so users can rebind an
action without touching the code that implements it.

Following the pattern of keyboard_feature.py, the GTK4 glue
(VisualStarKeyHandler) is optional and only needs PyGObject when used.

Usage:
    from visualstar.keymap_feature import KeyMap, VISUAL_MODE

    keymap = KeyMap()
    keymap.put_handler_mapping(VISUAL_MODE, "<Plug>Hello", lambda editor: ...)
    keymap.put_key_mapping(VISUAL_MODE, "*", "<Plug>Hello")
    keymap.dispatch(VISUAL_MODE, "*", editor)
"""

import logging
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

from .errors import KeyMapError

try:
    import gi
    gi.require_version('Gdk', '4.0')
    gi.require_version('Gtk', '4.0')
    from gi.repository import Gdk, Gtk
    GTK_AVAILABLE = True
except (ImportError, ValueError):
    GTK_AVAILABLE = False
    Gdk = None
    Gtk = None


logger = logging.getLogger(__name__)

NORMAL_MODE = "n"
VISUAL_MODE = "x"
INSERT_MODE = "i"
MODES = frozenset((NORMAL_MODE, VISUAL_MODE, INSERT_MODE))

PLUG_PREFIX = "<Plug>"

# Guards against mappings that point at each other
MAX_MAPPING_DEPTH = 1000

Handler = Callable[[Any], Any]


class KeyMapping(NamedTuple):
    """A key sequence mapped onto another key sequence or <Plug> name"""
    keys: str
    target: str
    recursive: bool
    owner: Optional[str]


class HandlerMapping(NamedTuple):
    """A <Plug> name bound to the callable that implements it"""
    plug: str
    handler: Handler
    owner: Optional[str]


def _check(mode: str, keys: str) -> None:
    if mode not in MODES:
        raise KeyMapError(f"Unknown mapping mode: {mode!r}")
    if not keys:
        raise KeyMapError("Cannot map an empty key sequence")


# ============================================================
#   KEY MAP
# ============================================================

class KeyMap:
    """Mapping table from keys to <Plug> names and from <Plug> names to handlers"""

    def __init__(self):
        self._handlers: Dict[Tuple[str, str], HandlerMapping] = {}
        self._mappings: Dict[Tuple[str, str], KeyMapping] = {}

    def put_handler_mapping(self, mode: str, plug: str, handler: Handler,
                            owner: Optional[str] = None) -> None:
        """Bind a <Plug> name to a handler in mode"""
        _check(mode, plug)
        if not plug.startswith(PLUG_PREFIX):
            raise KeyMapError(f"Handler names must start with {PLUG_PREFIX}: {plug!r}")
        self._handlers[(mode, plug)] = HandlerMapping(plug, handler, owner)

    def put_key_mapping(self, mode: str, keys: str, target: str,
                        recursive: bool = True, owner: Optional[str] = None) -> None:
        """Map keys onto target in mode, replacing any earlier mapping of keys"""
        _check(mode, keys)
        if not target:
            raise KeyMapError(f"Mapping for {keys!r} has no target")
        self._mappings[(mode, keys)] = KeyMapping(keys, target, recursive, owner)

    def remove_key_mapping(self, mode: str, keys: str) -> bool:
        """Remove the mapping of keys, returning whether one existed"""
        return self._mappings.pop((mode, keys), None) is not None

    def get_key_mapping(self, mode: str, keys: str) -> Optional[KeyMapping]:
        return self._mappings.get((mode, keys))

    def has_mapping_to(self, mode: str, target: str) -> bool:
        """Check if any key sequence in mode is mapped onto target"""
        return any(m.target == target for (m_mode, _), m in self._mappings.items()
                   if m_mode == mode)

    def owned_by(self, owner: str) -> Tuple[list, list]:
        """Return the (handler mappings, key mappings) registered by owner"""
        handlers = [h for h in self._handlers.values() if h.owner == owner]
        mappings = [m for m in self._mappings.values() if m.owner == owner]
        return handlers, mappings

    def resolve(self, mode: str, keys: str) -> Optional[Handler]:
        """
        Follow mappings from keys to the handler they end up at.

        Recursive mappings are followed through further key mappings,
        non-recursive ones only through handler names.

        Raises:
            KeyMapError: mappings loop back on themselves
        """
        current = keys
        for _ in range(MAX_MAPPING_DEPTH):
            handler = self._handlers.get((mode, current))
            if handler is not None:
                return handler.handler

            mapping = self._mappings.get((mode, current))
            if mapping is None:
                return None
            if not mapping.recursive:
                target = self._handlers.get((mode, mapping.target))
                return target.handler if target is not None else None
            current = mapping.target

        raise KeyMapError(f"Recursive mapping while resolving {keys!r} in mode {mode!r}")

    def dispatch(self, mode: str, keys: str, editor: Any) -> bool:
        """Run the handler keys resolve to, returning whether there was one"""
        handler = self.resolve(mode, keys)
        if handler is None:
            return False
        logger.debug("Dispatching %r in mode %r", keys, mode)
        handler(editor)
        return True


# ============================================================
#   GTK4 KEY HANDLER
# ============================================================

class VisualStarKeyHandler:
    """Feeds GTK key presses of a visual mode editor into a KeyMap"""

    def __init__(self, editor, keymap: KeyMap, mode: str = VISUAL_MODE):
        """
        Args:
            editor: The editor handle passed to handlers (needs visual_mode)
            keymap: Mapping table to dispatch through
            mode: Mapping mode the key presses are looked up in
        """
        self.editor = editor
        self.keymap = keymap
        self.mode = mode

    @staticmethod
    def key_to_text(keyval: int) -> Optional[str]:
        """Return the character a keyval types, or None for non-text keys"""
        code = Gdk.keyval_to_unicode(keyval)
        return chr(code) if code else None

    def on_key(self, c, keyval, keycode, state):
        if not getattr(self.editor, 'visual_mode', False):
            return False

        ctrl_pressed = (state & Gdk.ModifierType.CONTROL_MASK) != 0
        alt_pressed = (state & Gdk.ModifierType.ALT_MASK) != 0
        if ctrl_pressed or alt_pressed:
            return False

        text = self.key_to_text(keyval)
        if not text:
            return False
        return self.keymap.dispatch(self.mode, text, self.editor)

    def install_keys(self, widget):
        key = Gtk.EventControllerKey()
        key.connect("key-pressed", self.on_key)
        widget.add_controller(key)
        return key


# ============================================================
#   INSTALLATION / INTEGRATION
# ============================================================

def has_gtk_support() -> bool:
    """Check if PyGObject and GTK4 are available for the key handler"""
    return GTK_AVAILABLE


def install_keymap_feature(editor_class: type) -> bool:
    """Validate that editor class has the interface key dispatch needs"""
    required_methods = ['enter_visual_mode', 'get_selected_text']
    for method in required_methods:
        if not hasattr(editor_class, method):
            print(f"Warning: Editor missing method: {method}")
            return False
    return True


# Export public API
__all__ = [
    'KeyMap',
    'KeyMapping',
    'HandlerMapping',
    'VisualStarKeyHandler',
    'NORMAL_MODE',
    'VISUAL_MODE',
    'INSERT_MODE',
    'PLUG_PREFIX',
    'install_keymap_feature',
    'has_gtk_support',
    'GTK_AVAILABLE',
]
