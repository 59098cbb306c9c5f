import unittest

from visualstar.errors import KeyMapError
from visualstar.keymap_feature import (
    GTK_AVAILABLE, KeyMap, NORMAL_MODE, VISUAL_MODE, VisualStarKeyHandler,
    install_keymap_feature,
)
from visualstar.selection_feature import TextBuffer


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, editor):
        self.calls.append(editor)


class TestKeyMap(unittest.TestCase):
    def setUp(self):
        self.keymap = KeyMap()
        self.handler = Recorder()
        self.keymap.put_handler_mapping(VISUAL_MODE, "<Plug>Action", self.handler, owner="Test")

    def test_dispatch_through_key_mapping(self):
        self.keymap.put_key_mapping(VISUAL_MODE, "*", "<Plug>Action")
        editor = object()
        self.assertTrue(self.keymap.dispatch(VISUAL_MODE, "*", editor))
        self.assertEqual(self.handler.calls, [editor])

    def test_mapping_is_per_mode(self):
        self.keymap.put_key_mapping(VISUAL_MODE, "*", "<Plug>Action")
        self.assertFalse(self.keymap.dispatch(NORMAL_MODE, "*", object()))
        self.assertEqual(self.handler.calls, [])

    def test_unmapped_key(self):
        self.assertIsNone(self.keymap.resolve(VISUAL_MODE, "q"))
        self.assertFalse(self.keymap.dispatch(VISUAL_MODE, "q", object()))

    def test_recursive_chain(self):
        self.keymap.put_key_mapping(VISUAL_MODE, "a", "b")
        self.keymap.put_key_mapping(VISUAL_MODE, "b", "<Plug>Action")
        self.assertIs(self.keymap.resolve(VISUAL_MODE, "a"), self.handler)

    def test_non_recursive_mapping_stops_at_keys(self):
        self.keymap.put_key_mapping(VISUAL_MODE, "b", "<Plug>Action")
        self.keymap.put_key_mapping(VISUAL_MODE, "a", "b", recursive=False)
        self.assertIsNone(self.keymap.resolve(VISUAL_MODE, "a"))

    def test_non_recursive_mapping_to_plug(self):
        self.keymap.put_key_mapping(VISUAL_MODE, "a", "<Plug>Action", recursive=False)
        self.assertIs(self.keymap.resolve(VISUAL_MODE, "a"), self.handler)

    def test_mapping_loop(self):
        self.keymap.put_key_mapping(VISUAL_MODE, "a", "b")
        self.keymap.put_key_mapping(VISUAL_MODE, "b", "a")
        with self.assertRaises(KeyMapError):
            self.keymap.resolve(VISUAL_MODE, "a")

    def test_invalid_registrations(self):
        with self.assertRaises(KeyMapError):
            self.keymap.put_key_mapping("z", "*", "<Plug>Action")
        with self.assertRaises(KeyMapError):
            self.keymap.put_key_mapping(VISUAL_MODE, "", "<Plug>Action")
        with self.assertRaises(KeyMapError):
            self.keymap.put_key_mapping(VISUAL_MODE, "*", "")
        with self.assertRaises(KeyMapError):
            self.keymap.put_handler_mapping(VISUAL_MODE, "Action", self.handler)

    def test_has_mapping_to_and_remove(self):
        self.assertFalse(self.keymap.has_mapping_to(VISUAL_MODE, "<Plug>Action"))
        self.keymap.put_key_mapping(VISUAL_MODE, "*", "<Plug>Action")
        self.assertTrue(self.keymap.has_mapping_to(VISUAL_MODE, "<Plug>Action"))
        self.assertFalse(self.keymap.has_mapping_to(NORMAL_MODE, "<Plug>Action"))
        self.assertTrue(self.keymap.remove_key_mapping(VISUAL_MODE, "*"))
        self.assertFalse(self.keymap.remove_key_mapping(VISUAL_MODE, "*"))
        self.assertIsNone(self.keymap.get_key_mapping(VISUAL_MODE, "*"))

    def test_owned_by(self):
        self.keymap.put_key_mapping(VISUAL_MODE, "*", "<Plug>Action", owner="Test")
        self.keymap.put_key_mapping(VISUAL_MODE, "#", "<Plug>Action", owner="User")
        handlers, mappings = self.keymap.owned_by("Test")
        self.assertEqual([h.plug for h in handlers], ["<Plug>Action"])
        self.assertEqual([m.keys for m in mappings], ["*"])


class TestInstall(unittest.TestCase):
    def test_text_buffer(self):
        self.assertTrue(install_keymap_feature(TextBuffer))

    def test_missing_method(self):
        self.assertFalse(install_keymap_feature(object))


@unittest.skipUnless(GTK_AVAILABLE, "PyGObject with GTK4 not available")
class TestVisualStarKeyHandler(unittest.TestCase):
    def setUp(self):
        from gi.repository import Gdk
        self.Gdk = Gdk
        self.keymap = KeyMap()
        self.handler = Recorder()
        self.keymap.put_handler_mapping(VISUAL_MODE, "<Plug>Action", self.handler)
        self.keymap.put_key_mapping(VISUAL_MODE, "*", "<Plug>Action")
        self.editor = TextBuffer(["abc"])

    def test_key_to_text(self):
        self.assertEqual(VisualStarKeyHandler.key_to_text(self.Gdk.KEY_asterisk), "*")
        self.assertEqual(VisualStarKeyHandler.key_to_text(self.Gdk.KEY_numbersign), "#")

    def test_dispatches_in_visual_mode(self):
        key_handler = VisualStarKeyHandler(self.editor, self.keymap)
        self.editor.enter_visual_mode()
        self.assertTrue(key_handler.on_key(None, self.Gdk.KEY_asterisk, 0, 0))
        self.assertEqual(self.handler.calls, [self.editor])

    def test_ignored_outside_visual_mode(self):
        key_handler = VisualStarKeyHandler(self.editor, self.keymap)
        self.assertFalse(key_handler.on_key(None, self.Gdk.KEY_asterisk, 0, 0))
        self.assertEqual(self.handler.calls, [])

    def test_ignored_with_control(self):
        key_handler = VisualStarKeyHandler(self.editor, self.keymap)
        self.editor.enter_visual_mode()
        state = self.Gdk.ModifierType.CONTROL_MASK
        self.assertFalse(key_handler.on_key(None, self.Gdk.KEY_asterisk, 0, state))


if __name__ == '__main__':
    unittest.main()
