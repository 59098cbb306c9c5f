import unittest

from visualstar.selection_feature import (
    Selection, TextBuffer, VisualModeController, install_selection_feature,
)


class TestSelection(unittest.TestCase):
    def test_single_character_is_a_selection(self):
        sel = Selection()
        self.assertFalse(sel.has_selection())
        sel.set_start(2, 3)
        self.assertTrue(sel.has_selection())
        self.assertEqual(sel.get_bounds(), (2, 3, 2, 3))

    def test_bounds_are_normalized(self):
        sel = Selection()
        sel.set_start(3, 1)
        sel.set_end(1, 4)
        self.assertEqual(sel.get_bounds(), (1, 4, 3, 1))

    def test_contains_position_end_inclusive(self):
        sel = Selection()
        sel.set_start(0, 2)
        sel.set_end(1, 1)
        self.assertTrue(sel.contains_position(1, 1))
        self.assertTrue(sel.contains_position(0, 9))
        self.assertFalse(sel.contains_position(0, 1))
        self.assertFalse(sel.contains_position(1, 2))

    def test_clear(self):
        sel = Selection()
        sel.set_start(0, 0)
        sel.clear()
        self.assertEqual(sel.get_bounds(), (None, None, None, None))


class TestTextBufferSelection(unittest.TestCase):
    def test_no_selection_outside_visual_mode(self):
        buf = TextBuffer(["hello"])
        self.assertIsNone(buf.get_selected_text())

    def test_big_word_end(self):
        buf = TextBuffer(['user.name = "Jane Doe"'])
        buf.enter_visual_mode()
        buf.manager.select_to_big_word_end()
        self.assertEqual(buf.get_selected_text(), "user.name")
        self.assertEqual((buf.cursor_line, buf.cursor_col), (0, 8))

    def test_big_word_end_skips_blanks_and_lines(self):
        buf = TextBuffer(["a", "  next.word here"])
        buf.enter_visual_mode()
        buf.manager.select_to_big_word_end()
        self.assertEqual((buf.cursor_line, buf.cursor_col), (1, 10))
        self.assertEqual(buf.get_selected_text(), "a\n  next.word")

    def test_big_word_end_at_end_of_buffer(self):
        buf = TextBuffer(["word"])
        buf.set_cursor(0, 3)
        buf.enter_visual_mode()
        buf.manager.select_to_big_word_end()
        self.assertEqual(buf.get_selected_text(), "d")

    def test_word_at_cursor(self):
        buf = TextBuffer(["foo bar_baz qux"])
        buf.set_cursor(0, 6)
        buf.enter_visual_mode()
        buf.manager.select_word_at_cursor()
        self.assertEqual(buf.get_selected_text(), "bar_baz")

    def test_multiline_selection(self):
        buf = TextBuffer(["test", "ing", "more"])
        buf.enter_visual_mode()
        buf.manager.move_cursor_down()
        buf.manager.move_cursor_right()
        self.assertEqual(buf.get_selected_text(), "test\nin")

    def test_line_end_takes_line_break(self):
        buf = TextBuffer(["test", "ing", "more"])
        buf.enter_visual_mode()
        buf.manager.move_cursor_down()
        buf.manager.move_to_line_end()
        self.assertEqual(buf.get_selected_text(), "test\ning\n")

    def test_line_end_on_last_line(self):
        buf = TextBuffer(["test", "ing"])
        buf.enter_visual_mode()
        buf.manager.move_cursor_down()
        buf.manager.move_to_line_end()
        self.assertEqual(buf.get_selected_text(), "test\ning")

    def test_backwards_selection(self):
        buf = TextBuffer(["abcdef"])
        buf.set_cursor(0, 4)
        buf.enter_visual_mode()
        buf.manager.select_range(0, 4, 0, 1)
        self.assertEqual(buf.get_selected_text(), "bcde")

    def test_from_text(self):
        buf = TextBuffer.from_text("one\ntwo")
        self.assertEqual(buf.total(), 2)
        self.assertEqual(buf.text, "one\ntwo")
        self.assertEqual(buf.get_line(5), "")


class TestVisualModeController(unittest.TestCase):
    def test_exit_keeps_cursor(self):
        buf = TextBuffer(["abc def"])
        buf.enter_visual_mode()
        buf.manager.select_to_big_word_end()
        VisualModeController().exit_visual_mode(buf)
        self.assertFalse(buf.visual_mode)
        self.assertFalse(buf.selection.has_selection())
        self.assertEqual((buf.cursor_line, buf.cursor_col), (0, 2))
        self.assertIsNone(buf.get_selected_text())


class TestInstall(unittest.TestCase):
    def test_text_buffer_is_selectable(self):
        self.assertTrue(install_selection_feature(TextBuffer))

    def test_missing_method(self):
        self.assertFalse(install_selection_feature(object))


if __name__ == '__main__':
    unittest.main()
