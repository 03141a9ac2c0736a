"""
Unit tests for the edit history log.
"""

import unittest

from OD_Libs.ImageEditingLib.image_models import DEFAULT_SETTINGS
from OD_Libs.SessionLib.edit_history import EditHistory


class TestEditHistory(unittest.TestCase):
    def setUp(self):
        self.history = EditHistory()
        self.first = DEFAULT_SETTINGS
        self.second = DEFAULT_SETTINGS.merge(brightness=120)
        self.third = DEFAULT_SETTINGS.merge(brightness=140)

    def test_empty(self):
        self.assertEqual(len(self.history), 0)
        self.assertIsNone(self.history.current)
        self.assertFalse(self.history.can_undo)
        self.assertFalse(self.history.can_redo)
        self.assertIsNone(self.history.undo())
        self.assertIsNone(self.history.redo())

    def test_push_moves_cursor(self):
        self.history.push(self.first, "Image loaded")
        entry = self.history.push(self.second, "Adjusted brightness")

        self.assertEqual(self.history.index, 1)
        self.assertIs(self.history.current, entry)
        self.assertTrue(self.history.can_undo)
        self.assertFalse(self.history.can_redo)

    def test_undo_and_redo(self):
        self.history.push(self.first, "Image loaded")
        self.history.push(self.second, "Adjusted brightness")

        self.assertEqual(self.history.undo().settings, self.first)
        self.assertIsNone(self.history.undo())
        self.assertEqual(self.history.redo().settings, self.second)
        self.assertIsNone(self.history.redo())

    def test_push_after_undo_discards_forward_entries(self):
        self.history.push(self.first, "Image loaded")
        self.history.push(self.second, "Adjusted brightness")
        self.history.undo()

        self.history.push(self.third, "Adjusted brightness")

        self.assertEqual(len(self.history), 2)
        self.assertEqual(
            [entry.settings for entry in self.history.entries], [self.first, self.third]
        )
        self.assertFalse(self.history.can_redo)

    def test_clear(self):
        self.history.push(self.first, "Image loaded")
        self.history.clear()

        self.assertEqual(len(self.history), 0)
        self.assertEqual(self.history.index, -1)

    def test_entries_is_a_snapshot(self):
        self.history.push(self.first, "Image loaded")
        entries = self.history.entries
        self.history.push(self.second, "Adjusted brightness")

        self.assertEqual(len(entries), 1)


if __name__ == "__main__":
    unittest.main()
