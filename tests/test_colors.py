import unittest

from classcal.colors import PALETTE, color_for, display_color
from classcal.model import ScheduleEvent


class TestColors(unittest.TestCase):
    def test_same_id_same_color(self) -> None:
        self.assertEqual(color_for("teacher-42"), color_for("teacher-42"))
        self.assertIn(color_for("teacher-42"), PALETTE)

    def test_additive_hash(self) -> None:
        # ord("1") == 49 -> 49 % 5 == 4
        self.assertEqual(color_for("1"), PALETTE[4])
        # ord("2") == 50 -> 0
        self.assertEqual(color_for("2"), PALETTE[0])
        # anagrams collide by construction
        self.assertEqual(color_for("ab"), color_for("ba"))

    def test_astral_ids_hash_by_utf16_code_units(self) -> None:
        # U+1F600 is the surrogate pair D83D DE00: 55357 + 56832 == 112189 -> 4
        self.assertEqual(color_for("\U0001F600"), PALETTE[4])

    def test_empty_id_gets_default(self) -> None:
        self.assertEqual(color_for(""), PALETTE[0])

    def test_explicit_color_overrides(self) -> None:
        ev = ScheduleEvent(id="x", teacher_id="1", color="#000000")
        self.assertEqual(display_color(ev), "#000000")
        ev.color = None
        self.assertEqual(display_color(ev), color_for("1"))


if __name__ == "__main__":
    unittest.main()
