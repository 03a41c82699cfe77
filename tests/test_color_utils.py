"""
Unit tests for color and randomization helpers.

Tests cover:
- Random colors and integers
- Gradient stop offsets
- Brightness adjustment, clamping and case handling
"""

import os
import re
import sys
import unittest
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from color_utils import adjust_brightness, gradient_stops, random_hex_color, random_int

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class TestRandomValues(unittest.TestCase):

    def test_random_hex_color_format(self):
        for _ in range(200):
            self.assertRegex(random_hex_color(), HEX_COLOR)

    def test_random_int_range_is_half_open(self):
        values = {random_int(3, 6) for _ in range(500)}
        self.assertTrue(values.issubset({3, 4, 5}))
        self.assertNotIn(6, values)

    def test_random_int_single_value(self):
        self.assertEqual(random_int(7, 8), 7)

    def test_random_int_empty_range_returns_min(self):
        self.assertEqual(random_int(5, 5), 5)
        self.assertEqual(random_int(9, 2), 9)

    def test_random_int_float_bounds(self):
        values = {random_int(1.2, 4.8) for _ in range(300)}
        self.assertTrue(values.issubset({2, 3}))
        self.assertEqual(random_int(2.5, 3.5), 3)


class TestGradientStops(unittest.TestCase):

    def test_three_stops(self):
        """Stepping by 0.3 misses 1, so a final stop is added."""
        self.assertEqual(list(gradient_stops(3)), [0, 0.3, 0.6, 0.9, 1])

    def test_single_stop(self):
        self.assertEqual(list(gradient_stops(1)), [0, 1])

    def test_ten_stops(self):
        offsets = list(gradient_stops(10))
        self.assertEqual(offsets[0], 0)
        self.assertEqual(offsets[-1], 1)
        self.assertEqual(len(offsets), 11)

    def test_offsets_properties(self):
        for count in range(1, 30):
            offsets = list(gradient_stops(count))
            self.assertEqual(offsets[0], 0, count)
            self.assertEqual(offsets.count(1), 1, count)
            self.assertEqual(offsets, sorted(offsets), count)
            for offset in offsets:
                self.assertEqual(offset, round(offset, 1))

    def test_every_stop_has_a_color(self):
        for color in gradient_stops(4).values():
            self.assertRegex(color, HEX_COLOR)

    def test_colors_are_drawn_independently(self):
        with patch("color_utils.random_hex_color", side_effect=["#000001", "#000002", "#000003"]):
            stops = gradient_stops(2)
        self.assertEqual(list(stops.values()), ["#000001", "#000002", "#000003"])

    def test_non_positive_count_rejected(self):
        with self.assertRaises(ValueError):
            gradient_stops(0)
        with self.assertRaises(ValueError):
            gradient_stops(-3)


class TestAdjustBrightness(unittest.TestCase):

    def test_darken(self):
        self.assertEqual(adjust_brightness("#ff6b6b", -20), "#eb5757")

    def test_lighten(self):
        self.assertEqual(adjust_brightness("#102030", 16), "#203040")

    def test_clamps_both_ends(self):
        self.assertEqual(adjust_brightness("#000000", -20), "#000000")
        self.assertEqual(adjust_brightness("#ffffff", 20), "#ffffff")
        self.assertEqual(adjust_brightness("#f00a80", 100), "#ff6ee4")

    def test_zero_padded(self):
        self.assertEqual(adjust_brightness("#151515", -16), "#050505")

    def test_uppercase_input_stays_uppercase(self):
        self.assertEqual(adjust_brightness("#FF6B6B", -20), "#EB5757")

    def test_mixed_case_input_becomes_lowercase(self):
        self.assertEqual(adjust_brightness("#Ff6b6B", -20), "#eb5757")

    def test_zero_delta_is_identity(self):
        for color in ("#ff6b6b", "#FF6B6B", "#Ff6b6B", "#000000", "#aBcDeF"):
            self.assertEqual(adjust_brightness(color, 0), color)
        for _ in range(100):
            color = random_hex_color()
            self.assertEqual(adjust_brightness(color, 0), color)

    def test_clamped_channels_keep_their_digits(self):
        self.assertEqual(adjust_brightness("#FfFf00", 50), "#FfFf32")

    def test_invalid_input_returned_unchanged(self):
        for value in ("red", "#fff", "ff6b6b", "#gg0000", ""):
            self.assertEqual(adjust_brightness(value, -20), value)

    def test_result_is_always_hex(self):
        for _ in range(100):
            self.assertRegex(adjust_brightness(random_hex_color(), -20), HEX_COLOR)


if __name__ == "__main__":
    unittest.main()
