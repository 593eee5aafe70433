import unittest

from transfer.windowing import WindowLevel, derive_bounds


class TestDeriveBounds(unittest.TestCase):

    def test_soft_tissue_window(self):
        b = derive_bounds(WindowLevel(40.0, 400.0))
        self.assertEqual(b.low, -160.0)
        self.assertEqual(b.high, 240.0)
        self.assertEqual(b.mid1, -60.0)
        self.assertEqual(b.mid2, 140.0)

    def test_non_positive_width_is_floored(self):
        for width in (0.0, -5.0, 0.25):
            b = derive_bounds(WindowLevel(100.0, width))
            self.assertTrue(b.low < b.mid1 < b.mid2 < b.high)
            self.assertAlmostEqual(b.high - b.low, 1.0)

    def test_create_floors_width(self):
        wl = WindowLevel.create(10, -3)
        self.assertEqual(wl.width, 1.0)
        self.assertEqual(wl.center, 10.0)

    def test_floor_is_logged(self):
        with self.assertLogs("transfer.windowing", level="WARNING"):
            WindowLevel.create(0.0, 0.0)

    def test_window_is_immutable(self):
        wl = WindowLevel(40.0, 400.0)
        with self.assertRaises(Exception):
            wl.center = 0.0


if __name__ == '__main__':
    unittest.main()
