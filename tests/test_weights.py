import unittest

import numpy as np

from amrstencil.domain import COEFX, COEFY
from amrstencil.weights import (
    COMPACT,
    STAR,
    compact_table,
    make_weights,
    normalize_shape,
    stencil_offsets,
    star_table,
)


def _apply_to_ramp(table: np.ndarray, radius: int) -> float:
    """Stencil response to COEFX*x + COEFY*y at the origin."""
    total = 0.0
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            total += table[dy + radius, dx + radius] * (COEFX * dx + COEFY * dy)
    return total


class WeightTableTest(unittest.TestCase):
    def test_tables_sum_to_zero(self) -> None:
        for radius in range(1, 6):
            for shape in (STAR, COMPACT):
                w = make_weights(radius, shape, expand=4)
                self.assertAlmostEqual(float(w.background.sum()), 0.0, places=12)
                self.assertAlmostEqual(float(w.refinement.sum()), 0.0, places=12)

    def test_tables_reproduce_ramp_slope(self) -> None:
        for radius in range(1, 6):
            self.assertAlmostEqual(_apply_to_ramp(star_table(radius), radius), COEFX + COEFY, places=12)
            self.assertAlmostEqual(_apply_to_ramp(compact_table(radius), radius), COEFX + COEFY, places=12)

    def test_star_radius_one(self) -> None:
        w = star_table(1)
        expected = np.array(
            [
                [0.0, -0.5, 0.0],
                [-0.5, 0.0, 0.5],
                [0.0, 0.5, 0.0],
            ]
        )
        np.testing.assert_array_equal(w, expected)

    def test_compact_radius_one(self) -> None:
        w = compact_table(1)
        # ring 1: off-diagonal 1/4, diagonal 1/4, corners (1,-1)/(-1,1) empty
        expected = np.array(
            [
                [-0.25, -0.25, 0.0],
                [-0.25, 0.0, 0.25],
                [0.0, 0.25, 0.25],
            ]
        )
        np.testing.assert_array_equal(w, expected)

    def test_star_is_axis_only(self) -> None:
        w = star_table(3)
        mask = np.ones_like(w, dtype=bool)
        mask[3, :] = False
        mask[:, 3] = False
        self.assertTrue(np.all(w[mask] == 0.0))

    def test_refinement_scaled_by_expand(self) -> None:
        w = make_weights(2, "compact", expand=8)
        np.testing.assert_array_equal(w.refinement, w.background * 8)
        self.assertEqual(w.refinement[2, 3], 8 * w.background[2, 3])

    def test_single_precision_tables(self) -> None:
        w = make_weights(2, "star", expand=2, dtype=np.float32)
        self.assertEqual(w.background.dtype, np.float32)
        self.assertEqual(w.refinement.dtype, np.float32)

    def test_stencil_size(self) -> None:
        self.assertEqual(make_weights(2, STAR).stencil_size, 9)
        self.assertEqual(make_weights(2, COMPACT).stencil_size, 25)


class OffsetOrderTest(unittest.TestCase):
    def test_star_offsets(self) -> None:
        self.assertEqual(
            stencil_offsets(1, "star"),
            [(-1, 0), (0, 0), (1, 0), (0, -1), (0, 1)],
        )

    def test_compact_offsets_cover_square(self) -> None:
        offsets = stencil_offsets(2, "compact")
        self.assertEqual(len(offsets), 25)
        self.assertEqual(len(set(offsets)), 25)
        self.assertEqual(offsets[0], (-2, -2))
        self.assertEqual(offsets[1], (-2, -1))


class ShapeNameTest(unittest.TestCase):
    def test_aliases(self) -> None:
        self.assertEqual(normalize_shape(" Star "), STAR)
        self.assertEqual(normalize_shape("COMPACT"), COMPACT)
        self.assertEqual(normalize_shape("square"), COMPACT)

    def test_unknown_shape(self) -> None:
        with self.assertRaises(ValueError):
            normalize_shape("hexagon")

    def test_invalid_radius_and_expand(self) -> None:
        with self.assertRaises(ValueError):
            make_weights(0, "star")
        with self.assertRaises(ValueError):
            make_weights(1, "star", expand=0)


if __name__ == "__main__":
    unittest.main()
