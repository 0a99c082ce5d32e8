import unittest

import numpy as np

from amrstencil.domain import COEFX, COEFY, linear_ramp
from amrstencil.grid import Grid
from amrstencil.stencil import apply_stencil, iter_tiles, perturb, stencil_flops
from amrstencil.weights import make_weights


class IterTilesTest(unittest.TestCase):
    def test_untiled_is_single_block(self) -> None:
        self.assertEqual(list(iter_tiles(10, 2)), [(2, 8, 2, 8)])

    def test_tiles_partition_interior(self) -> None:
        for size, radius, tile in [(17, 2, 4), (17, 2, 5), (12, 1, 10), (9, 3, 1), (20, 2, 100)]:
            hits = np.zeros((size, size), dtype=int)
            for y0, y1, x0, x1 in iter_tiles(size, radius, tile):
                self.assertLessEqual(y1 - y0, tile)
                self.assertLessEqual(x1 - x0, tile)
                hits[y0:y1, x0:x1] += 1
            expected = np.zeros_like(hits)
            expected[radius : size - radius, radius : size - radius] = 1
            np.testing.assert_array_equal(hits, expected)

    def test_invalid_tile(self) -> None:
        with self.assertRaises(ValueError):
            list(iter_tiles(10, 1, 0))


class ApplyStencilTest(unittest.TestCase):
    def setUp(self) -> None:
        self.rng = np.random.default_rng(3)

    def test_ramp_gives_coefficient_sum(self) -> None:
        for shape in ("star", "compact"):
            w = make_weights(2, shape)
            grid = Grid.from_input(linear_ramp(12) + 3.0)
            apply_stencil(grid, w.background, w.offsets, 2)
            np.testing.assert_allclose(grid.out[2:10, 2:10], COEFX + COEFY, rtol=0, atol=1e-12)

    def test_boundary_untouched(self) -> None:
        w = make_weights(2, "compact")
        grid = Grid.from_input(self.rng.random((11, 11)))
        apply_stencil(grid, w.background, w.offsets, 2)
        self.assertTrue(np.all(grid.out[:2, :] == 0.0))
        self.assertTrue(np.all(grid.out[-2:, :] == 0.0))
        self.assertTrue(np.all(grid.out[:, :2] == 0.0))
        self.assertTrue(np.all(grid.out[:, -2:] == 0.0))

    def test_output_accumulates(self) -> None:
        w = make_weights(1, "star")
        grid = Grid.from_input(linear_ramp(8))
        apply_stencil(grid, w.background, w.offsets, 1)
        apply_stencil(grid, w.background, w.offsets, 1)
        np.testing.assert_allclose(grid.out[1:7, 1:7], 2 * (COEFX + COEFY), rtol=0, atol=1e-12)

    def test_tiled_matches_untiled_bitwise(self) -> None:
        size = 23
        values = self.rng.standard_normal((size, size))
        for dtype in (np.float64, np.float32):
            for shape in ("star", "compact"):
                for radius in (1, 3):
                    w = make_weights(radius, shape, expand=2, dtype=dtype)
                    reference = Grid.from_input(values.astype(dtype))
                    apply_stencil(reference, w.refinement, w.offsets, radius)
                    for tile in (1, 4, 5, size - 2 * radius, 64):
                        tiled = Grid.from_input(values.astype(dtype))
                        apply_stencil(tiled, w.refinement, w.offsets, radius, tile)
                        np.testing.assert_array_equal(tiled.out, reference.out)

    def test_table_radius_mismatch(self) -> None:
        w = make_weights(2, "star")
        with self.assertRaises(ValueError):
            apply_stencil(Grid.zeros(10), w.background, w.offsets, 1)


class PerturbTest(unittest.TestCase):
    def test_every_input_cell_incremented(self) -> None:
        grid = Grid.from_input(linear_ramp(6))
        perturb(grid)
        np.testing.assert_array_equal(grid.inp, linear_ramp(6) + 1.0)
        self.assertTrue(np.all(grid.out == 0.0))

    def test_single_precision_kept(self) -> None:
        grid = Grid.zeros(4, np.float32)
        perturb(grid)
        self.assertEqual(grid.inp.dtype, np.float32)


class FlopsTest(unittest.TestCase):
    def test_stencil_flops(self) -> None:
        self.assertEqual(stencil_flops(Grid.zeros(10), 2, 9), 36 * 19)


if __name__ == "__main__":
    unittest.main()
