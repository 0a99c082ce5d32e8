import unittest

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from amrstencil.config import AMRConfig  # noqa: E402
from amrstencil.driver import AMRSimulation  # noqa: E402
from amrstencil.visualize import plot_grid, plot_layout, plot_patches  # noqa: E402


class VisualizeTest(unittest.TestCase):
    def setUp(self) -> None:
        config = AMRConfig(iterations=3, n=16, nr=3, level=1, period=2, duration=1, sub_iterations=1)
        self.sim = AMRSimulation(config)
        self.sim.run()

    def tearDown(self) -> None:
        plt.close("all")

    def test_plot_layout(self) -> None:
        ax = plot_layout(self.sim)
        self.assertEqual(len(ax.collections), 1)
        self.assertEqual(len(ax.texts), 4)
        self.assertEqual(ax.get_xlim(), (0.0, 16.0))

    def test_plot_grid(self) -> None:
        ax = plot_grid(self.sim.background, self.sim.config.radius, title="Background")
        self.assertEqual(ax.get_title(), "Background")
        self.assertEqual(len(ax.images), 1)

    def test_plot_patches(self) -> None:
        fig = plot_patches(self.sim)
        titles = sorted(a.get_title() for a in fig.axes if a.get_title())
        self.assertEqual(titles, [f"Refinement {g}" for g in range(4)])


if __name__ == "__main__":
    unittest.main()
