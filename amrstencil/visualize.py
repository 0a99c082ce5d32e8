"""visualize.py — plotting helpers for the AMR stencil kernel.

Provides light-weight plotting utilities built on matplotlib:

- plot_layout(sim, ax=None)
    Draw the background extent and the four corner refinements, the
    currently active one highlighted.

- plot_grid(grid, radius, ax=None, title=...)
    Show the interior of a grid's output buffer with a colour bar.

- plot_patches(sim, fig=None)
    2×2 panel with the output of every refinement.
"""
from __future__ import annotations

from typing import List

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import PatchCollection
from matplotlib.patches import Rectangle

from .driver import AMRSimulation
from .grid import Grid
from .schedule import schedule


# --------------------------
# Helpers
# --------------------------
def _ax(ax=None):
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))
    return ax


def _set_equal_box(ax, n: int):
    ax.set_aspect("equal", adjustable="box")
    ax.set_xlim(0, n)
    ax.set_ylim(0, n)


# --------------------------
# Public plotting functions
# --------------------------
def plot_layout(sim: AMRSimulation, ax=None, *, linewidth: float = 1.0):
    """Outline the four refinements on the background grid."""
    ax = _ax(ax)
    cfg = sim.config
    active = None
    if sim.current_iteration >= 0:
        active = schedule(sim.current_iteration, cfg.period, cfg.duration).active_patch

    rects: List[Rectangle] = []
    colors: List[float] = []
    for patch in sim.patches:
        i0, i1, j0, j1 = patch.extent(cfg.nr)
        rects.append(Rectangle((i0, j0), i1 - i0 + 1, j1 - j0 + 1))
        colors.append(1.0 if patch.index == active else 0.0)
        ax.text(i0 + 0.5 * (i1 - i0 + 1), j0 + 0.5 * (j1 - j0 + 1), str(patch.index),
                ha="center", va="center")

    pc = PatchCollection(rects, cmap="coolwarm", alpha=0.4, edgecolor="black", linewidths=linewidth)
    pc.set_array(np.asarray(colors, dtype=float))
    pc.set_clim(0.0, 1.0)
    ax.add_collection(pc)
    ax.add_patch(Rectangle((0, 0), cfg.n, cfg.n, fill=False, linewidth=linewidth))

    _set_equal_box(ax, cfg.n)
    ax.set_title("Refinement layout")
    ax.set_xlabel("i")
    ax.set_ylabel("j")
    return ax


def plot_grid(grid: Grid, radius: int, ax=None, *, title: str = "Output", cmap: str = "viridis"):
    """Image of the interior of `grid.out` (origin at the bottom left)."""
    ax = _ax(ax)
    values = grid.out[grid.interior(radius)]
    lo, hi = radius, grid.size - radius
    im = ax.imshow(values, origin="lower", cmap=cmap, extent=(lo, hi, lo, hi))
    ax.figure.colorbar(im, ax=ax, label="out")
    ax.set_title(title)
    ax.set_xlabel("i")
    ax.set_ylabel("j")
    return ax


def plot_patches(sim: AMRSimulation, fig=None):
    """2×2 figure of the refinement outputs, laid out like the corners."""
    if fig is None:
        fig = plt.figure(figsize=(10, 10))
    axes = fig.subplots(2, 2, squeeze=False)
    # row 0 holds the top corners so the panel mirrors the domain
    slots = {0: (1, 0), 1: (1, 1), 2: (0, 0), 3: (0, 1)}
    for patch in sim.patches:
        r, c = slots[patch.index]
        plot_grid(patch.grid, sim.config.radius, ax=axes[r, c], title=f"Refinement {patch.index}")
    fig.tight_layout()
    return fig


__all__ = [
    "plot_layout",
    "plot_grid",
    "plot_patches",
]
