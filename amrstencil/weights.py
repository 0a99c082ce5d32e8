"""weights.py — stencil coefficient tables for the background and refinements.

Two footprint shapes are supported:

1) star: cross-shaped, only the horizontal and vertical axes through the
   centre carry weights, 1/(2kr) at offset k.
2) compact: the full (2r+1)×(2r+1) square, ring k carrying 1/(4k(2k-1)r)
   off the diagonal and 1/(4kr) on it.

Both are antisymmetric about the centre (positive to the right/above,
negative to the left/below), so they act as a discrete divergence: applied to
COEFX*x + COEFY*y they return COEFX + COEFY at every interior cell, and the
entries of each table sum to zero.

Tables are indexed ``[dy + r, dx + r]`` to match the ``[y, x]`` grid layout.
The refinement table is the background table scaled by the expansion factor
so both represent the same continuous operator.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

Offset = Tuple[int, int]  # (dy, dx)

STAR = "star"
COMPACT = "compact"


def normalize_shape(name: str) -> str:
    """Map a user-supplied shape name (aliases accepted) to 'star' or 'compact'."""
    key = name.strip().lower()
    if key in {"star", "cross", "s"}:
        return STAR
    if key in {"compact", "square", "box", "c"}:
        return COMPACT
    raise ValueError(f"Unknown stencil shape '{name}'. Use 'star' or 'compact'.")


def star_table(radius: int, dtype=np.float64) -> np.ndarray:
    """Background weights of the star stencil."""
    r = int(radius)
    w = np.zeros((2 * r + 1, 2 * r + 1), dtype=dtype)
    for k in range(1, r + 1):
        value = 1.0 / (2.0 * k * r)
        w[r, r + k] = w[r + k, r] = value
        w[r, r - k] = w[r - k, r] = -value
    return w


def compact_table(radius: int, dtype=np.float64) -> np.ndarray:
    """Background weights of the compact (full square) stencil."""
    r = int(radius)
    w = np.zeros((2 * r + 1, 2 * r + 1), dtype=dtype)
    for k in range(1, r + 1):
        edge = 1.0 / (4.0 * k * (2.0 * k - 1) * r)
        for t in range(-k + 1, k):
            w[r + k, r + t] = edge    # top ring row
            w[r - k, r + t] = -edge   # bottom ring row
            w[r + t, r + k] = edge    # right ring column
            w[r + t, r - k] = -edge   # left ring column
        diag = 1.0 / (4.0 * k * r)
        w[r + k, r + k] = diag
        w[r - k, r - k] = -diag
    return w


def stencil_offsets(radius: int, shape: str) -> List[Offset]:
    """Return the visiting order of stencil offsets as (dy, dx) pairs.

    Star: the vertical line dy=-r..r first, then dx=-r..-1, then dx=1..r.
    Compact: the full square, dy outer, dx inner.
    The order fixes the floating point accumulation sequence of every cell.
    """
    r = int(radius)
    shape = normalize_shape(shape)
    if shape == STAR:
        offsets = [(dy, 0) for dy in range(-r, r + 1)]
        offsets += [(0, dx) for dx in range(-r, 0)]
        offsets += [(0, dx) for dx in range(1, r + 1)]
        return offsets
    return [(dy, dx) for dy in range(-r, r + 1) for dx in range(-r, r + 1)]


@dataclass(slots=True)
class StencilWeights:
    """Background and refinement weight tables of one run.

    Attributes
    ----------
    radius : int
        Stencil radius r.
    shape : str
        'star' or 'compact'.
    expand : int
        Refinement cells per background cell; the refinement table is
        ``background * expand``.
    background, refinement : np.ndarray
        (2r+1)×(2r+1) tables indexed [dy + r, dx + r].
    offsets : list[tuple[int, int]]
        Visiting order of the footprint, see `stencil_offsets`.
    """

    radius: int
    shape: str
    expand: int
    background: np.ndarray
    refinement: np.ndarray
    offsets: List[Offset]

    @property
    def stencil_size(self) -> int:
        """Number of points in the footprint (used for flop counting)."""
        if self.shape == STAR:
            return 4 * self.radius + 1
        return (2 * self.radius + 1) ** 2


def make_weights(radius: int, shape: str = STAR, expand: int = 1, *, dtype=np.float64) -> StencilWeights:
    """Build the StencilWeights for a run.

    Raises
    ------
    ValueError
        If `radius` < 1, `expand` < 1 or `shape` is unknown.
    """
    radius = int(radius)
    expand = int(expand)
    if radius < 1:
        raise ValueError(f"Stencil radius {radius} should be positive")
    if expand < 1:
        raise ValueError(f"Expansion factor {expand} should be positive")
    shape = normalize_shape(shape)
    dtype = np.dtype(dtype)

    background = star_table(radius, dtype) if shape == STAR else compact_table(radius, dtype)
    refinement = background * dtype.type(expand)
    return StencilWeights(
        radius=radius,
        shape=shape,
        expand=expand,
        background=background,
        refinement=refinement.astype(dtype, copy=False),
        offsets=stencil_offsets(radius, shape),
    )


__all__ = [
    "STAR",
    "COMPACT",
    "StencilWeights",
    "normalize_shape",
    "star_table",
    "compact_table",
    "stencil_offsets",
    "make_weights",
]
