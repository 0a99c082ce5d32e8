"""grid.py — grid buffers and the fixed layout of the four refinements.

This module provides the storage side of the kernel: a square grid with an
input and an output buffer, and the refinement patches nested in the corners
of the background grid.

Key concepts
------------
- Grid: a pair of C-contiguous [y, x] arrays of identical shape. The stencil
  reads `inp` and accumulates into `out`; only interior cells are written.
- RefinementPatch: one of four corner refinements. Owns its Grid, its origin
  in background cells and lifecycle counters.
- patch_origins(n, nr): corner placement, each patch flush with the
  background boundary.

Design notes
------------
- Patch order is [SW, SE, NW, NE] (bottom-left, bottom-right, top-left,
  top-right); origins are (i, j) = (column, row) of the bottom-left
  background cell covered by the patch.
- A patch spans nr+1 background cells per axis (origin .. origin+nr), which
  is why the far origin is n-nr-1.
- All buffers are allocated once; nothing here resizes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

NUM_PATCHES = 4


@dataclass(slots=True)
class Grid:
    """Square grid with an input and an output buffer.

    Attributes
    ----------
    inp : np.ndarray
        Values read by the stencil, shape (size, size).
    out : np.ndarray
        Accumulated stencil output, same shape and dtype as `inp`.
    """

    inp: np.ndarray
    out: np.ndarray

    def __post_init__(self) -> None:
        if self.inp.ndim != 2 or self.inp.shape[0] != self.inp.shape[1]:
            raise ValueError(f"Grid buffers must be square 2-D arrays, got {self.inp.shape}")
        if self.inp.shape != self.out.shape or self.inp.dtype != self.out.dtype:
            raise ValueError("Grid input and output buffers must share shape and dtype")

    @classmethod
    def zeros(cls, size: int, dtype=np.float64) -> "Grid":
        return cls(np.zeros((size, size), dtype=dtype), np.zeros((size, size), dtype=dtype))

    @classmethod
    def from_input(cls, values: np.ndarray) -> "Grid":
        """Grid whose input holds a copy of `values` and whose output is zero."""
        inp = np.array(values, copy=True, order="C")
        return cls(inp, np.zeros_like(inp))

    @property
    def size(self) -> int:
        return int(self.inp.shape[0])

    @property
    def dtype(self) -> np.dtype:
        return self.inp.dtype

    def interior(self, radius: int) -> Tuple[slice, slice]:
        """Index tuple selecting the cells the stencil writes."""
        s = slice(radius, self.size - radius)
        return (s, s)

    def interior_points(self, radius: int) -> int:
        return max(0, self.size - 2 * radius) ** 2


def patch_origins(n: int, nr: int) -> List[Tuple[int, int]]:
    """Return the (i, j) origins of the four corner refinements.

    Order: (0,0), (n-nr-1,0), (0,n-nr-1), (n-nr-1,n-nr-1).
    """
    if not (1 <= nr < n):
        raise ValueError(f"refinements must be contained in background grid: nr={nr}, n={n}")
    far = n - nr - 1
    return [(0, 0), (far, 0), (0, far), (far, far)]


@dataclass(slots=True)
class RefinementPatch:
    """A corner refinement of the background grid.

    Attributes
    ----------
    index : int
        Position in the fixed patch array (0..3).
    origin : tuple[int, int]
        (i, j) background coordinate of the bottom-left covered cell.
    grid : Grid
        Fine-mesh buffers, nr*expand+1 cells per side.
    activations : int
        Number of times the patch was seeded by interpolation.
    sub_iterations_done : int
        Stencil passes executed on the patch so far.
    """

    index: int
    origin: Tuple[int, int]
    grid: Grid
    activations: int = 0
    sub_iterations_done: int = 0

    @property
    def size(self) -> int:
        return self.grid.size

    def extent(self, nr: int) -> Tuple[int, int, int, int]:
        """Covered background rectangle (i0, i1, j0, j1), inclusive bounds."""
        i0, j0 = self.origin
        return (i0, i0 + nr, j0, j0 + nr)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return (
            f"RefinementPatch(index={self.index}, origin={self.origin}, size={self.size}, "
            f"activations={self.activations}, sub_iterations_done={self.sub_iterations_done})"
        )


def make_patches(n: int, nr: int, nr_true: int, dtype=np.float64) -> Tuple[RefinementPatch, ...]:
    """Allocate the four zero-initialised corner refinements."""
    return tuple(
        RefinementPatch(index=g, origin=origin, grid=Grid.zeros(nr_true, dtype))
        for g, origin in enumerate(patch_origins(n, nr))
    )


__all__ = [
    "NUM_PATCHES",
    "Grid",
    "RefinementPatch",
    "patch_origins",
    "make_patches",
]
