"""stencil.py — apply the convolution stencil to a grid.

The same routine serves the background and the refinements; only the weight
table differs. Output is accumulated (``out += ...``), never overwritten, so
the interior of `out` holds a running sum over all passes.

Each stencil offset is applied as one vectorised update over a rectangle of
interior cells. Tiling only changes the rectangles: every cell still receives
the offsets in the same order with the same operands, so tiled and untiled
passes are bit-identical.
"""
from __future__ import annotations

from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from .grid import Grid
from .weights import Offset

Block = Tuple[int, int, int, int]  # (y0, y1, x0, x1), half-open


def iter_tiles(size: int, radius: int, tile_size: Optional[int] = None) -> Iterator[Block]:
    """Yield interior blocks in row-major tile order.

    With `tile_size` None the whole interior is a single block. Blocks at the
    upper edges are clamped to size - radius.
    """
    lo, hi = radius, size - radius
    if hi <= lo:
        return
    if tile_size is None:
        yield (lo, hi, lo, hi)
        return
    if tile_size < 1:
        raise ValueError(f"tile size must be positive: {tile_size}")
    for jt in range(lo, hi, tile_size):
        for it in range(lo, hi, tile_size):
            yield (jt, min(hi, jt + tile_size), it, min(hi, it + tile_size))


def _apply_block(inp: np.ndarray, out: np.ndarray, table: np.ndarray, offsets: Sequence[Offset],
                 radius: int, block: Block) -> None:
    y0, y1, x0, x1 = block
    target = out[y0:y1, x0:x1]
    for dy, dx in offsets:
        w = table[dy + radius, dx + radius]
        if w == 0:
            continue
        target += w * inp[y0 + dy : y1 + dy, x0 + dx : x1 + dx]


def apply_stencil(
    grid: Grid,
    table: np.ndarray,
    offsets: Sequence[Offset],
    radius: int,
    tile_size: Optional[int] = None,
) -> Grid:
    """Accumulate one stencil pass of `grid.inp` into the interior of `grid.out`.

    Parameters
    ----------
    grid : Grid
        Buffers to read from / accumulate into.
    table : np.ndarray
        (2r+1)×(2r+1) weights indexed [dy + r, dx + r].
    offsets : sequence of (dy, dx)
        Footprint in visiting order (see `weights.stencil_offsets`).
    radius : int
        Stencil radius; boundary cells of this width are left untouched.
    tile_size : int, optional
        Side of the square loop tiles; None for a single untiled sweep.
    """
    if table.shape != (2 * radius + 1, 2 * radius + 1):
        raise ValueError(f"weight table shape {table.shape} does not match radius {radius}")
    for block in iter_tiles(grid.size, radius, tile_size):
        _apply_block(grid.inp, grid.out, table, offsets, radius, block)
    return grid


def perturb(grid: Grid, amount: float = 1.0) -> Grid:
    """Add `amount` to every input cell, boundary included."""
    grid.inp += grid.dtype.type(amount)
    return grid


def stencil_flops(grid: Grid, radius: int, stencil_size: int) -> int:
    """Flops of one pass over the interior: one multiply-add per point plus one."""
    return grid.interior_points(radius) * (2 * stencil_size + 1)


__all__ = ["iter_tiles", "apply_stencil", "perturb", "stencil_flops"]
