"""interpolate.py — seed a refinement from the background solution.

The refinement mesh is `expand` times finer than the background. When the
two coincide (level 0) seeding is an index-mapped copy; otherwise a
separable bilinear scheme is used:

1) x-pass: on every fine row that lies on a coarse row (jr = 0, e, 2e, ...)
   blend the two floor-neighbouring coarse columns with weights (xr-xb) and
   (1-(xr-xb)). The last fine column copies the boundary coarse cell.
2) y-pass: every other fine row blends the two nearest coarse-aligned fine
   rows computed by the x-pass, with the same linear weights.

The last fine row is produced by the x-pass only, so nothing is
extrapolated past the covered background cells. A linear field is
reproduced exactly.
"""
from __future__ import annotations

from typing import Tuple

import numpy as np


def interpolate(
    background: np.ndarray,
    patch: np.ndarray,
    origin: Tuple[int, int],
    expand: int,
    hr: float,
) -> np.ndarray:
    """Overwrite `patch` with the background solution around `origin`.

    Parameters
    ----------
    background : np.ndarray
        Background input buffer, [y, x].
    patch : np.ndarray
        Refinement input buffer to fill in place, shape (m, m) with
        m = nr*expand + 1.
    origin : tuple[int, int]
        (i, j) background coordinate matching patch cell (0, 0).
    expand : int
        Refinement cells per background cell.
    hr : float
        Refinement mesh spacing in background units (1/expand).

    Returns
    -------
    np.ndarray
        `patch`, for chaining.
    """
    m = patch.shape[0]
    i0, j0 = origin
    dtype = patch.dtype
    one = dtype.type(1.0)
    hr = dtype.type(hr)

    if hr == one:
        patch[:, :] = background[j0 : j0 + m, i0 : i0 + m]
        return patch

    rend_i = i0 + (m - 1) // expand

    # x-pass on coarse-aligned fine rows
    rows = np.arange(0, m, expand)
    jb = j0 + np.arange(rows.size)
    xr = dtype.type(i0) + hr * np.arange(m - 1, dtype=dtype)
    ib = xr.astype(np.intp)
    xb = ib.astype(dtype)
    coarse = background[jb, :]
    patch[rows, : m - 1] = coarse[:, ib + 1] * (xr - xb) + coarse[:, ib] * (xb + one - xr)
    patch[rows, m - 1] = background[jb, rend_i]

    # y-pass; aligned rows blend with weight (1, 0) and keep their values
    jr = np.arange(m - 1)
    yr = hr * jr.astype(dtype)
    jlow = yr.astype(np.intp)
    yb = np.floor(yr)
    below = patch[jlow * expand, :]
    above = patch[(jlow + 1) * expand, :]
    patch[: m - 1, :] = above * (yr - yb)[:, np.newaxis] + below * (yb + one - yr)[:, np.newaxis]
    return patch


def interpolation_flops(nr: int, nr_true: int) -> int:
    """Floating point operations of one interpolation, as counted for the rate."""
    return nr_true * 3 * (nr_true + nr)


__all__ = ["interpolate", "interpolation_flops"]
