"""domain.py — numeric precision and initial condition for the AMR kernel.

The kernel is verified against an analytic solution, so everything that
defines that solution lives here: the floating point precision of the run,
the validation tolerance that goes with it, and the linear ramp used as the
initial background field.

Main entry points
-----------------
- Precision: dtype + epsilon pair used by every grid of a run.
- make_precision(name): factory returning a Precision instance.
- linear_ramp(n, dtype): background initial condition COEFX*i + COEFY*j.

The ramp is stored with the grid convention used throughout the package:
arrays are indexed ``[y, x]`` (row ``j``, column ``i``) and C-contiguous, so
``x`` is the fast axis.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

COEFX: float = 1.0
COEFY: float = 1.0


@dataclass(frozen=True, slots=True)
class Precision:
    """Floating point type of a run and its validation tolerance.

    Parameters
    ----------
    name : str
        'double' or 'single'.
    dtype : np.dtype
        numpy dtype of every grid buffer and weight table.
    epsilon : float
        Largest accepted |norm - reference| during validation.
    """

    name: str
    dtype: np.dtype
    epsilon: float

    def __repr__(self) -> str:  # pragma: no cover - simple metadata repr
        return f"Precision(name={self.name!r}, epsilon={self.epsilon})"


DOUBLE = Precision("double", np.dtype(np.float64), 1.0e-8)
SINGLE = Precision("single", np.dtype(np.float32), 1.0e-3)


def make_precision(name: str) -> Precision:
    """Return the Precision matching `name` (case-insensitive, aliases ok)."""
    key = name.strip().lower()

    if key in {"double", "float64", "f8", "dp"}:
        return DOUBLE

    if key in {"single", "float", "float32", "f4", "sp"}:
        return SINGLE

    raise ValueError(f"Unknown precision '{name}'. Available: 'double', 'single'.")


def linear_ramp(n: int, dtype=np.float64) -> np.ndarray:
    """Return the n×n field f(i, j) = COEFX*i + COEFY*j as a [y, x] array."""
    if n <= 0:
        raise ValueError(f"linear_ramp: grid size must be positive: {n}")
    dtype = np.dtype(dtype)
    idx = np.arange(n, dtype=dtype)
    ramp = dtype.type(COEFX) * idx[np.newaxis, :] + dtype.type(COEFY) * idx[:, np.newaxis]
    return np.ascontiguousarray(ramp, dtype=dtype)


__all__ = [
    "COEFX",
    "COEFY",
    "Precision",
    "DOUBLE",
    "SINGLE",
    "make_precision",
    "linear_ramp",
]
