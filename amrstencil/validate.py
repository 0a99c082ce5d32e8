"""validate.py — analytic correctness check of the background and refinements.

Every stencil pass adds exactly COEFX + COEFY to each interior output cell:
the input is a linear ramp (plus a constant that the zero-sum weights
ignore) and the weights reproduce the ramp's slope. After k passes the L1
norm of a grid's output, the mean absolute value over its interior, must
therefore equal k * (COEFX + COEFY).

Key APIs
--------
- l1_norm(grid, radius): mean |out| over interior cells.
- reference_norm(passes): analytic value after `passes` stencil passes.
- background_passes / patch_passes: how many passes each grid received.
- validate(background, patches, ...): compare all five grids and return a
  ValidationReport.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from .domain import COEFX, COEFY
from .grid import Grid, RefinementPatch
from .schedule import advance_count


@dataclass(frozen=True, slots=True)
class NormCheck:
    label: str
    norm: float
    reference: float
    passed: bool


@dataclass(slots=True)
class ValidationReport:
    """Outcome of validating every grid of a run."""

    checks: List[NormCheck] = field(default_factory=list)

    @property
    def validates(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def failures(self) -> List[NormCheck]:
        return [c for c in self.checks if not c.passed]


def l1_norm(grid: Grid, radius: int) -> float:
    """Mean absolute value of the output buffer over interior cells."""
    interior = grid.out[grid.interior(radius)]
    if interior.size == 0:
        raise ValueError(f"grid of size {grid.size} has no interior for radius {radius}")
    total = np.abs(interior).sum(dtype=grid.dtype)
    return float(total / grid.dtype.type(interior.size))


def reference_norm(passes: int) -> float:
    return float(passes) * (COEFX + COEFY)


def background_passes(iterations: int) -> int:
    """Stencil passes on the background: the timed iterations plus the warm-up."""
    return iterations + 1


def patch_passes(patch: int, iterations: int, period: int, duration: int, sub_iterations: int) -> int:
    """Stencil passes executed on refinement `patch` over a whole run."""
    return sub_iterations * advance_count(patch, iterations + 1, period, duration)


def check(label: str, grid: Grid, radius: int, passes: int, epsilon: float) -> NormCheck:
    norm = l1_norm(grid, radius)
    reference = reference_norm(passes)
    return NormCheck(label, norm, reference, abs(norm - reference) <= epsilon)


def validate(
    background: Grid,
    patches: Sequence[RefinementPatch],
    *,
    radius: int,
    iterations: int,
    period: int,
    duration: int,
    sub_iterations: int,
    epsilon: float,
) -> ValidationReport:
    """Compare the background and every refinement against its analytic norm."""
    report = ValidationReport()
    report.checks.append(check("background", background, radius, background_passes(iterations), epsilon))
    for patch in patches:
        passes = patch_passes(patch.index, iterations, period, duration, sub_iterations)
        report.checks.append(check(f"refinement {patch.index}", patch.grid, radius, passes, epsilon))
    return report


__all__ = [
    "NormCheck",
    "ValidationReport",
    "l1_norm",
    "reference_norm",
    "background_passes",
    "patch_passes",
    "check",
    "validate",
]
