"""config.py — validated run parameters for the AMR stencil kernel.

`AMRConfig` collects every integer the command line supplies and checks the
legal ranges up front, before any grid is allocated. Derived quantities (mesh
spacing of the refinements, expansion factor, refinement grid size, tiling)
are exposed as properties so there is a single place computing them.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .domain import Precision, make_precision
from .weights import normalize_shape


@dataclass(frozen=True, slots=True)
class AMRConfig:
    """Parameters of one kernel run.

    Parameters
    ----------
    iterations : int
        Timed iterations (one extra untimed warm-up iteration is always run).
    n : int
        Linear background grid size.
    nr : int
        Linear refinement size in background cells.
    level : int
        Refinement level; expansion factor is 2**level.
    period : int
        Iterations between two refinement activations.
    duration : int
        Iterations, from activation, during which a refinement is advanced.
    sub_iterations : int
        Stencil passes on the active refinement per iteration.
    tile_size : int, optional
        Loop tile size; <= 0 or > n means untiled.
    radius : int, optional (default: 2)
        Stencil radius.
    shape : str, optional (default: 'star')
        'star' or 'compact'.
    precision : str, optional (default: 'double')
        'double' or 'single'.
    """

    iterations: int
    n: int
    nr: int
    level: int
    period: int
    duration: int
    sub_iterations: int
    tile_size: int = 0
    radius: int = 2
    shape: str = "star"
    precision: str = "double"

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError(f"iterations must be >= 1 : {self.iterations}")
        if self.n < 2:
            raise ValueError(f"grid must have at least one cell: {self.n}")
        if self.nr < 1:
            raise ValueError(f"refinements must have at least one cell: {self.nr}")
        if self.nr >= self.n:
            raise ValueError(f"refinements must be contained in background grid: {self.nr}")
        if self.level < 0:
            raise ValueError(f"refinement levels must be >= 0 : {self.level}")
        if self.period < 1:
            raise ValueError(f"refinement period must be at least one: {self.period}")
        if self.duration < 1 or self.duration > self.period:
            raise ValueError(
                f"refinement duration must be positive, no greater than period: {self.duration}"
            )
        if self.sub_iterations < 1:
            raise ValueError(f"refinement sub-iterations must be positive: {self.sub_iterations}")
        if self.radius < 1:
            raise ValueError(f"Stencil radius {self.radius} should be positive")
        if 2 * self.radius + 1 > self.n:
            raise ValueError(f"Stencil radius {self.radius} exceeds grid size {self.n}")
        if 2 * self.radius + 1 > self.nr_true:
            raise ValueError(f"Stencil radius {self.radius} exceeds refinement size {self.nr_true}")
        # normalise aliases
        object.__setattr__(self, "shape", normalize_shape(self.shape))
        object.__setattr__(self, "precision", make_precision(self.precision).name)

    # ----- derived quantities -----
    @property
    def expand(self) -> int:
        """Refinement cells per background cell."""
        return 1 << self.level

    @property
    def hr(self) -> float:
        """Mesh spacing of the refinements relative to the background."""
        return 1.0 / self.expand

    @property
    def nr_true(self) -> int:
        """Linear size of a refinement grid in refinement cells."""
        return self.nr * self.expand + 1

    @property
    def tiling(self) -> bool:
        return 0 < self.tile_size <= self.n

    @property
    def effective_tile_size(self) -> int | None:
        """Tile size handed to the stencil, None when untiled."""
        return self.tile_size if self.tiling else None

    @property
    def precision_info(self) -> Precision:
        return make_precision(self.precision)

    @property
    def dtype(self) -> np.dtype:
        return self.precision_info.dtype

    @property
    def epsilon(self) -> float:
        return self.precision_info.epsilon


__all__ = ["AMRConfig"]
