"""driver.py — iteration loop of the AMR stencil kernel.

This module connects the grids, the refinement schedule, the interpolator
and the stencil into the timed kernel loop, then validates the result.

Key APIs
--------
- AMRSimulation(config): allocates the background and the four refinements.
- AMRSimulation.step(iteration): one iteration (seed, sub-iterate, advance
  background, perturb inputs).
- AMRSimulation.run(verbose=False, listeners=()): warm-up + timed loop,
  validation and flop accounting, returns a RunResult.

Notes on the iteration count
----------------------------
`config.iterations` counts timed iterations. Iteration 0 is an untimed
warm-up, so iterations 0..config.iterations are executed and the background
receives config.iterations + 1 stencil passes. The flop count subtracts the
warm-up from the background and one pass-count from refinement 0 only.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from .config import AMRConfig
from .domain import linear_ramp
from .grid import Grid, RefinementPatch, make_patches
from .interpolate import interpolate, interpolation_flops
from .schedule import ScheduleStep, schedule
from .stencil import apply_stencil, perturb, stencil_flops
from .validate import ValidationReport, patch_passes, validate
from .weights import StencilWeights, make_weights


@dataclass(frozen=True, slots=True)
class RunResult:
    """Timing, work and validation outcome of a run."""

    report: ValidationReport
    elapsed: float
    flops: float
    iterations: int
    interpolations: int

    @property
    def validates(self) -> bool:
        return self.report.validates

    @property
    def mflops(self) -> float:
        if self.elapsed <= 0.0:
            return float("inf")
        return 1.0e-6 * self.flops / self.elapsed

    @property
    def avg_time(self) -> float:
        return self.elapsed / self.iterations


Listener = Callable[["AMRSimulation", ScheduleStep], None]


class AMRSimulation:
    """Background grid plus four periodically refreshed corner refinements.

    Parameters
    ----------
    config : AMRConfig
        Validated run parameters.
    weights : StencilWeights, optional
        Override the weight tables (e.g. to check validation sensitivity);
        built from `config` when omitted.
    """

    def __init__(self, config: AMRConfig, *, weights: Optional[StencilWeights] = None) -> None:
        self.config = config
        dtype = config.dtype
        self.weights = weights if weights is not None else make_weights(
            config.radius, config.shape, config.expand, dtype=dtype
        )
        self.background = Grid.from_input(linear_ramp(config.n, dtype))
        self.patches: Tuple[RefinementPatch, ...] = make_patches(config.n, config.nr, config.nr_true, dtype)
        self.num_interpolations = 0
        self.current_iteration = -1

    # ----- kernel pieces -----
    def activate(self, g: int) -> None:
        """Seed refinement `g` from the current background input."""
        patch = self.patches[g]
        interpolate(self.background.inp, patch.grid.inp, patch.origin, self.config.expand, self.config.hr)
        patch.activations += 1
        self.num_interpolations += 1

    def advance_patch(self, g: int) -> None:
        """Run the configured sub-iterations on refinement `g`, then perturb it."""
        cfg = self.config
        patch = self.patches[g]
        for _ in range(cfg.sub_iterations):
            apply_stencil(patch.grid, self.weights.refinement, self.weights.offsets,
                          cfg.radius, cfg.effective_tile_size)
        patch.sub_iterations_done += cfg.sub_iterations
        perturb(patch.grid)

    def advance_background(self) -> None:
        cfg = self.config
        apply_stencil(self.background, self.weights.background, self.weights.offsets,
                      cfg.radius, cfg.effective_tile_size)
        perturb(self.background)

    def step(self, iteration: int) -> ScheduleStep:
        """Execute one kernel iteration and return its schedule decision."""
        cfg = self.config
        s = schedule(iteration, cfg.period, cfg.duration)
        if s.just_activated:
            self.activate(s.active_patch)
        if s.should_advance:
            self.advance_patch(s.active_patch)
        self.advance_background()
        self.current_iteration = iteration
        return s

    # ----- run -----
    def validate(self) -> ValidationReport:
        cfg = self.config
        return validate(
            self.background,
            self.patches,
            radius=cfg.radius,
            iterations=cfg.iterations,
            period=cfg.period,
            duration=cfg.duration,
            sub_iterations=cfg.sub_iterations,
            epsilon=cfg.epsilon,
        )

    def flop_count(self) -> float:
        """Floating point work of the timed iterations (stencil + interpolation)."""
        cfg = self.config
        r = cfg.radius
        size = self.weights.stencil_size
        iterations_r = [
            patch_passes(g, cfg.iterations, cfg.period, cfg.duration, cfg.sub_iterations)
            for g in range(len(self.patches))
        ]
        # one untimed pass, booked against refinement 0 only
        iterations_r[0] -= 1
        flops = float(stencil_flops(self.background, r, size) * cfg.iterations)
        for patch, it in zip(self.patches, iterations_r):
            flops += stencil_flops(patch.grid, r, size) * it
        if cfg.level > 0:
            flops += (self.num_interpolations - 1) * interpolation_flops(cfg.nr, cfg.nr_true)
        return flops

    def run(self, *, verbose: bool = False, listeners: Iterable[Listener] = ()) -> RunResult:
        """Run the warm-up and timed iterations, then validate.

        Listeners are called as ``listener(simulation, step)`` after every
        iteration (warm-up included).
        """
        cfg = self.config
        callbacks: List[Listener] = list(listeners)
        start = time.perf_counter()
        for iteration in range(cfg.iterations + 1):
            if iteration == 1:
                start = time.perf_counter()
            s = self.step(iteration)
            if verbose:
                print(
                    f"iter {iteration}: patch={s.active_patch} "
                    f"seeded={int(s.just_activated)} advanced={int(s.should_advance)}"
                )
            for cb in callbacks:
                cb(self, s)
        elapsed = time.perf_counter() - start

        return RunResult(
            report=self.validate(),
            elapsed=elapsed,
            flops=self.flop_count(),
            iterations=cfg.iterations,
            interpolations=self.num_interpolations,
        )


def run_amr(config: AMRConfig, *, verbose: bool = False) -> RunResult:
    """Convenience wrapper: build an AMRSimulation and run it."""
    return AMRSimulation(config).run(verbose=verbose)


__all__ = ["RunResult", "AMRSimulation", "run_amr"]
