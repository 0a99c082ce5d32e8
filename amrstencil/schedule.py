"""schedule.py — round-robin lifecycle of the four refinements.

The schedule is a pure function of the iteration counter: patch
``(iteration // period) % 4`` owns the current window of `period`
iterations, it is (re)seeded at the first iteration of the window and
advanced during the first `duration` iterations of it. No state is kept
between calls.
"""
from __future__ import annotations

from typing import NamedTuple

from .grid import NUM_PATCHES


class ScheduleStep(NamedTuple):
    iteration: int
    active_patch: int
    just_activated: bool
    should_advance: bool


def _check(period: int, duration: int) -> None:
    if period < 1:
        raise ValueError(f"refinement period must be at least one: {period}")
    if duration < 1 or duration > period:
        raise ValueError(f"refinement duration must be positive, no greater than period: {duration}")


def schedule(iteration: int, period: int, duration: int) -> ScheduleStep:
    """Decide which refinement is seeded and/or advanced at `iteration`."""
    _check(period, duration)
    if iteration < 0:
        raise ValueError(f"iteration must be >= 0: {iteration}")
    phase = iteration % period
    return ScheduleStep(
        iteration=iteration,
        active_patch=(iteration // period) % NUM_PATCHES,
        just_activated=phase == 0,
        should_advance=phase < duration,
    )


def advance_count(patch: int, total_iterations: int, period: int, duration: int) -> int:
    """Number of iterations in [0, total_iterations) during which `patch` is advanced.

    Every full cycle of 4*period iterations advances each patch `duration`
    times; the trailing partial cycle reaches patch g after g*period
    iterations.
    """
    _check(period, duration)
    cycle = NUM_PATCHES * period
    full_cycles = total_iterations // cycle
    leftover = total_iterations % cycle
    return full_cycles * duration + min(max(0, leftover - patch * period), duration)


__all__ = ["ScheduleStep", "schedule", "advance_count"]
