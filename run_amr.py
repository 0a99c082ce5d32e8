"""run_amr.py — command-line driver for the AMR stencil kernel.

Examples
--------
Run 100 timed iterations on a 1000×1000 background with 100-cell corner
refinements at level 2, a new refinement every 10 iterations, each alive for
5 iterations with 2 sub-iterations:

    python run_amr.py 100 1000 100 2 10 5 2

Same run with 32×32 loop tiles, a compact radius-3 stencil, and a plot of the
refinement layout saved to a PNG:

    python run_amr.py 100 1000 100 2 10 5 2 32 --stencil compact --radius 3 --plot layout --save layout.png

Notes
-----
- A tile size <= 0 or larger than the grid means untiled.
- One untimed warm-up iteration precedes the timed iterations.
- Exit status is 1 if the solution does not validate.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

from amrstencil.config import AMRConfig
from amrstencil.driver import AMRSimulation, RunResult


PLOT_CHOICES = ["layout", "background", "patches"]


def _add_kernel_args(parser: argparse.ArgumentParser) -> None:
    g = parser.add_argument_group("kernel")
    g.add_argument("iterations", type=int, help="Number of timed iterations")
    g.add_argument("n", type=int, help="Background grid size")
    g.add_argument("nr", type=int, help="Refinement size in background cells")
    g.add_argument("level", type=int, help="Refinement level (expansion 2**level)")
    g.add_argument("period", type=int, help="Iterations between refinement activations")
    g.add_argument("duration", type=int, help="Iterations a refinement stays alive")
    g.add_argument("sub_iterations", type=int, help="Stencil passes per refinement iteration")
    g.add_argument("tile_size", type=int, nargs="?", default=0,
                   help="Loop tile size; <= 0 or > n means untiled")


def _add_stencil_args(parser: argparse.ArgumentParser) -> None:
    g = parser.add_argument_group("stencil")
    g.add_argument("--radius", type=int, default=2, help="Stencil radius")
    g.add_argument("--stencil", type=str, default="star", help="Stencil shape: star|compact")
    g.add_argument("--precision", type=str, default="double", help="double|single")


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    g = parser.add_argument_group("output")
    g.add_argument("--verbose", action="store_true", help="Print one line per iteration")
    g.add_argument("--plot", type=str, nargs="*", default=[], choices=PLOT_CHOICES,
                   help="What to plot after the run")
    g.add_argument("--save", type=str, default=None, help="Save figure to path")


def print_banner(config: AMRConfig) -> None:
    print("Serial AMR stencil execution on 2D grid")
    print(f"Background grid size = {config.n}")
    print(f"Radius of stencil    = {config.radius}")
    print(f"Type of stencil      = {config.shape}")
    print(f"Data type            = {config.precision} precision")
    if config.tiling:
        print(f"Tile size            = {config.tile_size}")
    else:
        print("Untiled")
    print(f"Number of iterations = {config.iterations}")
    print("Refinements:")
    print(f"   Coarse grid cells = {config.nr}")
    print(f"   Grid size         = {config.nr_true}")
    print(f"   Period            = {config.period}")
    print(f"   Duration          = {config.duration}")
    print(f"   Level             = {config.level}")
    print(f"   Sub-iterations    = {config.sub_iterations}")


def report(result: RunResult, *, verbose: bool = False) -> None:
    for c in result.report.checks:
        if not c.passed:
            print(f"ERROR: L1 norm {c.label} = {c.norm:f}, Reference L1 norm = {c.reference:f}")
        elif verbose:
            print(f"Reference L1 norm {c.label} = {c.reference:f}, L1 norm = {c.norm:f}")
    if not result.validates:
        print("Solution does not validate")
        return
    print("Solution validates")
    print(f"Rate (MFlops/s): {result.mflops:f}  Avg time (s): {result.avg_time:f}")


def _plot(sim: AMRSimulation, what: List[str], save: str | None) -> None:
    import matplotlib.pyplot as plt

    from amrstencil.visualize import plot_grid, plot_layout, plot_patches

    for kind in what:
        if kind == "layout":
            fig, ax = plt.subplots(figsize=(6, 6))
            plot_layout(sim, ax=ax)
        elif kind == "background":
            fig, ax = plt.subplots(figsize=(6, 6))
            plot_grid(sim.background, sim.config.radius, ax=ax, title="Background")
        else:
            fig = plot_patches(sim)
        fig.tight_layout()
        if save:
            path = Path(save)
            if len(what) > 1:
                path = path.with_name(f"{kind}_{path.name}")
            fig.savefig(path, dpi=200, bbox_inches="tight")
            print(f"Saved figure to {path}")
    if not save:
        plt.show()


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="AMR stencil kernel")
    _add_kernel_args(parser)
    _add_stencil_args(parser)
    _add_output_args(parser)

    args = parser.parse_args(argv)

    try:
        config = AMRConfig(
            iterations=args.iterations,
            n=args.n,
            nr=args.nr,
            level=args.level,
            period=args.period,
            duration=args.duration,
            sub_iterations=args.sub_iterations,
            tile_size=args.tile_size,
            radius=args.radius,
            shape=args.stencil,
            precision=args.precision,
        )
    except ValueError as exc:
        parser.error(str(exc))

    print_banner(config)
    sim = AMRSimulation(config)
    result = sim.run(verbose=args.verbose)
    report(result, verbose=args.verbose)

    if args.plot:
        _plot(sim, args.plot, args.save)

    return 0 if result.validates else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
