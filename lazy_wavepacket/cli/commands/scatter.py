"""
Scatter Command
===============

Gaussian wave packet on a square barrier.

Usage:
    lazy-wavepacket scatter --V0 1.0 --width 5.0 --p0 1.0 -o result.json
"""

import typer
from typing import Optional
from pathlib import Path

from ..utils import (
    print_banner, print_section, print_key_value,
    save_json, error_exit
)
from ...core.errors import WavepacketError
from ...solvers.time_evolution import EvolutionConfig
from ...solvers.scattering import ScatteringConfig, run_barrier_scattering


def scatter(
    xmin: float = typer.Option(-30.0, "--xmin", help="Grid lower bound"),
    xmax: float = typer.Option(30.0, "--xmax", help="Grid upper bound"),
    n: int = typer.Option(200, "-N", "--points", help="Number of grid points"),
    V0: float = typer.Option(1.0, "--V0", help="Barrier height"),
    width: float = typer.Option(5.0, "--width", help="Barrier width"),
    x0: float = typer.Option(-15.0, "--x0", help="Initial packet center"),
    p0: float = typer.Option(1.0, "--p0", help="Initial mean momentum"),
    sigma0: float = typer.Option(4.0, "--sigma0", help="Initial packet width"),
    tmax: float = typer.Option(2 * 15 / 1.2, "--tmax", help="Final time"),
    steps: int = typer.Option(20, "--steps", help="Number of sample times"),
    method: str = typer.Option("RK45", "--method", help="RK45 or DOP853"),
    rtol: float = typer.Option(1e-8, "--rtol", help="Relative tolerance"),
    atol: float = typer.Option(1e-10, "--atol", help="Absolute tolerance"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Output JSON file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """
    Run a square barrier scattering simulation.

    Example:
        lazy-wavepacket scatter --V0 1.0 --width 5.0 --p0 1.0
    """
    print_banner()

    typer.echo("🌊 Barrier scattering")
    typer.echo("─" * 50)
    print_key_value("Grid", f"[{xmin}, {xmax}), N={n}")
    print_key_value("Barrier", f"V0={V0}, width={width}")
    print_key_value("Packet", f"x0={x0}, p0={p0}, σ0={sigma0}")
    print_key_value("Time", f"0 → {tmax:.4g} ({steps} samples)")
    print_key_value("Method", method)
    typer.echo()

    config = ScatteringConfig(
        xmin=xmin, xmax=xmax, n=n,
        V0=V0, width=width,
        x0=x0, sigma0=sigma0, p0=p0,
        tmax=tmax, n_times=steps,
    )
    evolution = EvolutionConfig(method=method, rtol=rtol, atol=atol, verbose=verbose)

    try:
        with typer.progressbar(length=steps, label="Evolving") as progress:
            result = run_barrier_scattering(
                config, evolution,
                callback=lambda i, t, state: progress.update(1),
            )
    except (WavepacketError, ValueError) as e:
        error_exit(f"Simulation failed: {e}",
                   "Check grid bounds, time grid and tolerances")

    trajectory = result.trajectory
    check = trajectory.check_norm_conservation()

    print_section("Results", "📊")
    print_key_value("Initial norm", f"{trajectory.norms[0]:.8f}")
    print_key_value("Final norm", f"{trajectory.norms[-1]:.8f}")
    print_key_value("Max norm drift", f"{check['max_drift']:.2e}")
    if 'energy_drift' in check:
        print_key_value("Energy drift", f"{check['energy_drift']:.2e}")
    print_key_value("Reflected", f"{result.split.reflected:.6f}")
    print_key_value("Inside barrier", f"{result.split.inside:.6f}")
    print_key_value("Transmitted", f"{result.split.transmitted:.6f}")
    print_key_value("RK steps", trajectory.n_steps)
    print_key_value("H applications", trajectory.n_rhs)

    if output:
        save_json(result.summary(), output)

    typer.echo("\n✅ Done!")
