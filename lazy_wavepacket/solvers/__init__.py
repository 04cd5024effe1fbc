"""
lazy-wavepacket Solvers
=======================

Numerical solvers for lazy operator simulations.

Modules:
  - time_evolution: Adaptive Runge-Kutta Schrödinger / von Neumann evolution
  - scattering: Square barrier wave packet scattering
"""

from .time_evolution import (
    EvolutionStatus,
    EvolutionConfig,
    Trajectory,
    TimeEvolutionEngine,
    evolve,
    quick_evolve,
)

from .scattering import (
    ScatteringConfig,
    ScatteringResult,
    run_barrier_scattering,
)


__all__ = [
    'EvolutionStatus',
    'EvolutionConfig',
    'Trajectory',
    'TimeEvolutionEngine',
    'evolve',
    'quick_evolve',

    'ScatteringConfig',
    'ScatteringResult',
    'run_barrier_scattering',
]
