"""
lazy-wavepacket Examples
========================

Example scripts demonstrating lazy operator simulations.

Examples:
  - barrier_scattering.py: Gaussian packet on a square barrier

Usage:
    python -m lazy_wavepacket.examples.barrier_scattering
"""

__all__ = [
    'run_barrier_scattering_demo',
]


# Lazy import to avoid running anything on package import
def run_barrier_scattering_demo():
    """Run barrier scattering demonstration."""
    from .barrier_scattering import main
    main()
