"""
CLI Commands
============

All CLI commands for lazy-wavepacket.

Commands:
  - info: Show version and component information
  - scatter: Square barrier scattering simulation
"""

from .info import info
from .scatter import scatter

__all__ = [
    'info',
    'scatter',
]
