"""
Info Command
============

Show version and component information.

Usage:
    lazy-wavepacket info
"""

import typer
import numpy as np
import scipy

from ... import __version__
from ..utils import print_banner, print_section, print_key_value


def info():
    """Show version and component information."""
    print_banner()

    print_section("Package Information", "📦")
    print_key_value("Version", __version__)
    print_key_value("Package", "lazy-wavepacket")
    print_key_value("NumPy", np.__version__)
    print_key_value("SciPy", scipy.__version__)

    print_section("Lazy Operators (4)", "🧮")
    print_key_value("1. Diagonal", "Per-point multipliers, O(n)")
    print_key_value("2. Transform", "Position <-> momentum FFT, O(n log n)")
    print_key_value("3. DeferredSum", "Σ c_k A_k, term by term")
    print_key_value("4. DeferredProduct", "A_1 ... A_m, right to left")

    print_section("Integrator", "⏱️")
    print_key_value("Methods", "RK45, DOP853 (adaptive, embedded)")
    print_key_value("Sampling", "Exact hit of every requested time")

    print_section("Key Insight", "💡")
    typer.echo("  H = T(x←p) · p²/2 · T(p←x) + V(x)")
    typer.echo("  H|ψ⟩ costs two FFTs; the n×n matrix is never built.")
