"""
lazy-wavepacket CLI
===================

Command-line interface for lazy operator wave packet simulations.

Usage:
    lazy-wavepacket info
    lazy-wavepacket scatter --V0 1.0 --width 5.0 --p0 1.0
    lazy-wavepacket scatter -N 256 --tmax 30 -o result.json

Architecture:
    cli/
    ├── __init__.py       # This file - app definition
    ├── commands/         # Individual command modules
    │   ├── info.py
    │   └── scatter.py
    └── utils.py          # Shared utilities
"""

import typer

# Create CLI app
app = typer.Typer(
    name="lazy-wavepacket",
    help="Wave packet dynamics with lazy FFT operators",
    add_completion=False,
)


# =============================================================================
# Register Commands
# =============================================================================

from .commands import info, scatter

app.command()(info)
app.command()(scatter)


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
