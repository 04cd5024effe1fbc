"""
CLI Utilities
=============

Common utilities shared across CLI commands.
"""

import typer
import numpy as np
import json
from pathlib import Path
from typing import Any, Optional

from .. import __version__


def print_banner():
    """Print welcome banner."""
    typer.echo(f"""
╔═══════════════════════════════════════════════════════════════╗
║                      lazy-wavepacket                          ║
║                        v{__version__:<10}                            ║
║        ~ Wave packets with lazy FFT operators ~               ║
╚═══════════════════════════════════════════════════════════════╝
    """)


def print_section(title: str, emoji: str = "📦"):
    """Print section header."""
    typer.echo(f"\n{emoji} {title}")
    typer.echo("─" * 50)


def print_key_value(key: str, value: Any, indent: int = 2):
    """Print key-value pair."""
    spaces = " " * indent
    typer.echo(f"{spaces}{key}: {value}")


def _json_default(x):
    if isinstance(x, np.floating):
        return float(x)
    if isinstance(x, np.integer):
        return int(x)
    if isinstance(x, np.ndarray):
        return x.tolist()
    raise TypeError(f"Object of type {type(x).__name__} is not JSON serializable")


def save_json(data: dict, output: Path, default_serializer=None):
    """Save data to JSON file."""
    if default_serializer is None:
        default_serializer = _json_default

    output.write_text(json.dumps(data, indent=2, default=default_serializer))
    typer.echo(f"\n💾 Saved to {output}")


def error_exit(message: str, hint: Optional[str] = None):
    """Print error and exit."""
    typer.echo(f"❌ {message}", err=True)
    if hint:
        typer.echo(f"   {hint}", err=True)
    raise typer.Exit(1)
