"""
Basis Registry for lazy-wavepacket
==================================

Discretized position and momentum bases on a periodic 1D grid.

A position basis samples [xmin, xmax) with n points:

    x_j = xmin + j * dx,        dx = (xmax - xmin) / n

Its conjugate momentum basis uses the standard FFT frequency grid:

    p_k = 2π * fftfreq(n, dx)[k],   dp = 2π / (xmax - xmin)

so that dx * dp * n = 2π (FFT duality). Both bases are immutable and
may be shared freely between threads.
"""

import numpy as np
from scipy.fft import fftfreq
from dataclasses import dataclass, field
from typing import Union

from .errors import InvalidRangeError, IncompatibleBasisError


# =============================================================================
# Bases
# =============================================================================

@dataclass(frozen=True)
class PositionBasis:
    """
    Periodic position grid.

    Attributes:
        xmin: Lower bound (included)
        xmax: Upper bound (excluded, identified with xmin)
        n: Number of sample points

    Example:
        >>> b = PositionBasis(-30.0, 30.0, 200)
        >>> b.spacing
        0.3
    """
    xmin: float
    xmax: float
    n: int

    def __post_init__(self):
        _validate_range(self.xmin, self.xmax, self.n)
        object.__setattr__(self, 'xmin', float(self.xmin))
        object.__setattr__(self, 'xmax', float(self.xmax))
        object.__setattr__(self, 'n', int(self.n))

    @property
    def lower(self) -> float:
        return self.xmin

    @property
    def upper(self) -> float:
        return self.xmax

    @property
    def length(self) -> float:
        """Box length L = xmax - xmin"""
        return self.xmax - self.xmin

    @property
    def spacing(self) -> float:
        """Grid spacing dx"""
        return self.length / self.n

    @property
    def points(self) -> np.ndarray:
        """Sample points x_j (fresh array each call)"""
        return self.xmin + np.arange(self.n) * self.spacing

    def __len__(self) -> int:
        return self.n

    def __repr__(self) -> str:
        return f"PositionBasis(xmin={self.xmin}, xmax={self.xmax}, n={self.n})"


@dataclass(frozen=True)
class MomentumBasis:
    """
    Momentum grid conjugate to a PositionBasis.

    Points are kept in FFT order (zero frequency first, negative
    frequencies in the second half) so that a plain FFT maps position
    amplitudes onto them without reordering.

    Attributes:
        position: The position basis this grid is derived from
    """
    position: PositionBasis
    n: int = field(init=False)

    def __post_init__(self):
        if not isinstance(self.position, PositionBasis):
            raise IncompatibleBasisError(
                f"Momentum basis must be derived from a PositionBasis, "
                f"got {type(self.position).__name__}"
            )
        object.__setattr__(self, 'n', self.position.n)

    @property
    def spacing(self) -> float:
        """dp = 2π / L"""
        return 2 * np.pi / self.position.length

    @property
    def lower(self) -> float:
        """-π / dx (Nyquist)"""
        return -np.pi / self.position.spacing

    @property
    def upper(self) -> float:
        """π / dx (Nyquist)"""
        return np.pi / self.position.spacing

    @property
    def points(self) -> np.ndarray:
        """Sample points p_k in FFT order"""
        return 2 * np.pi * fftfreq(self.n, d=self.position.spacing)

    def sorted_points(self) -> np.ndarray:
        """Sample points in ascending order (fftshift of points)"""
        return np.fft.fftshift(self.points)

    def __len__(self) -> int:
        return self.n

    def __repr__(self) -> str:
        return (f"MomentumBasis(pmin={self.lower:.4g}, pmax={self.upper:.4g}, "
                f"n={self.n})")


Basis = Union[PositionBasis, MomentumBasis]


def _validate_range(xmin: float, xmax: float, n: int):
    if not (np.isfinite(xmin) and np.isfinite(xmax)):
        raise InvalidRangeError(f"Basis bounds must be finite: [{xmin}, {xmax}]")
    if xmax <= xmin:
        raise InvalidRangeError(f"Empty range: xmax={xmax} <= xmin={xmin}")
    if not float(n).is_integer() or n < 2:
        raise InvalidRangeError(f"Need at least 2 grid points, got n={n}")


# =============================================================================
# Factory Functions
# =============================================================================

def make_position_basis(xmin: float, xmax: float, n: int) -> PositionBasis:
    """
    Create a periodic position basis on [xmin, xmax) with n points.

    Raises:
        InvalidRangeError: if xmax <= xmin, n < 2 or bounds are not finite
    """
    return PositionBasis(xmin, xmax, n)


def make_momentum_basis(position_basis: PositionBasis) -> MomentumBasis:
    """
    Derive the conjugate momentum basis of a position basis.

    Raises:
        IncompatibleBasisError: if position_basis is not a PositionBasis
    """
    return MomentumBasis(position_basis)


def are_conjugate(a: Basis, b: Basis) -> bool:
    """True if a and b are a position/momentum pair on the same grid."""
    if isinstance(a, PositionBasis) and isinstance(b, MomentumBasis):
        return b.position == a
    if isinstance(a, MomentumBasis) and isinstance(b, PositionBasis):
        return a.position == b
    return False


__all__ = [
    'PositionBasis',
    'MomentumBasis',
    'Basis',
    'make_position_basis',
    'make_momentum_basis',
    'are_conjugate',
]
