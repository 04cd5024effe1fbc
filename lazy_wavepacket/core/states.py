"""
Quantum States for lazy-wavepacket
==================================

Immutable state containers tied to a basis:

  - Ket:              |ψ⟩, complex amplitudes ψ_j on one basis
  - DensityOperator:  ρ, complex n×n matrix (pure or mixed)

Amplitudes are normalized as plain vectors (Σ|ψ_j|² = 1), i.e. they
already absorb the √dx quadrature weight of the continuum wavefunction.

Both containers copy their input and mark the backing array read-only,
so evaluators can never update a state in place.
"""

import numpy as np
from typing import Optional

from .basis import Basis, PositionBasis, MomentumBasis
from .errors import DimensionMismatchError, InvalidRangeError


def _frozen(data, ndim: int, shape, what: str) -> np.ndarray:
    arr = np.array(data, dtype=np.complex128, copy=True)
    if arr.ndim != ndim or arr.shape != shape:
        raise DimensionMismatchError(
            f"{what} expects shape {shape}, got {arr.shape}"
        )
    arr.setflags(write=False)
    return arr


# =============================================================================
# Ket
# =============================================================================

class Ket:
    """
    State vector |ψ⟩ on a basis.

    Attributes:
        basis: Basis the amplitudes are indexed by
        data: Read-only complex amplitude array (length basis.n)
    """

    __slots__ = ('basis', 'data')
    __array_ufunc__ = None

    def __init__(self, basis: Basis, data):
        object.__setattr__(self, 'basis', basis)
        object.__setattr__(self, 'data',
                           _frozen(data, 1, (basis.n,), f"Ket on {basis!r}"))

    def __setattr__(self, name, value):
        raise AttributeError(f"Ket is immutable; cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"Ket is immutable; cannot delete {name!r}")

    def norm(self) -> float:
        """L2 norm ‖ψ‖"""
        return float(np.linalg.norm(self.data))

    def normalized(self) -> 'Ket':
        nrm = self.norm()
        if nrm == 0:
            raise InvalidRangeError("Cannot normalize the zero vector")
        return Ket(self.basis, self.data / nrm)

    def inner(self, other: 'Ket') -> complex:
        """⟨self|other⟩"""
        self._check_same_basis(other)
        return complex(np.vdot(self.data, other.data))

    def _check_same_basis(self, other: 'Ket'):
        if not isinstance(other, Ket) or other.basis != self.basis:
            raise DimensionMismatchError(
                f"Kets live on different bases: {self.basis!r} vs "
                f"{getattr(other, 'basis', None)!r}"
            )

    def __add__(self, other: 'Ket') -> 'Ket':
        self._check_same_basis(other)
        return Ket(self.basis, self.data + other.data)

    def __sub__(self, other: 'Ket') -> 'Ket':
        self._check_same_basis(other)
        return Ket(self.basis, self.data - other.data)

    def __mul__(self, scalar) -> 'Ket':
        return Ket(self.basis, self.data * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar) -> 'Ket':
        return Ket(self.basis, self.data / scalar)

    def __neg__(self) -> 'Ket':
        return Ket(self.basis, -self.data)

    def __len__(self) -> int:
        return self.basis.n

    def __repr__(self) -> str:
        return f"Ket({self.basis!r}, norm={self.norm():.6f})"


# =============================================================================
# Density Operator
# =============================================================================

class DensityOperator:
    """
    Density operator ρ.

    A density operator normally lives on a single basis. Applying a
    transform from the left yields a mixed-basis matrix, so the column
    basis can be given separately via basis_r.

    Attributes:
        basis: Row basis (basis_l)
        basis_r: Column basis (defaults to basis)
        data: Read-only complex matrix
    """

    __slots__ = ('basis', 'basis_r', 'data')
    __array_ufunc__ = None

    def __init__(self, basis: Basis, data, basis_r: Optional[Basis] = None):
        basis_r = basis if basis_r is None else basis_r
        object.__setattr__(self, 'basis', basis)
        object.__setattr__(self, 'basis_r', basis_r)
        object.__setattr__(self, 'data',
                           _frozen(data, 2, (basis.n, basis_r.n),
                                   f"DensityOperator on {basis!r}"))

    def __setattr__(self, name, value):
        raise AttributeError(
            f"DensityOperator is immutable; cannot set {name!r}"
        )

    def __delattr__(self, name):
        raise AttributeError(
            f"DensityOperator is immutable; cannot delete {name!r}"
        )

    @classmethod
    def from_ket(cls, ket: Ket) -> 'DensityOperator':
        """Pure state projector |ψ⟩⟨ψ|"""
        return cls(ket.basis, np.outer(ket.data, ket.data.conj()))

    def trace(self) -> complex:
        return complex(np.trace(self.data))

    def purity(self) -> float:
        """tr(ρ²)"""
        return float(np.real(np.vdot(self.data.conj().T, self.data)))

    def dagger(self) -> 'DensityOperator':
        return DensityOperator(self.basis_r, self.data.conj().T, self.basis)

    def __add__(self, other: 'DensityOperator') -> 'DensityOperator':
        if (not isinstance(other, DensityOperator) or other.basis != self.basis
                or other.basis_r != self.basis_r):
            raise DimensionMismatchError("DensityOperators live on different bases")
        return DensityOperator(self.basis, self.data + other.data, self.basis_r)

    def __mul__(self, scalar) -> 'DensityOperator':
        return DensityOperator(self.basis, self.data * scalar, self.basis_r)

    __rmul__ = __mul__

    def __repr__(self) -> str:
        return f"DensityOperator({self.basis!r}, trace={self.trace().real:.6f})"


# =============================================================================
# Initial States
# =============================================================================

def gaussian_state(basis: Basis, x0: float, p0: float, sigma0: float) -> Ket:
    """
    Normalized Gaussian wave packet.

    Position basis:
        ψ(x) ∝ exp(i p0 (x - x0/2) - (x - x0)² / (2 σ0²))

    Momentum basis (its Fourier transform):
        ψ(p) ∝ exp(-i x0 (p - p0/2) - (p - p0)² σ0² / 2)

    The phase convention makes the two forms agree under transform().

    Args:
        basis: PositionBasis or MomentumBasis
        x0: Center in position
        p0: Mean momentum
        sigma0: Width in position (> 0)

    Returns:
        Ket with unit norm
    """
    if not sigma0 > 0:
        raise InvalidRangeError(f"sigma0 must be positive, got {sigma0}")

    if isinstance(basis, PositionBasis):
        x = basis.points
        psi = np.exp(1j * p0 * (x - x0 / 2) - (x - x0) ** 2 / (2 * sigma0 ** 2))
    elif isinstance(basis, MomentumBasis):
        p = basis.points
        psi = np.exp(-1j * x0 * (p - p0 / 2) - (p - p0) ** 2 * sigma0 ** 2 / 2)
    else:
        raise DimensionMismatchError(f"Unsupported basis: {basis!r}")

    return Ket(basis, psi).normalized()


__all__ = [
    'Ket',
    'DensityOperator',
    'gaussian_state',
]
