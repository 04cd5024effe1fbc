"""
Hamiltonian Builders for lazy-wavepacket
========================================

Build lazy Hamiltonians for a particle on a periodic 1D grid.

    H = T⁻¹ · p²/2m · T  +  V(x)
        └─ kinetic ─┘     └ potential ┘

The kinetic term is a DeferredProduct of two FFTs around a momentum
diagonal; the potential term is a position diagonal. The sum is a
DeferredSum, so applying H costs two FFTs plus O(n) work.

Key Features:
  - Keeps H_kinetic and H_potential separately accessible
  - Square barrier potential used in scattering experiments
  - Compatible with TimeEvolutionEngine (only apply() is used)
"""

import numpy as np
from typing import Callable, Optional

from .basis import PositionBasis, make_momentum_basis
from .operators import (
    DeferredProduct,
    DeferredSum,
    DiagonalOperator,
    momentum_operator,
    potential_operator,
    transform,
)
from .errors import (
    IncompatibleBasisError,
    InvalidRangeError,
    NonHermitianOperatorError,
)


# =============================================================================
# Potentials
# =============================================================================

def square_barrier(height: float, width: float,
                   center: float = 0.0) -> Callable[[np.ndarray], np.ndarray]:
    """
    Square barrier V(x) = height for |x - center| <= width/2, else 0.

    Returns a pure vectorized function suitable for potential_operator().
    """
    if not width > 0:
        raise InvalidRangeError(f"Barrier width must be positive, got {width}")
    half = width / 2

    def V(x):
        x = np.asarray(x, dtype=float)
        return np.where(np.abs(x - center) <= half, float(height), 0.0)

    return V


# =============================================================================
# Hamiltonian Builder
# =============================================================================

class HamiltonianBuilder:
    """
    Build lazy Hamiltonians on a position basis.

    Attributes:
        bx: Position basis
        bp: Conjugate momentum basis
        mass: Particle mass (ħ = 1)

    Example:
        >>> bx = make_position_basis(-30, 30, 200)
        >>> builder = HamiltonianBuilder(bx)
        >>> H = builder.hamiltonian(square_barrier(1.0, 5.0))
        >>> H.apply(psi0)
    """

    def __init__(self, position_basis: PositionBasis, mass: float = 1.0):
        if not isinstance(position_basis, PositionBasis):
            raise IncompatibleBasisError(
                f"HamiltonianBuilder needs a PositionBasis, got {position_basis!r}"
            )
        if not mass > 0:
            raise InvalidRangeError(f"Mass must be positive, got {mass}")

        self.bx = position_basis
        self.bp = make_momentum_basis(position_basis)
        self.mass = mass

        self.Txp = transform(self.bx, self.bp)
        self.Tpx = transform(self.bp, self.bx)

    def kinetic_diagonal(self) -> DiagonalOperator:
        """p²/2m in the momentum basis"""
        return momentum_operator(self.bp) ** 2 / (2 * self.mass)

    def kinetic(self) -> DeferredProduct:
        """
        Kinetic energy in the position basis.

        H_K = T(x←p) · p²/2m · T(p←x)
        """
        return DeferredProduct([self.Txp, self.kinetic_diagonal(), self.Tpx])

    def potential(self, V: Callable) -> DiagonalOperator:
        """
        Potential energy, diagonal in the position basis.

        Raises:
            NonHermitianOperatorError: if V takes complex values
        """
        V_op = potential_operator(self.bx, V)
        if not V_op.is_real:
            raise NonHermitianOperatorError(
                "Hamiltonian potentials must be real; combine complex "
                "potentials with kinetic_operator() explicitly"
            )
        return V_op

    def hamiltonian(self, V: Optional[Callable] = None) -> DeferredSum:
        """
        Full Hamiltonian H = H_K + H_V.

        Args:
            V: Potential function (free particle if None)

        Returns:
            DeferredSum of the kinetic product and the potential diagonal
        """
        if V is None:
            V = np.zeros_like
        return DeferredSum([self.kinetic(), self.potential(V)])

    def hamiltonian_KV(self, V: Callable):
        """
        Hamiltonian split into kinetic and potential parts.

        Returns:
            (H_K, H_V) tuple
        """
        return self.kinetic(), self.potential(V)

    def __repr__(self) -> str:
        return f"HamiltonianBuilder({self.bx!r}, mass={self.mass})"


# =============================================================================
# Factory Functions
# =============================================================================

def kinetic_operator(position_basis: PositionBasis, mass: float = 1.0) -> DeferredProduct:
    """Lazy kinetic energy operator on a position basis."""
    return HamiltonianBuilder(position_basis, mass).kinetic()


def build_hamiltonian(position_basis: PositionBasis,
                      V: Optional[Callable] = None,
                      mass: float = 1.0) -> DeferredSum:
    """
    Factory function for a lazy particle Hamiltonian.

    Args:
        position_basis: Position grid
        V: Potential function of x
        mass: Particle mass

    Returns:
        DeferredSum H = H_K + H_V
    """
    return HamiltonianBuilder(position_basis, mass).hamiltonian(V)


__all__ = [
    'HamiltonianBuilder',
    'build_hamiltonian',
    'kinetic_operator',
    'square_barrier',
]
