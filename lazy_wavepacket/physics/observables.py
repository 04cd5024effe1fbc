"""
Observables for lazy-wavepacket
===============================

Expectation values and probability bookkeeping for kets and density
operators. All operator access goes through the lazy apply(), so these
work on DeferredSum / DeferredProduct Hamiltonians without building a
matrix.

Scattering bookkeeping:
    R = P(x < barrier_left)        reflected
    I = P(barrier_left <= x <= barrier_right)
    T = P(x > barrier_right)       transmitted
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict

from ..core.basis import PositionBasis
from ..core.states import Ket, DensityOperator
from ..core.operators import Operator, DeferredProduct
from ..core.errors import DimensionMismatchError, InvalidRangeError


# =============================================================================
# Expectation Values
# =============================================================================

def expect(op: Operator, state) -> complex:
    """
    ⟨ψ|op|ψ⟩ for a Ket, tr(op ρ) for a DensityOperator.

    Raises:
        DimensionMismatchError: if op does not map the state's basis to itself
    """
    if op.basis_l != op.basis_r:
        raise DimensionMismatchError(
            f"expect() needs a square operator, got {op.basis_r!r} -> {op.basis_l!r}"
        )
    if isinstance(state, Ket):
        return complex(np.vdot(state.data, op.apply(state).data))
    if isinstance(state, DensityOperator):
        return complex(np.trace(op.apply(state).data))
    raise TypeError(f"Cannot take expectation value in {type(state).__name__}")


def variance(op: Operator, state) -> complex:
    """⟨op²⟩ - ⟨op⟩²"""
    mean = expect(op, state)
    second = expect(DeferredProduct([op, op]), state)
    return second - mean ** 2


def norm(state) -> float:
    """‖ψ‖ for kets, tr(ρ) (real part) for density operators."""
    if isinstance(state, Ket):
        return state.norm()
    if isinstance(state, DensityOperator):
        return float(np.real(state.trace()))
    raise TypeError(f"Unsupported state: {type(state).__name__}")


def normalize(state):
    """Unit-norm ket or unit-trace density operator."""
    if isinstance(state, Ket):
        return state.normalized()
    if isinstance(state, DensityOperator):
        tr = state.trace()
        if tr == 0:
            raise InvalidRangeError("Cannot normalize a traceless density operator")
        return state * (1.0 / tr)
    raise TypeError(f"Unsupported state: {type(state).__name__}")


# =============================================================================
# Probability Densities
# =============================================================================

def probability_density(state) -> np.ndarray:
    """|ψ_j|² for kets, diag(ρ) for density operators."""
    if isinstance(state, Ket):
        return np.abs(state.data) ** 2
    if isinstance(state, DensityOperator):
        return np.real(np.diag(state.data)).copy()
    raise TypeError(f"Unsupported state: {type(state).__name__}")


def region_probability(state, lower: float = -np.inf, upper: float = np.inf) -> float:
    """
    Probability mass on position points x_j with lower <= x_j <= upper.

    Raises:
        DimensionMismatchError: if the state is not on a PositionBasis
    """
    if not isinstance(state.basis, PositionBasis):
        raise DimensionMismatchError(
            f"region_probability needs a position-basis state, got {state.basis!r}"
        )
    if upper < lower:
        raise InvalidRangeError(f"Empty region [{lower}, {upper}]")
    x = state.basis.points
    mask = (x >= lower) & (x <= upper)
    return float(np.sum(probability_density(state)[mask]))


@dataclass(frozen=True)
class ScatteringSplit:
    """Probability mass left of, inside, and right of a barrier."""
    reflected: float
    inside: float
    transmitted: float

    @property
    def total(self) -> float:
        return self.reflected + self.inside + self.transmitted

    def to_dict(self) -> Dict[str, float]:
        return {
            'reflected': self.reflected,
            'inside': self.inside,
            'transmitted': self.transmitted,
        }


def scattering_split(state, barrier_left: float, barrier_right: float) -> ScatteringSplit:
    """
    Split probability around a barrier occupying [barrier_left, barrier_right].

    Grid points exactly on a barrier edge count as inside.
    """
    if barrier_right < barrier_left:
        raise InvalidRangeError(
            f"Barrier edges out of order: {barrier_left} > {barrier_right}"
        )
    if not isinstance(state.basis, PositionBasis):
        raise DimensionMismatchError(
            f"scattering_split needs a position-basis state, got {state.basis!r}"
        )
    x = state.basis.points
    rho = probability_density(state)
    return ScatteringSplit(
        reflected=float(np.sum(rho[x < barrier_left])),
        inside=float(np.sum(rho[(x >= barrier_left) & (x <= barrier_right)])),
        transmitted=float(np.sum(rho[x > barrier_right])),
    )


__all__ = [
    'expect',
    'variance',
    'norm',
    'normalize',
    'probability_density',
    'region_probability',
    'ScatteringSplit',
    'scattering_split',
]
