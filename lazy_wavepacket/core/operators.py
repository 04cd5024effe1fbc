"""
Lazy Operators for lazy-wavepacket
==================================

Operators on position/momentum bases that never build an n×n matrix.

Variants (closed set):
  - DiagonalOperator:  per-point multipliers, O(n)
  - TransformOperator: FFT between a conjugate basis pair, O(n log n)
  - DeferredSum:       Σ_k c_k A_k, evaluated term by term
  - DeferredProduct:   c · A_1 A_2 ... A_m, folded right to left

Every operator maps states on basis_r (domain) to states on basis_l
(codomain). Application is defined recursively through apply_array(),
which acts along axis 0 so the same code handles kets (1D) and density
operators (2D, column-wise left multiplication).

Example:
    >>> bx = make_position_basis(-10, 10, 128)
    >>> bp = make_momentum_basis(bx)
    >>> Txp, Tpx = transform(bx, bp), transform(bp, bx)
    >>> H = Txp @ (momentum_operator(bp) ** 2 / 2) @ Tpx + potential_operator(bx, V)
    >>> H.apply(psi)
"""

import numbers
import numpy as np
from scipy.fft import fft, ifft
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from .basis import Basis, PositionBasis, MomentumBasis, are_conjugate
from .states import Ket, DensityOperator
from .errors import (
    IncompatibleBasisError,
    DimensionMismatchError,
    InvalidRangeError,
    NonHermitianOperatorError,
)


def _along_axis0(vec: np.ndarray, arr: np.ndarray) -> np.ndarray:
    """Reshape a length-n vector so it broadcasts along axis 0 of arr."""
    return vec.reshape((-1,) + (1,) * (arr.ndim - 1))


# =============================================================================
# Base Class
# =============================================================================

class Operator(ABC):
    """
    Abstract lazy operator.

    Subclasses implement apply_array() and dagger(); everything else
    (state wrapping, basis checks, algebra) lives here.
    """

    basis_l: Basis
    basis_r: Basis

    # keep numpy scalars from broadcasting over operators
    __array_ufunc__ = None

    @abstractmethod
    def apply_array(self, arr: np.ndarray) -> np.ndarray:
        """Apply to a raw array whose axis 0 is indexed by basis_r."""

    @abstractmethod
    def dagger(self) -> 'Operator':
        """Hermitian adjoint"""

    @property
    def shape(self):
        return (self.basis_l.n, self.basis_r.n)

    def apply(self, state):
        """
        Apply the operator to a Ket or DensityOperator.

        Returns a new state on basis_l; the input is left untouched.

        Raises:
            DimensionMismatchError: if the state is not on basis_r
        """
        if isinstance(state, Ket):
            self._check_domain(state.basis)
            return Ket(self.basis_l, self.apply_array(state.data))
        if isinstance(state, DensityOperator):
            self._check_domain(state.basis)
            return DensityOperator(self.basis_l, self.apply_array(state.data),
                                   state.basis_r)
        if isinstance(state, np.ndarray):
            if state.ndim == 0 or state.shape[0] != self.basis_r.n:
                raise DimensionMismatchError(
                    f"Array of shape {state.shape} does not match operator "
                    f"domain of size {self.basis_r.n}"
                )
            return self.apply_array(state)
        raise TypeError(f"Cannot apply operator to {type(state).__name__}")

    def _check_domain(self, basis: Basis):
        if basis != self.basis_r:
            raise DimensionMismatchError(
                f"State on {basis!r} but operator expects {self.basis_r!r}"
            )

    def to_dense(self) -> np.ndarray:
        """
        Materialize the full matrix.

        Only meant for small bases and diagnostics; the evaluator and
        the integrator never call this.
        """
        return self.apply_array(np.eye(self.basis_r.n, dtype=np.complex128))

    # -------------------------------------------------------------------------
    # Algebra
    # -------------------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Operator):
            return NotImplemented
        return DeferredSum([self, other])

    def __sub__(self, other):
        if not isinstance(other, Operator):
            return NotImplemented
        return DeferredSum([self, other], [1.0, -1.0])

    def __mul__(self, scalar):
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return DeferredProduct([self], factor=scalar)

    def __rmul__(self, scalar):
        return self.__mul__(scalar)

    def __truediv__(self, scalar):
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return self * (1.0 / scalar)

    def __neg__(self):
        return self * -1.0

    def __matmul__(self, other):
        if isinstance(other, Operator):
            return DeferredProduct([self, other])
        if isinstance(other, (Ket, DensityOperator)):
            return self.apply(other)
        return NotImplemented


# =============================================================================
# Diagonal Operator
# =============================================================================

class DiagonalOperator(Operator):
    """
    Operator diagonal in its basis: (Dψ)_j = d_j ψ_j.

    Attributes:
        basis: The basis (domain and codomain)
        diag: Read-only multiplier array
    """

    def __init__(self, basis: Basis, diag):
        diag = np.array(diag, copy=True)
        if not np.issubdtype(diag.dtype, np.inexact):
            diag = diag.astype(np.float64)
        if diag.shape != (basis.n,):
            raise DimensionMismatchError(
                f"Diagonal of shape {diag.shape} on basis of size {basis.n}"
            )
        if np.iscomplexobj(diag) and not np.any(diag.imag):
            diag = diag.real
        diag.setflags(write=False)
        self.basis = basis
        self.diag = diag

    @property
    def basis_l(self) -> Basis:
        return self.basis

    @property
    def basis_r(self) -> Basis:
        return self.basis

    @property
    def is_real(self) -> bool:
        return not np.iscomplexobj(self.diag)

    def apply_array(self, arr: np.ndarray) -> np.ndarray:
        return _along_axis0(self.diag, arr) * arr

    def dagger(self) -> 'DiagonalOperator':
        return DiagonalOperator(self.basis, np.conj(self.diag))

    def map(self, func: Callable[[np.ndarray], np.ndarray]) -> 'DiagonalOperator':
        """New diagonal with func applied element-wise to the multipliers."""
        return DiagonalOperator(self.basis, func(self.diag))

    def _check_same(self, other: 'DiagonalOperator'):
        if other.basis != self.basis:
            raise IncompatibleBasisError(
                f"Diagonal operators on different bases: "
                f"{self.basis!r} vs {other.basis!r}"
            )

    def __add__(self, other):
        if isinstance(other, DiagonalOperator):
            self._check_same(other)
            return DiagonalOperator(self.basis, self.diag + other.diag)
        return super().__add__(other)

    def __sub__(self, other):
        if isinstance(other, DiagonalOperator):
            self._check_same(other)
            return DiagonalOperator(self.basis, self.diag - other.diag)
        return super().__sub__(other)

    def __mul__(self, scalar):
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return DiagonalOperator(self.basis, self.diag * scalar)

    def __pow__(self, exponent):
        if not isinstance(exponent, numbers.Number):
            return NotImplemented
        return DiagonalOperator(self.basis, self.diag ** exponent)

    def __matmul__(self, other):
        if isinstance(other, DiagonalOperator):
            self._check_same(other)
            return DiagonalOperator(self.basis, self.diag * other.diag)
        return super().__matmul__(other)

    def __repr__(self) -> str:
        kind = "real" if self.is_real else "complex"
        return f"DiagonalOperator({self.basis!r}, {kind})"


# =============================================================================
# Transform Operator
# =============================================================================

class TransformOperator(Operator):
    """
    Unitary FFT between a position basis and its momentum basis.

    position → momentum:  ψ̃_k = exp(-i p_k x_min) · FFT(ψ)_k / √n
    momentum → position:  ψ_j = IFFT(exp(+i p_k x_min) ψ̃)_j · √n

    The phase factor makes momentum amplitudes agree with the continuous
    Fourier transform; it cancels in any T⁻¹ D T sandwich.
    """

    def __init__(self, basis_l: Basis, basis_r: Basis):
        if not are_conjugate(basis_l, basis_r):
            raise IncompatibleBasisError(
                f"Transform needs a conjugate position/momentum pair, got "
                f"{basis_r!r} -> {basis_l!r}"
            )
        self.basis_l = basis_l
        self.basis_r = basis_r
        self.forward = isinstance(basis_r, PositionBasis)
        momentum = basis_l if self.forward else basis_r
        phase = np.exp(-1j * momentum.points * momentum.position.xmin)
        phase.setflags(write=False)
        self._phase = phase

    def apply_array(self, arr: np.ndarray) -> np.ndarray:
        if self.forward:
            return _along_axis0(self._phase, arr) * fft(arr, axis=0, norm="ortho")
        return ifft(_along_axis0(self._phase.conj(), arr) * arr, axis=0, norm="ortho")

    def dagger(self) -> 'TransformOperator':
        return TransformOperator(self.basis_r, self.basis_l)

    inverse = dagger

    def __repr__(self) -> str:
        direction = "position -> momentum" if self.forward else "momentum -> position"
        return f"TransformOperator({direction}, n={self.basis_l.n})"


# =============================================================================
# Deferred Sum / Product
# =============================================================================

class DeferredSum(Operator):
    """
    Lazy sum Σ_k c_k A_k.

    Each term is applied to the same input and the results are
    accumulated. All terms must share basis_l and basis_r. Nested sums
    are flattened.
    """

    def __init__(self, operators: Sequence[Operator],
                 factors: Optional[Sequence[complex]] = None):
        if factors is None:
            factors = [1.0] * len(operators)
        if len(operators) == 0:
            raise InvalidRangeError("DeferredSum needs at least one operator")
        if len(factors) != len(operators):
            raise DimensionMismatchError(
                f"{len(operators)} operators but {len(factors)} factors"
            )

        ops: List[Operator] = []
        facs: List[complex] = []
        for op, c in zip(operators, factors):
            if isinstance(op, DeferredSum):
                ops.extend(op.operators)
                facs.extend(c * f for f in op.factors)
            else:
                ops.append(op)
                facs.append(c)

        basis_l, basis_r = ops[0].basis_l, ops[0].basis_r
        for op in ops[1:]:
            if op.basis_l != basis_l or op.basis_r != basis_r:
                raise IncompatibleBasisError(
                    f"DeferredSum terms disagree on bases: "
                    f"{op.basis_r!r} -> {op.basis_l!r} vs {basis_r!r} -> {basis_l!r}"
                )

        self.operators = tuple(ops)
        self.factors = tuple(facs)
        self.basis_l = basis_l
        self.basis_r = basis_r

    def apply_array(self, arr: np.ndarray) -> np.ndarray:
        out = None
        for c, op in zip(self.factors, self.operators):
            term = op.apply_array(arr)
            if c != 1:
                term = c * term
            out = term if out is None else out + term
        return out

    def dagger(self) -> 'DeferredSum':
        return DeferredSum([op.dagger() for op in self.operators],
                           [np.conj(c) for c in self.factors])

    def __mul__(self, scalar):
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return DeferredSum(self.operators, [scalar * c for c in self.factors])

    def __repr__(self) -> str:
        return f"DeferredSum({len(self.operators)} terms)"


class DeferredProduct(Operator):
    """
    Lazy product c · A_1 A_2 ... A_m.

    Applied right to left: A_m first. Neighbouring operators must chain
    (A_k.basis_r == A_{k+1}.basis_l). Nested products are flattened.
    """

    def __init__(self, operators: Sequence[Operator], factor: complex = 1.0):
        if len(operators) == 0:
            raise InvalidRangeError("DeferredProduct needs at least one operator")

        ops: List[Operator] = []
        for op in operators:
            if isinstance(op, DeferredProduct):
                ops.extend(op.operators)
                factor = factor * op.factor
            else:
                ops.append(op)

        for left, right in zip(ops[:-1], ops[1:]):
            if left.basis_r != right.basis_l:
                raise DimensionMismatchError(
                    f"DeferredProduct stages do not chain: {right.basis_l!r} "
                    f"feeds an operator expecting {left.basis_r!r}"
                )

        self.operators = tuple(ops)
        self.factor = factor
        self.basis_l = ops[0].basis_l
        self.basis_r = ops[-1].basis_r

    def apply_array(self, arr: np.ndarray) -> np.ndarray:
        current = self.basis_r
        for op in reversed(self.operators):
            if op.basis_r != current:
                raise DimensionMismatchError(
                    f"Stage expects {op.basis_r!r} but receives {current!r}"
                )
            arr = op.apply_array(arr)
            current = op.basis_l
        if self.factor != 1:
            arr = self.factor * arr
        return arr

    def dagger(self) -> 'DeferredProduct':
        return DeferredProduct([op.dagger() for op in reversed(self.operators)],
                               np.conj(self.factor))

    def __mul__(self, scalar):
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return DeferredProduct(self.operators, self.factor * scalar)

    def __repr__(self) -> str:
        return f"DeferredProduct({len(self.operators)} factors)"


# =============================================================================
# Factory Functions
# =============================================================================

def transform(basis_l: Basis, basis_r: Basis) -> TransformOperator:
    """
    Transformation operator mapping states on basis_r into basis_l.

    transform(bx, bp) turns momentum amplitudes into position amplitudes,
    transform(bp, bx) the opposite.

    Raises:
        IncompatibleBasisError: unless the bases are a conjugate pair
    """
    return TransformOperator(basis_l, basis_r)


def potential_operator(basis: Basis, func: Callable[[float], float]) -> DiagonalOperator:
    """
    Sample func at every basis point.

    func should be pure and defined over the whole basis range. Vectorized
    callables are evaluated once on the point array; scalar-only ones
    (e.g. using `if x > 0`) are evaluated point by point.

    Raises:
        InvalidRangeError: if func returns non-finite values
    """
    points = basis.points
    try:
        values = np.asarray(func(points))
    except (TypeError, ValueError):
        values = None
    if values is None or values.shape != points.shape:
        values = np.array([func(x) for x in points])

    if not np.all(np.isfinite(values)):
        raise InvalidRangeError(f"Potential is not finite on {basis!r}")
    return DiagonalOperator(basis, values)


def momentum_operator(basis: MomentumBasis) -> DiagonalOperator:
    """Momentum operator p̂, diagonal in the momentum basis."""
    if not isinstance(basis, MomentumBasis):
        raise IncompatibleBasisError(
            f"momentum_operator needs a MomentumBasis, got {basis!r}"
        )
    return DiagonalOperator(basis, basis.points)


def position_operator(basis: PositionBasis) -> DiagonalOperator:
    """Position operator x̂, diagonal in the position basis."""
    if not isinstance(basis, PositionBasis):
        raise IncompatibleBasisError(
            f"position_operator needs a PositionBasis, got {basis!r}"
        )
    return DiagonalOperator(basis, basis.points)


def identity_operator(basis: Basis) -> DiagonalOperator:
    return DiagonalOperator(basis, np.ones(basis.n))


# =============================================================================
# Diagnostics
# =============================================================================

def check_hermitian(op: Operator, probes: int = 3, rtol: float = 1e-8,
                    seed: Optional[int] = None) -> bool:
    """
    Probabilistic hermiticity test: ⟨u|H v⟩ == ⟨H u|v⟩ for random u, v.

    Uses only apply_array(), never the matrix.

    Raises:
        NonHermitianOperatorError: if any probe disagrees beyond rtol
    """
    if op.basis_l != op.basis_r:
        raise NonHermitianOperatorError(
            f"Operator maps {op.basis_r!r} -> {op.basis_l!r}; not square"
        )

    rng = np.random.default_rng(seed)
    n = op.basis_r.n
    for _ in range(probes):
        u = rng.standard_normal(n) + 1j * rng.standard_normal(n)
        v = rng.standard_normal(n) + 1j * rng.standard_normal(n)
        Hu = op.apply_array(u)
        Hv = op.apply_array(v)
        lhs = np.vdot(u, Hv)
        rhs = np.vdot(Hu, v)
        scale = (np.linalg.norm(u) * np.linalg.norm(Hv)
                 + np.linalg.norm(Hu) * np.linalg.norm(v))
        if abs(lhs - rhs) > rtol * max(scale, np.finfo(float).tiny):
            raise NonHermitianOperatorError(
                f"⟨u|Hv⟩ - ⟨Hu|v⟩ = {abs(lhs - rhs):.3e} exceeds tolerance"
            )
    return True


__all__ = [
    'Operator',
    'DiagonalOperator',
    'TransformOperator',
    'DeferredSum',
    'DeferredProduct',
    'transform',
    'potential_operator',
    'momentum_operator',
    'position_operator',
    'identity_operator',
    'check_hermitian',
]
