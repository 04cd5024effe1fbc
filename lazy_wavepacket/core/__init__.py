"""
lazy-wavepacket Core Components
===============================

Foundation modules for lazy operator simulations.

Modules:
  - errors: Error taxonomy
  - basis: Position / momentum bases (FFT duality)
  - states: Ket, DensityOperator, Gaussian wave packets
  - operators: Diagonal, Transform, DeferredSum, DeferredProduct
  - hamiltonian: Hamiltonian builders and potentials
"""

# Errors
from .errors import (
    WavepacketError,
    InvalidRangeError,
    IncompatibleBasisError,
    DimensionMismatchError,
    NonHermitianOperatorError,
    IntegrationDivergedError,
)

# Bases
from .basis import (
    PositionBasis,
    MomentumBasis,
    make_position_basis,
    make_momentum_basis,
    are_conjugate,
)

# States
from .states import (
    Ket,
    DensityOperator,
    gaussian_state,
)

# Lazy Operators
from .operators import (
    Operator,
    DiagonalOperator,
    TransformOperator,
    DeferredSum,
    DeferredProduct,
    transform,
    potential_operator,
    momentum_operator,
    position_operator,
    identity_operator,
    check_hermitian,
)

# Hamiltonian Builders
from .hamiltonian import (
    HamiltonianBuilder,
    build_hamiltonian,
    kinetic_operator,
    square_barrier,
)


__all__ = [
    # Errors
    'WavepacketError',
    'InvalidRangeError',
    'IncompatibleBasisError',
    'DimensionMismatchError',
    'NonHermitianOperatorError',
    'IntegrationDivergedError',

    # Bases
    'PositionBasis',
    'MomentumBasis',
    'make_position_basis',
    'make_momentum_basis',
    'are_conjugate',

    # States
    'Ket',
    'DensityOperator',
    'gaussian_state',

    # Operators
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

    # Hamiltonian
    'HamiltonianBuilder',
    'build_hamiltonian',
    'kinetic_operator',
    'square_barrier',
]
