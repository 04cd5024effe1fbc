"""
lazy-wavepacket
===============

Wave packet dynamics with lazy quantum operators.

A particle on a periodic 1D grid is described in two bases, position
and momentum, related by an FFT. Operators are kept as an expression
tree of diagonals, transforms, deferred sums and deferred products and
are only ever *applied*, never turned into matrices:

    H = T(x←p) · p²/2 · T(p←x)  +  V(x)

    H|ψ⟩ costs two FFTs + O(n)   instead of an O(n²) matrix product

The time-dependent Schrödinger equation is then integrated with an
adaptive embedded Runge-Kutta method that only calls H.apply().

Structure:
  lazy_wavepacket/
  ├── core/
  │   ├── errors.py             # Error taxonomy
  │   ├── basis.py              # Position / momentum bases
  │   ├── states.py             # Ket, DensityOperator, Gaussian packets
  │   ├── operators.py          # Lazy operators + evaluator
  │   └── hamiltonian.py        # Hamiltonian builders, square barrier
  ├── solvers/
  │   ├── time_evolution.py     # Adaptive RK integrator
  │   └── scattering.py         # Barrier scattering scenario
  ├── physics/
  │   └── observables.py        # expect, densities, R/T split
  ├── examples/                 # Example scripts
  ├── cli/                      # `lazy-wavepacket` command
  └── tests/
      └── ...                   # Test suites

Units: ħ = 1, m = 1.
"""

__version__ = "0.1.0"

# =============================================================================
# Core Components
# =============================================================================

# Errors
from .core.errors import (
    WavepacketError,
    InvalidRangeError,
    IncompatibleBasisError,
    DimensionMismatchError,
    NonHermitianOperatorError,
    IntegrationDivergedError,
)

# Bases
from .core.basis import (
    PositionBasis,
    MomentumBasis,
    make_position_basis,
    make_momentum_basis,
    are_conjugate,
)

# States
from .core.states import (
    Ket,
    DensityOperator,
    gaussian_state,
)

# Lazy Operators
from .core.operators import (
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
from .core.hamiltonian import (
    HamiltonianBuilder,
    build_hamiltonian,
    kinetic_operator,
    square_barrier,
)

# =============================================================================
# Solvers
# =============================================================================

from .solvers.time_evolution import (
    EvolutionStatus,
    EvolutionConfig,
    Trajectory,
    TimeEvolutionEngine,
    evolve,
    quick_evolve,
)

from .solvers.scattering import (
    ScatteringConfig,
    ScatteringResult,
    run_barrier_scattering,
)

# =============================================================================
# Physics
# =============================================================================

from .physics.observables import (
    expect,
    variance,
    norm,
    normalize,
    probability_density,
    region_probability,
    ScatteringSplit,
    scattering_split,
)


# =============================================================================
# __all__
# =============================================================================

__all__ = [
    # Version
    '__version__',

    # Core - Errors
    'WavepacketError',
    'InvalidRangeError',
    'IncompatibleBasisError',
    'DimensionMismatchError',
    'NonHermitianOperatorError',
    'IntegrationDivergedError',

    # Core - Bases
    'PositionBasis',
    'MomentumBasis',
    'make_position_basis',
    'make_momentum_basis',
    'are_conjugate',

    # Core - States
    'Ket',
    'DensityOperator',
    'gaussian_state',

    # Core - Operators
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

    # Core - Hamiltonian
    'HamiltonianBuilder',
    'build_hamiltonian',
    'kinetic_operator',
    'square_barrier',

    # Solvers - Time Evolution
    'EvolutionStatus',
    'EvolutionConfig',
    'Trajectory',
    'TimeEvolutionEngine',
    'evolve',
    'quick_evolve',

    # Solvers - Scattering
    'ScatteringConfig',
    'ScatteringResult',
    'run_barrier_scattering',

    # Physics - Observables
    'expect',
    'variance',
    'norm',
    'normalize',
    'probability_density',
    'region_probability',
    'ScatteringSplit',
    'scattering_split',
]
