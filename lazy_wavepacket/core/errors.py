"""
Error Taxonomy for lazy-wavepacket
==================================

All errors raised by the package derive from WavepacketError, and
additionally from the builtin exception that best matches their meaning
so that callers catching ValueError / RuntimeError keep working.

  - InvalidRangeError:          bad bounds, sizes, widths or time grids
  - IncompatibleBasisError:     operators/transforms on mismatched bases
  - DimensionMismatchError:     a state does not live where an operator expects
  - NonHermitianOperatorError:  unitarity / hermiticity violated
  - IntegrationDivergedError:   adaptive step size collapsed
"""


class WavepacketError(Exception):
    """Base class for every lazy-wavepacket error."""


class InvalidRangeError(WavepacketError, ValueError):
    """Raised for empty or degenerate ranges (bases, widths, time grids)."""


class IncompatibleBasisError(WavepacketError, ValueError):
    """Raised when two bases cannot be combined."""


class DimensionMismatchError(WavepacketError, ValueError):
    """Raised when a state's basis or shape does not match an operator."""


class NonHermitianOperatorError(WavepacketError, ArithmeticError):
    """Raised when an operator fails a hermiticity or unitarity check."""


class IntegrationDivergedError(WavepacketError, RuntimeError):
    """Raised when the integrator cannot reach the next requested time."""


__all__ = [
    'WavepacketError',
    'InvalidRangeError',
    'IncompatibleBasisError',
    'DimensionMismatchError',
    'NonHermitianOperatorError',
    'IntegrationDivergedError',
]
