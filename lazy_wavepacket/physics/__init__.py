"""lazy-wavepacket Physics Utilities"""

from .observables import (
    expect,
    variance,
    norm,
    normalize,
    probability_density,
    region_probability,
    ScatteringSplit,
    scattering_split,
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
