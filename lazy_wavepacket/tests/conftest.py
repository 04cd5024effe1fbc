"""
lazy-wavepacket Test Configuration
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


@pytest.fixture
def bx():
    """Small position basis fixture"""
    from lazy_wavepacket import make_position_basis
    return make_position_basis(-20.0, 20.0, 128)


@pytest.fixture
def bp(bx):
    """Momentum basis conjugate to bx"""
    from lazy_wavepacket import make_momentum_basis
    return make_momentum_basis(bx)


@pytest.fixture
def tiny_bx():
    """Basis small enough for dense comparisons"""
    from lazy_wavepacket import make_position_basis
    return make_position_basis(-4.0, 4.0, 16)


@pytest.fixture
def random_ket(bx):
    """Random normalized ket on bx"""
    from lazy_wavepacket import Ket
    rng = np.random.default_rng(42)
    psi = rng.standard_normal(bx.n) + 1j * rng.standard_normal(bx.n)
    return Ket(bx, psi).normalized()


@pytest.fixture
def barrier_hamiltonian(bx):
    """Lazy Hamiltonian with a unit square barrier on bx"""
    from lazy_wavepacket import build_hamiltonian, square_barrier
    return build_hamiltonian(bx, square_barrier(1.0, 2.0))


@pytest.fixture(scope="session")
def scattering_result():
    """Default barrier scattering run (computed once)"""
    from lazy_wavepacket import run_barrier_scattering
    return run_barrier_scattering()


def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
