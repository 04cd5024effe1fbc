"""
Test States and Observables: kets, density operators, probability bookkeeping
"""

import numpy as np
import pytest

from lazy_wavepacket import (
    Ket,
    DensityOperator,
    gaussian_state,
    make_position_basis,
    position_operator,
    momentum_operator,
    transform,
    expect,
    variance,
    norm,
    normalize,
    probability_density,
    region_probability,
    scattering_split,
    square_barrier,
    potential_operator,
    build_hamiltonian,
    HamiltonianBuilder,
    DimensionMismatchError,
    InvalidRangeError,
    IncompatibleBasisError,
    NonHermitianOperatorError,
)


class TestKet:
    """State vectors."""

    def test_read_only_copy(self, bx):
        raw = np.ones(bx.n)
        psi = Ket(bx, raw)
        raw[0] = 5.0
        assert psi.data[0] == 1.0
        with pytest.raises(ValueError):
            psi.data[0] = 2.0

    def test_attributes_cannot_be_rebound(self, bx, bp, random_ket):
        with pytest.raises(AttributeError):
            random_ket.data = np.zeros(bx.n)
        with pytest.raises(AttributeError):
            random_ket.basis = bp
        with pytest.raises(AttributeError):
            del random_ket.data
        assert random_ket.basis == bx

    def test_wrong_length(self, bx):
        with pytest.raises(DimensionMismatchError):
            Ket(bx, np.ones(bx.n + 1))

    def test_arithmetic(self, bx, random_ket):
        doubled = random_ket + random_ket
        assert np.allclose(doubled.data, 2 * random_ket.data)
        assert np.allclose((random_ket - random_ket).data, 0.0)
        assert np.allclose((0.5j * random_ket).data, 0.5j * random_ket.data)
        assert np.allclose((random_ket / 2).data, random_ket.data / 2)
        assert np.isclose(random_ket.inner(random_ket), 1.0)

    def test_different_bases(self, bx, bp, random_ket):
        with pytest.raises(DimensionMismatchError):
            random_ket + Ket(bp, random_ket.data)

    def test_zero_vector_cannot_be_normalized(self, bx):
        with pytest.raises(InvalidRangeError):
            Ket(bx, np.zeros(bx.n)).normalized()


class TestGaussianState:
    """Gaussian wave packets."""

    def test_normalized(self, bx, bp):
        assert np.isclose(gaussian_state(bx, -3.0, 1.0, 2.0).norm(), 1.0)
        assert np.isclose(gaussian_state(bp, -3.0, 1.0, 2.0).norm(), 1.0)

    def test_moments(self, bx, bp):
        x0, p0, sigma0 = -3.0, 1.5, 2.0
        psi = gaussian_state(bx, x0, p0, sigma0)
        assert np.isclose(expect(position_operator(bx), psi).real, x0)
        assert np.isclose(variance(position_operator(bx), psi).real,
                          sigma0 ** 2 / 2, rtol=1e-6)

        P = transform(bx, bp) @ momentum_operator(bp) @ transform(bp, bx)
        assert np.isclose(expect(P, psi).real, p0, rtol=1e-8)

    @pytest.mark.parametrize("sigma0", [0.0, -1.0])
    def test_invalid_width(self, bx, sigma0):
        with pytest.raises(InvalidRangeError):
            gaussian_state(bx, 0.0, 0.0, sigma0)


class TestDensityOperator:
    """Density operators."""

    def test_pure_state(self, random_ket):
        rho = DensityOperator.from_ket(random_ket)
        assert np.isclose(rho.trace(), 1.0)
        assert np.isclose(rho.purity(), 1.0)
        assert np.allclose(rho.dagger().data, rho.data)

    def test_mixed_state(self, bx):
        a = gaussian_state(bx, -5.0, 0.0, 1.0)
        b = gaussian_state(bx, 5.0, 0.0, 1.0)
        rho = 0.5 * DensityOperator.from_ket(a) + 0.5 * DensityOperator.from_ket(b)
        assert np.isclose(rho.trace(), 1.0)
        assert rho.purity() < 0.6

    def test_expectation_matches_ket(self, bx, random_ket, barrier_hamiltonian):
        rho = DensityOperator.from_ket(random_ket)
        assert np.isclose(expect(barrier_hamiltonian, rho),
                          expect(barrier_hamiltonian, random_ket))

    def test_attributes_cannot_be_rebound(self, bp, random_ket):
        rho = DensityOperator.from_ket(random_ket)
        with pytest.raises(AttributeError):
            rho.data = np.eye(rho.basis.n)
        with pytest.raises(AttributeError):
            rho.basis_r = bp

    def test_wrong_shape(self, bx):
        with pytest.raises(DimensionMismatchError):
            DensityOperator(bx, np.eye(bx.n - 1))

    def test_observables(self, bx, random_ket):
        rho = DensityOperator.from_ket(random_ket) * 2.0
        assert np.isclose(norm(rho), 2.0)
        assert np.isclose(normalize(rho).trace(), 1.0)
        assert np.allclose(probability_density(rho),
                           2 * np.abs(random_ket.data) ** 2)


class TestProbabilities:
    """Region probabilities and the scattering split."""

    def test_region_probability(self, bx):
        psi = gaussian_state(bx, -8.0, 0.0, 1.0)
        assert np.isclose(region_probability(psi), 1.0)
        assert region_probability(psi, upper=0.0) > 0.999
        assert region_probability(psi, lower=0.0) < 1e-6

    def test_split_sums_to_norm(self, bx, random_ket):
        split = scattering_split(random_ket, -2.0, 2.0)
        assert np.isclose(split.total, random_ket.norm() ** 2)
        assert split.inside > 0
        assert set(split.to_dict()) == {'reflected', 'inside', 'transmitted'}

    def test_edges_count_as_inside(self):
        bx = make_position_basis(-2.0, 2.0, 4)  # points -2, -1, 0, 1
        psi = Ket(bx, np.ones(4) / 2)
        split = scattering_split(psi, -1.0, 0.0)
        assert np.isclose(split.reflected, 0.25)
        assert np.isclose(split.inside, 0.5)
        assert np.isclose(split.transmitted, 0.25)

    def test_needs_position_basis(self, bp):
        psi = gaussian_state(bp, 0.0, 0.0, 1.0)
        with pytest.raises(DimensionMismatchError):
            scattering_split(psi, -1.0, 1.0)
        with pytest.raises(DimensionMismatchError):
            region_probability(psi)

    def test_reversed_edges(self, random_ket):
        with pytest.raises(InvalidRangeError):
            scattering_split(random_ket, 1.0, -1.0)


class TestHamiltonianBuilder:
    """Hamiltonian construction."""

    def test_square_barrier(self):
        V = square_barrier(2.0, 4.0, center=1.0)
        x = np.array([-1.5, -1.0, 1.0, 3.0, 3.5])
        assert np.allclose(V(x), [0.0, 2.0, 2.0, 2.0, 0.0])

    def test_invalid_barrier(self):
        with pytest.raises(InvalidRangeError):
            square_barrier(1.0, 0.0)

    def test_free_hamiltonian(self, bx, random_ket):
        builder = HamiltonianBuilder(bx)
        H = builder.hamiltonian()
        K = builder.kinetic()
        assert np.allclose(H.apply(random_ket).data, K.apply(random_ket).data)

    def test_kinetic_potential_split(self, bx, random_ket, barrier_hamiltonian):
        K, V = HamiltonianBuilder(bx).hamiltonian_KV(square_barrier(1.0, 2.0))
        combined = K.apply(random_ket) + V.apply(random_ket)
        assert np.allclose(combined.data, barrier_hamiltonian.apply(random_ket).data)

    def test_mass_scaling(self, bx, random_ket):
        K1 = HamiltonianBuilder(bx, mass=1.0).kinetic()
        K2 = HamiltonianBuilder(bx, mass=2.0).kinetic()
        assert np.allclose(K2.apply(random_ket).data, 0.5 * K1.apply(random_ket).data)

    def test_complex_potential_rejected(self, bx):
        with pytest.raises(NonHermitianOperatorError):
            build_hamiltonian(bx, lambda x: 1j * x)
        with pytest.raises(NonHermitianOperatorError):
            HamiltonianBuilder(bx).potential(lambda x: -0.1j * np.ones_like(x))

    def test_real_valued_complex_potential_accepted(self, bx):
        H = build_hamiltonian(bx, lambda x: (x ** 2).astype(complex))
        assert H.operators[-1].is_real

    def test_invalid_inputs(self, bx, bp):
        with pytest.raises(IncompatibleBasisError):
            HamiltonianBuilder(bp)
        with pytest.raises(InvalidRangeError):
            HamiltonianBuilder(bx, mass=0.0)

    def test_potential_energy(self, bx):
        psi = gaussian_state(bx, 0.0, 0.0, 1.0)
        H = build_hamiltonian(bx, lambda x: x ** 2 / 2)
        # Harmonic ground state: E = 1/2
        assert np.isclose(expect(H, psi).real, 0.5, rtol=1e-6)
        V = potential_operator(bx, lambda x: x ** 2 / 2)
        assert np.isclose(expect(V, psi).real, 0.25, rtol=1e-6)
