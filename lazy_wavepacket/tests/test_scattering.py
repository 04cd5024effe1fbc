"""
Test Barrier Scattering: Gaussian packet on a square barrier
"""

import numpy as np
import pytest

from lazy_wavepacket import (
    ScatteringConfig,
    ScatteringResult,
    EvolutionConfig,
    run_barrier_scattering,
    make_position_basis,
    gaussian_state,
    expect,
    kinetic_operator,
    InvalidRangeError,
)


class TestScatteringConfig:
    """Scenario parameters."""

    def test_defaults(self):
        cfg = ScatteringConfig()
        assert (cfg.xmin, cfg.xmax, cfg.n) == (-30.0, 30.0, 200)
        assert (cfg.V0, cfg.width) == (1.0, 5.0)
        assert (cfg.x0, cfg.sigma0, cfg.p0) == (-15.0, 4.0, 1.0)
        assert cfg.barrier_edges == (-2.5, 2.5)

    def test_time_grid(self):
        cfg = ScatteringConfig()
        times = cfg.times()
        assert len(times) == 20
        assert times[0] == 0.0
        assert times[-1] == cfg.tmax

    def test_to_dict(self):
        d = ScatteringConfig(V0=2.0).to_dict()
        assert d['V0'] == 2.0
        assert set(d) >= {'xmin', 'xmax', 'n', 'tmax', 'n_times'}


@pytest.mark.slow
class TestDefaultScenario:
    """Default scenario: mean energy 0.5 below a unit barrier."""

    def test_result_type(self, scattering_result):
        assert isinstance(scattering_result, ScatteringResult)

    def test_samples(self, scattering_result):
        traj = scattering_result.trajectory
        assert len(traj) == 20
        assert traj.times[-1] == scattering_result.config.tmax

    def test_normalized_throughout(self, scattering_result):
        traj = scattering_result.trajectory
        assert np.allclose(traj.norms, 1.0, atol=1e-5)
        assert traj.max_norm_drift < 1e-5

    def test_energy_conserved(self, scattering_result):
        energies = scattering_result.trajectory.energies
        assert np.max(np.abs(energies - energies[0])) < 1e-5

    def test_initial_kinetic_energy(self, scattering_result):
        # ⟨p²/2⟩ = p0²/2 + 1/(4 σ0²) for this packet
        cfg = scattering_result.config
        E_kin = expect(scattering_result.H_kinetic, scattering_result.psi0).real
        assert np.isclose(E_kin, cfg.p0 ** 2 / 2 + 1 / (4 * cfg.sigma0 ** 2), rtol=1e-6)

    def test_reflection_and_transmission(self, scattering_result):
        split = scattering_result.split
        assert split.reflected > 0.8
        assert split.transmitted > 1e-4
        assert split.transmitted < 0.1
        assert np.isclose(split.total, 1.0, atol=1e-5)

    def test_split_starts_on_the_left(self, scattering_result):
        history = scattering_result.split_history()
        assert len(history) == 20
        assert history[0].reflected > 0.999
        assert history[0].transmitted < 1e-6
        assert history[-1].transmitted > history[0].transmitted

    def test_summary(self, scattering_result):
        summary = scattering_result.summary()
        for key in ('config', 'times', 'norms', 'energies', 'split',
                    'max_norm_drift', 'n_steps', 'n_rhs'):
            assert key in summary
        assert summary['split']['reflected'] == scattering_result.reflection
        assert len(summary['times']) == 20


class TestSmallScenarios:
    """Cheap variants of the scenario."""

    def test_free_packet_is_not_reflected(self):
        cfg = ScatteringConfig(n=64, V0=0.0, tmax=8.0, n_times=3)
        result = run_barrier_scattering(cfg)
        # Without a barrier the packet drifts right at speed p0
        psi = result.trajectory.get_final_state()
        x = psi.basis.points
        mean_x = float(np.sum(x * np.abs(psi.data) ** 2))
        assert np.isclose(mean_x, cfg.x0 + cfg.p0 * cfg.tmax, atol=0.1)

    def test_callback_per_sample(self):
        calls = []
        cfg = ScatteringConfig(n=64, tmax=1.0, n_times=4)
        run_barrier_scattering(cfg, callback=lambda i, t, s: calls.append(i))
        assert calls == [0, 1, 2, 3]

    def test_dop853(self):
        cfg = ScatteringConfig(n=64, tmax=2.0, n_times=2)
        result = run_barrier_scattering(cfg, EvolutionConfig(method='DOP853'))
        assert result.trajectory.config.method == 'DOP853'
        assert result.trajectory.max_norm_drift < 1e-6

    def test_invalid_grid(self):
        with pytest.raises(InvalidRangeError):
            run_barrier_scattering(ScatteringConfig(xmin=1.0, xmax=0.0))

    def test_invalid_width(self):
        with pytest.raises(InvalidRangeError):
            run_barrier_scattering(ScatteringConfig(width=0.0))

    def test_packet_kinetic_energy_on_coarse_grid(self):
        bx = make_position_basis(-30, 30, 64)
        psi0 = gaussian_state(bx, -15.0, 1.0, 4.0)
        E_kin = expect(kinetic_operator(bx), psi0).real
        assert np.isclose(E_kin, 0.5 + 1 / 64, rtol=1e-4)


@pytest.mark.slow
def test_barrier_example_script(capsys):
    from lazy_wavepacket.examples.barrier_scattering import run_barrier_example
    result = run_barrier_example(verbose=False)
    out = capsys.readouterr().out
    assert "Square Barrier Scattering" in out
    assert "Transmission" in out
    assert result.reflection > 0.8
