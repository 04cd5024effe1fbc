"""
Time Evolution Engine for lazy-wavepacket
=========================================

Adaptive Runge-Kutta integration of the time-dependent Schrödinger
equation with a lazy Hamiltonian:

    dψ/dt = -i H ψ                  (kets)
    dρ/dt = -i (H ρ - ρ H)          (density operators)

The Hamiltonian is only ever touched through apply_array(), so a
DeferredSum of FFT products costs O(n log n) per right-hand side.

Features:
- scipy.integrate RK45 / DOP853 steppers (embedded, adaptive)
- Every requested time is hit exactly: each interval [t_i, t_{i+1}]
  is integrated with t_bound = t_{i+1}, no dense-output interpolation
- Step size carried over between intervals
- Norm / trace monitoring and optional hermiticity probe
- Divergence detection when the step size collapses

Lifecycle:
    INITIALIZED -> STEPPING -> COMPLETED | FAILED
"""

import numpy as np
from scipy.integrate import RK45, DOP853
from typing import Optional, Dict, Any, Callable, List, Sequence, Tuple
from dataclasses import dataclass, replace
from enum import Enum
import time

from ..core.states import Ket, DensityOperator
from ..core.operators import Operator, check_hermitian
from ..core.errors import (
    DimensionMismatchError,
    IntegrationDivergedError,
    InvalidRangeError,
    NonHermitianOperatorError,
)
from ..physics.observables import expect, norm as state_norm


_METHODS = {
    'RK45': RK45,
    'DOP853': DOP853,
}


class EvolutionStatus(Enum):
    """Integrator lifecycle"""
    INITIALIZED = "initialized"
    STEPPING = "stepping"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class EvolutionConfig:
    """Time evolution settings"""
    t0: float = 0.0

    # Stepper
    method: str = 'RK45'
    rtol: float = 1e-8
    atol: float = 1e-10
    min_step: float = 1e-10
    max_step: float = np.inf
    first_step: Optional[float] = None

    # Checks
    norm_tol: Optional[float] = 1e-4
    check_hermitian: bool = False

    # Diagnostics
    track_energy: bool = True
    verbose: bool = False


@dataclass(frozen=True, eq=False)
class Trajectory:
    """Immutable result of a time evolution run"""
    times: np.ndarray
    states: Tuple

    # Per-sample diagnostics
    norms: np.ndarray
    energies: np.ndarray

    # Metadata
    config: EvolutionConfig = None
    wall_time: float = 0.0
    n_steps: int = 0
    n_rhs: int = 0

    def __post_init__(self):
        for name in ('times', 'norms', 'energies'):
            arr = np.array(getattr(self, name), copy=True)
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)
        object.__setattr__(self, 'states', tuple(self.states))

    def __len__(self) -> int:
        return len(self.states)

    def __iter__(self):
        return iter(zip(self.times, self.states))

    def __getitem__(self, index):
        return self.times[index], self.states[index]

    def get_final_state(self):
        """Final state"""
        return self.states[-1]

    @property
    def max_norm_drift(self) -> float:
        return float(np.max(np.abs(self.norms - self.norms[0])))

    def check_norm_conservation(self, tol: float = 1e-6) -> Dict[str, Any]:
        """
        Unitarity check along the trajectory.

        ‖ψ(t)‖ should equal ‖ψ(t0)‖ up to integrator tolerance.
        """
        drift = self.max_norm_drift
        result = {
            'conserved': drift <= tol,
            'max_drift': drift,
            'initial_norm': float(self.norms[0]),
            'final_norm': float(self.norms[-1]),
        }
        if len(self.energies):
            result['energy_drift'] = float(
                np.max(np.abs(self.energies - self.energies[0]))
            )
        return result


class TimeEvolutionEngine:
    """
    Time evolution engine

    Integrates kets or density operators under a time-independent lazy
    Hamiltonian. One engine may be reused for several runs; each run
    resets the counters and the status.
    """

    def __init__(self, H: Operator, config: Optional[EvolutionConfig] = None):
        """
        Args:
            H: Hamiltonian (any lazy Operator with basis_l == basis_r)
            config: Evolution settings
        """
        if H.basis_l != H.basis_r:
            raise DimensionMismatchError(
                f"Hamiltonian must map a basis to itself, got "
                f"{H.basis_r!r} -> {H.basis_l!r}"
            )
        self.H = H
        self.H_dagger = H.dagger()
        self.config = config or EvolutionConfig()

        if self.config.method not in _METHODS:
            raise ValueError(
                f"Unknown method {self.config.method!r}; "
                f"choose from {sorted(_METHODS)}"
            )
        if self.config.first_step is not None and not self.config.first_step > 0:
            raise InvalidRangeError(
                f"first_step must be positive, got {self.config.first_step}"
            )
        if not self.config.min_step >= 0:
            raise InvalidRangeError(
                f"min_step must be non-negative, got {self.config.min_step}"
            )
        self._stepper = _METHODS[self.config.method]

        self.status = EvolutionStatus.INITIALIZED
        self.n_steps = 0
        self.n_rhs = 0

    # -------------------------------------------------------------------------
    # Right-hand sides
    # -------------------------------------------------------------------------

    def _rhs_ket(self, t, y):
        self.n_rhs += 1
        return -1j * self.H.apply_array(y)

    def _rhs_density(self, t, y):
        self.n_rhs += 1
        n = self.H.basis_r.n
        rho = y.reshape(n, n)
        H_rho = self.H.apply_array(rho)
        # ρH = (H† ρ†)†
        rho_H = self.H_dagger.apply_array(rho.conj().T).conj().T
        return (-1j * (H_rho - rho_H)).ravel()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _validate_times(self, times: Sequence[float]) -> np.ndarray:
        times = np.asarray(times, dtype=float)
        if times.ndim != 1 or times.size == 0:
            raise InvalidRangeError("times must be a non-empty 1D sequence")
        if not np.all(np.isfinite(times)):
            raise InvalidRangeError("times must be finite")
        if np.any(np.diff(times) <= 0):
            raise InvalidRangeError("times must be strictly increasing")
        if times[0] < self.config.t0:
            raise InvalidRangeError(
                f"times start at {times[0]} before t0={self.config.t0}"
            )
        return times

    def _prepare(self, state0):
        """Flatten the initial state and pick rhs / wrapper."""
        basis = self.H.basis_r
        if isinstance(state0, Ket):
            if state0.basis != basis:
                raise DimensionMismatchError(
                    f"Initial state on {state0.basis!r}, Hamiltonian on {basis!r}"
                )
            return (state0.data.copy(), self._rhs_ket,
                    lambda y: Ket(basis, y))
        if isinstance(state0, DensityOperator):
            if state0.basis != basis or state0.basis_r != basis:
                raise DimensionMismatchError(
                    f"Initial density operator on {state0.basis!r}, "
                    f"Hamiltonian on {basis!r}"
                )
            n = basis.n
            return (state0.data.ravel().copy(), self._rhs_density,
                    lambda y: DensityOperator(basis, y.reshape(n, n)))
        raise TypeError(f"Cannot evolve {type(state0).__name__}")

    def _advance(self, rhs: Callable, t: float, y: np.ndarray,
                 t_bound: float, h: Optional[float]):
        """
        Integrate from t to exactly t_bound.

        Returns:
            (y(t_bound), last unclamped step size)
        """
        cfg = self.config
        kwargs = dict(rtol=cfg.rtol, atol=cfg.atol, max_step=cfg.max_step)
        if h is not None:
            kwargs['first_step'] = min(h, t_bound - t)

        solver = self._stepper(rhs, t, y, t_bound, **kwargs)
        h_next = h

        while solver.status == 'running':
            message = solver.step()
            if solver.status == 'failed':
                raise IntegrationDivergedError(
                    f"Step failed at t={solver.t:.6g} before reaching "
                    f"t={t_bound:.6g}: {message}"
                )
            self.n_steps += 1
            if solver.status == 'running':
                if solver.h_abs < cfg.min_step:
                    raise IntegrationDivergedError(
                        f"Step size {solver.h_abs:.3e} fell below "
                        f"min_step={cfg.min_step:.3e} at t={solver.t:.6g} "
                        f"(next requested time {t_bound:.6g})"
                    )
                h_next = solver.h_abs

        return solver.y.copy(), h_next

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def run(self,
            state0,
            times: Sequence[float],
            callback: Optional[Callable] = None) -> Trajectory:
        """
        Run the time evolution.

        Args:
            state0: Initial Ket or DensityOperator at t0
            times: Strictly increasing sample times (>= t0)
            callback: Called as callback(index, t, state) after each sample

        Returns:
            Trajectory with one state per requested time

        Raises:
            InvalidRangeError: bad time grid
            DimensionMismatchError: state not on the Hamiltonian's basis
            NonHermitianOperatorError: hermiticity probe or norm check failed
            IntegrationDivergedError: step size collapsed
        """
        cfg = self.config
        times = self._validate_times(times)
        y, rhs, wrap = self._prepare(state0)

        self.n_steps = 0
        self.n_rhs = 0
        self.status = EvolutionStatus.INITIALIZED

        n_samples = len(times)
        states: List = []
        norms: List[float] = []
        energies: List[float] = []

        if cfg.verbose:
            print(f"⏱️ Time Evolution: {n_samples} samples, "
                  f"t ∈ [{times[0]:.4g}, {times[-1]:.4g}]")
            print(f"   Method: {cfg.method} (rtol={cfg.rtol:g}, atol={cfg.atol:g})")

        t0_wall = time.time()
        self.status = EvolutionStatus.STEPPING

        try:
            if cfg.check_hermitian:
                check_hermitian(self.H)

            norm0 = state_norm(state0)
            t = cfg.t0
            h = cfg.first_step

            for i, t_next in enumerate(times):
                if t_next > t:
                    y, h = self._advance(rhs, t, y, t_next, h)
                    t = t_next

                state = wrap(y)
                nrm = state_norm(state)
                if cfg.norm_tol is not None and abs(nrm - norm0) > cfg.norm_tol:
                    raise NonHermitianOperatorError(
                        f"Norm drifted from {norm0:.8f} to {nrm:.8f} at "
                        f"t={t_next:.6g} (norm_tol={cfg.norm_tol:g})"
                    )

                states.append(state)
                norms.append(nrm)
                if cfg.track_energy:
                    energies.append(float(np.real(expect(self.H, state))))

                if callback:
                    callback(i, float(t_next), state)

                if cfg.verbose and (i + 1) % max(n_samples // 4, 1) == 0:
                    elapsed = time.time() - t0_wall
                    print(f"   Sample {i+1}/{n_samples}: t={t_next:.4f}, "
                          f"norm={nrm:.8f}, steps={self.n_steps}, {elapsed:.2f}s")
        except Exception:
            self.status = EvolutionStatus.FAILED
            if cfg.verbose:
                print(f"   ❌ Failed after {self.n_steps} steps")
            raise

        self.status = EvolutionStatus.COMPLETED
        wall_time = time.time() - t0_wall

        if cfg.verbose:
            print(f"   ✅ Done in {wall_time:.2f}s "
                  f"({self.n_steps} steps, {self.n_rhs} H applications)")

        return Trajectory(
            times=times,
            states=states,
            norms=norms,
            energies=energies,
            config=replace(cfg),
            wall_time=wall_time,
            n_steps=self.n_steps,
            n_rhs=self.n_rhs,
        )


# =============================================================================
# Utility Functions
# =============================================================================

def evolve(times: Sequence[float], state0, H: Operator,
           config: Optional[EvolutionConfig] = None,
           callback: Optional[Callable] = None) -> Trajectory:
    """
    Integrate the Schrödinger (or von Neumann) equation.

    Args:
        times: Strictly increasing sample times, starting at or after t0
        state0: Initial Ket or DensityOperator
        H: Lazy Hamiltonian
        config: EvolutionConfig (defaults if None)
        callback: Optional per-sample callback(index, t, state)

    Returns:
        Trajectory
    """
    return TimeEvolutionEngine(H, config).run(state0, times, callback)


def quick_evolve(H: Operator, psi0, t_end: float = 10.0, n_times: int = 21,
                 verbose: bool = True) -> Trajectory:
    """
    Quick time evolution on an evenly spaced grid [0, t_end].
    """
    if n_times < 1:
        raise InvalidRangeError(f"n_times must be >= 1, got {n_times}")
    config = EvolutionConfig(verbose=verbose)
    return evolve(np.linspace(0.0, t_end, n_times), psi0, H, config)


__all__ = [
    'EvolutionStatus',
    'EvolutionConfig',
    'Trajectory',
    'TimeEvolutionEngine',
    'evolve',
    'quick_evolve',
]
