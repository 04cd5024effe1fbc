"""
Barrier Scattering Example
==========================

A Gaussian packet (x0 = -15, σ0 = 4, p0 = 1) runs into a square barrier
of height 1 and width 5 on a 200-point grid over [-30, 30).

Mean kinetic energy p0²/2 = 0.5 is below the barrier, so most of the
packet reflects; the high-momentum tail and tunnelling give a small
transmitted fraction.

Usage:
    python -m lazy_wavepacket.examples.barrier_scattering
"""

import numpy as np

from lazy_wavepacket import (
    ScatteringConfig,
    EvolutionConfig,
    run_barrier_scattering,
    expect,
    check_hermitian,
)


def run_barrier_example(verbose: bool = True):
    """Run the default scenario and print the scattering history."""
    config = ScatteringConfig()
    evolution = EvolutionConfig(verbose=verbose)

    print("=" * 70)
    print("Square Barrier Scattering")
    print("=" * 70)
    print(f"  Grid:    [{config.xmin}, {config.xmax}), N={config.n}")
    print(f"  Barrier: V0={config.V0}, width={config.width}")
    print(f"  Packet:  x0={config.x0}, σ0={config.sigma0}, p0={config.p0}")
    print()

    result = run_barrier_scattering(config, evolution)

    H = result.H_kinetic + result.H_potential
    check_hermitian(H, seed=0)
    E_kin = expect(result.H_kinetic, result.psi0).real
    print(f"\n  ⟨H_kin⟩(t=0) = {E_kin:.4f}  (barrier height {config.V0})")

    print("\n  t        R         inside    T         norm")
    print("  " + "-" * 50)
    for (t, _), split, nrm in zip(result.trajectory, result.split_history(),
                                  result.trajectory.norms):
        print(f"  {t:7.3f}  {split.reflected:.6f}  {split.inside:.6f}  "
              f"{split.transmitted:.6f}  {nrm:.8f}")

    check = result.trajectory.check_norm_conservation()
    print(f"\n  Max norm drift:   {check['max_drift']:.2e}")
    print(f"  Max energy drift: {check.get('energy_drift', np.nan):.2e}")
    print(f"  Reflection: {result.reflection:.4f}")
    print(f"  Transmission: {result.transmission:.4f}")

    return result


def main():
    """Main entry point."""
    run_barrier_example()
    print("\n" + "=" * 70)
    print("✅ Barrier example completed!")
    print("=" * 70)


if __name__ == "__main__":
    main()
