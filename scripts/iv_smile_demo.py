#!/usr/bin/env python
"""
Implied volatility smile demonstration.

Generates a synthetic volatility smile, prices calls and puts with it,
and recovers the implied volatility from each price.
"""

import sys
from pathlib import Path

import numpy as np

# Add parent directory to path to allow imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bs_pricer.analytics.black_scholes import call, put
from bs_pricer.analytics.implied_vol import call_iv, put_iv


def main():
    """Run IV smile demonstration."""
    # Parameters
    S0 = 100.0
    r = 0.05
    T = 1.0

    # Volatility smile parameters
    base_vol = 0.20  # ATM volatility
    skew = -0.15
    curvature = 0.25

    strikes = np.linspace(70.0, 130.0, 13)

    print("=" * 100)
    print("Implied Volatility Smile Demonstration")
    print("=" * 100)
    print(f"\nParameters: S0={S0}, r={r}, T={T}")
    print(f"Volatility model: σ(K) = {base_vol} + {skew}*(K/S0 - 1) + {curvature}*(K/S0 - 1)²")
    print("\n" + "-" * 100)
    print(f"{'Strike':<10} {'True Vol':<12} {'Call IV':<14} {'Put IV':<14} "
          f"{'Iterations':<12} {'Max Abs Error':<12}")
    print("-" * 100)

    errors = []
    for K in strikes:
        deviation = K / S0 - 1.0
        true_sigma = base_vol + skew * deviation + curvature * deviation**2

        call_result = call_iv(call(S0, K, r, true_sigma, T), S0, K, r, T)
        put_result = put_iv(put(S0, K, r, true_sigma, T), S0, K, r, T)

        if not (call_result.converged and put_result.converged):
            print(f"{K:<10.1f} {true_sigma:<12.6f} "
                  f"FAILED ({call_result.reason}, {put_result.reason})")
            continue

        error = max(abs(call_result.sigma - true_sigma), abs(put_result.sigma - true_sigma))
        errors.append(error)
        print(f"{K:<10.1f} {true_sigma:<12.6f} {call_result.sigma:<14.8f} "
              f"{put_result.sigma:<14.8f} "
              f"{call_result.iterations:>3}/{put_result.iterations:<8} {error:<12.2e}")

    print("-" * 100)

    if errors:
        errors = np.asarray(errors)
        print(f"\nRecovered {len(errors)}/{len(strikes)} strikes")
        print(f"Mean absolute error: {errors.mean():.2e}")
        print(f"Max absolute error:  {errors.max():.2e}")


if __name__ == "__main__":
    main()
