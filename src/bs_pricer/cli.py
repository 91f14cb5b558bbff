#!/usr/bin/env python
"""
Command-line interface for Black-Scholes option pricing.

This module provides the main CLI entrypoint for the bs-price command.

Example usage:
    bs-price --S0 5 --K 4.5 --r 0.05 --sigma 0.3 --T 1.0
    bs-price --S0 100 --K 100 --r 0.05 --T 1.0 --option_type put --implied_vol 5.57
"""

import argparse
import logging
import sys

from bs_pricer.analytics.black_scholes import option_all
from bs_pricer.analytics.implied_vol import (
    DEFAULT_MAX_ITER,
    DEFAULT_SIGMA_HIGH,
    DEFAULT_SIGMA_TOL,
    DEFAULT_TOL,
    implied_vol,
)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Black-Scholes option pricing, Greeks and implied volatility",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Market parameters
    parser.add_argument("--S0", type=float, required=True, help="Spot price")
    parser.add_argument("--K", type=float, required=True, help="Strike price")
    parser.add_argument("--r", type=float, required=True, help="Risk-free rate")
    parser.add_argument("--T", type=float, required=True, help="Time to maturity (years)")
    parser.add_argument(
        "--sigma",
        type=float,
        default=None,
        help="Volatility (required unless only --implied_vol is requested)",
    )

    # Option parameters
    parser.add_argument(
        "--option_type",
        type=str,
        choices=["call", "put"],
        default="call",
        help="Option type: call or put",
    )

    # Implied volatility parameters
    parser.add_argument(
        "--implied_vol",
        type=float,
        default=None,
        help="Compute implied volatility from given market price",
    )
    parser.add_argument(
        "--tol",
        type=float,
        default=DEFAULT_TOL,
        help="Price tolerance for the implied volatility solver",
    )
    parser.add_argument(
        "--sigma_tol",
        type=float,
        default=DEFAULT_SIGMA_TOL,
        help="Volatility resolution required before the solver reports convergence",
    )
    parser.add_argument(
        "--max_iter",
        type=int,
        default=DEFAULT_MAX_ITER,
        help="Maximum implied volatility solver iterations",
    )
    parser.add_argument(
        "--sigma_high",
        type=float,
        default=DEFAULT_SIGMA_HIGH,
        help="Initial upper end of the volatility bracket",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(args)


def validate_inputs(parsed: argparse.Namespace) -> list[str]:
    """Return a list of input errors; empty when the inputs are usable."""
    errors = []
    if not parsed.S0 > 0:
        errors.append("Spot price S0 must be positive")
    if not parsed.K > 0:
        errors.append("Strike K must be positive")
    if not parsed.T >= 0:
        errors.append("Time to maturity T must be non-negative")
    if parsed.sigma is not None and not parsed.sigma >= 0:
        errors.append("Volatility sigma must be non-negative")
    if parsed.sigma is None and parsed.implied_vol is None:
        errors.append("--sigma is required unless --implied_vol is given")
    if parsed.implied_vol is not None:
        if not parsed.implied_vol >= 0:
            errors.append("Price must be non-negative")
        if not parsed.T > 0:
            errors.append("Implied volatility requires positive maturity T")
        if not parsed.tol > 0:
            errors.append("--tol must be positive")
        if not parsed.sigma_tol > 0:
            errors.append("--sigma_tol must be positive")
        if parsed.max_iter < 1:
            errors.append("--max_iter must be at least 1")
    return errors


def main(args: list[str] | None = None) -> int:
    """Main entry point for CLI.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    int
        Exit code (0 for success, non-zero for errors).
    """
    parsed = parse_args(args)

    if parsed.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s"
        )

    errors = validate_inputs(parsed)
    if errors:
        for error in errors:
            print(f"Error: {error}")
        return 1

    # Print input parameters
    print("=" * 70)
    print("Black-Scholes Option Pricing")
    print("=" * 70)
    print("\nInput Parameters:")
    print(f"  Spot Price (S0):        {parsed.S0:,.4f}")
    print(f"  Strike Price (K):       {parsed.K:,.4f}")
    print(f"  Risk-free Rate (r):     {parsed.r:.4f}")
    if parsed.sigma is not None:
        print(f"  Volatility (σ):         {parsed.sigma:.4f}")
    print(f"  Time to Maturity (T):   {parsed.T:.4f} years")
    print(f"  Option Type:            {parsed.option_type.upper()}")

    if parsed.sigma is not None:
        bundle = option_all(
            parsed.option_type, parsed.S0, parsed.K, parsed.r, parsed.sigma, parsed.T
        )
        print("\nResults:")
        print(f"  Price:  {bundle.price:.6f}")
        print(f"  Delta:  {bundle.delta:.6f}")
        print(f"  Gamma:  {bundle.gamma:.6f}")
        print(f"  Theta:  {bundle.theta:.6f}")
        print(f"  Vega:   {bundle.vega:.6f}")
        print(f"  Rho:    {bundle.rho:.6f}")

    exit_code = 0
    if parsed.implied_vol is not None:
        print("\n" + "=" * 70)
        print("Implied Volatility")
        print("=" * 70)

        result = implied_vol(
            parsed.implied_vol,
            parsed.S0,
            parsed.K,
            parsed.r,
            parsed.T,
            parsed.option_type,
            tol=parsed.tol,
            sigma_tol=parsed.sigma_tol,
            max_iter=parsed.max_iter,
            sigma_high=parsed.sigma_high,
        )
        print(f"\nMarket Price:      {parsed.implied_vol:.6f}")
        if result.converged:
            print(f"Implied Vol:       {result.sigma:.6f}")
            print(f"Iterations:        {result.iterations}")
            print(f"Price Error:       {abs(result.price_error):.2e}")
            if parsed.sigma is not None:
                print(f"Vol Difference:    {result.sigma - parsed.sigma:.6f}")
        else:
            print(f"Solver failed:     {result.reason}")
            print(f"Best Estimate:     {result.sigma:.6f}")
            print(f"Bracket:           [{result.bracket[0]:.6f}, {result.bracket[1]:.6f}]")
            print(f"Price Error:       {result.price_error:.2e}")
            exit_code = 1

    print("\n" + "=" * 70)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
