"""
Black-Scholes Option Pricing Library

Closed-form European option prices, Greeks and implied volatility.
"""

from bs_pricer._version import __version__

# Analytics
from bs_pricer.analytics.black_scholes import (
    call,
    call_all,
    call_delta,
    call_price,
    call_rho,
    call_theta,
    gamma,
    put,
    put_all,
    put_delta,
    put_price,
    put_rho,
    put_theta,
    vega,
)
from bs_pricer.analytics.implied_vol import call_iv, implied_vol, put_iv
from bs_pricer.analytics.normal import normal_cdf, normal_pdf

# Result types
from bs_pricer.analytics.types import ImpliedVolError, ImpliedVolResult, OptionBundle

__all__ = [
    # Version
    "__version__",
    # Prices
    "call",
    "call_price",
    "put",
    "put_price",
    # Greeks
    "call_delta",
    "put_delta",
    "gamma",
    "vega",
    "call_theta",
    "put_theta",
    "call_rho",
    "put_rho",
    "call_all",
    "put_all",
    # Implied volatility
    "call_iv",
    "put_iv",
    "implied_vol",
    # Distribution
    "normal_cdf",
    "normal_pdf",
    # Types
    "OptionBundle",
    "ImpliedVolResult",
    "ImpliedVolError",
]
