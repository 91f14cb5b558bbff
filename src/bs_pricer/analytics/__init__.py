"""
Analytics module for Black-Scholes pricing, Greeks and implied volatility.

Closed-form formulas over scalar floats, built on shared intermediate
terms, plus a bounded Newton/bisection implied volatility solver.
"""

from bs_pricer.analytics.black_scholes import (
    call,
    call_all,
    call_all_discount,
    call_delta,
    call_delta_discount,
    call_gamma,
    call_price,
    call_rho,
    call_rho_discount,
    call_theta,
    call_theta_discount,
    call_vega,
    gamma,
    gamma_discount,
    option_all,
    put,
    put_all,
    put_all_discount,
    put_delta,
    put_delta_discount,
    put_gamma,
    put_price,
    put_rho,
    put_rho_discount,
    put_theta,
    put_theta_discount,
    put_vega,
    vega,
    vega_discount,
)
from bs_pricer.analytics.implied_vol import (
    call_iv,
    call_iv_guess,
    corrado_miller_vol,
    implied_vol,
    put_iv,
    put_iv_guess,
)
from bs_pricer.analytics.normal import normal_cdf, normal_pdf
from bs_pricer.analytics.terms import SharedTerms, build_terms, build_terms_from_rate
from bs_pricer.analytics.types import ImpliedVolError, ImpliedVolResult, OptionBundle

__all__ = [
    "ImpliedVolError",
    "ImpliedVolResult",
    "OptionBundle",
    "SharedTerms",
    "build_terms",
    "build_terms_from_rate",
    "call",
    "call_all",
    "call_all_discount",
    "call_delta",
    "call_delta_discount",
    "call_gamma",
    "call_iv",
    "call_iv_guess",
    "call_price",
    "call_rho",
    "call_rho_discount",
    "call_theta",
    "call_theta_discount",
    "call_vega",
    "corrado_miller_vol",
    "gamma",
    "gamma_discount",
    "implied_vol",
    "normal_cdf",
    "normal_pdf",
    "option_all",
    "put",
    "put_all",
    "put_all_discount",
    "put_delta",
    "put_delta_discount",
    "put_gamma",
    "put_iv",
    "put_iv_guess",
    "put_price",
    "put_rho",
    "put_rho_discount",
    "put_theta",
    "put_theta_discount",
    "put_vega",
    "vega",
    "vega_discount",
]
