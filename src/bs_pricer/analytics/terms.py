"""
Shared Black-Scholes intermediate terms.

Every price and greek formula is a cheap combination of d1, d2, N(d1),
N(d2) and φ(d1). Building them once and handing the frozen result to
each formula avoids repeating the log, exp and erfc evaluations.
"""

import math
from dataclasses import dataclass

from bs_pricer.analytics.normal import normal_cdf, normal_pdf


@dataclass(frozen=True)
class SharedTerms:
    """
    Intermediate values shared by the pricing and greek formulas.

    Attributes
    ----------
    d1 : float
        ln(S/(K·Df))/v + v/2
    d2 : float
        d1 - v
    cdf_d1 : float
        N(d1)
    cdf_d2 : float
        N(d2)
    pdf_d1 : float
        φ(d1)
    discount : float
        Discount factor Df the terms were built with
    sqrt_maturity_sigma : float
        Total volatility v = σ√τ the terms were built with
    """

    d1: float
    d2: float
    cdf_d1: float
    cdf_d2: float
    pdf_d1: float
    discount: float
    sqrt_maturity_sigma: float


def is_degenerate(sqrt_maturity_sigma: float) -> bool:
    """Return True when total volatility is zero and d1/d2 are undefined."""
    return not sqrt_maturity_sigma > 0.0


def build_terms(
    stock: float, strike: float, discount: float, sqrt_maturity_sigma: float
) -> SharedTerms:
    """
    Build shared terms from a discount factor and pre-combined volatility.

    Parameters
    ----------
    stock : float
        Spot price (must be > 0)
    strike : float
        Strike price (must be > 0)
    discount : float
        Discount factor exp(-r·τ)
    sqrt_maturity_sigma : float
        Total volatility σ√τ (must be > 0, see is_degenerate)

    Returns
    -------
    SharedTerms
        Frozen bundle of d1, d2 and their distribution values
    """
    d1 = math.log(stock / (strike * discount)) / sqrt_maturity_sigma + 0.5 * sqrt_maturity_sigma
    d2 = d1 - sqrt_maturity_sigma
    return SharedTerms(
        d1=d1,
        d2=d2,
        cdf_d1=normal_cdf(d1),
        cdf_d2=normal_cdf(d2),
        pdf_d1=normal_pdf(d1),
        discount=discount,
        sqrt_maturity_sigma=sqrt_maturity_sigma,
    )


def discount_and_total_vol(rate: float, sigma: float, maturity: float) -> tuple[float, float]:
    """Convert (rate, sigma, maturity) into (discount, sqrt_maturity_sigma)."""
    return math.exp(-rate * maturity), math.sqrt(maturity) * sigma


def build_terms_from_rate(
    stock: float, strike: float, rate: float, sigma: float, maturity: float
) -> SharedTerms:
    """Build shared terms from a continuously compounded rate and raw sigma, maturity."""
    discount, sqrt_maturity_sigma = discount_and_total_vol(rate, sigma, maturity)
    return build_terms(stock, strike, discount, sqrt_maturity_sigma)
