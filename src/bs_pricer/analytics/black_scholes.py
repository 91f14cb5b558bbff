"""
Black-Scholes analytical pricing formulas and Greeks for European options.

Every quantity is available in two forms:

- rate-based: ``(stock, strike, rate, sigma, maturity)``
- discount-based: ``(stock, strike, discount, sqrt_maturity_sigma)``, for
  callers that already hold exp(-r·τ) and σ√τ. Vega, theta and rho also
  need ``maturity`` as a trailing argument.

Single-formula functions build their own SharedTerms. The ``*_all``
functions build SharedTerms once and derive the price and every Greek
from it.

When total volatility σ√τ is zero the option is worth its discounted
intrinsic value; gamma, vega and theta are then 0.
"""

import math

from bs_pricer.analytics.terms import (
    SharedTerms,
    build_terms,
    discount_and_total_vol,
    is_degenerate,
)
from bs_pricer.analytics.types import OptionBundle


def _implied_rate(discount: float, maturity: float) -> float:
    """Continuously compounded rate r such that exp(-r·τ) = discount."""
    if maturity > 0.0:
        return -math.log(discount) / maturity
    return 0.0


# Formulas on shared terms


def call_price_from_terms(stock: float, strike: float, terms: SharedTerms) -> float:
    """S·N(d1) - K·Df·N(d2)"""
    return stock * terms.cdf_d1 - strike * terms.discount * terms.cdf_d2


def put_price_from_terms(stock: float, strike: float, terms: SharedTerms) -> float:
    """K·Df·N(-d2) - S·N(-d1)"""
    return strike * terms.discount * (1.0 - terms.cdf_d2) - stock * (1.0 - terms.cdf_d1)


def gamma_from_terms(stock: float, terms: SharedTerms) -> float:
    """φ(d1) / (S·σ√τ)"""
    return terms.pdf_d1 / (stock * terms.sqrt_maturity_sigma)


def vega_from_terms(stock: float, terms: SharedTerms, maturity: float) -> float:
    """S·φ(d1)·√τ"""
    return stock * terms.pdf_d1 * math.sqrt(maturity)


def _time_decay(stock: float, terms: SharedTerms, maturity: float) -> float:
    # S·φ(d1)·σ/(2√τ) written with σ√τ so sigma itself is not needed;
    # no decay left to measure once τ is zero, matching vega and rho
    if not maturity > 0.0:
        return 0.0
    return -stock * terms.pdf_d1 * terms.sqrt_maturity_sigma / (2.0 * maturity)


def call_theta_from_terms(
    stock: float, strike: float, terms: SharedTerms, rate: float, maturity: float
) -> float:
    """-S·φ(d1)·σ/(2√τ) - r·K·Df·N(d2)"""
    carry = rate * strike * terms.discount
    return _time_decay(stock, terms, maturity) - carry * terms.cdf_d2


def put_theta_from_terms(
    stock: float, strike: float, terms: SharedTerms, rate: float, maturity: float
) -> float:
    """-S·φ(d1)·σ/(2√τ) + r·K·Df·N(-d2)"""
    carry = rate * strike * terms.discount
    return _time_decay(stock, terms, maturity) + carry * (1.0 - terms.cdf_d2)


def call_rho_from_terms(strike: float, terms: SharedTerms, maturity: float) -> float:
    """K·τ·Df·N(d2)"""
    return strike * maturity * terms.discount * terms.cdf_d2


def put_rho_from_terms(strike: float, terms: SharedTerms, maturity: float) -> float:
    """-K·τ·Df·N(-d2)"""
    return -strike * maturity * terms.discount * (1.0 - terms.cdf_d2)


# Zero total volatility: discounted intrinsic value


def _call_in_the_money(stock: float, strike: float, discount: float) -> bool:
    return stock > strike * discount


def _put_in_the_money(stock: float, strike: float, discount: float) -> bool:
    return strike * discount > stock


def _intrinsic_call_rho(stock: float, strike: float, discount: float, maturity: float) -> float:
    if _call_in_the_money(stock, strike, discount):
        return strike * maturity * discount
    return 0.0


def _intrinsic_put_rho(stock: float, strike: float, discount: float, maturity: float) -> float:
    if _put_in_the_money(stock, strike, discount):
        return -strike * maturity * discount
    return 0.0


# Prices


def call_price(stock: float, strike: float, discount: float, sqrt_maturity_sigma: float) -> float:
    """
    Compute European call price from a discount factor and total volatility.

    Parameters
    ----------
    stock : float
        Spot price (must be > 0)
    strike : float
        Strike price (must be > 0)
    discount : float
        Discount factor exp(-r·τ)
    sqrt_maturity_sigma : float
        Total volatility σ√τ (must be >= 0)

    Returns
    -------
    float
        Call price. For zero total volatility, max(S - K·Df, 0).

    Examples
    --------
    >>> round(call_price(5.0, 4.5, 0.99, 0.3 * math.sqrt(2.0)), 10)
    1.0954304987
    """
    if is_degenerate(sqrt_maturity_sigma):
        return max(stock - strike * discount, 0.0)
    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    return call_price_from_terms(stock, strike, terms)


def call(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute European call price using the Black-Scholes formula.

    Parameters
    ----------
    stock : float
        Spot price (must be > 0)
    strike : float
        Strike price (must be > 0)
    rate : float
        Risk-free interest rate (annualized, continuously compounded)
    sigma : float
        Volatility (annualized, must be >= 0)
    maturity : float
        Time to maturity in years (must be >= 0)

    Returns
    -------
    float
        Call price

    Examples
    --------
    >>> call(5.0, 4.5, 0.05, 0.3, 1.0)
    0.9848721043419868
    """
    return call_price(stock, strike, *discount_and_total_vol(rate, sigma, maturity))


def put_price(stock: float, strike: float, discount: float, sqrt_maturity_sigma: float) -> float:
    """
    Compute European put price from a discount factor and total volatility.

    For zero total volatility returns max(K·Df - S, 0).
    """
    if is_degenerate(sqrt_maturity_sigma):
        return max(strike * discount - stock, 0.0)
    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    return put_price_from_terms(stock, strike, terms)


def put(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute European put price using the Black-Scholes formula.

    Examples
    --------
    >>> put(5.0, 4.5, 0.05, 0.3, 1.0)
    0.2654045145951993
    """
    return put_price(stock, strike, *discount_and_total_vol(rate, sigma, maturity))


# Delta


def call_delta_discount(
    stock: float, strike: float, discount: float, sqrt_maturity_sigma: float
) -> float:
    """Call delta N(d1); 1 or 0 when total volatility is zero."""
    if is_degenerate(sqrt_maturity_sigma):
        return 1.0 if _call_in_the_money(stock, strike, discount) else 0.0
    return build_terms(stock, strike, discount, sqrt_maturity_sigma).cdf_d1


def call_delta(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute Delta for a European call.

    Delta = ∂V/∂S = N(d1)
    """
    return call_delta_discount(stock, strike, *discount_and_total_vol(rate, sigma, maturity))


def put_delta_discount(
    stock: float, strike: float, discount: float, sqrt_maturity_sigma: float
) -> float:
    """Put delta N(d1) - 1; -1 or 0 when total volatility is zero."""
    if is_degenerate(sqrt_maturity_sigma):
        return -1.0 if _put_in_the_money(stock, strike, discount) else 0.0
    return build_terms(stock, strike, discount, sqrt_maturity_sigma).cdf_d1 - 1.0


def put_delta(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute Delta for a European put.

    Delta = ∂V/∂S = N(d1) - 1
    """
    return put_delta_discount(stock, strike, *discount_and_total_vol(rate, sigma, maturity))


# Gamma and vega (identical for calls and puts)


def gamma_discount(
    stock: float, strike: float, discount: float, sqrt_maturity_sigma: float
) -> float:
    """Gamma from a discount factor and total volatility."""
    if is_degenerate(sqrt_maturity_sigma):
        return 0.0
    return gamma_from_terms(stock, build_terms(stock, strike, discount, sqrt_maturity_sigma))


def gamma(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute Gamma for a European option.

    Gamma = ∂²V/∂S² = φ(d1) / (S·σ·√τ), same for calls and puts.
    """
    return gamma_discount(stock, strike, *discount_and_total_vol(rate, sigma, maturity))


def vega_discount(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    maturity: float,
) -> float:
    """Vega from a discount factor and total volatility."""
    if is_degenerate(sqrt_maturity_sigma):
        return 0.0
    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    return vega_from_terms(stock, terms, maturity)


def vega(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute Vega for a European option.

    Vega = ∂V/∂σ = S·φ(d1)·√τ, same for calls and puts.
    """
    discount, sqrt_maturity_sigma = discount_and_total_vol(rate, sigma, maturity)
    return vega_discount(stock, strike, discount, sqrt_maturity_sigma, maturity)


call_gamma = gamma
put_gamma = gamma
call_vega = vega
put_vega = vega


# Theta


def _call_theta(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    rate: float,
    maturity: float,
) -> float:
    if is_degenerate(sqrt_maturity_sigma):
        return 0.0
    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    return call_theta_from_terms(stock, strike, terms, rate, maturity)


def _put_theta(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    rate: float,
    maturity: float,
) -> float:
    if is_degenerate(sqrt_maturity_sigma):
        return 0.0
    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    return put_theta_from_terms(stock, strike, terms, rate, maturity)


def call_theta_discount(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    maturity: float,
) -> float:
    """Call theta; the rate is recovered as -ln(Df)/τ."""
    rate = _implied_rate(discount, maturity)
    return _call_theta(stock, strike, discount, sqrt_maturity_sigma, rate, maturity)


def call_theta(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute Theta for a European call.

    Theta is the time decay -∂V/∂τ, typically negative:
    -[S·φ(d1)·σ/(2√τ)] - r·K·exp(-rτ)·N(d2)
    """
    discount, sqrt_maturity_sigma = discount_and_total_vol(rate, sigma, maturity)
    return _call_theta(stock, strike, discount, sqrt_maturity_sigma, rate, maturity)


def put_theta_discount(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    maturity: float,
) -> float:
    """Put theta; the rate is recovered as -ln(Df)/τ."""
    rate = _implied_rate(discount, maturity)
    return _put_theta(stock, strike, discount, sqrt_maturity_sigma, rate, maturity)


def put_theta(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute Theta for a European put.

    -[S·φ(d1)·σ/(2√τ)] + r·K·exp(-rτ)·N(-d2)
    """
    discount, sqrt_maturity_sigma = discount_and_total_vol(rate, sigma, maturity)
    return _put_theta(stock, strike, discount, sqrt_maturity_sigma, rate, maturity)


# Rho


def call_rho_discount(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    maturity: float,
) -> float:
    """Call rho K·τ·Df·N(d2); K·τ·Df or 0 when total volatility is zero."""
    if is_degenerate(sqrt_maturity_sigma):
        return _intrinsic_call_rho(stock, strike, discount, maturity)
    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    return call_rho_from_terms(strike, terms, maturity)


def call_rho(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute Rho for a European call.

    Rho = ∂V/∂r = K·τ·exp(-rτ)·N(d2)
    """
    discount, sqrt_maturity_sigma = discount_and_total_vol(rate, sigma, maturity)
    return call_rho_discount(stock, strike, discount, sqrt_maturity_sigma, maturity)


def put_rho_discount(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    maturity: float,
) -> float:
    """Put rho -K·τ·Df·N(-d2); -K·τ·Df or 0 when total volatility is zero."""
    if is_degenerate(sqrt_maturity_sigma):
        return _intrinsic_put_rho(stock, strike, discount, maturity)
    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    return put_rho_from_terms(strike, terms, maturity)


def put_rho(stock: float, strike: float, rate: float, sigma: float, maturity: float) -> float:
    """
    Compute Rho for a European put.

    Rho = ∂V/∂r = -K·τ·exp(-rτ)·N(-d2)
    """
    discount, sqrt_maturity_sigma = discount_and_total_vol(rate, sigma, maturity)
    return put_rho_discount(stock, strike, discount, sqrt_maturity_sigma, maturity)


# Cached aggregate mode


def _call_bundle(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    rate: float,
    maturity: float,
) -> OptionBundle:
    if is_degenerate(sqrt_maturity_sigma):
        itm = _call_in_the_money(stock, strike, discount)
        return OptionBundle(
            price=max(stock - strike * discount, 0.0),
            delta=1.0 if itm else 0.0,
            gamma=0.0,
            theta=0.0,
            vega=0.0,
            rho=_intrinsic_call_rho(stock, strike, discount, maturity),
        )

    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    return OptionBundle(
        price=call_price_from_terms(stock, strike, terms),
        delta=terms.cdf_d1,
        gamma=gamma_from_terms(stock, terms),
        theta=call_theta_from_terms(stock, strike, terms, rate, maturity),
        vega=vega_from_terms(stock, terms, maturity),
        rho=call_rho_from_terms(strike, terms, maturity),
    )


def _put_bundle(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    rate: float,
    maturity: float,
) -> OptionBundle:
    if is_degenerate(sqrt_maturity_sigma):
        itm = _put_in_the_money(stock, strike, discount)
        return OptionBundle(
            price=max(strike * discount - stock, 0.0),
            delta=-1.0 if itm else 0.0,
            gamma=0.0,
            theta=0.0,
            vega=0.0,
            rho=_intrinsic_put_rho(stock, strike, discount, maturity),
        )

    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    return OptionBundle(
        price=put_price_from_terms(stock, strike, terms),
        delta=terms.cdf_d1 - 1.0,
        gamma=gamma_from_terms(stock, terms),
        theta=put_theta_from_terms(stock, strike, terms, rate, maturity),
        vega=vega_from_terms(stock, terms, maturity),
        rho=put_rho_from_terms(strike, terms, maturity),
    )


def call_all(
    stock: float, strike: float, rate: float, sigma: float, maturity: float
) -> OptionBundle:
    """
    Compute call price and all Greeks from a single set of shared terms.

    Parameters
    ----------
    stock : float
        Spot price (must be > 0)
    strike : float
        Strike price (must be > 0)
    rate : float
        Risk-free interest rate
    sigma : float
        Volatility (must be >= 0)
    maturity : float
        Time to maturity in years (must be >= 0)

    Returns
    -------
    OptionBundle
        Price, delta, gamma, theta, vega and rho
    """
    discount, sqrt_maturity_sigma = discount_and_total_vol(rate, sigma, maturity)
    return _call_bundle(stock, strike, discount, sqrt_maturity_sigma, rate, maturity)


def call_all_discount(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    maturity: float,
) -> OptionBundle:
    """Discount-based form of call_all."""
    rate = _implied_rate(discount, maturity)
    return _call_bundle(stock, strike, discount, sqrt_maturity_sigma, rate, maturity)


def put_all(
    stock: float, strike: float, rate: float, sigma: float, maturity: float
) -> OptionBundle:
    """Compute put price and all Greeks from a single set of shared terms."""
    discount, sqrt_maturity_sigma = discount_and_total_vol(rate, sigma, maturity)
    return _put_bundle(stock, strike, discount, sqrt_maturity_sigma, rate, maturity)


def put_all_discount(
    stock: float,
    strike: float,
    discount: float,
    sqrt_maturity_sigma: float,
    maturity: float,
) -> OptionBundle:
    """Discount-based form of put_all."""
    rate = _implied_rate(discount, maturity)
    return _put_bundle(stock, strike, discount, sqrt_maturity_sigma, rate, maturity)


def option_all(
    option_type: str, stock: float, strike: float, rate: float, sigma: float, maturity: float
) -> OptionBundle:
    """Dispatch to call_all or put_all by option_type ('call' or 'put')."""
    if option_type == "call":
        return call_all(stock, strike, rate, sigma, maturity)
    if option_type == "put":
        return put_all(stock, strike, rate, sigma, maturity)
    raise ValueError("option_type must be 'call' or 'put'")
