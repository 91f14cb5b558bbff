"""
Implied volatility solver for European options.

Newton-Raphson on σ using vega as the derivative, safeguarded by a
bracket that is narrowed on every iteration. A Newton step that leaves
the bracket, or a vanishing vega, falls back to bisection. A solve
converges only when the price matches and vega is large enough to pin
σ down; deep in the wings a price match alone says little about σ. The
solver never raises on numerical failure; it returns an ImpliedVolResult that
carries the best estimate reached.
"""

import logging
import math

from bs_pricer.analytics.black_scholes import (
    call_price_from_terms,
    put_price_from_terms,
    vega_from_terms,
)
from bs_pricer.analytics.terms import build_terms, is_degenerate
from bs_pricer.analytics.types import (
    ABOVE_UPPER_BOUND,
    BELOW_INTRINSIC,
    CONVERGED,
    MAX_ITERATIONS,
    NON_POSITIVE_MATURITY,
    STALLED,
    ImpliedVolResult,
)

logger = logging.getLogger(__name__)

DEFAULT_TOL = 1e-8
DEFAULT_MAX_ITER = 100
DEFAULT_SIGMA_LOW = 0.0
DEFAULT_SIGMA_HIGH = 5.0
MAX_SIGMA = 10.0
DEFAULT_SIGMA_TOL = 1e-8
MIN_VEGA = 1e-12
PRICE_ROUNDING = 2.0 * math.ulp(1.0)

SQRT_2PI = math.sqrt(2.0 * math.pi)


def corrado_miller_vol(
    price: float, stock: float, strike: float, rate: float, maturity: float
) -> float:
    """
    Closed-form approximation of call implied volatility.

    Corrado and Miller (1996). Used as the Newton starting point; accurate
    to a few volatility points near the money, poor far from it.

    Parameters
    ----------
    price : float
        Call price
    stock : float
        Spot price
    strike : float
        Strike price
    rate : float
        Risk-free interest rate
    maturity : float
        Time to maturity in years (must be > 0)

    Returns
    -------
    float
        Approximate implied volatility
    """
    discounted_strike = strike * math.exp(-rate * maturity)
    moneyness = stock - discounted_strike
    centred = price - 0.5 * moneyness
    bridge = centred**2 - moneyness**2 / math.pi
    root = math.sqrt(bridge) if bridge > 0.0 else 0.0
    return SQRT_2PI / (stock + discounted_strike) * (centred + root) / math.sqrt(maturity)


def _price_and_vega(
    stock: float,
    strike: float,
    discount: float,
    maturity: float,
    sigma: float,
    is_call: bool,
) -> tuple[float, float, float]:
    """
    Model price, vega, and the magnitude of the terms the price is the
    difference of (its rounding error is a few ulps of that magnitude).
    """
    sqrt_maturity_sigma = sigma * math.sqrt(maturity)
    if is_degenerate(sqrt_maturity_sigma):
        if is_call:
            return max(stock - strike * discount, 0.0), 0.0, stock
        return max(strike * discount - stock, 0.0), 0.0, stock

    terms = build_terms(stock, strike, discount, sqrt_maturity_sigma)
    if is_call:
        model_price = call_price_from_terms(stock, strike, terms)
        scale = stock * terms.cdf_d1 + strike * discount * terms.cdf_d2
    else:
        model_price = put_price_from_terms(stock, strike, terms)
        # 1 - N(d) carries the absolute rounding error of N(d)
        scale = stock + strike * discount
    return model_price, vega_from_terms(stock, terms, maturity), scale


def _solve(
    price: float,
    stock: float,
    strike: float,
    rate: float,
    maturity: float,
    is_call: bool,
    initial_guess: float,
    tol: float,
    sigma_tol: float,
    max_iter: int,
    sigma_low: float,
    sigma_high: float,
) -> ImpliedVolResult:
    label = "call" if is_call else "put"

    if not maturity > 0.0:
        intrinsic = max(stock - strike, 0.0) if is_call else max(strike - stock, 0.0)
        logger.debug("%s implied vol undefined for maturity %s", label, maturity)
        return ImpliedVolResult(
            converged=False,
            sigma=sigma_low,
            iterations=0,
            price_error=intrinsic - price,
            bracket=(sigma_low, sigma_high),
            reason=NON_POSITIVE_MATURITY,
        )

    discount = math.exp(-rate * maturity)

    # Arbitrage bounds:
    # - Call: max(0, S - K·Df) <= price <= S
    # - Put: max(0, K·Df - S) <= price <= K·Df
    if is_call:
        lower_bound = max(stock - strike * discount, 0.0)
        upper_bound = stock
    else:
        lower_bound = max(strike * discount - stock, 0.0)
        upper_bound = strike * discount

    if price < lower_bound - tol:
        logger.debug(
            "%s price %.6f is below arbitrage lower bound %.6f", label, price, lower_bound
        )
        return ImpliedVolResult(
            converged=False,
            sigma=sigma_low,
            iterations=0,
            price_error=lower_bound - price,
            bracket=(sigma_low, sigma_low),
            reason=BELOW_INTRINSIC,
        )
    if price > upper_bound + tol:
        logger.debug(
            "%s price %.6f exceeds arbitrage upper bound %.6f", label, price, upper_bound
        )
        return ImpliedVolResult(
            converged=False,
            sigma=sigma_high,
            iterations=0,
            price_error=upper_bound - price,
            bracket=(sigma_high, sigma_high),
            reason=ABOVE_UPPER_BOUND,
        )

    sigma_l = sigma_low
    sigma_h = sigma_high

    # Price at the bottom of the bracket (intrinsic value when sigma_low is 0).
    # Only a target at or below it is answered by sigma_low itself.
    price_low, _, _ = _price_and_vega(stock, strike, discount, maturity, sigma_l, is_call)
    if price <= price_low:
        if price_low - price <= tol:
            return ImpliedVolResult(
                converged=True,
                sigma=sigma_l,
                iterations=0,
                price_error=price_low - price,
                bracket=(sigma_l, sigma_l),
            )
        logger.debug(
            "%s price %.6f is below the model price %.6f at sigma %.4f",
            label,
            price,
            price_low,
            sigma_l,
        )
        return ImpliedVolResult(
            converged=False,
            sigma=sigma_l,
            iterations=0,
            price_error=price_low - price,
            bracket=(sigma_l, sigma_l),
            reason=BELOW_INTRINSIC,
        )

    # Ensure upper bound is high enough
    price_high, _, _ = _price_and_vega(stock, strike, discount, maturity, sigma_h, is_call)
    while price_high < price - tol and sigma_h < MAX_SIGMA:
        sigma_l = sigma_h
        sigma_h = min(2.0 * sigma_h, MAX_SIGMA)
        price_high, _, _ = _price_and_vega(
            stock, strike, discount, maturity, sigma_h, is_call
        )

    if price_high < price - tol:
        logger.debug(
            "%s price %.6f cannot be matched with sigma <= %.2f (model price %.6f)",
            label,
            price,
            sigma_h,
            price_high,
        )
        return ImpliedVolResult(
            converged=False,
            sigma=sigma_h,
            iterations=0,
            price_error=price_high - price,
            bracket=(sigma_h, sigma_h),
            reason=ABOVE_UPPER_BOUND,
        )

    sigma = initial_guess
    if not sigma_l < sigma < sigma_h:
        sigma = 0.5 * (sigma_l + sigma_h)

    best_sigma = sigma
    best_error = math.inf
    step = step_before = sigma_h - sigma_l

    for iteration in range(1, max_iter + 1):
        model_price, model_vega, scale = _price_and_vega(
            stock, strike, discount, maturity, sigma, is_call
        )
        error = model_price - price

        if abs(error) < abs(best_error):
            best_sigma, best_error = sigma, error

        # A price match only pins sigma down when vega resolves it: the
        # remaining Newton step and the price rounding error, both measured
        # in sigma, must be within sigma_tol
        sigma_resolution = math.inf
        if model_vega > 0.0:
            sigma_resolution = (abs(error) + PRICE_ROUNDING * scale) / model_vega

        if abs(error) <= tol and sigma_resolution <= sigma_tol:
            return ImpliedVolResult(
                converged=True,
                sigma=sigma,
                iterations=iteration,
                price_error=error,
                bracket=(sigma_l, sigma_h),
            )

        # Price is increasing in sigma, so the sign of the error moves one side
        if error > 0:
            sigma_h = sigma
        else:
            sigma_l = sigma

        if sigma_h - sigma_l <= 2.0 * math.ulp(sigma_h):
            logger.debug(
                "%s implied vol bracket collapsed at %.12f with price error %.2e",
                label,
                best_sigma,
                best_error,
            )
            return ImpliedVolResult(
                converged=False,
                sigma=best_sigma,
                iterations=iteration,
                price_error=best_error,
                bracket=(sigma_l, sigma_h),
                reason=STALLED,
            )

        # Newton step, unless it leaves the bracket or is not at least
        # halving the step taken two iterations ago (rtsafe rule)
        use_newton = False
        if model_vega > MIN_VEGA:
            newton_step = error / model_vega
            use_newton = (
                sigma_l < sigma - newton_step < sigma_h
                and abs(2.0 * newton_step) <= abs(step_before)
            )

        step_before = step
        if use_newton:
            step = newton_step
            sigma -= newton_step
        else:
            step = 0.5 * (sigma_h - sigma_l)
            sigma = sigma_l + step

    logger.debug(
        "%s implied vol did not converge after %d iterations, bracket [%.6f, %.6f]",
        label,
        max_iter,
        sigma_l,
        sigma_h,
    )
    return ImpliedVolResult(
        converged=False,
        sigma=best_sigma,
        iterations=max_iter,
        price_error=best_error,
        bracket=(sigma_l, sigma_h),
        reason=MAX_ITERATIONS,
    )


def call_iv_guess(
    price: float,
    stock: float,
    strike: float,
    rate: float,
    maturity: float,
    initial_guess: float,
    *,
    tol: float = DEFAULT_TOL,
    sigma_tol: float = DEFAULT_SIGMA_TOL,
    max_iter: int = DEFAULT_MAX_ITER,
    sigma_low: float = DEFAULT_SIGMA_LOW,
    sigma_high: float = DEFAULT_SIGMA_HIGH,
) -> ImpliedVolResult:
    """
    Compute call implied volatility starting from an explicit guess.

    Parameters
    ----------
    price : float
        Observed market price of the call
    stock : float
        Spot price (must be > 0)
    strike : float
        Strike price (must be > 0)
    rate : float
        Risk-free interest rate
    maturity : float
        Time to maturity in years (must be > 0)
    initial_guess : float
        Starting volatility; replaced by the bracket midpoint if outside it
    tol : float, optional
        Convergence tolerance on the price difference (default: 1e-8)
    sigma_tol : float, optional
        Required resolution of the volatility itself: the remaining Newton
        step plus price rounding error divided by vega (default: 1e-8)
    max_iter : int, optional
        Maximum number of Newton/bisection iterations (default: 100)
    sigma_low : float, optional
        Lower end of the volatility bracket (default: 0.0)
    sigma_high : float, optional
        Upper end of the volatility bracket (default: 5.0), doubled up to
        10.0 if the target price is not reached

    Returns
    -------
    ImpliedVolResult
        Converged volatility, or a failure carrying the best estimate
    """
    return _solve(
        price, stock, strike, rate, maturity, True, initial_guess,
        tol, sigma_tol, max_iter, sigma_low, sigma_high,
    )


def call_iv(
    price: float,
    stock: float,
    strike: float,
    rate: float,
    maturity: float,
    *,
    tol: float = DEFAULT_TOL,
    sigma_tol: float = DEFAULT_SIGMA_TOL,
    max_iter: int = DEFAULT_MAX_ITER,
    sigma_low: float = DEFAULT_SIGMA_LOW,
    sigma_high: float = DEFAULT_SIGMA_HIGH,
) -> ImpliedVolResult:
    """
    Compute call implied volatility.

    Starts from the Corrado-Miller approximation.

    Examples
    --------
    >>> from bs_pricer.analytics.black_scholes import call
    >>> result = call_iv(call(5.0, 4.5, 0.05, 0.2, 1.0), 5.0, 4.5, 0.05, 1.0)
    >>> result.converged, round(result.sigma, 8)
    (True, 0.2)
    """
    initial_guess = math.nan
    if maturity > 0.0:
        initial_guess = corrado_miller_vol(price, stock, strike, rate, maturity)
    return call_iv_guess(
        price, stock, strike, rate, maturity, initial_guess,
        tol=tol, sigma_tol=sigma_tol, max_iter=max_iter,
        sigma_low=sigma_low, sigma_high=sigma_high,
    )


def put_iv_guess(
    price: float,
    stock: float,
    strike: float,
    rate: float,
    maturity: float,
    initial_guess: float,
    *,
    tol: float = DEFAULT_TOL,
    sigma_tol: float = DEFAULT_SIGMA_TOL,
    max_iter: int = DEFAULT_MAX_ITER,
    sigma_low: float = DEFAULT_SIGMA_LOW,
    sigma_high: float = DEFAULT_SIGMA_HIGH,
) -> ImpliedVolResult:
    """Compute put implied volatility starting from an explicit guess."""
    return _solve(
        price, stock, strike, rate, maturity, False, initial_guess,
        tol, sigma_tol, max_iter, sigma_low, sigma_high,
    )


def put_iv(
    price: float,
    stock: float,
    strike: float,
    rate: float,
    maturity: float,
    *,
    tol: float = DEFAULT_TOL,
    sigma_tol: float = DEFAULT_SIGMA_TOL,
    max_iter: int = DEFAULT_MAX_ITER,
    sigma_low: float = DEFAULT_SIGMA_LOW,
    sigma_high: float = DEFAULT_SIGMA_HIGH,
) -> ImpliedVolResult:
    """
    Compute put implied volatility.

    The starting point is the Corrado-Miller guess for the call with the
    same strike, priced through put-call parity.
    """
    initial_guess = math.nan
    if maturity > 0.0:
        call_equivalent = price + stock - strike * math.exp(-rate * maturity)
        initial_guess = corrado_miller_vol(call_equivalent, stock, strike, rate, maturity)
    return put_iv_guess(
        price, stock, strike, rate, maturity, initial_guess,
        tol=tol, sigma_tol=sigma_tol, max_iter=max_iter,
        sigma_low=sigma_low, sigma_high=sigma_high,
    )


def implied_vol(
    price: float,
    stock: float,
    strike: float,
    rate: float,
    maturity: float,
    option_type: str,
    **kwargs,
) -> ImpliedVolResult:
    """Dispatch to call_iv or put_iv by option_type ('call' or 'put')."""
    if option_type == "call":
        return call_iv(price, stock, strike, rate, maturity, **kwargs)
    if option_type == "put":
        return put_iv(price, stock, strike, rate, maturity, **kwargs)
    raise ValueError("option_type must be 'call' or 'put'")
