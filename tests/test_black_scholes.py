"""
Tests for Black-Scholes prices and single-formula Greeks.
"""

import math

import numpy as np
import pytest

from bs_pricer.analytics.black_scholes import (
    call,
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
    put,
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

from .utils.black_scholes import (
    black_scholes_call,
    black_scholes_delta_call,
    black_scholes_delta_put,
    black_scholes_gamma,
    black_scholes_put,
    black_scholes_rho_call,
    black_scholes_rho_put,
    black_scholes_theta_call,
    black_scholes_theta_put,
    black_scholes_vega,
)

MARKETS = [
    (5.0, 4.5, 0.05, 0.3, 1.0),
    (100, 100, 0.05, 0.2, 1.0),  # ATM
    (100, 90, 0.05, 0.2, 1.0),  # ITM call
    (100, 110, 0.05, 0.2, 1.0),  # OTM call
    (120, 100, 0.03, 0.25, 0.5),  # shorter maturity
    (80, 100, 0.02, 0.15, 2.0),  # longer maturity
    (50, 50, 0.0, 0.6, 0.1),  # zero rate, high vol
    (100, 100, -0.01, 0.2, 1.0),  # negative rate
]


class TestReferenceValues:
    """Frozen reference values."""

    def test_call_formula(self):
        assert abs(call(5.0, 4.5, 0.05, 0.3, 1.0) - 0.9848721043419868) < 1e-12

    def test_put_formula(self):
        assert abs(put(5.0, 4.5, 0.05, 0.3, 1.0) - 0.2654045145951993) < 1e-12

    def test_discount_call_boundary_scenario(self):
        """stock=5, strike=4.5, discount=0.99, σ√τ=0.3·√2."""
        price = call_price(5.0, 4.5, 0.99, 0.3 * math.sqrt(2.0))
        assert abs(price - 1.0954304986648746) < 1e-8

    def test_discount_put_boundary_scenario(self):
        price = put_price(5.0, 4.5, 0.99, 0.3 * math.sqrt(2.0))
        assert abs(price - 0.5504304986648749) < 1e-8

    def test_atm_textbook_values(self):
        assert abs(call(100, 100, 0.05, 0.2, 1.0) - 10.450583572185565) < 1e-10
        assert abs(put(100, 100, 0.05, 0.2, 1.0) - 5.573526022256971) < 1e-10

    def test_greeks(self):
        args = (5.0, 4.5, 0.05, 0.3, 1.0)
        assert abs(call_delta(*args) - 0.7478911953200073) < 1e-12
        assert abs(put_delta(*args) - (0.7478911953200073 - 1.0)) < 1e-12
        assert abs(gamma(*args) - 0.2127946353815788) < 1e-12
        assert abs(vega(*args) - 1.5959597653618409) < 1e-12
        assert abs(call_theta(*args) - (-0.3771231584171786)) < 1e-12
        assert abs(put_theta(*args) - (-0.1630965379045180)) < 1e-12
        assert abs(call_rho(*args) - 2.7545838722580496) < 1e-12
        assert abs(put_rho(*args) - (-1.5259485379951629)) < 1e-12


class TestPutCallParity:
    """C - P = S - K·Df."""

    @pytest.mark.parametrize("S0,K,r,sigma,T", MARKETS)
    def test_rate_based(self, S0, K, r, sigma, T):
        lhs = call(S0, K, r, sigma, T) - put(S0, K, r, sigma, T)
        assert abs(lhs - (S0 - K * math.exp(-r * T))) < 1e-8

    def test_discount_based_random_grid(self):
        rng = np.random.default_rng(42)
        for _ in range(500):
            stock = rng.uniform(1.0, 200.0)
            strike = rng.uniform(1.0, 200.0)
            discount = rng.uniform(0.5, 1.05)
            total_vol = rng.uniform(0.01, 2.0)
            lhs = call_price(stock, strike, discount, total_vol) - put_price(
                stock, strike, discount, total_vol
            )
            assert abs(lhs - (stock - strike * discount)) < 1e-8

    @pytest.mark.parametrize("S0,K,r,sigma,T", MARKETS)
    def test_delta_parity(self, S0, K, r, sigma, T):
        assert abs(call_delta(S0, K, r, sigma, T) - put_delta(S0, K, r, sigma, T) - 1.0) < 1e-15


class TestAgainstReferenceImplementation:
    """Compare with the independent numpy implementation."""

    @pytest.mark.parametrize("S0,K,r,sigma,T", MARKETS)
    def test_prices(self, S0, K, r, sigma, T):
        assert call(S0, K, r, sigma, T) == pytest.approx(
            black_scholes_call(S0, K, r, sigma, T), rel=1e-10, abs=1e-12
        )
        assert put(S0, K, r, sigma, T) == pytest.approx(
            black_scholes_put(S0, K, r, sigma, T), rel=1e-10, abs=1e-12
        )

    @pytest.mark.parametrize("S0,K,r,sigma,T", MARKETS)
    def test_greeks(self, S0, K, r, sigma, T):
        args = (S0, K, r, sigma, T)
        approx = dict(rel=1e-9, abs=1e-12)
        assert call_delta(*args) == pytest.approx(black_scholes_delta_call(*args), **approx)
        assert put_delta(*args) == pytest.approx(black_scholes_delta_put(*args), **approx)
        assert gamma(*args) == pytest.approx(black_scholes_gamma(*args), **approx)
        assert vega(*args) == pytest.approx(black_scholes_vega(*args), **approx)
        assert call_theta(*args) == pytest.approx(black_scholes_theta_call(*args), **approx)
        assert put_theta(*args) == pytest.approx(black_scholes_theta_put(*args), **approx)
        assert call_rho(*args) == pytest.approx(black_scholes_rho_call(*args), **approx)
        assert put_rho(*args) == pytest.approx(black_scholes_rho_put(*args), **approx)


class TestFiniteDifferences:
    """Greeks agree with central differences of the price."""

    @pytest.mark.parametrize("S0,K,r,sigma,T", MARKETS[:6])
    def test_delta_and_gamma(self, S0, K, r, sigma, T):
        h = 1e-3 * S0
        for price_fn, delta_fn in [(call, call_delta), (put, put_delta)]:
            up = price_fn(S0 + h, K, r, sigma, T)
            mid = price_fn(S0, K, r, sigma, T)
            down = price_fn(S0 - h, K, r, sigma, T)
            assert abs((up - down) / (2 * h) - delta_fn(S0, K, r, sigma, T)) < 1e-5
            assert abs((up - 2 * mid + down) / h**2 - gamma(S0, K, r, sigma, T)) < 1e-5

    @pytest.mark.parametrize("S0,K,r,sigma,T", MARKETS[:6])
    def test_vega(self, S0, K, r, sigma, T):
        h = 1e-5
        numerical = (call(S0, K, r, sigma + h, T) - call(S0, K, r, sigma - h, T)) / (2 * h)
        assert numerical == pytest.approx(vega(S0, K, r, sigma, T), rel=1e-6, abs=1e-8)

    @pytest.mark.parametrize("S0,K,r,sigma,T", MARKETS[:6])
    def test_theta_is_negative_maturity_derivative(self, S0, K, r, sigma, T):
        h = 1e-5
        for price_fn, theta_fn in [(call, call_theta), (put, put_theta)]:
            numerical = -(price_fn(S0, K, r, sigma, T + h) - price_fn(S0, K, r, sigma, T - h)) / (
                2 * h
            )
            assert numerical == pytest.approx(theta_fn(S0, K, r, sigma, T), rel=1e-6, abs=1e-7)

    @pytest.mark.parametrize("S0,K,r,sigma,T", MARKETS[:6])
    def test_rho(self, S0, K, r, sigma, T):
        h = 1e-6
        for price_fn, rho_fn in [(call, call_rho), (put, put_rho)]:
            numerical = (price_fn(S0, K, r + h, sigma, T) - price_fn(S0, K, r - h, sigma, T)) / (
                2 * h
            )
            assert numerical == pytest.approx(rho_fn(S0, K, r, sigma, T), rel=1e-6, abs=1e-7)


class TestDiscountEntryPoints:
    """Discount-based entry points agree with the rate-based ones."""

    @pytest.mark.parametrize("S0,K,r,sigma,T", MARKETS)
    def test_all_quantities(self, S0, K, r, sigma, T):
        discount = math.exp(-r * T)
        total_vol = math.sqrt(T) * sigma
        approx = dict(rel=1e-12, abs=1e-14)

        assert call_price(S0, K, discount, total_vol) == call(S0, K, r, sigma, T)
        assert put_price(S0, K, discount, total_vol) == put(S0, K, r, sigma, T)
        assert call_delta_discount(S0, K, discount, total_vol) == call_delta(S0, K, r, sigma, T)
        assert put_delta_discount(S0, K, discount, total_vol) == put_delta(S0, K, r, sigma, T)
        assert gamma_discount(S0, K, discount, total_vol) == gamma(S0, K, r, sigma, T)
        assert vega_discount(S0, K, discount, total_vol, T) == vega(S0, K, r, sigma, T)
        assert call_rho_discount(S0, K, discount, total_vol, T) == call_rho(S0, K, r, sigma, T)
        assert put_rho_discount(S0, K, discount, total_vol, T) == put_rho(S0, K, r, sigma, T)
        # Rate is recovered from the discount factor, so allow rounding
        assert call_theta_discount(S0, K, discount, total_vol, T) == pytest.approx(
            call_theta(S0, K, r, sigma, T), **approx
        )
        assert put_theta_discount(S0, K, discount, total_vol, T) == pytest.approx(
            put_theta(S0, K, r, sigma, T), **approx
        )

    def test_call_put_aliases(self):
        args = (100, 95, 0.03, 0.25, 0.75)
        assert call_gamma(*args) == put_gamma(*args) == gamma(*args)
        assert call_vega(*args) == put_vega(*args) == vega(*args)


class TestMonotonicity:
    """Price is strictly increasing in volatility."""

    @pytest.mark.parametrize("K", [80, 100, 120])
    def test_call_price_increases_with_vol(self, K):
        sigmas = np.linspace(0.05, 2.0, 60)
        prices = [call(100, K, 0.05, float(s), 1.0) for s in sigmas]
        assert np.all(np.diff(prices) > 0)

    @pytest.mark.parametrize("K", [80, 100, 120])
    def test_put_price_increases_with_vol(self, K):
        sigmas = np.linspace(0.05, 2.0, 60)
        prices = [put(100, K, 0.05, float(s), 1.0) for s in sigmas]
        assert np.all(np.diff(prices) > 0)

    def test_call_price_increases_with_spot(self):
        spots = np.linspace(50, 150, 51)
        prices = [call(float(s), 100, 0.05, 0.2, 1.0) for s in spots]
        assert np.all(np.diff(prices) > 0)


class TestDegenerateInputs:
    """Zero volatility or zero maturity collapse to discounted intrinsic value."""

    def test_zero_maturity_call(self):
        assert call(5.0, 4.5, 0.05, 0.3, 0.0) == 0.5

    def test_zero_maturity_put(self):
        assert put(5.0, 4.5, 0.05, 0.3, 0.0) == 0.0

    @pytest.mark.parametrize("S0,K", [(5.0, 4.5), (4.0, 4.5), (100, 100)])
    def test_zero_vol_prices(self, S0, K):
        r, T = 0.05, 1.0
        discount = math.exp(-r * T)
        assert call(S0, K, r, 0.0, T) == max(S0 - K * discount, 0.0)
        assert put(S0, K, r, 0.0, T) == max(K * discount - S0, 0.0)

    def test_zero_total_vol_discount_form(self):
        assert call_price(5.0, 4.5, 0.99, 0.0) == pytest.approx(5.0 - 4.455)
        assert put_price(5.0, 4.5, 0.99, 0.0) == 0.0
        assert put_price(4.0, 4.5, 0.99, 0.0) == pytest.approx(0.455)

    @pytest.mark.parametrize("sigma,T", [(0.0, 1.0), (0.3, 0.0)])
    def test_zero_greeks(self, sigma, T):
        args = (5.0, 4.5, 0.05, sigma, T)
        assert gamma(*args) == 0.0
        assert vega(*args) == 0.0
        assert call_theta(*args) == 0.0
        assert put_theta(*args) == 0.0

    def test_zero_vol_deltas(self):
        # in the money call, out of the money put
        assert call_delta(5.0, 4.5, 0.05, 0.0, 1.0) == 1.0
        assert put_delta(5.0, 4.5, 0.05, 0.0, 1.0) == 0.0
        # out of the money call, in the money put
        assert call_delta(4.0, 4.5, 0.05, 0.0, 1.0) == 0.0
        assert put_delta(4.0, 4.5, 0.05, 0.0, 1.0) == -1.0

    def test_zero_vol_rho(self):
        discount = math.exp(-0.05 * 2.0)
        assert call_rho(5.0, 4.5, 0.05, 0.0, 2.0) == pytest.approx(4.5 * 2.0 * discount)
        assert put_rho(5.0, 4.5, 0.05, 0.0, 2.0) == 0.0
        assert put_rho(4.0, 4.5, 0.05, 0.0, 2.0) == pytest.approx(-4.5 * 2.0 * discount)
        assert call_rho(5.0, 4.5, 0.05, 0.3, 0.0) == 0.0

    def test_small_vol_approaches_intrinsic(self):
        intrinsic = call(100, 90, 0.05, 0.0, 1.0)
        assert abs(call(100, 90, 0.05, 1e-6, 1.0) - intrinsic) < 1e-10

    def test_discount_form_with_zero_maturity_and_positive_total_vol(self):
        args = (5.0, 4.5, 1.0, 0.3, 0.0)
        assert call_theta_discount(*args) == 0.0
        assert put_theta_discount(*args) == 0.0
        assert vega_discount(*args) == 0.0
        assert call_rho_discount(*args) == 0.0
        assert put_rho_discount(*args) == 0.0
