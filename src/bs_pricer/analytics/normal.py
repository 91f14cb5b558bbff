"""
Standard normal distribution primitives.

The CDF is evaluated through math.erfc rather than math.erf so that the
lower tail keeps full relative precision (deep out-of-the-money prices
are differences of tiny CDF values).
"""

import math

SQRT_2 = math.sqrt(2.0)
INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def normal_cdf(x: float) -> float:
    """
    Cumulative distribution function for standard normal distribution.

    Parameters
    ----------
    x : float
        Input value

    Returns
    -------
    float
        CDF value at x: P(Z <= x) where Z ~ N(0,1), clamped to [0, 1]
    """
    value = 0.5 * math.erfc(-x / SQRT_2)
    return min(max(value, 0.0), 1.0)


def normal_pdf(x: float) -> float:
    """
    Probability density function for standard normal distribution.

    Parameters
    ----------
    x : float
        Input value

    Returns
    -------
    float
        PDF value at x: φ(x) = exp(-x²/2)/√(2π)
    """
    return INV_SQRT_2PI * math.exp(-0.5 * x * x)
