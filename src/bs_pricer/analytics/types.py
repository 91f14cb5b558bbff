"""
Result types for the pricing engine and implied volatility solver.
"""

from dataclasses import dataclass

# Solver outcome reasons
CONVERGED = "converged"
BELOW_INTRINSIC = "below_intrinsic"
ABOVE_UPPER_BOUND = "above_upper_bound"
MAX_ITERATIONS = "max_iterations"
STALLED = "stalled"
NON_POSITIVE_MATURITY = "non_positive_maturity"


class ImpliedVolError(ValueError):
    """Raised when a failed implied volatility result is unwrapped."""

    def __init__(self, result: "ImpliedVolResult"):
        self.result = result
        super().__init__(
            f"Implied volatility did not converge ({result.reason}) after "
            f"{result.iterations} iterations. Best estimate: {result.sigma:.6f}, "
            f"bracket: [{result.bracket[0]:.6f}, {result.bracket[1]:.6f}], "
            f"price error: {result.price_error:.2e}"
        )


@dataclass(frozen=True)
class OptionBundle:
    """
    Price and first/second order Greeks of one option.

    All fields are derived from a single SharedTerms instance, so they
    are mutually consistent to the last bit.

    Attributes
    ----------
    price : float
        Option price
    delta : float
        ∂V/∂S
    gamma : float
        ∂²V/∂S²
    theta : float
        Time decay, -∂V/∂τ
    vega : float
        ∂V/∂σ
    rho : float
        ∂V/∂r
    """

    price: float
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    def __repr__(self) -> str:
        return (
            f"OptionBundle(\n"
            f"  price={self.price:.6f},\n"
            f"  delta={self.delta:.6f}, gamma={self.gamma:.6f},\n"
            f"  theta={self.theta:.6f}, vega={self.vega:.6f}, rho={self.rho:.6f}\n"
            f")"
        )


@dataclass(frozen=True)
class ImpliedVolResult:
    """
    Outcome of an implied volatility solve.

    Attributes
    ----------
    converged : bool
        True if the model price matched the target within tolerance and
        vega resolved sigma to the requested precision
    sigma : float
        Implied volatility if converged, otherwise the best estimate reached
        (never negative, never NaN)
    iterations : int
        Number of Newton/bisection iterations (bracket-end evaluations not counted)
    price_error : float
        Model price at sigma minus target price
    bracket : tuple[float, float]
        Final volatility bracket known to contain the root
    reason : str
        One of 'converged', 'below_intrinsic', 'above_upper_bound',
        'max_iterations', 'stalled', 'non_positive_maturity'
    """

    converged: bool
    sigma: float
    iterations: int
    price_error: float
    bracket: tuple[float, float]
    reason: str = CONVERGED

    def unwrap(self) -> float:
        """Return the implied volatility, raising ImpliedVolError on failure."""
        if not self.converged:
            raise ImpliedVolError(self)
        return self.sigma

    def sigma_or(self, default: float) -> float:
        """Return the implied volatility, or default if the solve failed."""
        return self.sigma if self.converged else default

    def __bool__(self) -> bool:
        return self.converged
