"""
Discount curve representation and queries.

The DiscountCurve class provides:
- Instantaneous forward rate r(t) (the interpolated node level)
- Discount factor P(0,t) = exp(-integral of r from 0 to t)
- Zero rate z(t)
- Forward rate f(t1, t2)

Conventions:
    - Times are year fractions, the curve starts at t=0
    - Rates are continuously compounded
    - Beyond the last node the last rate is held constant
"""

from typing import Optional

import numpy as np

from ..exceptions import EvaluationError, InvalidInputError
from ..numerics.interpolation import InterpolationType, Interpolator


class DiscountCurve:
    """
    Read-only curve over an installed interpolant.

    A DiscountCurve never changes its interpolant; YieldCurve swaps in a
    new one as a whole after each successful build. Calibration also wraps
    trial interpolants in throwaway DiscountCurve objects so instruments
    can be priced without touching the curve being built.

    Attributes:
        interpolator: Node interpolant of instantaneous forward rates
            (None until built)
    """

    def __init__(self, interpolator: Optional[Interpolator] = None):
        self._interpolator = interpolator

    @property
    def interpolator(self) -> Optional[Interpolator]:
        return self._interpolator

    @property
    def is_built(self) -> bool:
        return self._interpolator is not None and self._interpolator.is_fitted

    @property
    def scheme(self) -> Optional[InterpolationType]:
        """Interpolation scheme of the installed state, None if never built."""
        if self._interpolator is None:
            return None
        return self._interpolator.scheme

    def get_x(self) -> np.ndarray:
        """Node times of the installed state (empty if never built)."""
        if self._interpolator is None:
            return np.array([], dtype=np.float64)
        return self._interpolator.x

    def get_y(self) -> np.ndarray:
        """Node rates of the installed state (empty if never built)."""
        if self._interpolator is None:
            return np.array([], dtype=np.float64)
        return self._interpolator.y

    def _ensure_built(self) -> Interpolator:
        if not self.is_built:
            raise EvaluationError("Curve not built - add instruments and call build()")
        return self._interpolator

    def evaluate(self, t: float) -> float:
        """
        Get the instantaneous forward rate r(t).

        Args:
            t: Year fraction

        Returns:
            Interpolated node level at t
        """
        return self._ensure_built().interpolate(t)

    def __call__(self, t: float) -> float:
        return self.evaluate(t)

    def discount_factor(self, t: float) -> float:
        """
        Get discount factor P(0,t).

        Args:
            t: Year fraction

        Returns:
            Discount factor, exp(-integral of r over [0, t])
        """
        interpolator = self._ensure_built()
        if t == 0:
            return 1.0
        return float(np.exp(-interpolator.integrate(0.0, t)))

    def zero_rate(self, t: float) -> float:
        """
        Get continuously compounded zero rate z(t).

        At t=0 the limit r(0) is returned.
        """
        interpolator = self._ensure_built()
        if t <= 0:
            return interpolator.interpolate(0.0)
        return interpolator.integrate(0.0, t) / t

    def forward_rate(self, t1: float, t2: float) -> float:
        """
        Get simply compounded forward rate f(t1, t2).

        f = (P(0,t1) / P(0,t2) - 1) / (t2 - t1)
        """
        if t2 <= t1:
            raise InvalidInputError(f"t2 must be greater than t1: t1={t1}, t2={t2}")

        df1 = self.discount_factor(t1)
        df2 = self.discount_factor(t2)

        return (df1 / df2 - 1.0) / (t2 - t1)

    def __repr__(self) -> str:
        scheme = self.scheme.value if self.scheme else None
        return f"{self.__class__.__name__}(scheme={scheme}, nodes={len(self.get_x())})"


__all__ = [
    "DiscountCurve",
]
