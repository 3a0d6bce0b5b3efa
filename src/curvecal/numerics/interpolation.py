"""
Interpolation schemes for curve node levels.

Provides:
- PiecewiseConstantInterpolator: Backward-flat steps (bootstrap curves)
- LinearInterpolator: Linear between nodes
- PolynomialInterpolator: Single polynomial through all nodes
- CubicSplineInterpolator: Natural cubic spline
- AkimaInterpolator: Akima spline (local, less overshoot)
- MonotoneCubicInterpolator: Shape-preserving cubic (PCHIP)

All interpolators take year fractions as x-coordinates. Every scheme
extrapolates flat: left of the first node the first value is held, right
of the last node the last value is held. Integrals honour the same rule,
so a curve can be integrated from 0 to any horizon.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np
from scipy.interpolate import Akima1DInterpolator, CubicSpline, PchipInterpolator, PPoly

from ..exceptions import EvaluationError, InvalidInputError


class InterpolationType(Enum):
    """Interpolation scheme enumeration."""
    PIECEWISE_CONSTANT = "piecewise_constant"
    LINEAR = "linear"
    POLYNOMIAL = "polynomial"
    CUBIC_SPLINE = "cubic_spline"
    AKIMA = "akima"
    MONOTONE_CUBIC = "monotone_cubic"

    @classmethod
    def from_string(cls, s: str) -> "InterpolationType":
        """Parse an interpolation scheme from its name or a common alias."""
        mapping = {
            "piecewise_constant": cls.PIECEWISE_CONSTANT,
            "constant": cls.PIECEWISE_CONSTANT,
            "flat": cls.PIECEWISE_CONSTANT,
            "linear": cls.LINEAR,
            "lin": cls.LINEAR,
            "polynomial": cls.POLYNOMIAL,
            "poly": cls.POLYNOMIAL,
            "cubic_spline": cls.CUBIC_SPLINE,
            "cspline": cls.CUBIC_SPLINE,
            "cubic": cls.CUBIC_SPLINE,
            "spline": cls.CUBIC_SPLINE,
            "akima": cls.AKIMA,
            "monotone_cubic": cls.MONOTONE_CUBIC,
            "monotone": cls.MONOTONE_CUBIC,
            "pchip": cls.MONOTONE_CUBIC,
        }
        key = s.lower().strip().replace("-", "_").replace(" ", "_")
        if key in mapping:
            return mapping[key]
        raise InvalidInputError(f"Unknown interpolation method: {s}")

    @property
    def min_size(self) -> int:
        """Minimum number of nodes the scheme accepts."""
        return _MIN_SIZE[self]


_MIN_SIZE = {
    InterpolationType.PIECEWISE_CONSTANT: 1,
    InterpolationType.LINEAR: 2,
    InterpolationType.POLYNOMIAL: 3,
    InterpolationType.CUBIC_SPLINE: 3,
    InterpolationType.AKIMA: 5,
    InterpolationType.MONOTONE_CUBIC: 3,
}


class Interpolator(ABC):
    """
    Abstract base class for node interpolation.

    Subclasses implement evaluation and integration strictly inside the
    node range; the base class handles validation and flat extrapolation.
    """

    scheme: InterpolationType

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    @property
    def name(self) -> str:
        return self.scheme.value

    @property
    def size(self) -> int:
        return 0 if self.times is None else len(self.times)

    @property
    def is_fitted(self) -> bool:
        return self.times is not None and len(self.times) > 0

    @property
    def x(self) -> np.ndarray:
        return np.array([] if self.times is None else self.times, dtype=np.float64)

    @property
    def y(self) -> np.ndarray:
        return np.array([] if self.values is None else self.values, dtype=np.float64)

    def fit(self, times: Sequence[float], values: Sequence[float]) -> None:
        """
        Fit the interpolator to nodes.

        Args:
            times: Strictly increasing year fractions
            values: Node levels, one per time

        Raises:
            EvaluationError: On mismatched lengths, unordered or non-finite
                nodes, or fewer nodes than the scheme needs
        """
        times = np.asarray(times, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)

        if times.ndim != 1 or times.shape != values.shape:
            raise EvaluationError(
                f"Times and values must have same length: {times.size} vs {values.size}"
            )
        if len(times) < self.scheme.min_size:
            raise EvaluationError(
                f"Need at least {self.scheme.min_size} points for {self.name} "
                f"interpolation, got {len(times)}"
            )
        if not (np.all(np.isfinite(times)) and np.all(np.isfinite(values))):
            raise EvaluationError("Interpolation nodes must be finite")
        if np.any(np.diff(times) <= 0):
            raise EvaluationError("Interpolation times must be strictly increasing")

        self.times = times
        self.values = values
        self._fit()

    def _fit(self) -> None:
        """Precompute scheme state after nodes are set."""

    def _ensure_fitted(self) -> None:
        if not self.is_fitted:
            raise EvaluationError("Interpolator not fitted")

    def interpolate(self, t: float) -> float:
        """Evaluate at t with flat extrapolation outside the nodes."""
        self._ensure_fitted()

        if t <= self.times[0]:
            return float(self.values[0])
        if t >= self.times[-1]:
            return float(self.values[-1])

        return float(self._interpolate_inside(t))

    def __call__(self, t: float) -> float:
        return self.interpolate(t)

    def integrate(self, a: float, b: float) -> float:
        """
        Definite integral of the interpolant from a to b.

        Flat extrapolation applies outside the nodes, so any finite
        interval is accepted. Reversed limits give the negated integral.
        """
        self._ensure_fitted()

        if a == b:
            return 0.0
        if a > b:
            return -self.integrate(b, a)

        lo, hi = self.times[0], self.times[-1]
        total = 0.0

        if a < lo:
            total += self.values[0] * (min(b, lo) - a)
        if b > hi:
            total += self.values[-1] * (b - max(a, hi))

        inner_a, inner_b = max(a, lo), min(b, hi)
        if inner_b > inner_a:
            total += self._integrate_inside(inner_a, inner_b)

        return float(total)

    @abstractmethod
    def _interpolate_inside(self, t: float) -> float:
        """Evaluate at t, where times[0] < t < times[-1]."""

    @abstractmethod
    def _integrate_inside(self, a: float, b: float) -> float:
        """Integrate over [a, b], a sub-interval of [times[0], times[-1]]."""

    def __repr__(self) -> str:
        pairs = ", ".join(f"({t:g},{v:g})" for t, v in zip(self.x, self.y))
        return f"{self.__class__.__name__}([{pairs}])"


class PiecewiseConstantInterpolator(Interpolator):
    """
    Backward-flat piecewise constant interpolation.

    The value of node i holds on (times[i-1], times[i]], and the first
    value also holds on everything up to times[0]. Nodes may be appended
    one at a time, which is what a sequential bootstrap needs.
    """

    scheme = InterpolationType.PIECEWISE_CONSTANT

    def append(self, t: float, value: float) -> None:
        """Append a node beyond the current last node."""
        if not (np.isfinite(t) and np.isfinite(value)):
            raise EvaluationError(f"Cannot append non-finite node ({t}, {value})")
        if self.is_fitted and t <= self.times[-1]:
            raise EvaluationError(
                f"Appended time {t:g} must exceed last node {self.times[-1]:g}"
            )
        times = np.append(self.x, t)
        values = np.append(self.y, value)
        self.times, self.values = times, values

    def _interpolate_inside(self, t: float) -> float:
        idx = int(np.searchsorted(self.times, t, side="left"))
        return self.values[idx]

    def _integrate_inside(self, a: float, b: float) -> float:
        left = self.times[:-1]
        right = self.times[1:]
        overlap = np.clip(np.minimum(right, b) - np.maximum(left, a), 0.0, None)
        return float(np.sum(self.values[1:] * overlap))


class LinearInterpolator(Interpolator):
    """Linear interpolation between knot points."""

    scheme = InterpolationType.LINEAR

    def _interpolate_inside(self, t: float) -> float:
        return np.interp(t, self.times, self.values)

    def _integrate_inside(self, a: float, b: float) -> float:
        # Trapezoid rule on the knots inside (a, b) is exact for a linear interpolant
        inner = self.times[(self.times > a) & (self.times < b)]
        pts = np.concatenate(([a], inner, [b]))
        vals = np.interp(pts, self.times, self.values)
        return float(np.sum(0.5 * (vals[1:] + vals[:-1]) * np.diff(pts)))


class PolynomialInterpolator(Interpolator):
    """
    Single polynomial of degree n-1 through all n nodes.

    Prone to oscillation on many nodes; useful as a smooth baseline on
    short grids.
    """

    scheme = InterpolationType.POLYNOMIAL

    def _fit(self) -> None:
        self._poly = np.polynomial.Polynomial.fit(
            self.times, self.values, deg=len(self.times) - 1
        )
        self._antiderivative = self._poly.integ()

    def _interpolate_inside(self, t: float) -> float:
        return self._poly(t)

    def _integrate_inside(self, a: float, b: float) -> float:
        return float(self._antiderivative(b) - self._antiderivative(a))


class _PiecewisePolynomialInterpolator(Interpolator):
    """Interpolator backed by a scipy PPoly, which integrates exactly."""

    def _fit(self) -> None:
        self._ppoly = self._build_ppoly()

    @abstractmethod
    def _build_ppoly(self) -> PPoly:
        """Construct the piecewise polynomial over the current nodes."""

    def _interpolate_inside(self, t: float) -> float:
        return self._ppoly(t)

    def _integrate_inside(self, a: float, b: float) -> float:
        return float(self._ppoly.integrate(a, b))


class CubicSplineInterpolator(_PiecewisePolynomialInterpolator):
    """
    Natural cubic spline (second derivative = 0 at both end nodes).

    Provides smooth first and second derivatives.
    """

    scheme = InterpolationType.CUBIC_SPLINE

    def _build_ppoly(self) -> PPoly:
        return CubicSpline(self.times, self.values, bc_type="natural", extrapolate=False)


class AkimaInterpolator(_PiecewisePolynomialInterpolator):
    """Akima spline; local construction limits overshoot near outliers."""

    scheme = InterpolationType.AKIMA

    def _build_ppoly(self) -> PPoly:
        return Akima1DInterpolator(self.times, self.values)


class MonotoneCubicInterpolator(_PiecewisePolynomialInterpolator):
    """
    Shape-preserving piecewise cubic (PCHIP).

    Monotone between nodes wherever the data are, so it never introduces
    spurious local extrema in the node levels.
    """

    scheme = InterpolationType.MONOTONE_CUBIC

    def _build_ppoly(self) -> PPoly:
        return PchipInterpolator(self.times, self.values, extrapolate=False)


_INTERPOLATORS = {
    InterpolationType.PIECEWISE_CONSTANT: PiecewiseConstantInterpolator,
    InterpolationType.LINEAR: LinearInterpolator,
    InterpolationType.POLYNOMIAL: PolynomialInterpolator,
    InterpolationType.CUBIC_SPLINE: CubicSplineInterpolator,
    InterpolationType.AKIMA: AkimaInterpolator,
    InterpolationType.MONOTONE_CUBIC: MonotoneCubicInterpolator,
}


def create_interpolator(
    method: Union[str, InterpolationType],
    times: Optional[Sequence[float]] = None,
    values: Optional[Sequence[float]] = None,
) -> Interpolator:
    """
    Factory function to create an interpolator by scheme.

    Args:
        method: InterpolationType or one of its names/aliases
        times: Optional node times; when given with values the
            interpolator is returned already fitted
        values: Optional node values

    Returns:
        Interpolator instance
    """
    if not isinstance(method, InterpolationType):
        method = InterpolationType.from_string(method)

    interpolator = _INTERPOLATORS[method]()
    if times is not None or values is not None:
        interpolator.fit(
            [] if times is None else times,
            [] if values is None else values,
        )
    return interpolator


__all__ = [
    "InterpolationType",
    "Interpolator",
    "PiecewiseConstantInterpolator",
    "LinearInterpolator",
    "PolynomialInterpolator",
    "CubicSplineInterpolator",
    "AkimaInterpolator",
    "MonotoneCubicInterpolator",
    "create_interpolator",
]
