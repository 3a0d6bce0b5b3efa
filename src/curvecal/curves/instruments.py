"""
Curve instruments for calibration and bootstrapping.

Defines the instruments used to build yield curves:
- ZeroCouponBond: Pays 1 at maturity, quoted by price
- ForwardRateAgreement: Simple forward rate between two times
- Swap: Fixed leg against a floating leg, quoted at par

Each instrument knows how to:
1. Report its maturity and market quote
2. Price itself on a curve (the model-implied quote)
3. Append one node to a piecewise constant curve under construction
"""

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..exceptions import ConvergenceError, InvalidInputError
from ..numerics.interpolation import PiecewiseConstantInterpolator
from ..numerics.minimizer import solve
from ..numerics.types import Parameter
from .curve import DiscountCurve


def _last_node(interpolator: PiecewiseConstantInterpolator) -> float:
    """Last node time of a curve under construction, 0 when it is empty."""
    return float(interpolator.times[-1]) if interpolator.is_fitted else 0.0


def _integral_to(interpolator: PiecewiseConstantInterpolator, a: float, b: float) -> float:
    if not interpolator.is_fitted:
        return 0.0
    return interpolator.integrate(a, b)


@dataclass
class Instrument(ABC):
    """
    Abstract base for curve construction instruments.

    Instruments are value objects: a curve stores its own clone, so
    changing an instrument after adding it has no effect on the curve.
    """

    @abstractmethod
    def get_maturity(self) -> float:
        """Time (year fraction) at which the instrument's last cashflow occurs."""

    @abstractmethod
    def value(self) -> float:
        """Market quote."""

    @abstractmethod
    def evaluate(self, curve: DiscountCurve) -> float:
        """Model-implied quote on the given curve."""

    @abstractmethod
    def about(self) -> str:
        """One-line description."""

    def residual(self, curve: DiscountCurve) -> float:
        """Market quote minus model quote."""
        return self.value() - self.evaluate(curve)

    def clone(self) -> "Instrument":
        """Independent deep copy."""
        return copy.deepcopy(self)

    def _check_appendable(self, interpolator: PiecewiseConstantInterpolator) -> float:
        maturity = self.get_maturity()
        last = _last_node(interpolator)
        if maturity <= last:
            raise InvalidInputError(
                f"{self.about()}: maturity {maturity:g} must exceed last node {last:g}"
            )
        return maturity

    def add_to_curve(self, interpolator: PiecewiseConstantInterpolator) -> None:
        """
        Append the node that makes this instrument reprice exactly.

        The new node's rate holds from the previous last node to this
        instrument's maturity. The default searches for that rate with a
        1-D root finder; instruments with a closed form override this.

        Args:
            interpolator: Piecewise constant curve built so far (modified)

        Raises:
            InvalidInputError: If the maturity does not extend the curve
            ConvergenceError: If no repricing rate is found
        """
        maturity = self._check_appendable(interpolator)

        def mispricing(rate: float) -> float:
            trial = PiecewiseConstantInterpolator()
            trial.fit(np.append(interpolator.x, maturity), np.append(interpolator.y, rate))
            return self.residual(DiscountCurve(trial))

        guess = float(interpolator.values[-1]) if interpolator.is_fitted else 0.0
        result = solve(mispricing, Parameter(guess, 1e-2))
        if not result:
            raise ConvergenceError(f"{self.about()}: {result.get_error()}", result)

        interpolator.append(maturity, result.value)

    def __str__(self) -> str:
        return self.about()


@dataclass
class ZeroCouponBond(Instrument):
    """
    Zero coupon bond paying 1 at maturity.

    Pricing: price = P(0,T)
    """
    maturity: float
    price: float

    def __post_init__(self):
        if self.price <= 0:
            raise InvalidInputError(f"Zero coupon bond price must be positive: {self.price}")

    def get_maturity(self) -> float:
        return self.maturity

    def value(self) -> float:
        return self.price

    def evaluate(self, curve: DiscountCurve) -> float:
        return curve.discount_factor(self.maturity)

    def add_to_curve(self, interpolator: PiecewiseConstantInterpolator) -> None:
        """
        Closed form: -ln(price) = integral to t_prev + r * (T - t_prev).
        """
        maturity = self._check_appendable(interpolator)
        last = _last_node(interpolator)

        known = _integral_to(interpolator, 0.0, last)
        rate = (-np.log(self.price) - known) / (maturity - last)

        interpolator.append(maturity, float(rate))

    def about(self) -> str:
        return f"ZeroCouponBond maturity={self.maturity:g} price={self.price:g}"


@dataclass
class ForwardRateAgreement(Instrument):
    """
    Forward Rate Agreement.

    FRA rate: F = (P(0,T1)/P(0,T2) - 1) / tau, tau = T2 - T1
    """
    start: float
    end: float
    rate: float

    def __post_init__(self):
        if self.end <= self.start:
            raise InvalidInputError(
                f"FRA end must be after start: start={self.start}, end={self.end}"
            )

    @property
    def tau(self) -> float:
        return self.end - self.start

    def get_maturity(self) -> float:
        return self.end

    def value(self) -> float:
        return self.rate

    def evaluate(self, curve: DiscountCurve) -> float:
        df1 = curve.discount_factor(self.start)
        df2 = curve.discount_factor(self.end)
        return (df1 / df2 - 1.0) / self.tau

    def add_to_curve(self, interpolator: PiecewiseConstantInterpolator) -> None:
        """
        Closed form: integral of r over [T1, T2] = ln(1 + F * tau).

        Only the part of [T1, T2] beyond the last node is covered by the
        new rate; the rest is already fixed by earlier nodes.
        """
        maturity = self._check_appendable(interpolator)
        last = _last_node(interpolator)

        growth = 1.0 + self.rate * self.tau
        if growth <= 0:
            raise InvalidInputError(f"{self.about()}: rate implies non-positive growth")

        known = _integral_to(interpolator, self.start, last) if self.start < last else 0.0
        rate = (np.log(growth) - known) / (maturity - max(self.start, last))

        interpolator.append(maturity, float(rate))

    def about(self) -> str:
        return f"ForwardRateAgreement start={self.start:g} end={self.end:g} rate={self.rate:g}"


@dataclass
class FixedLeg:
    """
    Fixed leg: n payments of rate * dt at t0 + dt, ..., t0 + n*dt.
    """
    t0: float = 0.0
    dt: float = 1.0
    n: int = 1
    rate: float = 0.0

    def __post_init__(self):
        _check_schedule(self.dt, self.n)

    @property
    def end(self) -> float:
        return self.t0 + self.n * self.dt

    def payment_times(self) -> np.ndarray:
        return self.t0 + self.dt * np.arange(1, self.n + 1)

    def present_value(self, curve: DiscountCurve) -> float:
        return sum(self.rate * self.dt * curve.discount_factor(t) for t in self.payment_times())


@dataclass
class FloatLeg:
    """
    Floating leg: n payments of F(t_{i-1}, t_i) * dt at t_i = t0 + i*dt.

    Forward rates come from the forwarding curve; without one the
    discounting curve forwards too (single-curve pricing).
    """
    t0: float = 0.0
    dt: float = 1.0
    n: int = 1
    curve: Optional[DiscountCurve] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        _check_schedule(self.dt, self.n)

    @property
    def end(self) -> float:
        return self.t0 + self.n * self.dt

    def payment_times(self) -> np.ndarray:
        return self.t0 + self.dt * np.arange(1, self.n + 1)

    def present_value(self, curve: DiscountCurve) -> float:
        forwarding = self.curve if self.curve is not None else curve
        pv = 0.0
        start = self.t0
        for t in self.payment_times():
            pv += forwarding.forward_rate(start, t) * self.dt * curve.discount_factor(t)
            start = t
        return pv


def _check_schedule(dt: float, n: int) -> None:
    if dt <= 0:
        raise InvalidInputError(f"Leg period must be positive: dt={dt}")
    if n < 1:
        raise InvalidInputError(f"Leg needs at least one payment: n={n}")


@dataclass
class Swap(Instrument):
    """
    Interest rate swap quoted at par.

    Value: 0 (a par swap has no value to either side)
    Model: PV(fixed leg) - PV(floating leg), both discounted on the curve
    being built; forwards come from the floating leg's own curve if set.

    Cloning a swap deep-copies its forwarding curve as well.
    """
    fixed_leg: FixedLeg = field(default_factory=FixedLeg)
    float_leg: FloatLeg = field(default_factory=FloatLeg)

    def get_maturity(self) -> float:
        return max(self.fixed_leg.end, self.float_leg.end)

    def value(self) -> float:
        return 0.0

    def evaluate(self, curve: DiscountCurve) -> float:
        return self.fixed_leg.present_value(curve) - self.float_leg.present_value(curve)

    def about(self) -> str:
        fix, flt = self.fixed_leg, self.float_leg
        return (
            f"Swap fixed(t0={fix.t0:g} dt={fix.dt:g} n={fix.n} rate={fix.rate:g}) "
            f"float(t0={flt.t0:g} dt={flt.dt:g} n={flt.n})"
        )


__all__ = [
    "Instrument",
    "ZeroCouponBond",
    "ForwardRateAgreement",
    "FixedLeg",
    "FloatLeg",
    "Swap",
]
