"""
Yield curve built from market instruments.

The YieldCurve holds one instrument per maturity and the interpolant
fitted to them. Typical use:

    curve = (
        YieldCurve()
        .add(ZeroCouponBond(1, 0.9))
        .add(ZeroCouponBond(2, 0.8))
        .build(InterpolationType.LINEAR)
    )
    curve.discount_factor(1.5)
"""

import logging
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from ..exceptions import InvalidInputError
from ..numerics.interpolation import InterpolationType
from ..numerics.types import Options
from .bootstrap import bootstrap_piecewise_constant
from .calibration import CalibrationResult, calibrate, repricing_errors
from .curve import DiscountCurve
from .instruments import Instrument

logger = logging.getLogger(__name__)


class YieldCurve(DiscountCurve):
    """
    Curve calibrated to a set of instruments.

    Instruments are keyed by maturity: adding a second instrument with
    the same maturity replaces the first. Each instrument is cloned on
    insertion, so the curve never shares instruments with the caller.

    A build replaces the installed interpolant as a whole, and only
    after it succeeded; on any error the previous state (or the
    unbuilt state) is kept.

    Not safe to build from several threads at once. Independent curves
    can be built in parallel.

    Attributes:
        last_calibration: Diagnostics of the last optimizing build
            (None after a bootstrap or before any build)
    """

    def __init__(self):
        super().__init__(None)
        self._instruments: Dict[float, Instrument] = {}
        self.last_calibration: Optional[CalibrationResult] = None

    def add(self, instrument: Instrument) -> "YieldCurve":
        """
        Add a copy of an instrument, replacing any at the same maturity.

        Returns:
            self, so calls can be chained
        """
        key = float(instrument.get_maturity())
        if key in self._instruments:
            logger.debug(
                "Replacing %s with %s", self._instruments[key].about(), instrument.about()
            )
        self._instruments[key] = instrument.clone()
        return self

    @property
    def instruments(self) -> List[Instrument]:
        """Instruments in increasing maturity order."""
        return [self._instruments[t] for t in sorted(self._instruments)]

    def __len__(self) -> int:
        return len(self._instruments)

    def build_piecewise_constant(self) -> "YieldCurve":
        """
        Bootstrap a piecewise constant curve, one node per instrument.

        Returns:
            self
        """
        interpolator = bootstrap_piecewise_constant(self.instruments)
        self._interpolator = interpolator
        self.last_calibration = None
        return self

    def build(
        self,
        scheme: Union[str, InterpolationType] = InterpolationType.LINEAR,
        options: Optional[Options] = None,
    ) -> "YieldCurve":
        """
        Calibrate the curve to its instruments.

        Piecewise constant curves are bootstrapped; every other scheme is
        fitted by least squares over a grid of t=0 plus each maturity.

        Args:
            scheme: Interpolation scheme (InterpolationType or name)
            options: Minimizer controls; default tolerances 1e-5 and
                1000 + 1000 * n_instruments iterations

        Returns:
            self

        Raises:
            InvalidInputError: If any maturity is not positive
            EvaluationError: If there are too few nodes for the scheme
            ConvergenceError: If the minimizer does not converge
        """
        if not isinstance(scheme, InterpolationType):
            scheme = InterpolationType.from_string(scheme)

        if scheme == InterpolationType.PIECEWISE_CONSTANT:
            return self.build_piecewise_constant()

        calibration = calibrate(self.instruments, scheme, options)

        self._interpolator = calibration.interpolator
        self.last_calibration = calibration
        return self

    def residuals(self) -> Dict[float, float]:
        """Market quote minus calculated quote for each instrument."""
        return repricing_errors(self.instruments, self)

    def report(self) -> pd.DataFrame:
        """
        Tabulate each instrument's market quote against the curve.

        Returns:
            DataFrame with columns maturity, instrument, market,
            calculated, difference
        """
        rows = []
        for inst in self.instruments:
            market = inst.value()
            calculated = inst.evaluate(self)
            rows.append({
                "maturity": inst.get_maturity(),
                "instrument": inst.about(),
                "market": market,
                "calculated": calculated,
                "difference": market - calculated,
            })
        return pd.DataFrame(
            rows, columns=["maturity", "instrument", "market", "calculated", "difference"]
        )

    def sample(self, points: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Sample the curve at equally spaced times from 0 to the last node.

        Args:
            points: Number of samples (at least 2)

        Returns:
            Tuple of (times, rates)
        """
        if points < 2:
            raise InvalidInputError(f"Need at least 2 sample points, got {points}")

        self._ensure_built()
        times = np.linspace(0.0, self.get_x()[-1], points)
        rates = np.array([self.evaluate(t) for t in times])
        return times, rates

    def describe(self) -> str:
        """Human-readable summary of the curve and its repricing."""
        scheme = self.scheme.value if self.scheme else "unbuilt"
        lines = [f"YieldCurve interpolation type: {scheme} size={len(self.get_x())}"]
        lines.extend(
            f"  t={t:g}  rate={r:.6g}" for t, r in zip(self.get_x(), self.get_y())
        )
        if self.is_built:
            for _, row in self.report().iterrows():
                lines.append(row["instrument"])
                lines.append(f"    market quote ... {row['market']:g}")
                lines.append(f"    calculated ..... {row['calculated']:g}")
                lines.append(f"    difference ..... {row['difference']:g}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        scheme = self.scheme.value if self.scheme else None
        return (f"YieldCurve(instruments={len(self._instruments)}, "
                f"scheme={scheme}, nodes={len(self.get_x())})")


__all__ = [
    "YieldCurve",
]
