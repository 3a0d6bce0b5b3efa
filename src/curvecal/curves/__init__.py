"""
Curves package - yield curve construction and calibration.

Provides:
- YieldCurve: Instrument container with bootstrap and least-squares builds
- DiscountCurve: Discount factor / zero / forward queries over an interpolant
- Instruments: ZeroCouponBond, ForwardRateAgreement, Swap
- calibrate / bootstrap_piecewise_constant: the build algorithms
"""

from .curve import DiscountCurve
from .yield_curve import YieldCurve
from .bootstrap import bootstrap_piecewise_constant, check_maturities
from .calibration import (
    CalibrationResult,
    calibrate,
    calibration_grid,
    make_objective,
    repricing_errors,
    sum_of_squares,
)
from .instruments import (
    Instrument,
    ZeroCouponBond,
    ForwardRateAgreement,
    FixedLeg,
    FloatLeg,
    Swap,
)
from .quotes import instrument_from_quote, build_curve_from_quotes

__all__ = [
    "DiscountCurve",
    "YieldCurve",
    "bootstrap_piecewise_constant",
    "check_maturities",
    "CalibrationResult",
    "calibrate",
    "calibration_grid",
    "make_objective",
    "repricing_errors",
    "sum_of_squares",
    "Instrument",
    "ZeroCouponBond",
    "ForwardRateAgreement",
    "FixedLeg",
    "FloatLeg",
    "Swap",
    "instrument_from_quote",
    "build_curve_from_quotes",
]
