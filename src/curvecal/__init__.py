"""
curvecal: Yield Curve Calibration Library

A small library for:
- Describing market instruments (zero coupon bonds, FRAs, par swaps)
- Bootstrapping piecewise constant forward curves
- Calibrating smooth curves to instrument quotes by least squares
- Querying discount factors, zero rates and forward rates

Node levels are instantaneous forward rates; discount factors are
exp(-integral of the rate), with the last rate held beyond the last node.
"""

__version__ = "0.1.0"

from .exceptions import CurveError, InvalidInputError, ConvergenceError, EvaluationError

# Numerics
from .numerics import (
    Parameter,
    Options,
    Result,
    InterpolationType,
    Interpolator,
    create_interpolator,
    minimize,
    solve,
)

# Curves
from .curves import (
    DiscountCurve,
    YieldCurve,
    CalibrationResult,
    calibrate,
    bootstrap_piecewise_constant,
    Instrument,
    ZeroCouponBond,
    ForwardRateAgreement,
    FixedLeg,
    FloatLeg,
    Swap,
    instrument_from_quote,
    build_curve_from_quotes,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "CurveError",
    "InvalidInputError",
    "ConvergenceError",
    "EvaluationError",
    # Numerics
    "Parameter",
    "Options",
    "Result",
    "InterpolationType",
    "Interpolator",
    "create_interpolator",
    "minimize",
    "solve",
    # Curves
    "DiscountCurve",
    "YieldCurve",
    "CalibrationResult",
    "calibrate",
    "bootstrap_piecewise_constant",
    "Instrument",
    "ZeroCouponBond",
    "ForwardRateAgreement",
    "FixedLeg",
    "FloatLeg",
    "Swap",
    "instrument_from_quote",
    "build_curve_from_quotes",
]
