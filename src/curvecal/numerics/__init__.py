"""
Numerics package - interpolation and optimization adapters.

Provides:
- Interpolator: Node interpolation with flat extrapolation and exact integrals
- minimize / solve: scipy-backed minimizer and root finder
- Parameter / Options / Result: shared numerical types
"""

from .types import Parameter, Options, Result
from .interpolation import (
    InterpolationType,
    Interpolator,
    PiecewiseConstantInterpolator,
    LinearInterpolator,
    PolynomialInterpolator,
    CubicSplineInterpolator,
    AkimaInterpolator,
    MonotoneCubicInterpolator,
    create_interpolator,
)
from .minimizer import minimize, solve

__all__ = [
    "Parameter",
    "Options",
    "Result",
    "InterpolationType",
    "Interpolator",
    "PiecewiseConstantInterpolator",
    "LinearInterpolator",
    "PolynomialInterpolator",
    "CubicSplineInterpolator",
    "AkimaInterpolator",
    "MonotoneCubicInterpolator",
    "create_interpolator",
    "minimize",
    "solve",
]
