"""
Exception hierarchy for curve construction.

- InvalidInputError: bad instrument data or an inconsistent calibration grid
- ConvergenceError: the minimizer did not converge
- EvaluationError: the interpolant cannot answer a query
"""

from typing import Any, Optional


class CurveError(Exception):
    """Base class for all curvecal errors."""


class InvalidInputError(CurveError, ValueError):
    """Raised when instruments or grids are not usable for a build."""


class ConvergenceError(CurveError, RuntimeError):
    """
    Raised when calibration fails to converge.

    Attributes:
        diagnostic: Solver message describing the failure
        result: The minimizer Result, when available
    """

    def __init__(self, diagnostic: str, result: Optional[Any] = None):
        super().__init__(diagnostic)
        self.diagnostic = diagnostic
        self.result = result


class EvaluationError(CurveError, RuntimeError):
    """Raised when an interpolant has too few nodes or is queried before it is set."""


__all__ = [
    "CurveError",
    "InvalidInputError",
    "ConvergenceError",
    "EvaluationError",
]
