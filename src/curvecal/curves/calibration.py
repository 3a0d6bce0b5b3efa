"""
Curve calibration by nonlinear least squares.

Fits one node level per grid point so that the curve reprices a set of
instruments jointly:
- Grid: t=0 followed by every instrument maturity
- Objective: sum over instruments of (quote - model quote)^2
- Optimizer: Nelder-Mead simplex (see numerics.minimizer)

The objective is a pure function of the trial node levels. Each
evaluation prices against a throwaway curve, so no curve is modified
until the final interpolant is handed back to the caller.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Union

import numpy as np

from ..exceptions import ConvergenceError, InvalidInputError
from ..numerics.interpolation import InterpolationType, Interpolator, create_interpolator
from ..numerics.minimizer import minimize
from ..numerics.types import Options, Parameter, Result
from .bootstrap import check_maturities
from .curve import DiscountCurve
from .instruments import Instrument

logger = logging.getLogger(__name__)

INITIAL_RATE = 0.0
INITIAL_STEP = 1e-2


@dataclass
class CalibrationResult:
    """Result of curve calibration."""
    interpolator: Interpolator
    objective: float
    initial_objective: float
    residuals: Dict[float, float]  # {maturity: quote - model}
    minimizer: Result


def calibration_grid(instruments: Sequence[Instrument]) -> np.ndarray:
    """
    Time grid for calibration: 0 followed by each maturity in increasing order.

    Raises:
        InvalidInputError: If a maturity is not positive or is repeated
    """
    maturities = check_maturities(instruments)
    return np.array([0.0] + maturities, dtype=np.float64)


def repricing_errors(
    instruments: Sequence[Instrument],
    curve: DiscountCurve,
) -> Dict[float, float]:
    """Quote minus model quote for each instrument, keyed by maturity."""
    return {inst.get_maturity(): inst.residual(curve) for inst in instruments}


def sum_of_squares(instruments: Sequence[Instrument], curve: DiscountCurve) -> float:
    """Unweighted sum of squared repricing errors."""
    return float(sum(inst.residual(curve) ** 2 for inst in instruments))


def make_objective(
    instruments: Sequence[Instrument],
    grid: np.ndarray,
    scheme: InterpolationType,
) -> Callable[[np.ndarray], float]:
    """
    Build the calibration objective over trial node levels.

    Args:
        instruments: Instruments to reprice
        grid: Node times
        scheme: Interpolation scheme for the trial curves

    Returns:
        Function mapping a node-level vector to the sum of squared errors
    """
    def objective(levels: np.ndarray) -> float:
        trial = DiscountCurve(create_interpolator(scheme, grid, levels))
        return sum_of_squares(instruments, trial)

    return objective


def calibrate(
    instruments: Sequence[Instrument],
    scheme: Union[str, InterpolationType] = InterpolationType.LINEAR,
    options: Optional[Options] = None,
) -> CalibrationResult:
    """
    Calibrate node levels to reprice instruments.

    Args:
        instruments: Instruments with distinct positive maturities
        scheme: Interpolation scheme of the fitted curve
        options: Minimizer controls; defaults to Options.for_calibration

    Returns:
        CalibrationResult with the fitted interpolant and diagnostics

    Raises:
        InvalidInputError: On bad maturities, before any evaluation
        EvaluationError: If the grid is too small for the scheme
        ConvergenceError: If the minimizer does not converge
    """
    if not isinstance(scheme, InterpolationType):
        scheme = InterpolationType.from_string(scheme)

    grid = calibration_grid(instruments)
    params = [Parameter(INITIAL_RATE, INITIAL_STEP) for _ in grid]

    if options is None:
        options = Options.for_calibration(len(instruments))

    objective = make_objective(instruments, grid, scheme)
    initial_objective = objective(np.array([p.value for p in params]))

    logger.debug(
        "Calibrating %d instruments on %s grid %s (initial objective %.6g)",
        len(instruments), scheme.value, grid, initial_objective,
    )

    result = minimize(objective, params, options)
    if not result:
        logger.error("Calibration failed: %s", result.get_error())
        raise ConvergenceError(result.get_error(), result)

    levels = result.values()
    if len(grid) != len(levels):
        raise InvalidInputError(
            f"Calibration internal error: {len(grid)} nodes but {len(levels)} levels"
        )

    interpolator = create_interpolator(scheme, grid, levels)
    curve = DiscountCurve(interpolator)

    calibration = CalibrationResult(
        interpolator=interpolator,
        objective=sum_of_squares(instruments, curve),
        initial_objective=initial_objective,
        residuals=repricing_errors(instruments, curve),
        minimizer=result,
    )

    logger.info(
        "Calibrated %d instruments (%s): objective %.3g -> %.3g in %s iterations",
        len(instruments), scheme.value, initial_objective, calibration.objective,
        result.iterations,
    )
    return calibration


__all__ = [
    "CalibrationResult",
    "calibration_grid",
    "repricing_errors",
    "sum_of_squares",
    "make_objective",
    "calibrate",
]
