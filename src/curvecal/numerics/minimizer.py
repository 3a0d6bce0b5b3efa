"""
Minimization and root finding.

Thin adapters over scipy.optimize that speak in Parameter / Options /
Result terms:
- minimize: Nelder-Mead simplex seeded from each parameter's step
- solve: 1-D root search, bracket expansion followed by Brent's method

Both return a Result instead of raising on non-convergence; exceptions
raised by the objective itself propagate unchanged.
"""

import logging
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import brentq
from scipy.optimize import minimize as scipy_minimize

from .types import Options, Parameter, Result

logger = logging.getLogger(__name__)

Objective = Callable[[np.ndarray], float]
Func = Callable[[float], float]


def _initial_simplex(params: Sequence[Parameter]) -> np.ndarray:
    """Start vertex plus one vertex per parameter displaced by its step."""
    x0 = np.array([p.value for p in params], dtype=np.float64)
    n = len(params)
    simplex = np.tile(x0, (n + 1, 1))
    for i, p in enumerate(params):
        step = p.step if np.isfinite(p.step) and p.step != 0 else 1e-2
        simplex[i + 1, i] += step
        # keep the displaced vertex inside the bounds
        if p.max is not None and simplex[i + 1, i] > p.max:
            simplex[i + 1, i] = x0[i] - step
    return simplex


def minimize(
    func: Objective,
    params: Sequence[Parameter],
    options: Optional[Options] = None,
) -> Result:
    """
    Minimize a scalar objective over a parameter vector.

    Args:
        func: Objective taking an array of parameter values
        params: Initial guesses; value is the start point, step seeds the simplex
        options: Tolerances and iteration caps

    Returns:
        Result with converged parameters (error = final simplex spread),
        or with error_text set when the search did not converge
    """
    if options is None:
        options = Options()

    params = list(params)
    if not params:
        return Result(value=float(func(np.array([], dtype=np.float64))), calls=1, iterations=0)

    x0 = np.array([p.value for p in params], dtype=np.float64)
    if not np.all(np.isfinite(x0)):
        return Result(error_text="Initial parameter values must be finite")

    bounds = None
    if any(p.is_bounded for p in params):
        bounds = [p.bounds() for p in params]

    solver_options = {
        "initial_simplex": _initial_simplex(params),
        "xatol": options.eps_abs,
        "fatol": options.eps_abs * options.eps_rel,
        "maxiter": options.iters,
        "maxfev": options.limit,
        "adaptive": len(params) > 5,
    }

    logger.debug(
        "Nelder-Mead on %d parameters: xatol=%g fatol=%g maxiter=%d",
        len(params), solver_options["xatol"], solver_options["fatol"], options.iters,
    )

    res = scipy_minimize(
        func,
        x0,
        method="Nelder-Mead",
        bounds=bounds,
        options=solver_options,
    )

    spread = np.ptp(res.final_simplex[0], axis=0)
    x = [
        Parameter(value=float(v), error=float(e), min=p.min, max=p.max)
        for v, e, p in zip(res.x, spread, params)
    ]

    result = Result(
        value=float(res.fun),
        x=x,
        calls=int(res.nfev),
        iterations=int(res.nit),
        code=int(res.status),
    )

    if not res.success:
        result.set_error(f"Minimization failed after {res.nit} iterations: {res.message}")
    elif not np.isfinite(res.fun):
        result.set_error(f"Minimization ended on a non-finite objective value: {res.fun}")

    logger.debug("Nelder-Mead finished: %s", result)
    return result


def _find_bracket(
    func: Func,
    guess: float,
    step: float,
    expansion: float = 1.6,
    max_iter: int = 50,
) -> Optional[Tuple[float, float]]:
    """Widen [guess - step, guess + step] until func changes sign; None if it never does."""
    a, b = guess - step, guess + step
    f_a, f_b = func(a), func(b)
    for _ in range(max_iter):
        if f_a * f_b <= 0:
            return a, b
        if abs(f_a) < abs(f_b):
            a -= expansion * (b - a)
            f_a = func(a)
        else:
            b += expansion * (b - a)
            f_b = func(b)
    return None


def solve(
    func: Func,
    param: Parameter,
    options: Optional[Options] = None,
) -> Result:
    """
    Find a root of a scalar function of one variable.

    Args:
        func: Function whose zero is sought
        param: Initial guess (value) and bracket half-width (step)
        options: eps_abs/eps_rel become Brent's xtol/rtol, iters its maxiter

    Returns:
        Result whose x holds the root; error_text set on failure
    """
    if options is None:
        options = Options()

    step = param.step if np.isfinite(param.step) and param.step > 0 else 1e-2

    bracket = _find_bracket(func, param.value, step)
    if bracket is None:
        return Result(error_text=f"Failed to bracket the root around {param.value:g}")
    a, b = bracket

    root, info = brentq(
        func,
        a,
        b,
        xtol=options.eps_abs,
        rtol=max(options.eps_rel, 4 * np.finfo(float).eps),
        maxiter=options.iters,
        full_output=True,
        disp=False,
    )

    result = Result(
        value=float(root),
        x=[Parameter(value=float(root), error=options.eps_abs, min=param.min, max=param.max)],
        calls=int(info.function_calls),
        iterations=int(info.iterations),
    )
    if not info.converged:
        result.set_error(f"Root search failed: {info.flag}")
    return result


__all__ = [
    "minimize",
    "solve",
]
