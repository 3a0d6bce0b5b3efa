"""
Shared parameter and option types for the numerical routines.

- Parameter: a value with a step/error estimate and optional bounds
- Options: tolerances and iteration caps for the minimizer
- Result: outcome of a minimization or root search
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np


@dataclass
class Parameter:
    """
    A single fit parameter.

    Used both as the minimizer's initial guess (value, step) and as its
    converged output (value, error estimate).

    Attributes:
        value: Current value
        error: Initial step size on input, error estimate on output
        min: Lower bound (None = unbounded)
        max: Upper bound (None = unbounded)
    """
    value: float = float("nan")
    error: float = float("nan")
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def step(self) -> float:
        """Initial step size used to seed the search."""
        return self.error

    @property
    def is_bounded(self) -> bool:
        return self.min is not None or self.max is not None

    def bounds(self) -> Tuple[Optional[float], Optional[float]]:
        return (self.min, self.max)

    def __float__(self) -> float:
        return float(self.value)


@dataclass
class Options:
    """
    Minimizer controls.

    Attributes:
        eps_abs: Absolute tolerance
        eps_rel: Relative tolerance
        iters: Maximum number of iterations
        limit: Maximum number of function evaluations (None = no cap)
    """
    eps_abs: float = 1e-6
    eps_rel: float = 1e-5
    iters: int = 100
    limit: Optional[int] = None

    def __post_init__(self):
        if self.eps_abs <= 0 or self.eps_rel <= 0:
            raise ValueError(
                f"Tolerances must be positive: eps_abs={self.eps_abs}, eps_rel={self.eps_rel}"
            )
        if self.iters < 1:
            raise ValueError(f"Iteration cap must be at least 1, got {self.iters}")

    @classmethod
    def for_calibration(cls, n_instruments: int) -> "Options":
        """Default options for calibrating a curve to n instruments."""
        return cls(
            eps_abs=1e-5,
            eps_rel=1e-5,
            iters=1000 + 1000 * n_instruments,
        )


@dataclass
class Result:
    """
    Outcome of a numerical routine.

    A Result is truthy when the routine succeeded.

    Attributes:
        value: Objective value at the solution (or root location for solve)
        x: Solution parameters with error estimates
        calls: Number of function evaluations
        iterations: Number of iterations
        code: Solver status code
        error_text: Diagnostic text, set only on failure
    """
    value: Optional[float] = None
    x: List[Parameter] = field(default_factory=list)
    calls: Optional[int] = None
    iterations: Optional[int] = None
    code: Optional[int] = None
    error_text: Optional[str] = None

    @property
    def is_good(self) -> bool:
        return self.error_text is None

    def __bool__(self) -> bool:
        return self.is_good

    def set_error(self, text: str) -> None:
        self.error_text = text

    def get_error(self) -> str:
        return self.error_text or ""

    def values(self) -> np.ndarray:
        """Solution values as an array."""
        return np.array([p.value for p in self.x], dtype=np.float64)

    def __str__(self) -> str:
        parts = []
        if self.value is not None:
            parts.append(f"value={self.value:g}")
        if self.code is not None:
            parts.append(f"code={self.code}")
        if self.error_text is not None:
            parts.append(f'error="{self.error_text}"')
        if self.x:
            parts.append("x=[" + ",".join(f"{p.value:g}" for p in self.x) + "]")
        return " ".join(parts)


__all__ = [
    "Parameter",
    "Options",
    "Result",
]
