"""
Sequential bootstrap of piecewise constant curves.

1. Sort instruments by maturity
2. Let each instrument append the one node that reprices it, given only
   the nodes before it
3. No optimization is involved; each step is closed form (or a 1-D root
   search for instruments without one)
"""

import logging
from typing import Iterable, List, Sequence

from ..exceptions import InvalidInputError
from ..numerics.interpolation import PiecewiseConstantInterpolator
from .instruments import Instrument

logger = logging.getLogger(__name__)


def check_maturities(instruments: Iterable[Instrument]) -> List[float]:
    """
    Validate instrument maturities for curve construction.

    Returns:
        Maturities in increasing order

    Raises:
        InvalidInputError: If a maturity is not positive or appears twice
    """
    maturities = []
    for inst in instruments:
        t = inst.get_maturity()
        if not t > 0:
            raise InvalidInputError(f"Instrument maturity must be positive: {inst.about()}")
        maturities.append(t)

    maturities.sort()
    for t_prev, t in zip(maturities, maturities[1:]):
        if t == t_prev:
            raise InvalidInputError(f"Duplicate instrument maturity: {t:g}")

    return maturities


def bootstrap_piecewise_constant(
    instruments: Sequence[Instrument],
) -> PiecewiseConstantInterpolator:
    """
    Bootstrap a backward-flat forward curve from instruments.

    Args:
        instruments: Instruments with distinct positive maturities

    Returns:
        Fitted interpolator with one node per instrument (unfitted when
        there are no instruments)

    Raises:
        InvalidInputError: On bad maturities, or an instrument that cannot
            be solved from the nodes before it
        ConvergenceError: If an instrument's root search fails
    """
    check_maturities(instruments)
    ordered = sorted(instruments, key=lambda x: x.get_maturity())

    interpolator = PiecewiseConstantInterpolator()
    for inst in ordered:
        inst.add_to_curve(interpolator)
        logger.debug(
            "Bootstrapped %s -> rate %.6g up to t=%g",
            inst.about(), interpolator.values[-1], interpolator.times[-1],
        )

    logger.info("Bootstrapped piecewise constant curve with %d nodes", interpolator.size)
    return interpolator


__all__ = [
    "check_maturities",
    "bootstrap_piecewise_constant",
]
