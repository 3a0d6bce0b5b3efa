"""
Map quote dictionaries to instruments and build curves from them.

Quote formats (times in months where noted; an FRA "length" is its end
month, so the quote below is a 3x6 FRA):
    {"type": "ZCB", "maturity": 2.0, "quote": 0.95}            # years, price
    {"type": "FRA", "start": 3, "length": 6, "quote": 0.031}     # 3x6 months, rate
    {"type": "SWAP", "start": 0, "length": 24, "quote": 0.035,
     "fixed_frequency": 1, "float_frequency": 2}                 # months, par rate
"""

import logging
from typing import Dict, Iterable, Optional, Union

from ..exceptions import InvalidInputError
from ..numerics.interpolation import InterpolationType
from ..numerics.types import Options
from .instruments import FixedLeg, FloatLeg, ForwardRateAgreement, Instrument, Swap, ZeroCouponBond
from .yield_curve import YieldCurve

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12.0

_ZCB_TYPES = ("ZCB", "ZERO", "ZERO_COUPON_BOND")
SUPPORTED_TYPES = _ZCB_TYPES + ("FRA", "SWAP")


def _quote_type(quote: Dict) -> str:
    return str(quote.get("type", quote.get("instrument_type", ""))).upper()


def _periods(length_months: int, frequency: int) -> int:
    n = length_months * frequency / MONTHS_PER_YEAR
    if n < 1 or abs(n - round(n)) > 1e-9:
        raise InvalidInputError(
            f"Swap length {length_months}M is not a whole number of periods "
            f"at frequency {frequency}"
        )
    return int(round(n))


def instrument_from_quote(quote: Dict) -> Instrument:
    """
    Create an instrument from a quote dictionary.

    Args:
        quote: Dict with a "type" key (ZCB, FRA or SWAP) and the fields
            listed in the module docstring

    Returns:
        Instrument

    Raises:
        InvalidInputError: On unknown types or missing/invalid fields
    """
    inst_type = _quote_type(quote)
    if inst_type not in SUPPORTED_TYPES:
        raise InvalidInputError(f"Unsupported instrument type: {inst_type or quote}")

    try:
        if inst_type in _ZCB_TYPES:
            return ZeroCouponBond(
                maturity=float(quote["maturity"]),
                price=float(quote["quote"]),
            )

        if inst_type == "FRA":
            # market "3x6" convention: start and end month, end carried as "length"
            start = int(quote["start"])
            end = int(quote["length"])
            if end <= start:
                raise InvalidInputError(
                    f"FRA end month {end} must be after start month {start}: {quote}"
                )
            return ForwardRateAgreement(
                start=start / MONTHS_PER_YEAR,
                end=end / MONTHS_PER_YEAR,
                rate=float(quote["quote"]),
            )

        # SWAP
        start = int(quote.get("start", 0))
        length = int(quote["length"])
        fixed_freq = int(quote.get("fixed_frequency", 1))
        float_freq = int(quote.get("float_frequency", 2))
        t0 = start / MONTHS_PER_YEAR
        return Swap(
            fixed_leg=FixedLeg(
                t0=t0,
                dt=1.0 / fixed_freq,
                n=_periods(length, fixed_freq),
                rate=float(quote["quote"]),
            ),
            float_leg=FloatLeg(
                t0=t0,
                dt=1.0 / float_freq,
                n=_periods(length, float_freq),
            ),
        )
    except InvalidInputError:
        raise
    except (KeyError, TypeError, ValueError, ZeroDivisionError) as e:
        raise InvalidInputError(f"Invalid {inst_type} quote {quote}: {e!r}") from e


def build_curve_from_quotes(
    quotes: Iterable[Dict],
    interpolation: Union[str, InterpolationType] = InterpolationType.LINEAR,
    options: Optional[Options] = None,
    skip_unknown: bool = True,
) -> YieldCurve:
    """
    Convenience function to build a curve from quote dictionaries.

    Args:
        quotes: Quote dicts (see instrument_from_quote)
        interpolation: Interpolation scheme
        options: Minimizer controls
        skip_unknown: Log and skip quotes of unsupported type instead of raising

    Returns:
        Built YieldCurve
    """
    curve = YieldCurve()

    for q in quotes:
        if skip_unknown and _quote_type(q) not in SUPPORTED_TYPES:
            logger.warning("Skipping quote of unsupported type: %s", q)
            continue
        curve.add(instrument_from_quote(q))

    logger.debug("Building curve from %d instruments", len(curve))
    return curve.build(interpolation, options)


__all__ = [
    "instrument_from_quote",
    "build_curve_from_quotes",
]
