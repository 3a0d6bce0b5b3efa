#!/usr/bin/env python
"""
Yield Curve Calibration Demo Script

This script walks through the curve construction workflow:
1. Build a curve from zero coupon bond prices
2. Build a curve from FRA quotes
3. Build a discount curve from a par swap, forwarding off the FRA curve
4. Print repricing diagnostics and a sampled forward curve

Usage:
    python run_demo.py [--interpolation SCHEME] [--points N] [--verbose]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from curvecal import (
    FixedLeg,
    FloatLeg,
    InterpolationType,
    Swap,
    YieldCurve,
    ZeroCouponBond,
    build_curve_from_quotes,
)


def build_zcb_curve(scheme: InterpolationType) -> YieldCurve:
    """Build a curve from zero coupon bond prices."""
    print("\n" + "="*60)
    print("Zero Coupon Bond Curve")
    print("="*60)

    curve = YieldCurve()
    for maturity, price in [(1, 0.9), (2, 0.8), (5, 0.6)]:
        curve.add(ZeroCouponBond(maturity, price))
        print(f"  Added: {maturity:>3d}Y @ {price:.4f}")

    curve.build(scheme)
    print()
    print(curve.describe())
    return curve


def build_fra_curve(scheme: InterpolationType) -> YieldCurve:
    """Build a forwarding curve from FRA quotes (start and end month, e.g. 6x12)."""
    print("\n" + "="*60)
    print("FRA Curve")
    print("="*60)

    quotes = [
        {"type": "FRA", "start": 0, "length": 6, "quote": 0.030},
        {"type": "FRA", "start": 6, "length": 12, "quote": 0.032},
        {"type": "FRA", "start": 12, "length": 24, "quote": 0.034},
    ]
    for q in quotes:
        print(f"  Added: {q['start']:>2d}x{q['length']:<2d} @ {q['quote']*100:.3f}%")

    curve = build_curve_from_quotes(quotes, interpolation=scheme)
    print()
    print(curve.describe())
    return curve


def build_swap_curve(scheme: InterpolationType, forwarding: YieldCurve) -> YieldCurve:
    """Build a discount curve from a 2Y par swap forwarding off another curve."""
    print("\n" + "="*60)
    print("Swap Discount Curve")
    print("="*60)

    swap = Swap(
        fixed_leg=FixedLeg(t0=0.0, dt=1.0, n=2, rate=0.033),
        float_leg=FloatLeg(t0=0.0, dt=0.5, n=4, curve=forwarding),
    )
    print(f"  Added: {swap.about()}")

    curve = YieldCurve().add(swap).build(scheme)
    print()
    print(curve.describe())
    return curve


def print_sample(curve: YieldCurve, points: int) -> None:
    """Print the forward curve sampled on an equally spaced grid."""
    print("\n" + "="*60)
    print("Sampled Forward Curve")
    print("="*60)

    times, rates = curve.sample(points)
    for t, r in zip(times, rates):
        print(f"  t={t:6.3f}  r={r*100:7.4f}%  DF={curve.discount_factor(t):.6f}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Yield Curve Calibration Demo")
    parser.add_argument(
        "--interpolation",
        type=str,
        default=InterpolationType.LINEAR.value,
        help="Interpolation scheme (piecewise_constant, linear, polynomial, "
             "cubic_spline, akima, monotone_cubic)"
    )
    parser.add_argument(
        "--points",
        type=int,
        default=11,
        help="Number of points when sampling the forward curve",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log calibration progress",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    scheme = InterpolationType.from_string(args.interpolation)

    print("="*60)
    print("YIELD CURVE CALIBRATION DEMO")
    print(f"Interpolation: {scheme.value}")
    print("="*60)

    zcb_curve = build_zcb_curve(scheme)
    fra_curve = build_fra_curve(scheme)
    build_swap_curve(scheme, fra_curve)
    print_sample(zcb_curve, args.points)

    print("\n" + "="*60)
    print("DEMO COMPLETE")
    print("="*60)


if __name__ == "__main__":
    main()
