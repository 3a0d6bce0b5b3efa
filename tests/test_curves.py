"""
Unit tests for yield curve construction.
"""

import numpy as np
import pandas as pd
import pytest

from curvecal.curves import (
    YieldCurve,
    ZeroCouponBond,
    ForwardRateAgreement,
    FixedLeg,
    FloatLeg,
    Swap,
    calibrate,
    calibration_grid,
)
from curvecal.exceptions import ConvergenceError, EvaluationError, InvalidInputError
from curvecal.numerics import InterpolationType, Options, Parameter, Result

EPS = 1e-4


@pytest.fixture
def zcb_curve():
    """Unbuilt curve with three zero coupon bonds, added out of order."""
    return (
        YieldCurve()
        .add(ZeroCouponBond(2, 0.8))
        .add(ZeroCouponBond(1, 0.9))
        .add(ZeroCouponBond(5, 0.6))
    )


@pytest.fixture
def fra_curve():
    """Unbuilt curve with three FRAs."""
    return (
        YieldCurve()
        .add(ForwardRateAgreement(0, 1, 0.01))
        .add(ForwardRateAgreement(0.5, 2, 0.02))
        .add(ForwardRateAgreement(0, 3, 0.03))
    )


class TestContainer:
    """Tests for adding instruments."""

    def test_add_is_chainable(self):
        curve = YieldCurve()
        assert curve.add(ZeroCouponBond(1, 0.9)) is curve

    def test_instruments_ordered_by_maturity(self, zcb_curve):
        assert [inst.get_maturity() for inst in zcb_curve.instruments] == [1, 2, 5]
        assert len(zcb_curve) == 3

    def test_add_copies_instrument(self):
        zcb = ZeroCouponBond(2, 0.8)
        curve = YieldCurve().add(zcb)
        zcb.price = 0.5
        assert curve.instruments[0].price == 0.8

    def test_same_maturity_replaces(self):
        curve = YieldCurve().add(ZeroCouponBond(2, 0.8)).add(ZeroCouponBond(2, 0.85))
        assert len(curve) == 1
        assert curve.instruments[0].price == 0.85

    def test_unbuilt(self, zcb_curve):
        assert not zcb_curve.is_built
        with pytest.raises(EvaluationError):
            zcb_curve.discount_factor(1.0)

    def test_calibration_grid(self, zcb_curve):
        grid = calibration_grid(zcb_curve.instruments)
        assert list(grid) == [0.0, 1.0, 2.0, 5.0]


class TestBuild:
    """Tests for least-squares calibration."""

    def test_single_zero_coupon_bond(self):
        curve = YieldCurve().add(ZeroCouponBond(2, 0.9)).build()

        assert curve.is_built
        assert curve.scheme == InterpolationType.LINEAR
        assert abs(curve.discount_factor(2) - 0.9) < EPS

    def test_zero_coupon_bonds_end_to_end(self, zcb_curve):
        zcb_curve.build()

        assert abs(zcb_curve.discount_factor(1) - 0.9) < EPS
        assert abs(zcb_curve.discount_factor(2) - 0.8) < EPS
        assert abs(zcb_curve.discount_factor(5) - 0.6) < EPS
        assert list(zcb_curve.get_x()) == [0.0, 1.0, 2.0, 5.0]
        assert len(zcb_curve.get_y()) == 4

    def test_fras(self, fra_curve):
        fra_curve.build()

        for inst in fra_curve.instruments:
            assert abs(inst.residual(fra_curve)) < EPS

    @pytest.mark.parametrize("scheme", ["cubic_spline", "monotone_cubic", "polynomial"])
    def test_smooth_schemes(self, zcb_curve, scheme):
        zcb_curve.build(scheme)

        assert zcb_curve.scheme == InterpolationType.from_string(scheme)
        for inst in zcb_curve.instruments:
            assert abs(inst.residual(zcb_curve)) < EPS

    def test_objective_not_worse_than_initial_guess(self, fra_curve):
        fra_curve.build()
        calibration = fra_curve.last_calibration

        assert calibration is not None
        assert calibration.objective <= calibration.initial_objective
        assert calibration.minimizer

    def test_idempotent(self, zcb_curve):
        first = zcb_curve.build().get_y()
        second = zcb_curve.build().get_y()

        assert np.allclose(first, second, atol=EPS)

    def test_duplicate_maturity_uses_last(self):
        curve = (
            YieldCurve()
            .add(ZeroCouponBond(2, 0.8))
            .add(ZeroCouponBond(2, 0.85))
            .build()
        )
        assert abs(curve.discount_factor(2) - 0.85) < EPS

    def test_explicit_options(self, zcb_curve):
        zcb_curve.build(InterpolationType.LINEAR, Options(eps_abs=1e-6, eps_rel=1e-6, iters=20000))
        assert abs(zcb_curve.discount_factor(5) - 0.6) < EPS

    def test_swap_with_forwarding_curve(self, fra_curve):
        fra_curve.build()

        float_leg = FloatLeg(t0=0, dt=0.5, n=4, curve=fra_curve)
        annuity = fra_curve.discount_factor(1) + fra_curve.discount_factor(2)
        par_rate = float_leg.present_value(fra_curve) / annuity

        swap = Swap(
            fixed_leg=FixedLeg(t0=0, dt=1, n=2, rate=par_rate),
            float_leg=float_leg,
        )
        assert abs(swap.evaluate(fra_curve)) < 1e-12

        discount = YieldCurve().add(swap).build()

        assert discount.is_built
        assert abs(discount.instruments[0].evaluate(discount)) < EPS

    def test_calibrate_function(self, zcb_curve):
        result = calibrate(zcb_curve.instruments, "linear")

        assert set(result.residuals) == {1, 2, 5}
        assert all(abs(r) < EPS for r in result.residuals.values())
        # the curve itself is untouched by a bare calibration
        assert not zcb_curve.is_built


class TestBuildFailures:
    """Tests for error paths; no failure may change the installed curve."""

    def test_zero_maturity(self):
        curve = YieldCurve().add(ZeroCouponBond(0, 0.9))

        with pytest.raises(InvalidInputError):
            curve.build()
        assert not curve.is_built
        with pytest.raises(EvaluationError):
            curve.discount_factor(0)

    def test_negative_maturity_keeps_previous_state(self, zcb_curve):
        zcb_curve.build()
        before = zcb_curve.get_y()

        zcb_curve.add(ZeroCouponBond(-1, 1.01))
        with pytest.raises(InvalidInputError):
            zcb_curve.build()

        assert np.array_equal(zcb_curve.get_y(), before)

    def test_convergence_failure_keeps_previous_state(self, zcb_curve):
        zcb_curve.build_piecewise_constant()
        before = zcb_curve.get_y()

        with pytest.raises(ConvergenceError) as excinfo:
            zcb_curve.build(InterpolationType.LINEAR, Options(iters=1))

        assert excinfo.value.diagnostic
        assert not excinfo.value.result
        assert zcb_curve.scheme == InterpolationType.PIECEWISE_CONSTANT
        assert np.array_equal(zcb_curve.get_y(), before)

    def test_convergence_failure_on_unbuilt_curve(self, zcb_curve):
        with pytest.raises(ConvergenceError):
            zcb_curve.build(InterpolationType.LINEAR, Options(iters=1))
        assert not zcb_curve.is_built

    def test_empty_curve_below_minimum_nodes(self):
        with pytest.raises(EvaluationError):
            YieldCurve().build()

    def test_unknown_scheme(self, zcb_curve):
        with pytest.raises(InvalidInputError):
            zcb_curve.build("bogus")
        assert not zcb_curve.is_built

    def test_level_count_mismatch(self, zcb_curve, monkeypatch):
        zcb_curve.build_piecewise_constant()
        before = zcb_curve.get_y()

        def short_minimize(func, params, options=None):
            params = list(params)
            return Result(value=0.0, x=[Parameter(p.value, 0.0) for p in params[:-1]])

        monkeypatch.setattr("curvecal.curves.calibration.minimize", short_minimize)

        with pytest.raises(InvalidInputError, match="internal error"):
            zcb_curve.build(InterpolationType.LINEAR)

        assert zcb_curve.scheme == InterpolationType.PIECEWISE_CONSTANT
        assert np.array_equal(zcb_curve.get_y(), before)

    def test_too_few_nodes_for_akima(self, zcb_curve):
        with pytest.raises(EvaluationError):
            zcb_curve.build("akima")
        assert not zcb_curve.is_built


class TestPiecewiseConstant:
    """Tests for the bootstrap path."""

    def test_reprices_exactly(self, zcb_curve):
        zcb_curve.build_piecewise_constant()

        assert abs(zcb_curve.discount_factor(1) - 0.9) < 1e-12
        assert abs(zcb_curve.discount_factor(2) - 0.8) < 1e-12
        assert abs(zcb_curve.discount_factor(5) - 0.6) < 1e-12
        assert list(zcb_curve.get_x()) == [1.0, 2.0, 5.0]
        assert zcb_curve.last_calibration is None

    def test_build_delegates_to_bootstrap(self, zcb_curve):
        direct = zcb_curve.build_piecewise_constant().get_y()
        via_build = zcb_curve.build(InterpolationType.PIECEWISE_CONSTANT, Options()).get_y()

        assert np.array_equal(direct, via_build)

    def test_forward_rates_are_flat_between_nodes(self, zcb_curve):
        zcb_curve.build("piecewise_constant")

        assert zcb_curve(0.5) == zcb_curve(1.0)
        assert zcb_curve(1.5) == zcb_curve(2.0)
        assert abs(zcb_curve(1.5) - np.log(0.9 / 0.8)) < 1e-12

    def test_fras(self, fra_curve):
        fra_curve.build_piecewise_constant()

        for inst in fra_curve.instruments:
            assert abs(inst.residual(fra_curve)) < 1e-12

    def test_swap(self):
        curve = (
            YieldCurve()
            .add(ZeroCouponBond(1, 0.97))
            .add(Swap(
                fixed_leg=FixedLeg(t0=0, dt=1, n=3, rate=0.032),
                float_leg=FloatLeg(t0=0, dt=0.5, n=6),
            ))
            .build_piecewise_constant()
        )

        for inst in curve.instruments:
            assert abs(inst.residual(curve)) < 1e-5

    def test_zero_maturity(self):
        curve = YieldCurve().add(ZeroCouponBond(0, 0.9))
        with pytest.raises(InvalidInputError):
            curve.build_piecewise_constant()
        assert not curve.is_built

    def test_empty_curve(self):
        curve = YieldCurve().build_piecewise_constant()
        assert not curve.is_built


class TestDiagnostics:
    """Tests for reporting helpers."""

    def test_report(self, zcb_curve):
        report = zcb_curve.build().report()

        assert isinstance(report, pd.DataFrame)
        assert list(report.columns) == ["maturity", "instrument", "market", "calculated", "difference"]
        assert len(report) == 3
        assert (report["difference"].abs() < EPS).all()

    def test_residuals(self, zcb_curve):
        residuals = zcb_curve.build_piecewise_constant().residuals()
        assert set(residuals) == {1, 2, 5}

    def test_sample(self, zcb_curve):
        times, rates = zcb_curve.build().sample(11)

        assert len(times) == 11
        assert times[0] == 0.0
        assert times[-1] == 5.0
        assert abs(rates[-1] - zcb_curve(5.0)) < 1e-12

    def test_sample_needs_two_points(self, zcb_curve):
        zcb_curve.build()
        with pytest.raises(InvalidInputError):
            zcb_curve.sample(1)

    def test_describe(self, zcb_curve):
        text = zcb_curve.build().describe()

        assert text.startswith("YieldCurve interpolation type: linear size=4")
        assert "ZeroCouponBond maturity=5 price=0.6" in text
        assert "market quote" in text

    def test_repr(self, zcb_curve):
        assert repr(zcb_curve) == "YieldCurve(instruments=3, scheme=None, nodes=0)"
