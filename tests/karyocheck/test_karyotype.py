# -*- coding: utf-8 -*-
"""Tests for ``karyocheck.karyotype``"""

from decimal import Decimal

import pytest

from karyocheck.base import KaryotypeInputError
from karyocheck.karyotype import (
    CoverageRatioOverflow,
    ZeroAutosomalCoverage,
    calculate_gender,
    classify_axis,
    compute_ratios,
    divide,
    estimate_karyotype,
    excess_repetitions,
    render_karyotype,
    truncate,
)
from karyocheck.models.platform import PlatformThresholds
from karyocheck.models.sample import Gender


def D(value):
    return Decimal(value)


def test_truncate_does_not_round():
    assert truncate(D("1.9996")) == D("1.999")
    assert truncate(D("0.0009")) == D("0.000")
    assert truncate(D("-0.1405")) == D("-0.140")


def test_divide_truncates():
    assert divide(D("19996"), D("10000")) == D("1.999")
    assert divide(D("2"), D("3")) == D("0.666")
    assert divide(D("1"), D("0.5")) == D("2.000")


def test_excess_repetitions_is_floor():
    assert excess_repetitions(D("0.9")) == 0
    assert excess_repetitions(D("1.0")) == 1
    assert excess_repetitions(D("2.999")) == 2
    assert excess_repetitions(D("-0.5")) == 0


def test_compute_ratios_female(thresholds):
    ratios = compute_ratios(D("100"), D("0.5"), D("100"), thresholds)
    assert ratios.xa_ratio == D("1.0")
    assert ratios.ya_ratio == D("0.005")
    assert ratios.x_count == D("2.0")
    assert ratios.y_count == D("0.010")


def test_compute_ratios_truncates_each_step(thresholds):
    ratios = compute_ratios(D("99.98"), D("0"), D("100"), thresholds)
    assert ratios.xa_ratio == D("0.999")
    assert ratios.x_count == D("1.998")


def test_compute_ratios_out_of_range(thresholds):
    with pytest.raises(CoverageRatioOverflow) as exc_info:
        compute_ratios(D("1e26"), D("1"), D("1"), thresholds)
    assert isinstance(exc_info.value, KaryotypeInputError)


def test_compute_ratios_zero_autosomal(thresholds):
    with pytest.raises(ZeroAutosomalCoverage) as exc_info:
        compute_ratios(D("10"), D("10"), D("0"), thresholds)
    assert isinstance(exc_info.value, KaryotypeInputError)
    assert isinstance(exc_info.value, ZeroDivisionError)


def test_classify_axis_within_window():
    axis = classify_axis(D("2.000"), D("0.15"))
    assert axis.lower == D("1.850")
    assert axis.upper == D("2.150")
    assert axis.chromes == 2
    assert axis.hits == (2,)
    assert not axis.excess


def test_classify_axis_bounds_are_strict():
    # 1.15 - 0.15 is exactly 1, which is not inside the window
    axis = classify_axis(D("1.150"), D("0.15"))
    assert axis.lower == D("1.000")
    assert axis.chromes == 0
    assert axis.hits == ()
    assert axis.excess
    assert axis.excess_count == 1

    axis = classify_axis(D("0.850"), D("0.15"))
    assert axis.upper == D("1.000")
    assert axis.chromes == 0
    assert not axis.excess


def test_classify_axis_last_match_wins():
    axis = classify_axis(D("1.500"), D("0.6"))
    assert axis.hits == (1, 2)
    assert axis.chromes == 2


def test_classify_axis_caps_at_four():
    axis = classify_axis(D("5.000"), D("0.15"))
    assert axis.chromes == 0
    assert axis.excess
    assert axis.excess_count == 5


def test_classify_axis_absent():
    axis = classify_axis(D("0.010"), D("0.15"))
    assert axis.lower == D("-0.140")
    assert axis.chromes == 0
    assert not axis.excess
    assert not axis.above_absent


@pytest.mark.parametrize(
    "x_count,y_count,expected",
    [
        ("2.0", "0.0", "XX"),
        ("1.0", "1.0", "XY"),
        ("1.0", "0.0", "X0"),
        ("2.0", "1.0", "XXY"),
        ("1.0", "2.0", "XYY"),
        ("1.5", "1.0", "EXY"),
        ("1.0", "2.5", "XEYY"),
        ("2.5", "0.0", "EXX"),
        ("1.15", "0.0", "EX"),
        ("0.0", "1.0", "0Y"),
        ("0.0", "0.0", "0"),
        ("1.5", "0.0", "EX"),
    ],
)
def test_render_karyotype(x_count, y_count, expected):
    x = classify_axis(D(x_count), D("0.15"))
    y = classify_axis(D(y_count), D("0.15"))
    assert render_karyotype(x, y) == expected


def test_calculate_gender():
    absent, one, two, off = (classify_axis(D(c), D("0.15")) for c in ("0", "1", "2", "1.5"))
    assert calculate_gender(absent, one) == Gender.UNKNOWN
    assert calculate_gender(two, absent) == Gender.FEMALE
    assert calculate_gender(one, one) == Gender.MALE
    # Y signal outside of all windows still counts as male
    assert calculate_gender(one, off) == Gender.MALE


@pytest.mark.parametrize("x_count", ["0.0", "1.0", "1.5", "2.0", "3.0"])
@pytest.mark.parametrize("y_count", ["1.0", "2.0", "3.0", "4.0"])
def test_calculate_gender_y_is_never_female(x_count, y_count):
    tol = D("0.15")
    y = classify_axis(D(y_count), tol)
    assert y.chromes >= 1
    assert calculate_gender(classify_axis(D(x_count), tol), y) != Gender.FEMALE


def test_estimate_karyotype_female(thresholds):
    estimate = estimate_karyotype(D("100"), D("0.5"), D("100"), thresholds)
    assert estimate.x_chromes == 2
    assert estimate.y_chromes == 0
    assert estimate.rendered == "XX"
    assert estimate.gender == Gender.FEMALE


def test_estimate_karyotype_male(thresholds):
    estimate = estimate_karyotype(D("50"), D("50"), D("100"), thresholds)
    assert estimate.ratios.x_count == D("1.0")
    assert estimate.ratios.y_count == D("1.0")
    assert estimate.x_chromes == 1
    assert estimate.y_chromes == 1
    assert estimate.rendered == "XY"
    assert estimate.gender == Gender.MALE


def test_estimate_karyotype_no_signal(thresholds):
    estimate = estimate_karyotype(D("1"), D("1"), D("100"), thresholds)
    assert estimate.ratios.x_count == D("0.02")
    assert estimate.ratios.y_count == D("0.02")
    assert estimate.x_chromes == 0
    assert not estimate.x_excess
    assert not estimate.y_excess
    assert estimate.gender == Gender.UNKNOWN


def test_estimate_karyotype_excess_x_without_y(thresholds):
    estimate = estimate_karyotype(D("75"), D("0"), D("100"), thresholds)
    assert estimate.ratios.x_count == D("1.5")
    assert estimate.x_excess
    assert estimate.rendered == "EX"
    assert estimate.gender == Gender.UNKNOWN


def test_estimate_karyotype_platform_calibration():
    thresholds = PlatformThresholds(
        ratio_mean_x=0.45, tolerance_x=0.2, ratio_mean_y=0.1, tolerance_y=0.3
    )
    estimate = estimate_karyotype(D("45"), D("10"), D("100"), thresholds)
    assert estimate.ratios.x_count == D("1.0")
    assert estimate.ratios.y_count == D("1.0")
    assert estimate.rendered == "XY"


def test_estimate_karyotype_is_deterministic(thresholds):
    first = estimate_karyotype(D("61.3"), D("17.7"), D("58.1"), thresholds)
    for _ in range(10):
        assert estimate_karyotype(D("61.3"), D("17.7"), D("58.1"), thresholds) == first


def test_estimate_karyotype_zero_autosomal(thresholds):
    with pytest.raises(ZeroAutosomalCoverage):
        estimate_karyotype(D("1"), D("1"), D("0"), thresholds)
