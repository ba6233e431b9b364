# -*- coding: utf-8 -*-
"""Inference of the sex chromosome complement from depth of coverage

The mean depths over X, Y and the autosomes are turned into X/autosome and Y/autosome
ratios.  Divided by the per-platform ratio of a single chromosome copy, these give continuous
copy number estimates which are then snapped to integer chromosome counts within a tolerance
window.

All arithmetic is done in fixed point with three decimal digits.  Each division is truncated
towards zero (never rounded): whether an estimate falls inside a tolerance window depends on
the truncated value.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext
import logging
import math

import attr

from .base import KaryotypeInputError
from .models.platform import PlatformThresholds
from .models.sample import Gender

#: Number of decimal digits kept after each operation
SCALE = 3

#: Quantum for ``SCALE`` digits
QUANTUM = Decimal(1).scaleb(-SCALE)

#: Largest number of copies of a sex chromosome that is called
MAX_CHROMOSOMES = 4

#: Marker for chromosome signal that lies outside of all tolerance windows
EXCESS_MARKER = "E"

#: Marker for an absent chromosome
ABSENT_MARKER = "0"

logger = logging.getLogger(__name__)


class ZeroAutosomalCoverage(KaryotypeInputError, ZeroDivisionError):
    """Raised when the autosomal mean depth is zero"""


class CoverageRatioOverflow(KaryotypeInputError, ArithmeticError):
    """Raised when a coverage ratio cannot be represented with ``SCALE`` decimal digits"""


def truncate(value: Decimal) -> Decimal:
    """Truncate ``value`` towards zero to ``SCALE`` decimal digits"""
    return Decimal(value).quantize(QUANTUM, rounding=ROUND_DOWN)


def divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide with truncation to ``SCALE`` decimal digits"""
    with localcontext() as ctx:
        ctx.rounding = ROUND_DOWN
        return truncate(Decimal(numerator) / Decimal(denominator))


def excess_repetitions(count: Decimal) -> int:
    """Number of chromosome symbols to emit for an excess estimate

    This is the estimate truncated to an integer, so anything below one gives no symbol.
    """
    return max(0, math.floor(count))


@attr.s(frozen=True, auto_attribs=True)
class CopyNumberRatios:
    """Ratios of sex chromosome to autosomal coverage and the implied copy numbers."""

    #: X/autosome coverage ratio.
    xa_ratio: Decimal
    #: Y/autosome coverage ratio.
    ya_ratio: Decimal
    #: Continuous estimate of the number of X chromosomes.
    x_count: Decimal
    #: Continuous estimate of the number of Y chromosomes.
    y_count: Decimal


def compute_ratios(
    x_coverage: Decimal,
    y_coverage: Decimal,
    autosomal_coverage: Decimal,
    thresholds: PlatformThresholds,
) -> CopyNumberRatios:
    """Compute coverage ratios and copy number estimates for X and Y"""
    if Decimal(autosomal_coverage) == 0:
        raise ZeroAutosomalCoverage("Autosomal mean depth of coverage is zero")
    try:
        xa_ratio = divide(x_coverage, autosomal_coverage)
        ya_ratio = divide(y_coverage, autosomal_coverage)
        x_count = divide(xa_ratio, thresholds.mean_x)
        y_count = divide(ya_ratio, thresholds.mean_y)
    except InvalidOperation as e:
        raise CoverageRatioOverflow(
            "Coverage ratios of X {}, Y {} and autosomal {} mean depth are out of range".format(
                x_coverage, y_coverage, autosomal_coverage
            )
        ) from e
    return CopyNumberRatios(xa_ratio=xa_ratio, ya_ratio=ya_ratio, x_count=x_count, y_count=y_count)


@attr.s(frozen=True, auto_attribs=True)
class AxisClassification:
    """Discrete chromosome count for one of the sex chromosomes."""

    #: The continuous copy number estimate.
    count: Decimal
    #: The tolerance used.
    tolerance: Decimal
    #: Lower (exclusive) bound of the tolerance window.
    lower: Decimal
    #: Upper (exclusive) bound of the tolerance window.
    upper: Decimal
    #: Number of chromosomes called, ``0`` if no integer lies in the window.
    chromes: int
    #: Whether the estimate is above ``1 - tolerance`` without matching any integer.
    excess: bool = False
    #: Number of symbols to emit for an excess estimate.
    excess_count: int = 0
    #: All integers that fell into the tolerance window, in scanning order.
    hits: tuple[int, ...] = ()

    @property
    def above_absent(self) -> bool:
        """Whether the estimate is above the highest value still considered absent"""
        return self.count > 1 - self.tolerance


def classify_axis(count: Decimal, tolerance: Decimal) -> AxisClassification:
    """Map a continuous copy number estimate to a chromosome count in ``[0, 4]``

    All integers from 1 to 4 strictly inside ``(count - tolerance, count + tolerance)`` are
    considered and the highest one is taken.  If there is none, an estimate above
    ``1 - tolerance`` is flagged as excess, anything else is an absent chromosome.
    """
    count = Decimal(count)
    tolerance = Decimal(tolerance)
    lower = truncate(count - tolerance)
    upper = truncate(count + tolerance)
    chromes = 0
    hits = []
    for i in range(1, MAX_CHROMOSOMES + 1):
        if lower < i < upper:
            hits.append(i)
            chromes = i
    excess = False
    excess_count = 0
    if chromes == 0 and count > 1 - tolerance:
        excess = True
        excess_count = excess_repetitions(count)
    return AxisClassification(
        count=count,
        tolerance=tolerance,
        lower=lower,
        upper=upper,
        chromes=chromes,
        excess=excess,
        excess_count=excess_count,
        hits=tuple(hits),
    )


def render_karyotype(x: AxisClassification, y: AxisClassification) -> str:
    """Render the sex chromosome string, e.g. ``XX``, ``XY``, ``X0`` or ``EXXY``"""
    if x.chromes > 0:
        result = "X" * x.chromes
    elif x.excess:
        result = EXCESS_MARKER + "X" * x.excess_count
    else:
        result = ABSENT_MARKER

    if y.chromes > 0:
        result += "Y" * y.chromes
    elif y.excess:
        result += EXCESS_MARKER + "Y" * y.excess_count
    elif x.chromes == 1:
        result += ABSENT_MARKER
    # TODO: no X called and no Y signal leaves the Y part empty; decide whether "0" belongs here
    return result


def calculate_gender(x: AxisClassification, y: AxisClassification) -> Gender:
    """Derive the gender from the X and Y classification

    Without any X chromosome called the gender is unknown.  Any Y signal above the absence
    threshold makes the sample male, even if it falls outside the tolerance windows.
    """
    if x.chromes == 0:
        return Gender.UNKNOWN
    elif y.chromes == 0 and y.count < 1 - y.tolerance:
        return Gender.FEMALE
    else:
        return Gender.MALE


@attr.s(frozen=True, auto_attribs=True)
class KaryotypeEstimate:
    """Sex chromosome complement inferred for one sample."""

    #: The coverage ratios the estimate is based on.
    ratios: CopyNumberRatios
    #: Classification of the X chromosome.
    x: AxisClassification
    #: Classification of the Y chromosome.
    y: AxisClassification
    #: Rendered karyotype string.
    rendered: str
    #: Gender derived from the classification.
    gender: Gender

    @property
    def x_chromes(self) -> int:
        return self.x.chromes

    @property
    def y_chromes(self) -> int:
        return self.y.chromes

    @property
    def x_excess(self) -> bool:
        return self.x.excess

    @property
    def y_excess(self) -> bool:
        return self.y.excess


def estimate_karyotype(
    x_coverage: Decimal,
    y_coverage: Decimal,
    autosomal_coverage: Decimal,
    thresholds: PlatformThresholds,
) -> KaryotypeEstimate:
    """Infer the karyotype from the three mean depths and the platform calibration"""
    ratios = compute_ratios(x_coverage, y_coverage, autosomal_coverage, thresholds)
    x = classify_axis(ratios.x_count, thresholds.var_x)
    y = classify_axis(ratios.y_count, thresholds.var_y)
    rendered = render_karyotype(x, y)
    gender = calculate_gender(x, y)
    logger.debug(
        "X count %s (%s), Y count %s (%s) -> %s (%s)",
        ratios.x_count,
        x.chromes,
        ratios.y_count,
        y.chromes,
        rendered,
        gender,
    )
    return KaryotypeEstimate(ratios=ratios, x=x, y=y, rendered=rendered, gender=gender)
