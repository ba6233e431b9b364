# -*- coding: utf-8 -*-
"""Reading of depth of coverage summaries

Each of the X, Y and autosomal loci is summarized in its own file by the upstream coverage
step.  Only the mean depth over the locus is used.  Depths are kept as ``Decimal`` values
exactly as printed in the file.
"""

import csv
import enum
from decimal import Decimal, InvalidOperation
import logging
import os

import attr

from .base import KaryotypeInputError
from .models.config import CoverageFormat

#: File name suffix for each coverage format
SUFFIXES = {
    CoverageFormat.GATK_DOC: ".sample_summary",
    CoverageFormat.MOSDEPTH: ".mosdepth.summary.txt",
}

#: Line (1-based) and column (0-based) holding the mean depth in GATK ``.sample_summary`` files
GATK_DOC_LINE = 3
GATK_DOC_COLUMN = 2

#: Rows of mosdepth summaries to take the mean from, in order of preference
MOSDEPTH_TOTAL_ROWS = ("total_region", "total")

logger = logging.getLogger(__name__)


class Locus(enum.StrEnum):
    X = "X"
    Y = "Y"
    AUTOSOMAL = "Autosomal"


class MissingCoverageFile(KaryotypeInputError):
    """Raised when a depth of coverage summary file does not exist"""


class InvalidCoverageFile(KaryotypeInputError):
    """Raised when a depth of coverage summary file cannot be interpreted"""


@attr.s(frozen=True, auto_attribs=True)
class CoverageSummary:
    """Mean depth of coverage over one locus."""

    #: The locus the depth was computed over.
    locus: Locus
    #: Mean depth over the locus.
    mean_depth: Decimal
    #: Path to the file the depth was read from, if any.
    path: str | None = None


def coverage_path(path: str, coverage_format: CoverageFormat) -> str:
    """Return path to summary file, ``path`` may be given without the format's suffix"""
    suffix = SUFFIXES[CoverageFormat(coverage_format)]
    if path.endswith(suffix):
        return path
    return path + suffix


def parse_depth(value: str, path: str) -> Decimal:
    try:
        depth = Decimal(value.strip())
    except InvalidOperation as e:
        raise InvalidCoverageFile(
            "Mean depth {!r} in {} is not a number".format(value, path)
        ) from e
    if not depth.is_finite() or depth < 0:
        raise InvalidCoverageFile("Mean depth {} in {} is not valid".format(value, path))
    return depth


def read_gatk_doc_mean(path: str) -> Decimal:
    """Read mean depth from the ``Total`` row of a GATK DepthOfCoverage sample summary"""
    with open(path, "rt") as f:
        lines = f.read().splitlines()
    if len(lines) < GATK_DOC_LINE:
        raise InvalidCoverageFile(
            "{} has {} lines, expected at least {}".format(path, len(lines), GATK_DOC_LINE)
        )
    fields = lines[GATK_DOC_LINE - 1].split("\t")
    if len(fields) <= GATK_DOC_COLUMN:
        raise InvalidCoverageFile("Line {} of {} has no mean depth".format(GATK_DOC_LINE, path))
    return parse_depth(fields[GATK_DOC_COLUMN], path)


def read_mosdepth_mean(path: str) -> Decimal:
    """Read mean depth from a mosdepth summary, preferring the ``total_region`` row"""
    with open(path, "rt", newline="") as f:
        rows = {row["chrom"]: row for row in csv.DictReader(f, delimiter="\t") if "chrom" in row}
    for name in MOSDEPTH_TOTAL_ROWS:
        if name in rows and rows[name].get("mean") is not None:
            return parse_depth(rows[name]["mean"], path)
    raise InvalidCoverageFile(
        "Neither of {} found in mosdepth summary {}".format(", ".join(MOSDEPTH_TOTAL_ROWS), path)
    )


#: Readers for each coverage format
READERS = {
    CoverageFormat.GATK_DOC: read_gatk_doc_mean,
    CoverageFormat.MOSDEPTH: read_mosdepth_mean,
}


def read_coverage(
    path: str, locus: Locus, coverage_format: CoverageFormat = CoverageFormat.GATK_DOC
) -> CoverageSummary:
    """Read the depth of coverage summary for ``locus`` from ``path``"""
    coverage_format = CoverageFormat(coverage_format)
    summary_path = coverage_path(path, coverage_format)
    if not os.path.exists(summary_path):
        raise MissingCoverageFile(
            "{} coverage file {} does not exist.".format(Locus(locus), summary_path)
        )
    try:
        mean_depth = READERS[coverage_format](summary_path)
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidCoverageFile(
            "{} coverage file {} cannot be read: {}".format(Locus(locus), summary_path, e)
        ) from e
    logger.debug("Mean %s depth of %s read from %s", locus, mean_depth, summary_path)
    return CoverageSummary(locus=Locus(locus), mean_depth=mean_depth, path=summary_path)
