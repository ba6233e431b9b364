# -*- coding: utf-8 -*-
"""Per-individual report of the karyotype check

The report (``MergeReport.txt`` in the individual's directory) is shared by all checks of
the same individual and only ever appended to.  Each check writes its lines in one go while
holding an inter-process lock on ``<report>.lock``.
"""

import logging
import os

from fasteners import InterProcessLock

from .coverage import CoverageSummary, Locus
from .karyotype import KaryotypeEstimate
from .models.platform import PlatformThresholds
from .models.sample import DeclaredMetadata
from .reconcile import Decision, MessageLevel
from .utils import listify

#: Separator written before each check
SEPARATOR = "=" * 32

logger = logging.getLogger(__name__)


def _info(text: str) -> str:
    return "{} {}".format(MessageLevel.INFO, text)


@listify
def header_lines(identity: str, command_line: str | None = None):
    yield SEPARATOR
    yield "Depths of Coverage Gender comparison for {}".format(identity)
    yield ""
    yield (
        "Compare X and Y chromosomal coverage as compared to an Autosomal chromosome coverage "
        "to detect chromosomal gender."
    )
    yield (
        "If the sex chromosomes are already defined in the sample description, only a warning "
        "will be posted."
    )
    yield ""
    if command_line:
        yield _info("Commandline: {}".format(command_line))
        yield ""


@listify
def estimate_lines(
    platform: str,
    thresholds: PlatformThresholds,
    coverages: dict[Locus, CoverageSummary],
    estimate: KaryotypeEstimate,
):
    yield _info("Platform:   {}".format(platform))
    yield _info("X bias:     {} ±{}".format(thresholds.mean_x, thresholds.var_x))
    yield _info("Y bias:     {} ±{}".format(thresholds.mean_y, thresholds.var_y))
    yield _info("X coverage: {}".format(coverages[Locus.X].mean_depth))
    yield _info("Y coverage: {}".format(coverages[Locus.Y].mean_depth))
    yield _info("A coverage: {}".format(coverages[Locus.AUTOSOMAL].mean_depth))
    yield _info("X/A ratio:  {}".format(estimate.ratios.xa_ratio))
    yield _info("Y/A ratio:  {}".format(estimate.ratios.ya_ratio))
    yield _info("X count:    {}".format(estimate.ratios.x_count))
    yield _info("Y count:    {}".format(estimate.ratios.y_count))
    for name, axis in (("X", estimate.x), ("Y", estimate.y)):
        for i in axis.hits:
            yield _info(
                "{}:{} < {} < {} is in range of {}".format(
                    name, axis.lower, axis.count, axis.upper, i
                )
            )


@listify
def decision_lines(declared: DeclaredMetadata, decision: Decision):
    if decision.input_error is None:
        yield _info(
            "Gender reported:   {}:{}.".format(
                declared.gender, declared.describe_sex_chromosomes()
            )
        )
        yield _info(
            "Gender calculated: {}:{}.".format(
                decision.calculated_gender, decision.calculated_karyotype
            )
        )
    yield from decision.lines


class ReportWriter:
    """Append lines to a report file, serialized between processes"""

    def __init__(self, path: str):
        #: Path to the report file
        self.path = path
        #: Path to the lock file guarding the report
        self.lock_path = path + ".lock"

    @classmethod
    def for_individual(cls, identity: str, file_name: str = "MergeReport.txt") -> "ReportWriter":
        return cls(os.path.join(identity, file_name))

    def append(self, lines: list[str]):
        dirname = os.path.dirname(self.path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        with InterProcessLock(self.lock_path):
            logger.debug("Appending %d lines to %s", len(lines), self.path)
            with open(self.path, "at") as f:
                for line in lines:
                    print(line, file=f)
