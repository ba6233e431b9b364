# -*- coding: utf-8 -*-
"""Karyotype check of one sample: from coverage summaries to the gated BAM link

``evaluate()`` is the pure decision function.  ``SexCheck`` wraps it with reading the coverage
files, writing the individual's report and linking the BAM file and its index when the
decision allows the sample to continue.
"""

from decimal import Decimal
import logging

import attr

from .base import KaryotypeInputError, resolve_thresholds
from .coverage import CoverageSummary, Locus, read_coverage
from .karyotype import KaryotypeEstimate, estimate_karyotype
from .linking import LinkError, LinkRequest, LinkStatus, link_bam_pair
from .models.config import KaryotypeCheck
from .models.platform import PlatformThresholds
from .models.sample import DeclaredMetadata
from .reconcile import Decision, MessageLevel, ReconciliationPolicy
from .report import ReportWriter, decision_lines, estimate_lines, header_lines
from .utils import dictify

logger = logging.getLogger(__name__)


def evaluate(
    x_coverage: Decimal,
    y_coverage: Decimal,
    autosomal_coverage: Decimal,
    thresholds: PlatformThresholds,
    declared: DeclaredMetadata,
    policy: ReconciliationPolicy | None = None,
) -> Decision:
    """Infer the karyotype from the mean depths and reconcile it with ``declared``

    Raises ``ZeroAutosomalCoverage`` if ``autosomal_coverage`` is zero.
    """
    estimate = estimate_karyotype(x_coverage, y_coverage, autosomal_coverage, thresholds)
    return (policy or ReconciliationPolicy()).decide(estimate.gender, estimate.rendered, declared)


@attr.s(frozen=True, auto_attribs=True)
class CoveragePaths:
    """Paths (or path prefixes) of the coverage summaries."""

    x: str
    y: str
    autosomal: str

    def items(self):
        return ((Locus.X, self.x), (Locus.Y, self.y), (Locus.AUTOSOMAL, self.autosomal))


@attr.s(frozen=True, auto_attribs=True)
class CheckResult:
    """Outcome of ``SexCheck.run()``."""

    #: The decision on the sample.
    decision: Decision
    #: The karyotype estimate, ``None`` on input errors.
    estimate: KaryotypeEstimate | None = None
    #: Status of the BAM and index link, ``None`` if no link was made.
    link_status: tuple[LinkStatus, LinkStatus] | None = None
    #: Description of the link failure, if any.
    link_error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the sample may continue in the pipeline"""
        return self.decision.allows_link and self.link_error is None


class SexCheck:
    """Check of the chromosomal sex of one sample"""

    def __init__(
        self,
        identity: str,
        config: KaryotypeCheck,
        platform: str,
        declared: DeclaredMetadata,
        coverage_paths: CoveragePaths,
        thresholds: PlatformThresholds | None = None,
        link_request: LinkRequest | None = None,
        report: ReportWriter | None = None,
        command_line: str | None = None,
    ):
        #: Identity of the individual, also the directory holding its report
        self.identity = identity
        #: The karyotype check configuration
        self.config = config
        #: Capture platform identifier
        self.platform = platform
        #: Gender and sex chromosomes from the sample description
        self.declared = declared
        #: The coverage summaries to read
        self.coverage_paths = coverage_paths
        #: Thresholds to use instead of looking up ``platform`` in the configuration
        self.thresholds = thresholds
        #: BAM file and index to link on success, if any
        self.link_request = link_request
        #: Report to append to, ``None`` to not write a report
        self.report = report
        #: Command line to record in the report
        self.command_line = command_line

    @dictify
    def input_summary(self):
        """Return the inputs of the check, for display"""
        yield "Sample description gender", str(self.declared.gender)
        yield "Sample description chroms", self.declared.describe_sex_chromosomes()
        yield "X Depth of Coverage File", self.coverage_paths.x
        yield "Y Depth of Coverage File", self.coverage_paths.y
        yield "Autosomal Coverage File", self.coverage_paths.autosomal
        if self.link_request:
            yield "Incoming .BAM file", self.link_request.source_bam
            yield "Incoming .BAI file", self.link_request.source_bai
            yield "Outgoing .BAM file", self.link_request.dest_bam
            yield "Outgoing .BAI file", self.link_request.dest_bai
        yield "Platform", self.platform

    def load_coverages(self) -> dict[Locus, CoverageSummary]:
        return {
            locus: read_coverage(path, locus, self.config.coverage_format)
            for locus, path in self.coverage_paths.items()
        }

    def run(self) -> CheckResult:
        lines = header_lines(self.identity, self.command_line)
        estimate = None
        try:
            thresholds = self.thresholds
            if thresholds is None:
                thresholds = resolve_thresholds(self.config, self.platform)
            coverages = self.load_coverages()
            estimate = estimate_karyotype(
                coverages[Locus.X].mean_depth,
                coverages[Locus.Y].mean_depth,
                coverages[Locus.AUTOSOMAL].mean_depth,
                thresholds,
            )
        except KaryotypeInputError as e:
            logger.error("Cannot check %s: %s", self.identity, e)
            decision = Decision.from_input_error(e)
        else:
            lines += estimate_lines(self.platform, thresholds, coverages, estimate)
            decision = ReconciliationPolicy().decide(
                estimate.gender, estimate.rendered, self.declared
            )
        lines += decision_lines(self.declared, decision)

        link_status, link_error = None, None
        if decision.allows_link and self.link_request:
            try:
                link_status = link_bam_pair(
                    self.link_request, overwrite=self.config.link_overwrite
                )
            except LinkError as e:
                logger.error("Linking %s failed: %s", self.link_request.source_bam, e)
                link_error = str(e)
                lines.append("{} {}".format(MessageLevel.FAILURE, e))
            else:
                for source, dest, status in (
                    (self.link_request.source_bam, self.link_request.dest_bam, link_status[0]),
                    (self.link_request.source_bai, self.link_request.dest_bai, link_status[1]),
                ):
                    lines.append(
                        "{} {} hard linked to {} ({})".format(
                            MessageLevel.SUCCESS, source, dest, status
                        )
                    )

        if self.report:
            self.report.append(lines)
        return CheckResult(
            decision=decision, estimate=estimate, link_status=link_status, link_error=link_error
        )
