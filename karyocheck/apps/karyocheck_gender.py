# -*- coding: utf-8 -*-
"""Tool for checking the chromosomal sex of a sample before it continues in the pipeline

The X and Y depth of coverage is compared to the autosomal depth of coverage to detect the
chromosomal gender, which is then compared to the sample description.  If the sample passes,
its BAM file and index are hard-linked to the next pipeline stage.

Usage::

    $ karyocheck-gender -d P001 -g 2 -p platforms/SureSelect_V5.txt \\
        -x work/P001.X -y work/P001.Y -a work/P001.A \\
        -b work/P001.bam -i work/P001.bam.bai -l P001/P001.bam -o P001/P001.bam.bai
"""

import argparse
import logging
import shlex
import sys

from .. import __version__
from ..base import (
    InvalidConfiguration,
    KaryotypeInputError,
    load_config,
    load_platform_file,
    validate_config,
)
from ..check import CoveragePaths, SexCheck
from ..linking import LinkRequest
from ..models.config import CoverageFormat, KaryotypeCheck
from ..models.sample import DeclaredMetadata
from ..report import ReportWriter
from .impl.logging import LVL_ERROR, LVL_INFO, LVL_SUCCESS, log, log_message

#: Arguments that make up the link request
LINK_ARGS = ("source_bam", "source_bai", "dest_bam", "dest_bai")


def setup_logging(args):
    """Setup logger."""
    logging.basicConfig(
        format="%(asctime)s %(name)-12s %(levelname)-8s %(message)s", datefmt="%m-%d %H:%M"
    )
    logger = logging.getLogger("")
    if args.verbose:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)


def build_config(args) -> KaryotypeCheck:
    """Load configuration and apply the command line overrides"""
    config = load_config(args.config) if args.config else KaryotypeCheck()
    overrides = {}
    if args.coverage_format:
        overrides["coverage_format"] = args.coverage_format
    if args.force:
        overrides["link_overwrite"] = True
    if not overrides:
        return config
    return validate_config({**config.model_dump(), **overrides})


def build_link_request(args) -> LinkRequest | None:
    values = [getattr(args, name) for name in LINK_ARGS]
    if not any(values):
        return None
    return LinkRequest(*values)


def run(args, argv):
    """Perform the check, return exit code"""
    try:
        config = build_config(args)
        platform, thresholds = args.platform, None
        if args.platform_file:
            platform, thresholds = load_platform_file(args.platform_file)
    except (InvalidConfiguration, KaryotypeInputError) as e:
        log("{error}", {"error": e}, level=LVL_ERROR)
        return 1

    report = None
    if not args.no_report:
        report = ReportWriter.for_individual(args.identity, config.report_file_name)
    check = SexCheck(
        identity=args.identity,
        config=config,
        platform=platform,
        declared=DeclaredMetadata(gender=args.gender, sex_chromosomes=args.sex_chromosomes),
        coverage_paths=CoveragePaths(
            x=args.x_coverage, y=args.y_coverage, autosomal=args.a_coverage
        ),
        thresholds=thresholds,
        link_request=build_link_request(args),
        report=report,
        command_line=" ".join(map(shlex.quote, ["karyocheck-gender"] + list(argv or []))),
    )

    log("Depths of Coverage Gender comparison for {identity}", {"identity": args.identity})
    log("")
    for key, value in check.input_summary().items():
        log("{key:<26} {value!r}", {"key": key + ":", "value": value}, level=LVL_INFO)
    log("")

    result = check.run()
    if result.estimate:
        log(
            "Gender calculated: {gender}:{karyotype}",
            {"gender": result.estimate.gender, "karyotype": result.estimate.rendered},
            level=LVL_INFO,
        )
    for message in result.decision.messages:
        log_message(message)
    if result.link_error:
        log("{error}", {"error": result.link_error}, level=LVL_ERROR)
    elif result.link_status:
        log(
            "{bam} ({status})",
            {"bam": check.link_request.dest_bam, "status": result.link_status[0]},
            level=LVL_SUCCESS,
        )
    return 0 if result.ok else 1


def main(argv=None):
    """Program entry point including command line argument parsing"""
    parser = argparse.ArgumentParser(
        description=(
            "Compare X and Y chromosomal coverage to autosomal coverage to detect the "
            "chromosomal gender, reconcile it with the sample description and link the BAM "
            "file to the next stage on success."
        )
    )

    parser.add_argument("--version", action="version", version="%%(prog)s %s" % __version__)
    parser.add_argument(
        "--verbose", "-v", default=False, action="store_true", help="Enable verbose mode"
    )

    group = parser.add_argument_group("Sample")
    group.add_argument(
        "-d",
        "--identity",
        required=True,
        help="Identity of the individual, the directory the report is written to",
    )
    group.add_argument(
        "-g", "--gender", default=None, help="Recorded gender: 1 (male), 2 (female) or unknown"
    )
    group.add_argument(
        "-s",
        "--sex-chromosomes",
        default=None,
        help="Recorded sex chromosomes, e.g. XX; leave empty if not specified",
    )

    group = parser.add_argument_group("Capture platform")
    group.add_argument(
        "-p", "--platform-file", help="Legacy platform file with XRat, XVar, YRat and YVar"
    )
    group.add_argument("-c", "--config", help="Configuration YAML with platform calibrations")
    group.add_argument("--platform", help="Name of the capture platform in the configuration")

    group = parser.add_argument_group("Depth of coverage")
    group.add_argument("-x", dest="x_coverage", required=True, help="X chromosome coverage")
    group.add_argument("-y", dest="y_coverage", required=True, help="Y chromosome coverage")
    group.add_argument("-a", dest="a_coverage", required=True, help="Autosomal coverage")
    group.add_argument(
        "--coverage-format",
        choices=[str(f) for f in CoverageFormat],
        help="Format of the coverage summaries, overrides the configuration",
    )

    group = parser.add_argument_group("Linking")
    group.add_argument("-b", dest="source_bam", help="Source .BAM file")
    group.add_argument("-i", dest="source_bai", help="Source .BAI file")
    group.add_argument("-l", dest="dest_bam", help="Linked .BAM file if gender match passes")
    group.add_argument("-o", dest="dest_bai", help="Linked .BAI file if gender match passes")
    group.add_argument(
        "--force",
        default=False,
        action="store_true",
        help="Replace link targets that exist but are not linked to the source",
    )

    parser.add_argument(
        "--no-report",
        default=False,
        action="store_true",
        help="Do not append to the report in the individual's directory",
    )

    args = parser.parse_args(argv)
    if not args.platform_file and not (args.config and args.platform):
        parser.error("either --platform-file or both --config and --platform are required")
    link_values = [getattr(args, name) for name in LINK_ARGS]
    if any(link_values) and not all(link_values):
        parser.error("-b, -i, -l and -o must be given together")

    setup_logging(args)
    return run(args, sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":
    sys.exit(main())
