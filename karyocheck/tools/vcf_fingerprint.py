#!/usr/bin/env python3
"""Replace the sample name of a single-sample VCF file with a generic identity

The resulting "fingerprint" VCF can be compared to the VCF files of any other sample from the
same platform.  Only the ``#CHROM`` header line is changed.

Usage::

    $ karyocheck-vcf-fingerprint -i P001.vcf -o fingerprints/P001.vcf -f Individual
"""

import argparse
import contextlib
import logging
import os
import sys

import logzero
from logzero import logger

#: Fixed columns of the VCF ``#CHROM`` header line
VCF_FIXED_COLUMNS = ("#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT")

#: Default generic identity
DEFAULT_IDENTITY = "Individual"


def is_header_line(line):
    """Whether ``line`` is the ``#CHROM`` header line of a VCF file"""
    columns = line.rstrip("\r\n").split("\t")
    return tuple(columns[: len(VCF_FIXED_COLUMNS)]) == VCF_FIXED_COLUMNS


def fingerprint_header(line, identity=DEFAULT_IDENTITY):
    """Return ``#CHROM`` header ``line`` with the sample column(s) replaced by ``identity``"""
    if not is_header_line(line):
        return line
    return "\t".join(VCF_FIXED_COLUMNS + (identity,)) + "\n"


def fingerprint(in_file, out_file, identity=DEFAULT_IDENTITY):
    """Copy VCF from ``in_file`` to ``out_file``, return whether the header line was replaced"""
    replaced = False
    for line in in_file:
        if not replaced and is_header_line(line):
            line = fingerprint_header(line, identity)
            replaced = True
        print(line, file=out_file, end="")
    return replaced


def run(args):
    logger.info("Input VCF file:   %s", args.input)
    logger.info("Output VCF file:  %s", args.output)
    logger.info("Generic identity: %s", args.identity)
    if args.output != "-":
        if os.path.exists(args.output):
            logger.warning("Output file %s already exists and will be overwritten!", args.output)
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
    with contextlib.ExitStack() as stack:
        if args.input == "-":
            in_file = sys.stdin
        else:
            in_file = stack.enter_context(open(args.input, "rt"))
        if args.output == "-":
            out_file = sys.stdout
        else:
            out_file = stack.enter_context(open(args.output, "wt"))
        replaced = fingerprint(in_file, out_file, args.identity)
    if not replaced:
        logger.error("Unable to replace identifier in %s", args.input)
        return 1
    logger.info("Fingerprint file %s created with generic ID %s", args.output, args.identity)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate generic fingerprint VCF that can be compared to any other"
    )
    parser.add_argument("--verbose", "-v", default=False, action="store_true")
    parser.add_argument("--input", "-i", default="-", help="Input VCF file, default: stdin")
    parser.add_argument("--output", "-o", default="-", help="Output VCF file, default: stdout")
    parser.add_argument(
        "--identity",
        "-f",
        default=DEFAULT_IDENTITY,
        help="Generic identity, default: %s" % DEFAULT_IDENTITY,
    )
    args = parser.parse_args(argv)
    if args.verbose:
        logzero.loglevel(logging.DEBUG)
    else:
        logzero.loglevel(logging.INFO)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
