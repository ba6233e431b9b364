# -*- coding: utf-8 -*-
"""Hard-link a BAM file and its index into the next pipeline stage

Usage::

    $ karyocheck-link work/P001.bam P001/P001.bam
"""

import argparse
import logging
import sys

from .. import __version__
from ..linking import LinkError, LinkRequest, link_bam_pair
from .impl.logging import LVL_ERROR, LVL_SUCCESS, log


def run(args):
    """Link the files, return exit code"""
    request = LinkRequest(
        source_bam=args.source_bam,
        source_bai=args.source_bai or args.source_bam + ".bai",
        dest_bam=args.dest_bam,
        dest_bai=args.dest_bai or args.dest_bam + ".bai",
    )
    try:
        statuses = link_bam_pair(request, overwrite=args.force)
    except LinkError as e:
        log("{error}", {"error": e}, level=LVL_ERROR)
        return 1
    for source, dest, status in (
        (request.source_bam, request.dest_bam, statuses[0]),
        (request.source_bai, request.dest_bai, statuses[1]),
    ):
        log(
            "{source} hard linked to {dest} ({status})",
            {"source": source, "dest": dest, "status": status},
            level=LVL_SUCCESS,
        )
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Hard-link a BAM file and its index, skipping links that already exist"
    )
    parser.add_argument("--version", action="version", version="%%(prog)s %s" % __version__)
    parser.add_argument(
        "--verbose", "-v", default=False, action="store_true", help="Enable verbose mode"
    )
    parser.add_argument("source_bam", help="Source .BAM file")
    parser.add_argument("dest_bam", help="Destination .BAM file")
    parser.add_argument("--source-bai", help="Source .BAI file, default: <source_bam>.bai")
    parser.add_argument("--dest-bai", help="Destination .BAI file, default: <dest_bam>.bai")
    parser.add_argument(
        "--force",
        default=False,
        action="store_true",
        help="Replace destinations that exist but are not linked to the source",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
