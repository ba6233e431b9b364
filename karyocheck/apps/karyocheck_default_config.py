# -*- coding: utf-8 -*-
"""Print the default configuration of the karyotype check as commented YAML"""

import argparse
import sys

from .. import __version__
from ..base import CONFIG_KEY
from ..models import default_config_yaml_string
from ..models.config import KaryotypeCheck


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Print the default karyotype check configuration to stdout"
    )
    parser.add_argument("--version", action="version", version="%%(prog)s %s" % __version__)
    parser.add_argument(
        "--no-root-key",
        dest="root_key",
        default=True,
        action="store_false",
        help="Do not nest the configuration below '{}'".format(CONFIG_KEY),
    )
    parser.add_argument(
        "--output",
        "-o",
        type=argparse.FileType("wt"),
        default=sys.stdout,
        help="Output file, default: stdout",
    )
    args = parser.parse_args(argv)
    yaml_str = default_config_yaml_string(
        KaryotypeCheck, root_key=CONFIG_KEY if args.root_key else None
    )
    args.output.write(yaml_str)
    if args.output is not sys.stdout:
        args.output.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
