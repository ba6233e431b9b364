# -*- coding: utf-8 -*-

from .base import load_config, load_platform_file, print_config
from .check import SexCheck, evaluate

from karyocheck._version import __version__

__all__ = [
    "__version__",
    "SexCheck",
    "evaluate",
    "load_config",
    "load_platform_file",
    "print_config",
]
