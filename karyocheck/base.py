# -*- coding: utf-8 -*-
"""Basic utility code for karyocheck: exceptions and configuration loading
"""

import os
import re
import sys
from typing import Any

import pydantic
import ruamel.yaml as ruamel_yaml
from ruamel.yaml.error import YAMLError

from .models.config import KaryotypeCheck
from .models.platform import PlatformThresholds

#: Key of the karyotype check configuration in the configuration YAML
CONFIG_KEY = "karyotype_check"

#: Variables of legacy platform files and the threshold they map to
PLATFORM_FILE_VARIABLES = {
    "XRat": "ratio_mean_x",
    "XVar": "tolerance_x",
    "YRat": "ratio_mean_y",
    "YVar": "tolerance_y",
}

#: Pattern for ``NAME=value`` assignments in legacy platform files
PATTERN_ASSIGNMENT = re.compile(r"""^\s*(?:export\s+)?(\w+)=(["']?)([^"'#]*)\2\s*(?:#.*)?$""")


class InvalidConfiguration(Exception):
    """Raised on invalid configuration"""


class MissingConfiguration(InvalidConfiguration):
    """Raised on missing configuration"""


class KaryotypeInputError(Exception):
    """Base class for errors in the inputs of a karyotype check

    These are fatal for the evaluation: no karyotype is rendered and no link is created.
    """


class MissingPlatformThresholds(KaryotypeInputError):
    """Raised when no calibration is known for a capture platform"""


def load_config(path: str) -> KaryotypeCheck:
    """Load karyotype check configuration from the YAML file at ``path``

    The configuration is either nested below ``karyotype_check`` or at the top level.
    """
    if not os.path.exists(path):
        raise MissingConfiguration("Configuration file {} does not exist".format(path))
    yaml = ruamel_yaml.YAML(typ="safe")
    try:
        with open(path, "rt") as f:
            data = yaml.load(f)
    except (OSError, UnicodeDecodeError, YAMLError) as e:
        raise InvalidConfiguration("Could not parse {}: {}".format(path, e)) from e
    data = data or {}
    if isinstance(data, dict) and CONFIG_KEY in data:
        data = data[CONFIG_KEY] or {}
    if not isinstance(data, dict):
        raise InvalidConfiguration("Configuration in {} must be a mapping".format(path))
    return validate_config(data)


def validate_config(config: dict[str, Any]) -> KaryotypeCheck:
    try:
        return KaryotypeCheck(**config)
    except pydantic.ValidationError as e:
        raise InvalidConfiguration("Invalid karyotype check configuration: {}".format(e)) from e


def load_platform_file(path: str) -> tuple[str, PlatformThresholds]:
    """Load a legacy platform file with shell variable assignments

    Such files define ``Plat`` (the platform name) and the ``XRat``, ``XVar``, ``YRat`` and
    ``YVar`` calibration values.  Returns the platform name and its thresholds.
    """
    if not os.path.exists(path):
        raise MissingPlatformThresholds("Platform file {} does not exist.".format(path))
    values = {}
    try:
        with open(path, "rt") as f:
            for line in f:
                m = PATTERN_ASSIGNMENT.match(line)
                if m:
                    values[m.group(1)] = m.group(3).strip()
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidConfiguration("Could not read platform file {}: {}".format(path, e)) from e
    missing = [name for name in PLATFORM_FILE_VARIABLES if not values.get(name)]
    if missing:
        raise InvalidConfiguration(
            "Platform file {} does not define {}".format(path, ", ".join(missing))
        )
    try:
        thresholds = PlatformThresholds(
            **{key: values[name] for name, key in PLATFORM_FILE_VARIABLES.items()}
        )
    except pydantic.ValidationError as e:
        raise InvalidConfiguration("Invalid platform file {}: {}".format(path, e)) from e
    return values.get("Plat") or os.path.basename(path), thresholds


def resolve_thresholds(config: KaryotypeCheck, platform: str) -> PlatformThresholds:
    """Return the thresholds for ``platform`` from ``config`` or raise"""
    thresholds = config.find_platform(platform)
    if thresholds is None:
        raise MissingPlatformThresholds(
            "No calibration configured for capture platform {}".format(platform)
        )
    return thresholds


def print_config(config: KaryotypeCheck, file=sys.stderr):
    """Print human-readable version of configuration to ``file``"""
    print("\nConfiguration", file=file)
    print("-------------\n", file=file)
    yaml = ruamel_yaml.YAML()
    return yaml.dump({CONFIG_KEY: config.model_dump(mode="json")}, stream=file)
