#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Installation driver (and development utility entry point) for karyocheck
"""

import os
import sys

from setuptools import find_packages, setup


def parse_requirements(path):
    """Parse ``requirements.txt`` at ``path``."""
    requirements = []
    with open(path, "rt") as reqs_f:
        for line in reqs_f:
            line = line.strip()
            if line.startswith("-r"):
                fname = line.split()[1]
                inner_path = os.path.join(os.path.dirname(path), fname)
                requirements += parse_requirements(inner_path)
            elif line != "" and not line.startswith("#"):
                requirements.append(line)
    return requirements


# Enforce python version >=3.11
if sys.version_info < (3, 11):
    print("At least Python 3.11 is required.\n", file=sys.stderr)
    sys.exit(1)

with open("README.md") as readme_file:
    readme = readme_file.read()

with open("CHANGELOG.md") as history_file:
    history = history_file.read()

# Get requirements
requirements = parse_requirements("requirements/base.txt")

test_requirements = parse_requirements("requirements/test.txt")

# Name of the apps
APPS = ("gender", "link", "default_config")

# Name of the tools
TOOLS = ("vcf_fingerprint",)


def console_scripts_entry_points(names, module):
    """Yield entries for the 'console_scripts' entry points"""
    prefix = "karyocheck"
    for name in names:
        if module == "apps":
            yield "{prefix}-{dashed} = karyocheck.apps.karyocheck_{name}:main".format(
                prefix=prefix, dashed=name.replace("_", "-"), name=name
            )
        elif module == "tools":
            yield "{prefix}-{dashed} = karyocheck.tools.{name}:main".format(
                prefix=prefix, dashed=name.replace("_", "-"), name=name
            )


package_root = os.path.abspath(os.path.dirname(__file__))

version = {}
with open(os.path.join(package_root, "karyocheck/_version.py")) as fp:
    exec(fp.read(), version)
version = version["__version__"]

setup(
    name="karyocheck",
    version=version,
    description="Chromosomal sex inference and sample gating for NGS pipelines",
    long_description=readme + "\n\n" + history,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "tests.*")),
    entry_points={
        "console_scripts": list(console_scripts_entry_points(APPS, "apps"))
        + list(console_scripts_entry_points(TOOLS, "tools"))
    },
    include_package_data=True,
    install_requires=requirements,
    extras_require={"test": test_requirements},
    python_requires=">=3.11",
    license="MIT license",
    zip_safe=False,
    keywords="bioinformatics",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    test_suite="tests",
)
