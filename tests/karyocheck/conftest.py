# -*- coding: utf-8 -*-
"""Shared fixtures for the karyocheck unit tests"""

from collections import namedtuple

from pyfakefs import fake_filesystem
import pytest

from karyocheck.models.platform import PlatformThresholds
from karyocheck.models.sample import DeclaredMetadata


@pytest.fixture
def fake_fs():
    """Return ``namedtuple`` with fake file system objects"""
    klass = namedtuple("FakeFsBundle", "fs os open")
    fake_fs = fake_filesystem.FakeFilesystem()
    fake_os = fake_filesystem.FakeOsModule(fake_fs)
    fake_open = fake_filesystem.FakeFileOpen(fake_fs)
    return klass(fs=fake_fs, os=fake_os, open=fake_open)


@pytest.fixture
def thresholds():
    """Thresholds with single-copy ratio 0.5 and tolerance 0.15 for both X and Y"""
    return PlatformThresholds(
        ratio_mean_x=0.5, tolerance_x=0.15, ratio_mean_y=0.5, tolerance_y=0.15
    )


@pytest.fixture
def female_xx():
    return DeclaredMetadata(gender="2", sex_chromosomes="XX")


@pytest.fixture
def gatk_doc_summary():
    """Return function to build the contents of a GATK DepthOfCoverage sample summary"""

    def build(mean):
        return (
            "sample_id\ttotal\tmean\tgranular_third_quartile\tgranular_median\n"
            "P001\t{total}\t{mean}\t50\t40\n"
            "Total\t{total}\t{mean}\tN/A\tN/A\n"
        ).format(total=1000, mean=mean)

    return build
