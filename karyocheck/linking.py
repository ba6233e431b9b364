# -*- coding: utf-8 -*-
"""Hard-linking of BAM files (and their indices) into the next pipeline stage

Linking is idempotent: a destination that already is a hard link of the source is left
alone.  A destination that exists but refers to different data is only replaced when this is
requested explicitly.
"""

import enum
import logging
import os

import attr

logger = logging.getLogger(__name__)


class LinkStatus(enum.StrEnum):
    CREATED = "created"
    ALREADY_LINKED = "already linked"
    REPLACED = "replaced"


class LinkError(Exception):
    """Base class for errors when linking files"""


class MissingLinkSource(LinkError):
    """Raised when the file to link does not exist"""


class LinkTargetExists(LinkError):
    """Raised when the destination exists and is not linked to the source"""


class LinkFailed(LinkError):
    """Raised when the file system refuses to create the link"""


def is_same_file(source: str, dest: str) -> bool:
    """Whether ``dest`` (not following symlinks) shares its inode with ``source``"""
    src_stat = os.stat(source)
    dest_stat = os.lstat(dest)
    return (src_stat.st_dev, src_stat.st_ino) == (dest_stat.st_dev, dest_stat.st_ino)


def hard_link(source: str, dest: str, overwrite: bool = False) -> LinkStatus:
    """Hard-link ``source`` to ``dest``, creating the destination directory if necessary

    Raise ``LinkTargetExists`` if ``dest`` exists, is not linked to ``source`` and
    ``overwrite`` is not set.
    """
    if not os.path.isfile(source):
        raise MissingLinkSource("Source file {} doesn't exist!".format(source))

    dest_dir = os.path.dirname(dest) or "."
    try:
        os.makedirs(dest_dir, exist_ok=True)
    except OSError as e:
        raise LinkFailed(
            "Unable to create {} folder {}. Please check folder permissions.".format(
                dest, dest_dir
            )
        ) from e

    status = LinkStatus.CREATED
    if os.path.lexists(dest):
        if is_same_file(source, dest):
            logger.info("%s is already hard linked to %s", dest, source)
            return LinkStatus.ALREADY_LINKED
        elif os.path.isdir(dest) and not os.path.islink(dest):
            raise LinkTargetExists("{} already exists and is a directory".format(dest))
        elif not overwrite:
            raise LinkTargetExists(
                "{} already exists but is not linked to {}".format(dest, source)
            )
        logger.warning("%s already exists but is not linked to %s, replacing", dest, source)
        try:
            os.unlink(dest)
        except OSError as e:
            raise LinkFailed("Unable to delete {}. Check permissions.".format(dest)) from e
        status = LinkStatus.REPLACED

    try:
        os.link(source, dest)
    except OSError as e:
        raise LinkFailed(
            "Unable to hard link {} to {}. Check permissions. Links cannot be made across "
            "file systems.".format(source, dest)
        ) from e
    logger.info("%s hard linked to %s", source, dest)
    return status


@attr.s(frozen=True, auto_attribs=True)
class LinkRequest:
    """Source and destination of a BAM file and its index."""

    source_bam: str
    source_bai: str
    dest_bam: str
    dest_bai: str

    @classmethod
    def from_bam(cls, source_bam: str, dest_bam: str) -> "LinkRequest":
        """Build request with indices named ``<bam>.bai``"""
        return cls(source_bam, source_bam + ".bai", dest_bam, dest_bam + ".bai")


def link_bam_pair(request: LinkRequest, overwrite: bool = False) -> tuple[LinkStatus, LinkStatus]:
    """Hard-link BAM file and index, the BAM file first"""
    for path in (request.source_bam, request.source_bai):
        if not os.path.isfile(path):
            raise MissingLinkSource("Source file {} doesn't exist!".format(path))
    bam_status = hard_link(request.source_bam, request.dest_bam, overwrite=overwrite)
    bai_status = hard_link(request.source_bai, request.dest_bai, overwrite=overwrite)
    return bam_status, bai_status
