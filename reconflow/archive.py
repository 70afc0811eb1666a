"""Backing up a workspace to a tarball and extracting it again."""

from __future__ import annotations

import logging
import os
import tarfile

logger = logging.getLogger(__name__)

SUFFIX = ".tar.gz"


def backup_workspace(output_dir, backup_folder, workspace: str) -> str:
    """Compress ``output_dir`` to ``<backup_folder>/<workspace>.tar.gz``, replacing any old one."""
    output_dir = os.path.expanduser(os.fspath(output_dir))
    if not os.path.isdir(output_dir):
        raise FileNotFoundError(f"workspace folder not found: {output_dir}")
    backup_folder = os.path.expanduser(os.fspath(backup_folder))
    os.makedirs(backup_folder, exist_ok=True)

    dest = os.path.join(backup_folder, workspace) + SUFFIX
    if os.path.isfile(dest):
        os.remove(dest)
    arcname = os.path.basename(os.path.normpath(output_dir))
    with tarfile.open(dest, "w:gz") as archive:
        archive.add(output_dir, arcname=arcname)
    logger.info("Backup workspace save at %s", dest)
    return dest


def _inside(root: str, path: str) -> bool:
    return os.path.commonpath([root, path]) == root


def _check_members(archive: tarfile.TarFile, root: str) -> None:
    for member in archive.getmembers():
        target = os.path.realpath(os.path.join(root, member.name))
        if not _inside(root, target):
            raise ValueError(f"unsafe path in archive: {member.name}")
        if member.issym() or member.islnk():
            base = root if member.islnk() else os.path.dirname(target)
            link = os.path.realpath(os.path.join(base, member.linkname))
            if not _inside(root, link):
                raise ValueError(f"unsafe link in archive: {member.name}")
        if member.isdev():
            raise ValueError(f"device file in archive: {member.name}")


def extract_backup(src, extract_folder) -> str:
    """Extract a workspace backup into ``extract_folder`` and return that folder."""
    src = os.path.expanduser(os.fspath(src))
    if not os.path.isfile(src):
        logger.error("Backup file not found: %s", src)
        raise FileNotFoundError(f"Backup file not found: {src}")

    target = os.path.basename(src).replace(SUFFIX, "")
    dest = os.path.realpath(os.path.expanduser(os.fspath(extract_folder)))
    os.makedirs(dest, exist_ok=True)
    with tarfile.open(src, "r:*") as archive:
        _check_members(archive, dest)
        archive.extractall(dest)
    logger.info("Extracting the %s to %s", target, dest)
    return dest