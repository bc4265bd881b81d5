"""Read-only queries about how a worktree entry relates to its shared source.

Nothing here mutates the filesystem or caches results; every call looks at
the disk again.
"""

from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path

from wrktr.core.link_types import AssetCheck, LinkStatus
from wrktr.core.manifest import Asset, AssetKind
from wrktr.core.project_discovery import ProjectContext

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


def exists(project: ProjectContext, asset: Asset) -> bool:
    """True if anything is at the worktree path, including a broken symlink."""
    return os.path.lexists(project.worktree_path(asset.path))


def is_hardlinked(project: ProjectContext, asset: Asset) -> bool:
    """True if the worktree entry exists and its link count is above one.

    Only the link count is checked, not inode identity with the shared file.
    """
    path = project.worktree_path(asset.path)
    try:
        return path.lstat().st_nlink > 1
    except FileNotFoundError:
        return False


def is_softlinked(project: ProjectContext, asset: Asset) -> bool:
    """True if the worktree entry is a symbolic link; the target is not checked."""
    return project.worktree_path(asset.path).is_symlink()


def _hash_file(path: Path, digest: hashlib._Hash) -> None:
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)


def content_digest(path: Path) -> str | None:
    """SHA-256 of a file, or of a directory tree's relative paths and contents.

    Returns:
        Hex digest, or None if the path is missing or cannot be read
    """
    digest = hashlib.sha256()
    try:
        if path.is_file():
            _hash_file(path, digest)
        elif path.is_dir():
            for child in sorted(p for p in path.rglob("*") if p.is_file()):
                digest.update(child.relative_to(path).as_posix().encode("utf-8"))
                digest.update(b"\0")
                _hash_file(child, digest)
        else:
            return None
    except OSError as e:
        logger.debug("cannot read %s: %s", path, e)
        return None
    return digest.hexdigest()


def copy_matches(project: ProjectContext, asset: Asset) -> bool:
    """True if the worktree copy has the same content as the shared source.

    A missing or unreadable side counts as a mismatch.
    """
    shared = content_digest(project.shared_path(asset.path))
    local = content_digest(project.worktree_path(asset.path))
    return shared is not None and shared == local


def _negative_status(kind: AssetKind) -> LinkStatus:
    if kind is AssetKind.HARDLINK:
        return LinkStatus.NOT_HARDLINKED
    if kind is AssetKind.SOFTLINK:
        return LinkStatus.NOT_SOFTLINKED
    return LinkStatus.COPY_MISMATCH


def inspect_asset(project: ProjectContext, asset: Asset) -> AssetCheck:
    """Determine the current LinkStatus of one asset.

    Filesystem errors are recorded on the returned check instead of raised.
    """
    if not exists(project, asset):
        return AssetCheck(asset=asset, status=LinkStatus.MISSING)

    try:
        if asset.kind is AssetKind.HARDLINK:
            ok = is_hardlinked(project, asset)
        elif asset.kind is AssetKind.SOFTLINK:
            ok = is_softlinked(project, asset)
        else:
            ok = copy_matches(project, asset)
    except OSError as e:
        logger.debug("inspection of %s failed: %s", asset.path, e)
        return AssetCheck(asset=asset, status=_negative_status(asset.kind), error=str(e))

    if not ok:
        return AssetCheck(asset=asset, status=_negative_status(asset.kind))
    if asset.kind is AssetKind.HARDLINK:
        return AssetCheck(asset=asset, status=LinkStatus.HARDLINKED)
    if asset.kind is AssetKind.SOFTLINK:
        return AssetCheck(asset=asset, status=LinkStatus.SOFTLINKED)
    return AssetCheck(asset=asset, status=LinkStatus.COPY_MATCHES)
