"""Bring a worktree's shared-asset links into agreement with the manifest.

`link_worktree` creates what is missing and refreshes copies; `cleanup_worktree`
removes the worktree-side entries again. Both process assets one at a time in
manifest order (hardlinks, softlinks, then copies), record a per-asset
outcome instead of aborting on filesystem errors, and finish with a fresh
inspection of the worktree.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from wrktr_shared.git.abc import Git

from wrktr.core.inspector import exists
from wrktr.core.manifest import Asset, AssetKind, Manifest
from wrktr.core.project_discovery import ProjectContext
from wrktr.core.status_report import StatusReport, check_worktree

logger = logging.getLogger(__name__)


class AssetAction(Enum):
    """What the engine did with one asset."""

    CREATED = "created"
    SKIPPED_EXISTING = "skipped_existing"
    COPIED = "copied"
    REMOVED = "removed"
    RESTORED = "restored"
    ALREADY_ABSENT = "already_absent"
    FAILED = "failed"


@dataclass(frozen=True)
class AssetOutcome:
    asset: Asset
    action: AssetAction
    error: str | None = None


@dataclass(frozen=True)
class ReconcileReport:
    """Mutation outcomes plus the worktree status observed afterwards."""

    worktree_dir: Path
    outcomes: tuple[AssetOutcome, ...]
    status: StatusReport

    @property
    def failures(self) -> tuple[AssetOutcome, ...]:
        return tuple(o for o in self.outcomes if o.action is AssetAction.FAILED)


def _describe_os_error(e: OSError, source: Path) -> str:
    if e.errno == errno.EXDEV:
        return f"cannot hardlink across filesystems: {source}"
    if isinstance(e, FileNotFoundError):
        return f"shared source not found: {source}"
    return str(e)


def _ensure_parent(dest: Path) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)


def _escaped_parent(project: ProjectContext, asset: Asset) -> AssetOutcome | None:
    """FAILED outcome when a symlinked parent leads the destination out of the worktree."""
    parent = project.worktree_path(asset.path).parent.resolve()
    if parent.is_relative_to(project.worktree_dir):
        return None
    message = f"parent directory resolves outside the worktree: {parent}"
    logger.debug("refusing to touch %s: %s", asset.path, message)
    return AssetOutcome(asset=asset, action=AssetAction.FAILED, error=message)


def _create_link(project: ProjectContext, asset: Asset) -> AssetOutcome:
    source = project.shared_path(asset.path)
    dest = project.worktree_path(asset.path)

    if exists(project, asset):
        logger.debug("skipping %s: destination already exists", dest)
        return AssetOutcome(asset=asset, action=AssetAction.SKIPPED_EXISTING)
    escaped = _escaped_parent(project, asset)
    if escaped is not None:
        return escaped

    try:
        if not os.path.lexists(source):
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(source))
        _ensure_parent(dest)
        if asset.kind is AssetKind.HARDLINK:
            os.link(source, dest, follow_symlinks=False)
        else:
            os.symlink(source, dest, target_is_directory=source.is_dir())
    except OSError as e:
        message = _describe_os_error(e, source)
        logger.debug("failed to %s %s: %s", asset.kind.value, asset.path, message)
        return AssetOutcome(asset=asset, action=AssetAction.FAILED, error=message)

    logger.debug("%s %s -> %s", asset.kind.value, dest, source)
    return AssetOutcome(asset=asset, action=AssetAction.CREATED)


def _copy_file_replacing(source: Path, dest: Path) -> None:
    """Copy source over dest by renaming a temporary sibling into place.

    The rename replaces the directory entry, so a dest that is hardlinked or
    symlinked to shared content never has that content overwritten.
    """
    tmp = dest.with_name(f".{dest.name}.wrktr-tmp")
    tmp.unlink(missing_ok=True)
    try:
        shutil.copy2(source, tmp)
        os.replace(tmp, dest)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def _create_copy(project: ProjectContext, asset: Asset) -> AssetOutcome:
    source = project.shared_path(asset.path)
    dest = project.worktree_path(asset.path)
    escaped = _escaped_parent(project, asset)
    if escaped is not None:
        return escaped

    try:
        if not source.exists():
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(source))
        _ensure_parent(dest)
        if source.is_dir():
            if dest.is_dir() and not dest.is_symlink():
                shutil.rmtree(dest)
            elif os.path.lexists(dest):
                dest.unlink()
            shutil.copytree(source, dest, symlinks=True)
        else:
            if dest.is_dir() and not dest.is_symlink():
                raise IsADirectoryError(
                    errno.EISDIR, "destination is a directory", str(dest)
                )
            _copy_file_replacing(source, dest)
    except OSError as e:
        message = _describe_os_error(e, source)
        logger.debug("failed to copy %s: %s", asset.path, message)
        return AssetOutcome(asset=asset, action=AssetAction.FAILED, error=message)

    logger.debug("copied %s -> %s", source, dest)
    return AssetOutcome(asset=asset, action=AssetAction.COPIED)


def link_worktree(project: ProjectContext, manifest: Manifest) -> ReconcileReport:
    """Create missing links and refresh copies in the target worktree.

    Existing hardlink/softlink destinations are never replaced. Copy assets
    are always overwritten from the shared directory. Running this twice
    leaves the same state as running it once.
    """
    outcomes: list[AssetOutcome] = []
    for asset in manifest.hardlink_assets:
        outcomes.append(_create_link(project, asset))
    for asset in manifest.softlink_assets:
        outcomes.append(_create_link(project, asset))
    for asset in manifest.copy_assets:
        outcomes.append(_create_copy(project, asset))

    return ReconcileReport(
        worktree_dir=project.worktree_dir,
        outcomes=tuple(outcomes),
        status=check_worktree(project, manifest),
    )


def _remove_link(project: ProjectContext, asset: Asset) -> AssetOutcome:
    dest = project.worktree_path(asset.path)
    if not exists(project, asset):
        return AssetOutcome(asset=asset, action=AssetAction.ALREADY_ABSENT)
    escaped = _escaped_parent(project, asset)
    if escaped is not None:
        return escaped
    try:
        # Removes the worktree entry only; a symlink is not followed
        os.unlink(dest)
    except OSError as e:
        logger.debug("failed to remove %s: %s", dest, e)
        return AssetOutcome(asset=asset, action=AssetAction.FAILED, error=str(e))
    logger.debug("removed %s", dest)
    return AssetOutcome(asset=asset, action=AssetAction.REMOVED)


def _restore_copy(project: ProjectContext, asset: Asset, git: Git) -> AssetOutcome:
    if not exists(project, asset):
        return AssetOutcome(asset=asset, action=AssetAction.ALREADY_ABSENT)
    escaped = _escaped_parent(project, asset)
    if escaped is not None:
        return escaped
    try:
        git.restore_path(project.worktree_dir, asset.path)
    except RuntimeError as e:
        logger.debug("failed to restore %s: %s", asset.path, e)
        return AssetOutcome(asset=asset, action=AssetAction.FAILED, error=str(e))
    logger.debug("restored %s", asset.path)
    return AssetOutcome(asset=asset, action=AssetAction.RESTORED)


def cleanup_worktree(project: ProjectContext, manifest: Manifest, git: Git) -> ReconcileReport:
    """Remove link entries and restore copies to their committed content.

    Shared content is never deleted. Copy assets are assumed to be tracked by
    git and are restored through `git` instead of being deleted.
    """
    outcomes: list[AssetOutcome] = []
    for asset in manifest.hardlink_assets:
        outcomes.append(_remove_link(project, asset))
    for asset in manifest.softlink_assets:
        outcomes.append(_remove_link(project, asset))
    for asset in manifest.copy_assets:
        outcomes.append(_restore_copy(project, asset, git))

    return ReconcileReport(
        worktree_dir=project.worktree_dir,
        outcomes=tuple(outcomes),
        status=check_worktree(project, manifest),
    )
