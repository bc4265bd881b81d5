"""Locate the wrktr project and target worktree from the working directory.

A project root contains the `.SHARED` directory. A worktree member contains a
git linkage marker (`.git` file or directory) and sits directly inside a
project root. Every worktree-scoped command resolves a ProjectContext once and
passes it explicitly to the inspector and the reconciliation engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath

from wrktr.core.manifest import CONFIG_FILE_NAME

logger = logging.getLogger(__name__)

SHARED_DIR_NAME = ".SHARED"
GIT_MARKER_NAME = ".git"
BARE_DIR_NAME = ".bare"


class ProjectDiscoveryError(Exception):
    """Raised when the project or target worktree cannot be resolved."""


class Placement(Enum):
    """Where the current directory sits within a wrktr project."""

    PROJECT_ROOT = "project"
    WORKTREE_MEMBER = "worktree"
    UNCLASSIFIED = "unknown"


@dataclass(frozen=True)
class ProjectContext:
    """Resolved absolute paths for one invocation.

    Attributes:
        project_root: Directory containing `.SHARED`, `wrktr.conf` and the worktrees
        shared_dir: `project_root/.SHARED`, owner of all asset content
        worktree_dir: Worktree whose links are inspected or reconciled
    """

    project_root: Path
    shared_dir: Path
    worktree_dir: Path

    @property
    def config_path(self) -> Path:
        return self.project_root / CONFIG_FILE_NAME

    def shared_path(self, relative: str) -> Path:
        return self.shared_dir / relative

    def worktree_path(self, relative: str) -> Path:
        return self.worktree_dir / relative


def classify_directory(cwd: Path) -> Placement:
    """Classify cwd as project root, worktree member, or neither.

    The project root test runs first, so a directory that has both `.SHARED`
    and a `.git` marker is a project root.
    """
    if (cwd / SHARED_DIR_NAME).is_dir():
        return Placement.PROJECT_ROOT
    if (cwd / GIT_MARKER_NAME).exists() and (cwd.parent / SHARED_DIR_NAME).is_dir():
        return Placement.WORKTREE_MEMBER
    return Placement.UNCLASSIFIED


def _validate_worktree_name(name: str) -> None:
    """Reject names that would escape the project root."""
    if not name.strip():
        raise ProjectDiscoveryError("worktree name must not be empty")
    pure = PurePath(name)
    if pure.is_absolute():
        raise ProjectDiscoveryError(
            f"worktree name must be relative to the project root: {name}"
        )
    if ".." in pure.parts:
        raise ProjectDiscoveryError(
            f"worktree name must not contain '..': {name}"
        )
    if str(pure) == ".":
        raise ProjectDiscoveryError("worktree name must not refer to the project root itself")


def resolve_project_context(cwd: Path, worktree_name: str | None) -> ProjectContext:
    """Resolve the project and target worktree for a worktree-scoped command.

    Args:
        cwd: Directory the command was invoked from
        worktree_name: Worktree directory name, required at the project root and
            ignored inside a worktree

    Returns:
        ProjectContext whose shared_dir and worktree_dir both exist

    Raises:
        ProjectDiscoveryError: If cwd is not inside a wrktr project, the worktree
            name is missing or invalid, or the target worktree does not exist
    """
    cwd = cwd.resolve()
    placement = classify_directory(cwd)
    logger.debug("classified %s as %s", cwd, placement.value)

    if placement is Placement.PROJECT_ROOT:
        if worktree_name is None:
            raise ProjectDiscoveryError(
                "a worktree name is required when running from the project root"
            )
        _validate_worktree_name(worktree_name)
        project_root = cwd
        worktree_dir = project_root / worktree_name
    elif placement is Placement.WORKTREE_MEMBER:
        if worktree_name is not None:
            logger.debug("inside worktree %s; ignoring argument %r", cwd, worktree_name)
        project_root = cwd.parent
        worktree_dir = cwd
    else:
        raise ProjectDiscoveryError(
            "neither a worktree project nor worktree; "
            "run `wrktr init [repo-url] [project-directory]`"
        )

    shared_dir = project_root / SHARED_DIR_NAME
    if not shared_dir.is_dir():
        raise ProjectDiscoveryError(f"shared directory not found: {shared_dir}")
    if not worktree_dir.is_dir():
        raise ProjectDiscoveryError(f"target worktree not found: {worktree_dir}")

    worktree_dir = worktree_dir.resolve()
    if worktree_dir == project_root:
        raise ProjectDiscoveryError("target worktree must not be the project root itself")
    resolved_shared = shared_dir.resolve()
    if worktree_dir.is_relative_to(resolved_shared):
        raise ProjectDiscoveryError(
            f"target worktree must not be inside the shared directory: {worktree_dir}"
        )
    if worktree_dir == (project_root / BARE_DIR_NAME).resolve():
        raise ProjectDiscoveryError(
            f"target worktree must not be the bare repository: {worktree_dir}"
        )

    return ProjectContext(
        project_root=project_root,
        shared_dir=shared_dir,
        worktree_dir=worktree_dir,
    )
