"""Create a new wrktr project: bare clone, shared directory, first worktree."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from wrktr_shared.git.abc import Git

from wrktr.core.manifest import CONFIG_FILE_NAME, render_initial_manifest
from wrktr.core.project_discovery import BARE_DIR_NAME, SHARED_DIR_NAME

logger = logging.getLogger(__name__)

MAIN_WORKTREE_NAME = "main"
FETCH_REFSPEC = "+refs/heads/*:refs/remotes/origin/*"
GITDIR_POINTER = "gitdir: ./.bare\n"


class ProjectInitError(Exception):
    """Raised when a project cannot be initialized."""


def initialize_project(
    git: Git,
    *,
    repo_url: str,
    project_dir: Path,
    emit: Callable[[str], None],
) -> Path:
    """Set up project_dir as a worktree-based checkout of repo_url.

    Steps run in order; a git failure stops the sequence and propagates as
    RuntimeError, leaving the steps already completed in place.

    Args:
        git: Git gateway
        repo_url: Repository to clone
        project_dir: Directory to create the project in
        emit: Callback receiving one progress line per step

    Returns:
        Path to the main worktree

    Raises:
        ProjectInitError: If project_dir already holds a bare repository or manifest
    """
    project_dir = project_dir.expanduser().resolve()
    bare_dir = project_dir / BARE_DIR_NAME
    config_path = project_dir / CONFIG_FILE_NAME
    if bare_dir.exists():
        raise ProjectInitError(f"bare repository already exists at {bare_dir}")
    if config_path.exists():
        raise ProjectInitError(f"{CONFIG_FILE_NAME} already exists at {config_path}")

    emit("creating project shared directory if needed...")
    (project_dir / SHARED_DIR_NAME).mkdir(parents=True, exist_ok=True)

    emit(f"cloning bare repository to {bare_dir}...")
    git.clone_bare(repo_url, bare_dir)

    emit("setting gitdir for project directory...")
    (project_dir / ".git").write_text(GITDIR_POINTER, encoding="utf-8")

    emit("configuring fetch remote...")
    git.set_config(project_dir, "remote.origin.fetch", FETCH_REFSPEC)

    emit("fetching...")
    git.fetch(project_dir)

    emit("cleanup local refs...")
    for branch in git.list_local_branches(project_dir):
        if branch.is_in_use:
            continue
        logger.debug("deleting local branch %s", branch.name)
        git.delete_branch(project_dir, branch.name)

    emit(f"creating {MAIN_WORKTREE_NAME} worktree...")
    main_worktree = git.add_worktree(project_dir, MAIN_WORKTREE_NAME)

    emit(f"setting {MAIN_WORKTREE_NAME} upstream...")
    git.set_upstream(main_worktree, f"origin/{MAIN_WORKTREE_NAME}")

    emit(f"creating initial {CONFIG_FILE_NAME}...")
    config_path.write_text(render_initial_manifest(), encoding="utf-8")

    return main_worktree
