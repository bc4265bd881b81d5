"""Production Git implementation using subprocess."""

from pathlib import Path

from wrktr_shared.git.abc import Git, LocalBranch, parse_branch_list
from wrktr_shared.subprocess_utils import run_subprocess_with_context


class RealGit(Git):
    """Production implementation using subprocess."""

    def clone_bare(self, repo_url: str, dest: Path) -> None:
        run_subprocess_with_context(
            ["git", "clone", "--quiet", "--bare", repo_url, str(dest)],
            operation_context=f"clone {repo_url} into {dest}",
        )

    def set_config(self, repo_dir: Path, key: str, value: str) -> None:
        run_subprocess_with_context(
            ["git", "-C", str(repo_dir), "config", key, value],
            operation_context=f"set git config {key}",
        )

    def fetch(self, repo_dir: Path) -> None:
        run_subprocess_with_context(
            ["git", "-C", str(repo_dir), "fetch", "--quiet"],
            operation_context="fetch from remote",
        )

    def list_local_branches(self, repo_dir: Path) -> list[LocalBranch]:
        result = run_subprocess_with_context(
            ["git", "-C", str(repo_dir), "branch", "--list"],
            operation_context="list local branches",
        )
        return parse_branch_list(result.stdout)

    def delete_branch(self, repo_dir: Path, branch: str) -> None:
        run_subprocess_with_context(
            ["git", "-C", str(repo_dir), "branch", "-D", "--quiet", branch],
            operation_context=f"delete branch '{branch}'",
        )

    def add_worktree(self, repo_dir: Path, name: str) -> Path:
        run_subprocess_with_context(
            ["git", "-C", str(repo_dir), "worktree", "add", "--quiet", name],
            operation_context=f"add worktree '{name}'",
        )
        return repo_dir / name

    def set_upstream(self, worktree_dir: Path, upstream: str) -> None:
        run_subprocess_with_context(
            ["git", "-C", str(worktree_dir), "branch", "--quiet", "--set-upstream-to", upstream],
            operation_context=f"set upstream to {upstream}",
        )

    def restore_path(self, worktree_dir: Path, path: str) -> None:
        run_subprocess_with_context(
            ["git", "restore", "--", path],
            operation_context=f"restore {path}",
            cwd=worktree_dir,
        )
