"""Fake git operations for testing."""

from pathlib import Path

from wrktr_shared.git.abc import Git, LocalBranch


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    - branches: dict[Path, list[LocalBranch]] - Mapping of repo_dir -> local branches
    - committed_contents: dict[Path, str] - Committed content of tracked files,
      keyed by absolute path; restore_path() writes it back to disk
    - failing_restores: set[Path] - Absolute paths whose restore raises RuntimeError

    Mutation Tracking:
    - cloned: list[tuple[str, Path]]
    - config_values: dict[tuple[Path, str], str]
    - fetched: list[Path]
    - deleted_branches: list[str]
    - added_worktrees: list[Path]
    - upstreams: dict[Path, str]
    - restored_paths: list[Path]
    """

    def __init__(
        self,
        *,
        branches: dict[Path, list[LocalBranch]] | None = None,
        committed_contents: dict[Path, str] | None = None,
        failing_restores: set[Path] | None = None,
    ) -> None:
        self._branches = branches or {}
        self._committed_contents = committed_contents or {}
        self._failing_restores = failing_restores or set()

        self._cloned: list[tuple[str, Path]] = []
        self._config_values: dict[tuple[Path, str], str] = {}
        self._fetched: list[Path] = []
        self._deleted_branches: list[str] = []
        self._added_worktrees: list[Path] = []
        self._upstreams: dict[Path, str] = {}
        self._restored_paths: list[Path] = []

    def clone_bare(self, repo_url: str, dest: Path) -> None:
        """Record the clone and create the destination directory."""
        dest.mkdir(parents=True, exist_ok=True)
        self._cloned.append((repo_url, dest))

    def set_config(self, repo_dir: Path, key: str, value: str) -> None:
        self._config_values[(repo_dir, key)] = value

    def fetch(self, repo_dir: Path) -> None:
        self._fetched.append(repo_dir)

    def list_local_branches(self, repo_dir: Path) -> list[LocalBranch]:
        return list(self._branches.get(repo_dir, []))

    def delete_branch(self, repo_dir: Path, branch: str) -> None:
        if repo_dir in self._branches:
            self._branches[repo_dir] = [b for b in self._branches[repo_dir] if b.name != branch]
        self._deleted_branches.append(branch)

    def add_worktree(self, repo_dir: Path, name: str) -> Path:
        """Record the worktree and create its directory with a `.git` marker file."""
        path = repo_dir / name
        path.mkdir(parents=True, exist_ok=True)
        (path / ".git").write_text(f"gitdir: ../.bare/worktrees/{name}\n", encoding="utf-8")
        self._added_worktrees.append(path)
        return path

    def set_upstream(self, worktree_dir: Path, upstream: str) -> None:
        self._upstreams[worktree_dir] = upstream

    def restore_path(self, worktree_dir: Path, path: str) -> None:
        """Write the committed content back over the working copy.

        Raises RuntimeError for paths without committed content, matching
        `git restore` on an untracked path.
        """
        target = worktree_dir / path
        if target in self._failing_restores or target not in self._committed_contents:
            raise RuntimeError(f"Failed to restore {path}: pathspec did not match any file(s)")
        if target.is_symlink():
            target.unlink()
        target.write_text(self._committed_contents[target], encoding="utf-8")
        self._restored_paths.append(target)

    # Read-only properties for test assertions
    @property
    def cloned(self) -> list[tuple[str, Path]]:
        return self._cloned.copy()

    @property
    def config_values(self) -> dict[tuple[Path, str], str]:
        return self._config_values.copy()

    @property
    def fetched(self) -> list[Path]:
        return self._fetched.copy()

    @property
    def deleted_branches(self) -> list[str]:
        return self._deleted_branches.copy()

    @property
    def added_worktrees(self) -> list[Path]:
        return self._added_worktrees.copy()

    @property
    def upstreams(self) -> dict[Path, str]:
        return self._upstreams.copy()

    @property
    def restored_paths(self) -> list[Path]:
        return self._restored_paths.copy()
