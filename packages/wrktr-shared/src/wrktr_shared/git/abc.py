"""Abstract interface for the git operations wrktr depends on.

wrktr never manipulates repository state itself. Cloning, branch cleanup,
worktree creation and restoring tracked files all go through this gateway
so the link engine can be tested without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LocalBranch:
    """A local branch as listed by `git branch --list`.

    Attributes:
        name: Branch name
        is_current: Branch is checked out in the directory that was queried (`*`)
        is_checked_out: Branch is checked out in another worktree (`+`)
    """

    name: str
    is_current: bool = False
    is_checked_out: bool = False

    @property
    def is_in_use(self) -> bool:
        return self.is_current or self.is_checked_out


def parse_branch_list(output: str) -> list[LocalBranch]:
    """Parse `git branch --list` output into LocalBranch records."""
    branches: list[LocalBranch] = []
    for raw_line in output.splitlines():
        if not raw_line.strip():
            continue
        marker = raw_line[:2]
        name = raw_line[2:].strip()
        if name.startswith("("):
            # "(HEAD detached at ...)" is not a branch
            continue
        branches.append(
            LocalBranch(
                name=name,
                is_current=marker.startswith("*"),
                is_checked_out=marker.startswith("+"),
            )
        )
    return branches


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def clone_bare(self, repo_url: str, dest: Path) -> None:
        """Clone a repository as a bare repository into dest."""
        ...

    @abstractmethod
    def set_config(self, repo_dir: Path, key: str, value: str) -> None:
        """Set a repository-local git config value."""
        ...

    @abstractmethod
    def fetch(self, repo_dir: Path) -> None:
        """Fetch from the default remote."""
        ...

    @abstractmethod
    def list_local_branches(self, repo_dir: Path) -> list[LocalBranch]:
        """List local branches with their checkout markers."""
        ...

    @abstractmethod
    def delete_branch(self, repo_dir: Path, branch: str) -> None:
        """Force-delete a local branch."""
        ...

    @abstractmethod
    def add_worktree(self, repo_dir: Path, name: str) -> Path:
        """Create a worktree named `name` inside repo_dir.

        Returns:
            Path to the new worktree directory
        """
        ...

    @abstractmethod
    def set_upstream(self, worktree_dir: Path, upstream: str) -> None:
        """Set the upstream of the branch checked out in worktree_dir."""
        ...

    @abstractmethod
    def restore_path(self, worktree_dir: Path, path: str) -> None:
        """Restore a tracked path to its last committed content.

        Args:
            worktree_dir: Worktree containing the path
            path: Path relative to worktree_dir
        """
        ...
