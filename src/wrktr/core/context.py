"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from wrktr_shared.git.abc import Git
from wrktr_shared.git.real import RealGit


@dataclass(frozen=True)
class WrktrContext:
    """Immutable context holding all dependencies for wrktr operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    cwd: Path  # Current working directory at CLI invocation

    @staticmethod
    def for_test(git: Git | None = None, cwd: Path | None = None) -> "WrktrContext":
        """Create a context for tests, defaulting to FakeGit and the process cwd."""
        from wrktr_shared.git.fake import FakeGit

        return WrktrContext(
            git=git if git is not None else FakeGit(),
            cwd=cwd if cwd is not None else Path.cwd(),
        )


def create_context() -> WrktrContext:
    """Create the production context used by the `wrktr` console script."""
    return WrktrContext(git=RealGit(), cwd=Path.cwd())
