"""Git operations integration."""

from wrktr_shared.git.abc import Git, LocalBranch
from wrktr_shared.git.fake import FakeGit
from wrktr_shared.git.real import RealGit

__all__ = [
    "FakeGit",
    "Git",
    "LocalBranch",
    "RealGit",
]
