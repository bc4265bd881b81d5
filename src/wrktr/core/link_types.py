"""Types shared by the link inspector, status reporter and engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wrktr.core.manifest import Asset


class LinkStatus(Enum):
    """Observed state of one asset in one worktree."""

    MISSING = "missing"
    HARDLINKED = "hardlinked"
    NOT_HARDLINKED = "not_hardlinked"
    SOFTLINKED = "softlinked"
    NOT_SOFTLINKED = "not_softlinked"
    COPY_MATCHES = "copy_matches"
    COPY_MISMATCH = "copy_mismatch"

    @property
    def is_ok(self) -> bool:
        return self in (LinkStatus.HARDLINKED, LinkStatus.SOFTLINKED, LinkStatus.COPY_MATCHES)


@dataclass(frozen=True)
class AssetCheck:
    """Result of inspecting one asset.

    Attributes:
        asset: The inspected asset
        status: Observed link status
        error: Filesystem error encountered while inspecting, if any
    """

    asset: Asset
    status: LinkStatus
    error: str | None = None
