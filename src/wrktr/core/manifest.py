"""Asset manifest: which paths are hardlinked, softlinked or copied.

The manifest lives in `wrktr.conf` at the project root and uses a small
shell-array syntax:

    # individual gitignored files
    hardlink_assets=(
      "CLAUDE.local.md"
      ".claude/settings.local.json"
    )
    softlink_assets=(".claude/commands")
    copy_assets=()

The file is parsed, never executed. A `#` starts a comment even in the
middle of an unquoted word, so a path containing `#` must be quoted.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "wrktr.conf"

_PUNCTUATION = "=()"


class ManifestError(Exception):
    """Raised when the manifest is missing or cannot be parsed."""


class AssetKind(Enum):
    """How an asset is placed into a worktree."""

    HARDLINK = "hardlink"
    SOFTLINK = "softlink"
    COPY = "copy"

    @property
    def list_name(self) -> str:
        """Name of the manifest list declaring assets of this kind."""
        return f"{self.value}_assets"


@dataclass(frozen=True)
class Asset:
    """A path relative to both the shared directory and the worktree root."""

    path: str
    kind: AssetKind


@dataclass(frozen=True)
class Manifest:
    """Declared assets, one ordered tuple per kind."""

    hardlink_assets: tuple[Asset, ...] = ()
    softlink_assets: tuple[Asset, ...] = ()
    copy_assets: tuple[Asset, ...] = ()

    def for_kind(self, kind: AssetKind) -> tuple[Asset, ...]:
        if kind is AssetKind.HARDLINK:
            return self.hardlink_assets
        if kind is AssetKind.SOFTLINK:
            return self.softlink_assets
        return self.copy_assets

    @property
    def assets(self) -> tuple[Asset, ...]:
        """All assets in pass order: hardlinks, softlinks, then copies."""
        return self.hardlink_assets + self.softlink_assets + self.copy_assets


@dataclass(frozen=True)
class ManifestParseResult:
    manifest: Manifest
    warnings: tuple[str, ...] = field(default_factory=tuple)


def _tokens(text: str) -> list[tuple[str, int]]:
    """Split manifest text into (token, line number) pairs.

    Runs of punctuation such as `=(` are split into single characters.
    """
    lexer = shlex.shlex(text, posix=True, punctuation_chars=_PUNCTUATION)
    lexer.commenters = "#"
    lexer.whitespace_split = True
    tokens: list[tuple[str, int]] = []
    try:
        while True:
            line = lexer.lineno
            token = lexer.get_token()
            if token is None:
                break
            if token and all(ch in _PUNCTUATION for ch in token):
                tokens.extend((ch, line) for ch in token)
            else:
                tokens.append((token, line))
    except ValueError as e:
        raise ManifestError(f"near line {lexer.lineno}: {e}") from e
    return tokens


def _read_declarations(text: str) -> tuple[dict[str, list[str]], list[str]]:
    """Read `name=( ... )` and `name=value` declarations in file order.

    Returns:
        Tuple of (list declarations by name, names of scalar declarations)
    """
    tokens = _tokens(text)
    lists: dict[str, list[str]] = {}
    scalars: list[str] = []
    index = 0
    while index < len(tokens):
        name, line = tokens[index]
        if index + 1 >= len(tokens) or tokens[index + 1][0] != "=" or not name.isidentifier():
            raise ManifestError(f"near line {line}: expected '<name>=(...)', found {name!r}")
        index += 2
        if index < len(tokens) and tokens[index][0] == "(":
            index += 1
            values: list[str] = []
            while True:
                if index >= len(tokens):
                    raise ManifestError(f"near line {line}: unterminated list for {name!r}")
                value, value_line = tokens[index]
                index += 1
                if value == ")":
                    break
                if value in ("(", "="):
                    raise ManifestError(
                        f"near line {value_line}: unexpected {value!r} in {name!r}"
                    )
                values.append(value)
            if name in lists:
                raise ManifestError(f"near line {line}: {name!r} is declared more than once")
            lists[name] = values
            continue

        # `name=` or `name=value`: a value is present unless the next token
        # starts another declaration
        has_value = (
            index < len(tokens)
            and tokens[index][0] not in _PUNCTUATION
            and (index + 1 >= len(tokens) or tokens[index + 1][0] != "=")
        )
        if has_value:
            index += 1
        scalars.append(name)
    return lists, scalars


def _validate_path(path: str, kind: AssetKind) -> str:
    if not path.strip():
        raise ManifestError(f"{kind.list_name}: empty path")
    pure = PurePosixPath(path)
    if pure.is_absolute():
        raise ManifestError(f"{kind.list_name}: path must be relative: {path}")
    if ".." in pure.parts:
        raise ManifestError(f"{kind.list_name}: path must not contain '..': {path}")
    normalized = str(pure)
    if normalized == ".":
        raise ManifestError(f"{kind.list_name}: path must name a file or directory: {path}")
    return normalized


def parse_manifest(text: str) -> ManifestParseResult:
    """Parse manifest text into a validated Manifest.

    Args:
        text: Contents of `wrktr.conf`

    Returns:
        ManifestParseResult with the manifest and any non-fatal warnings
        (unset asset lists, unrecognized keys)

    Raises:
        ManifestError: On malformed syntax, invalid paths, or a path declared
            more than once
    """
    lists, scalars = _read_declarations(text)
    known = {kind.list_name for kind in AssetKind}
    warnings: list[str] = []

    for name in list(lists) + scalars:
        if name not in known:
            warnings.append(f"unrecognized key {name!r} ignored")
    for name in scalars:
        if name in known:
            warnings.append(f"{name} is not a list; treated as empty")

    declared: dict[str, AssetKind] = {}
    by_kind: dict[AssetKind, tuple[Asset, ...]] = {}
    for kind in AssetKind:
        if kind.list_name not in lists:
            if kind.list_name not in scalars:
                warnings.append(f"{kind.list_name} is unset")
            by_kind[kind] = ()
            continue
        assets: list[Asset] = []
        for raw in lists[kind.list_name]:
            path = _validate_path(raw, kind)
            if path in declared:
                previous = declared[path]
                raise ManifestError(
                    f"{path} is declared in both {previous.list_name} and {kind.list_name}"
                    if previous is not kind
                    else f"{path} is declared more than once in {kind.list_name}"
                )
            declared[path] = kind
            assets.append(Asset(path=path, kind=kind))
        by_kind[kind] = tuple(assets)

    for warning in warnings:
        logger.debug("manifest warning: %s", warning)

    return ManifestParseResult(
        manifest=Manifest(
            hardlink_assets=by_kind[AssetKind.HARDLINK],
            softlink_assets=by_kind[AssetKind.SOFTLINK],
            copy_assets=by_kind[AssetKind.COPY],
        ),
        warnings=tuple(warnings),
    )


def load_manifest(config_path: Path) -> ManifestParseResult:
    """Load and parse the manifest at config_path.

    Raises:
        ManifestError: If the file does not exist or cannot be parsed
    """
    if not config_path.is_file():
        raise ManifestError(f"config not found at {config_path}")
    result = parse_manifest(config_path.read_text(encoding="utf-8"))
    logger.debug(
        "loaded %d assets from %s", len(result.manifest.assets), config_path
    )
    return result


def render_initial_manifest() -> str:
    """Text written to `wrktr.conf` by `wrktr init`."""
    return """\
# Add shared files to .SHARED using the directory structure as wanted in the
# worktrees

# individual gitignored files
hardlink_assets=()

# gitignored directories
softlink_assets=()

# files that are checked into the git repository that we want local versions of
copy_assets=()
"""
