"""Tests for the link/cleanup reconciliation engine."""

import errno
import os
from pathlib import Path
from unittest.mock import patch

from tests.test_utils.project_builders import ProjectLayout, build_project
from wrktr.core.link_types import LinkStatus
from wrktr.core.manifest import Manifest, load_manifest
from wrktr.core.reconcile import AssetAction, cleanup_worktree, link_worktree
from wrktr_shared.git.fake import FakeGit


def _scenario(tmp_path: Path) -> tuple[ProjectLayout, Manifest]:
    layout = build_project(
        tmp_path,
        hardlink=[".env"],
        softlink=[".claude/commands"],
        copy=["config.yaml"],
    )
    layout.write_shared(".env", "SECRET=1\n")
    layout.write_shared(".claude/commands/review.md", "# review\n")
    layout.write_shared("config.yaml", "debug: true\n")
    manifest = load_manifest(layout.root / "wrktr.conf").manifest
    return layout, manifest


def _snapshot(root: Path) -> dict[str, tuple[str, int, str | None]]:
    """Entry type, link count and symlink target for everything under root."""
    entries: dict[str, tuple[str, int, str | None]] = {}
    for path in sorted(root.rglob("*")):
        st = path.lstat()
        if path.is_symlink():
            entries[str(path.relative_to(root))] = ("link", st.st_nlink, os.readlink(path))
        elif path.is_dir():
            entries[str(path.relative_to(root))] = ("dir", 0, None)
        else:
            entries[str(path.relative_to(root))] = ("file", st.st_nlink, path.read_text())
    return entries


def test_link_creates_all_three_kinds(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)

    report = link_worktree(layout.context, manifest)

    assert [o.action for o in report.outcomes] == [
        AssetAction.CREATED,
        AssetAction.CREATED,
        AssetAction.COPIED,
    ]
    assert [c.status for c in report.status.checks] == [
        LinkStatus.HARDLINKED,
        LinkStatus.SOFTLINKED,
        LinkStatus.COPY_MATCHES,
    ]
    env = layout.worktree / ".env"
    assert env.stat().st_ino == (layout.shared / ".env").stat().st_ino
    commands = layout.worktree / ".claude" / "commands"
    assert os.readlink(commands) == str(layout.shared / ".claude" / "commands")
    assert Path(os.readlink(commands)).is_absolute()
    assert (commands / "review.md").read_text() == "# review\n"


def test_link_is_idempotent(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)

    link_worktree(layout.context, manifest)
    before = _snapshot(layout.worktree)
    second = link_worktree(layout.context, manifest)

    assert second.failures == ()
    assert [o.action for o in second.outcomes] == [
        AssetAction.SKIPPED_EXISTING,
        AssetAction.SKIPPED_EXISTING,
        AssetAction.COPIED,
    ]
    assert _snapshot(layout.worktree) == before


def test_check_after_link_reports_the_same_statuses(tmp_path: Path) -> None:
    from wrktr.core.status_report import check_worktree

    layout, manifest = _scenario(tmp_path)

    linked = link_worktree(layout.context, manifest)

    assert check_worktree(layout.context, manifest) == linked.status


def test_link_never_overwrites_existing_entries(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)
    (layout.worktree / ".env").write_text("LOCAL=1\n")
    (layout.worktree / ".claude" / "commands").mkdir(parents=True)

    report = link_worktree(layout.context, manifest)

    assert (layout.worktree / ".env").read_text() == "LOCAL=1\n"
    assert not (layout.worktree / ".claude" / "commands").is_symlink()
    assert [c.status for c in report.status.checks][:2] == [
        LinkStatus.NOT_HARDLINKED,
        LinkStatus.NOT_SOFTLINKED,
    ]


def test_link_refreshes_modified_copy(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)
    (layout.worktree / "config.yaml").write_text("debug: false\n")

    report = link_worktree(layout.context, manifest)

    assert (layout.worktree / "config.yaml").read_text() == "debug: true\n"
    assert report.status.checks[-1].status is LinkStatus.COPY_MATCHES


def test_copy_over_hardlinked_destination_leaves_shared_content_alone(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)
    shared_config = layout.shared / "config.yaml"
    os.link(shared_config, layout.worktree / "config.yaml")

    link_worktree(layout.context, manifest)

    local = layout.worktree / "config.yaml"
    assert local.stat().st_ino != shared_config.stat().st_ino
    assert shared_config.read_text() == "debug: true\n"
    assert local.read_text() == "debug: true\n"


def test_copy_of_directory_is_recursive(tmp_path: Path) -> None:
    layout = build_project(tmp_path, copy=[".vscode"])
    layout.write_shared(".vscode/settings.json", "{}\n")
    layout.write_shared(".vscode/nested/launch.json", "[]\n")
    (layout.worktree / ".vscode").mkdir()
    (layout.worktree / ".vscode" / "settings.json").write_text('{"local": true}\n')
    manifest = load_manifest(layout.root / "wrktr.conf").manifest

    report = link_worktree(layout.context, manifest)

    assert (layout.worktree / ".vscode" / "settings.json").read_text() == "{}\n"
    assert (layout.worktree / ".vscode" / "nested" / "launch.json").read_text() == "[]\n"
    assert report.status.checks[0].status is LinkStatus.COPY_MATCHES


def test_missing_source_is_a_per_asset_failure(tmp_path: Path) -> None:
    layout = build_project(tmp_path, hardlink=["absent.env", "present.env"], softlink=["gone"])
    layout.write_shared("present.env", "A=1\n")
    manifest = load_manifest(layout.root / "wrktr.conf").manifest

    report = link_worktree(layout.context, manifest)

    assert [o.action for o in report.outcomes] == [
        AssetAction.FAILED,
        AssetAction.CREATED,
        AssetAction.FAILED,
    ]
    assert "shared source not found" in (report.outcomes[0].error or "")
    assert not os.path.lexists(layout.worktree / "gone")
    assert [c.status for c in report.status.checks] == [
        LinkStatus.MISSING,
        LinkStatus.HARDLINKED,
        LinkStatus.MISSING,
    ]


def test_cross_device_hardlink_failure_does_not_stop_other_passes(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)
    cross_device = OSError(errno.EXDEV, "Invalid cross-device link")

    with patch("wrktr.core.reconcile.os.link", side_effect=cross_device):
        report = link_worktree(layout.context, manifest)

    assert report.outcomes[0].action is AssetAction.FAILED
    assert "across filesystems" in (report.outcomes[0].error or "")
    assert [o.action for o in report.outcomes[1:]] == [AssetAction.CREATED, AssetAction.COPIED]


def test_link_creates_intermediate_directories(tmp_path: Path) -> None:
    layout = build_project(tmp_path, hardlink=[".claude/settings.local.json"])
    layout.write_shared(".claude/settings.local.json", "{}\n")
    manifest = load_manifest(layout.root / "wrktr.conf").manifest

    report = link_worktree(layout.context, manifest)

    assert report.outcomes[0].action is AssetAction.CREATED
    assert (layout.worktree / ".claude").is_dir()


def test_cleanup_round_trip(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)
    config = layout.worktree / "config.yaml"
    git = FakeGit(committed_contents={config: "debug: committed\n"})
    link_worktree(layout.context, manifest)

    report = cleanup_worktree(layout.context, manifest, git)

    assert [o.action for o in report.outcomes] == [
        AssetAction.REMOVED,
        AssetAction.REMOVED,
        AssetAction.RESTORED,
    ]
    assert not os.path.lexists(layout.worktree / ".env")
    assert not os.path.lexists(layout.worktree / ".claude" / "commands")
    assert config.read_text() == "debug: committed\n"
    assert git.restored_paths == [config]
    # Shared content is untouched
    assert (layout.shared / ".env").read_text() == "SECRET=1\n"
    assert (layout.shared / ".claude" / "commands" / "review.md").exists()
    assert (layout.shared / "config.yaml").read_text() == "debug: true\n"


def test_cleanup_is_idempotent(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)
    git = FakeGit()

    report = cleanup_worktree(layout.context, manifest, git)

    assert [o.action for o in report.outcomes] == [AssetAction.ALREADY_ABSENT] * 3
    assert report.failures == ()
    assert git.restored_paths == []


def test_cleanup_restore_failure_is_reported(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)
    link_worktree(layout.context, manifest)

    report = cleanup_worktree(layout.context, manifest, FakeGit())

    assert report.outcomes[-1].action is AssetAction.FAILED
    assert "Failed to restore config.yaml" in (report.outcomes[-1].error or "")
    assert report.outcomes[0].action is AssetAction.REMOVED


def test_cleanup_does_not_delete_real_directory(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)
    commands = layout.worktree / ".claude" / "commands"
    commands.mkdir(parents=True)
    (commands / "mine.md").write_text("keep me\n")

    report = cleanup_worktree(layout.context, manifest, FakeGit())

    assert report.outcomes[1].action is AssetAction.FAILED
    assert (commands / "mine.md").read_text() == "keep me\n"


def test_copy_of_directory_removes_stale_entries(tmp_path: Path) -> None:
    layout = build_project(tmp_path, copy=[".vscode"])
    layout.write_shared(".vscode/settings.json", "{}\n")
    stale = layout.worktree / ".vscode" / "stale.json"
    stale.parent.mkdir()
    stale.write_text("old\n")
    manifest = load_manifest(layout.root / "wrktr.conf").manifest

    first = link_worktree(layout.context, manifest)
    second = link_worktree(layout.context, manifest)

    assert not stale.exists()
    assert first.status.checks[0].status is LinkStatus.COPY_MATCHES
    assert second.status.checks[0].status is LinkStatus.COPY_MATCHES


def test_stale_temporary_symlink_is_not_written_through(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)
    decoy = layout.write_shared("decoy.txt", "keep\n")
    leftover = layout.worktree / ".config.yaml.wrktr-tmp"
    leftover.symlink_to(decoy)

    report = link_worktree(layout.context, manifest)

    assert report.outcomes[-1].action is AssetAction.COPIED
    assert decoy.read_text() == "keep\n"
    assert not os.path.lexists(leftover)


def test_failed_copy_leaves_no_temporary_file(tmp_path: Path) -> None:
    layout, manifest = _scenario(tmp_path)

    with patch("shutil.copystat", side_effect=OSError(errno.EPERM, "Operation not permitted")):
        report = link_worktree(layout.context, manifest)

    assert report.outcomes[-1].action is AssetAction.FAILED
    assert not os.path.lexists(layout.worktree / ".config.yaml.wrktr-tmp")


def test_cleanup_through_symlinked_parent_leaves_shared_content(tmp_path: Path) -> None:
    layout = build_project(tmp_path, hardlink=[".claude/settings.local.json"])
    shared_settings = layout.write_shared(".claude/settings.local.json", "{}\n")
    (layout.worktree / ".claude").symlink_to(layout.shared / ".claude")
    manifest = load_manifest(layout.root / "wrktr.conf").manifest

    report = cleanup_worktree(layout.context, manifest, FakeGit())

    assert report.outcomes[0].action is AssetAction.FAILED
    assert "outside the worktree" in (report.outcomes[0].error or "")
    assert shared_settings.read_text() == "{}\n"


def test_copy_through_symlinked_parent_is_refused(tmp_path: Path) -> None:
    layout = build_project(tmp_path, copy=[".vscode/settings.json"])
    shared_settings = layout.write_shared(".vscode/settings.json", "{}\n")
    (layout.worktree / ".vscode").symlink_to(layout.shared / ".vscode")
    manifest = load_manifest(layout.root / "wrktr.conf").manifest

    report = link_worktree(layout.context, manifest)

    assert report.outcomes[0].action is AssetAction.FAILED
    assert "outside the worktree" in (report.outcomes[0].error or "")
    assert shared_settings.read_text() == "{}\n"
    assert sorted(p.name for p in (layout.shared / ".vscode").iterdir()) == ["settings.json"]
