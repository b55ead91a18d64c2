from __future__ import annotations

import os
import time
from datetime import datetime, timezone
from pathlib import Path

import pytest

from autoclear import cli

DAY = 24 * 60 * 60
AGES = {
    "backup_12h.tar": 0.5 * DAY,
    "backup_36h.tar": 1.5 * DAY,
    "backup_6d.tar": 6 * DAY,
    "backup_10d.tar": 10 * DAY,
    "backup_3mo.tar": 90 * DAY,
    "backup_13mo.tar": 395 * DAY,
    "backup_25mo.tar": 760 * DAY,
}
KEPT = {"backup_36h.tar", "backup_10d.tar", "backup_3mo.tar", "backup_13mo.tar", "backup_25mo.tar"}


def _populate(root: Path, now: float) -> None:
    for name, age in AGES.items():
        path = root / name
        path.write_text(name)
        os.utime(path, (now - age, now - age))


def _names(root: Path) -> set[str]:
    return {p.name for p in root.iterdir()}


def test_main_keeps_one_file_per_bucket(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _populate(tmp_path, time.time())

    assert cli.main([str(tmp_path)]) == 0

    assert _names(tmp_path) == KEPT
    out = capsys.readouterr().out
    assert "clearing all files in directory" in out
    assert f"keeping file: {tmp_path / 'backup_36h.tar'} (day1)" in out
    assert "scanned 7, kept 5, removed 2, failed 0, skipped 0" in out


def test_test_mode_removes_nothing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _populate(tmp_path, time.time())

    assert cli.main(["--test", str(tmp_path)]) == 0

    assert _names(tmp_path) == set(AGES)
    out = capsys.readouterr().out
    assert f"remove file: {tmp_path / 'backup_12h.tar'}" in out
    assert f"remove file: {tmp_path / 'backup_6d.tar'}" in out
    assert "would remove 2" in out


def test_prefix_leaves_other_files_alone(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    now = time.time()
    _populate(tmp_path, now)
    notes = tmp_path / "notes.txt"
    notes.write_text("keep me")
    os.utime(notes, (now - 3 * DAY, now - 3 * DAY))

    assert cli.main(["-p", "backup_", str(tmp_path)]) == 0

    assert _names(tmp_path) == KEPT | {"notes.txt"}
    assert "clearing files with prefix: 'backup_'" in capsys.readouterr().out


def test_run_is_idempotent(tmp_path: Path) -> None:
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    _populate(tmp_path, now.timestamp())

    first = cli.run(tmp_path, now=now)
    second = cli.run(tmp_path, now=now)

    assert len(first.removed) == 2
    assert second.removed == []
    assert _names(tmp_path) == KEPT


def test_recursive_flag(tmp_path: Path) -> None:
    now = time.time()
    nested = tmp_path / "host"
    nested.mkdir()
    for name, age in (("old.tar", 10 * DAY), ("older.tar", 12 * DAY)):
        path = nested / name
        path.write_text(name)
        os.utime(path, (now - age, now - age))

    assert cli.main([str(tmp_path)]) == 0
    assert _names(nested) == {"old.tar", "older.tar"}

    assert cli.main(["--recursive", str(tmp_path)]) == 0
    assert _names(nested) == {"old.tar"}


def test_failed_removal_sets_exit_status(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _populate(tmp_path, time.time())
    real_unlink = Path.unlink

    def _unlink(self: Path, missing_ok: bool = False) -> None:
        if self.name == "backup_12h.tar":
            raise PermissionError(13, "Permission denied", str(self))
        real_unlink(self, missing_ok=missing_ok)

    monkeypatch.setattr(Path, "unlink", _unlink)

    assert cli.main([str(tmp_path)]) == 1

    assert _names(tmp_path) == KEPT | {"backup_12h.tar"}
    assert "removed 1, failed 1" in capsys.readouterr().out


def test_missing_directory_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="does not exist"):
        cli.main([str(tmp_path / "missing")])


def test_default_directory_is_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _populate(tmp_path, time.time())
    monkeypatch.chdir(tmp_path)

    assert cli.main(["-t"]) == 0
    assert _names(tmp_path) == set(AGES)


def test_help_exits_zero() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--help"])
    assert excinfo.value.code == 0


def test_skipped_entries_are_counted_in_summary(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _populate(tmp_path, time.time())
    os.symlink(tmp_path / "gone.tar", tmp_path / "backup_dangling.tar")

    assert cli.main([str(tmp_path)]) == 0

    assert _names(tmp_path) == KEPT | {"backup_dangling.tar"}
    assert "scanned 7, kept 5, removed 2, failed 0, skipped 1" in capsys.readouterr().out


def test_run_accepts_naive_now(tmp_path: Path) -> None:
    _populate(tmp_path, time.time())

    report = cli.run(tmp_path, test=True, now=datetime.now())

    assert sorted(p.name for p in report.removed) == ["backup_12h.tar", "backup_6d.tar"]
