from __future__ import annotations

import logging
import os
import stat
from datetime import datetime, timezone
from pathlib import Path

from autoclear.errors import InputError, ListingError, SkippedEntryError, TimestampError
from autoclear.models import CandidateFile, ScanResult

logger = logging.getLogger(__name__)


def scan(directory: Path, prefix: str | None = None, recursive: bool = False) -> ScanResult:
    directory = Path(directory)
    if not directory.exists() or not directory.is_dir():
        raise InputError(f"Path does not exist or is not a directory: {directory}")

    skipped: list[SkippedEntryError] = []
    if recursive:
        paths = _walk_files(directory, skipped)
    else:
        try:
            paths = sorted(directory.iterdir(), key=lambda p: p.as_posix())
        except OSError as exc:
            raise InputError(f"Cannot read directory {directory}: {exc}") from exc

    candidates: list[CandidateFile] = []
    for path in paths:
        if prefix and not path.name.startswith(prefix):
            continue
        candidate = _candidate(path, skipped)
        if candidate is not None:
            candidates.append(candidate)
    candidates.sort(key=lambda c: c.sort_key)
    return ScanResult(candidates=candidates, skipped=skipped)


def _walk_files(root: Path, skipped: list[SkippedEntryError]) -> list[Path]:
    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        raise InputError(f"Cannot read directory {root}: {exc}") from exc

    def _on_error(exc: OSError) -> None:
        path = Path(exc.filename) if exc.filename else root
        _skip(ListingError(path, exc), skipped)

    results: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        for name in filenames:
            results.append(Path(dirpath) / name)
    results.sort(key=lambda p: p.as_posix())
    return results


def _candidate(path: Path, skipped: list[SkippedEntryError]) -> CandidateFile | None:
    try:
        info = path.stat()
        if not stat.S_ISREG(info.st_mode):
            return None
        modified_at = datetime.fromtimestamp(info.st_mtime, tz=timezone.utc)
    except (OSError, OverflowError, ValueError) as exc:
        _skip(TimestampError(path, exc), skipped)
        return None
    return CandidateFile(path=path, modified_at=modified_at)


def _skip(error: SkippedEntryError, skipped: list[SkippedEntryError]) -> None:
    logger.warning("%s; skipping", error)
    skipped.append(error)
