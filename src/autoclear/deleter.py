from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from autoclear.errors import DeletionError
from autoclear.models import CandidateFile, DeletionReport

logger = logging.getLogger(__name__)


def remove_files(files: Iterable[CandidateFile], test: bool = False) -> DeletionReport:
    """Unlink every file, or only print it in test mode.

    A failed removal is logged and recorded; the remaining files are still
    attempted.
    """
    removed: list[Path] = []
    failed: list[DeletionError] = []
    seen: set[Path] = set()

    for candidate in files:
        path = candidate.path
        if path in seen:
            continue
        seen.add(path)
        if test:
            print(f"remove file: {path}")
            removed.append(path)
            continue
        try:
            path.unlink()
        except OSError as exc:
            error = DeletionError(path, exc)
            logger.error("%s", error)
            failed.append(error)
            continue
        logger.info("removed %s", path)
        removed.append(path)

    return DeletionReport(removed=removed, failed=failed, test=test)
