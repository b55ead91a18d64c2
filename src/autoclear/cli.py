from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from autoclear import __version__
from autoclear.errors import InputError
from autoclear.models import DeletionReport, RetentionResult, ScanResult


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="autoclear",
        description=(
            "Remove old backup files, keeping the latest copy from one day, "
            "one week, one month, one year and two years ago."
        ),
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to clear (default: current directory)",
    )
    parser.add_argument(
        "-p",
        "--prefix",
        default=None,
        help="Only consider files whose name starts with this prefix",
    )
    parser.add_argument(
        "-t",
        "--test",
        action="store_true",
        help="Test mode: print files that would be removed without removing them",
    )
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Include files in nested directories",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every removal")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        report = run(
            Path(args.directory),
            prefix=args.prefix,
            test=args.test,
            recursive=args.recursive,
        )
    except InputError as exc:
        raise SystemExit(str(exc)) from exc
    return 0 if report.ok else 1


def run(
    directory: Path,
    prefix: str | None = None,
    test: bool = False,
    recursive: bool = False,
    now: datetime | None = None,
) -> DeletionReport:
    from autoclear.deleter import remove_files
    from autoclear.scanner import scan
    from autoclear.selector import select

    if now is None:
        now = datetime.now(timezone.utc)
    scanned = scan(directory, prefix=prefix, recursive=recursive)

    if prefix:
        print(f"clearing files with prefix: '{prefix}'")
    else:
        print("clearing all files in directory")

    result = select(scanned.candidates, now)
    for bucket, candidate in result.keep.items():
        print(f"keeping file: {candidate.path} ({bucket.value})")

    report = remove_files(result.delete, test=test)
    print(_render_summary(scanned, result, report))
    return report


def _render_summary(scanned: ScanResult, result: RetentionResult, report: DeletionReport) -> str:
    removed_label = "would remove" if report.test else "removed"
    return (
        f"scanned {len(scanned.candidates)}, "
        f"kept {len(result.keep)}, "
        f"{removed_label} {len(report.removed)}, "
        f"failed {len(report.failed)}, "
        f"skipped {len(scanned.skipped)}"
    )


if __name__ == "__main__":
    raise SystemExit(main())
