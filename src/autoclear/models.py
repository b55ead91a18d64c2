from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path

from autoclear.errors import DeletionError, SkippedEntryError


class Bucket(str, Enum):
    DAY1 = "day1"
    WEEK1 = "week1"
    MONTH1 = "month1"
    YEAR1 = "year1"
    YEAR2 = "year2"


@dataclass(frozen=True)
class BucketRule:
    bucket: Bucket
    target: timedelta  # minimum age a file needs to fill this bucket


# Youngest first. The last rule also takes everything older than its target.
RETENTION_SCHEDULE: tuple[BucketRule, ...] = (
    BucketRule(Bucket.DAY1, timedelta(days=1)),
    BucketRule(Bucket.WEEK1, timedelta(days=7)),
    BucketRule(Bucket.MONTH1, timedelta(days=30)),
    BucketRule(Bucket.YEAR1, timedelta(days=365)),
    BucketRule(Bucket.YEAR2, timedelta(days=730)),
)


@dataclass(frozen=True)
class CandidateFile:
    path: Path
    modified_at: datetime

    @property
    def sort_key(self) -> str:
        return self.path.as_posix()


@dataclass(frozen=True)
class Classification:
    bucket: Bucket | None
    fit: timedelta | None = None  # age past the bucket target, smaller is better


@dataclass(frozen=True)
class RetentionResult:
    keep: dict[Bucket, CandidateFile]
    delete: list[CandidateFile]

    @property
    def kept(self) -> set[CandidateFile]:
        return set(self.keep.values())

    def bucket_of(self, candidate: CandidateFile) -> Bucket | None:
        for bucket, winner in self.keep.items():
            if winner == candidate:
                return bucket
        return None


@dataclass(frozen=True)
class ScanResult:
    candidates: list[CandidateFile]
    skipped: list[SkippedEntryError] = field(default_factory=list)


@dataclass(frozen=True)
class DeletionReport:
    removed: list[Path]
    failed: list[DeletionError]
    test: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed
