"""Retention selection: map every candidate to an age bucket and keep one winner per bucket."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable

from autoclear.models import (
    RETENTION_SCHEDULE,
    Bucket,
    BucketRule,
    CandidateFile,
    Classification,
    RetentionResult,
)

Winners = dict[Bucket, tuple[timedelta, CandidateFile]]


def classify(
    modified_at: datetime,
    now: datetime,
    schedule: Iterable[BucketRule] = RETENTION_SCHEDULE,
) -> Classification:
    """Return the bucket a file of this age competes for, and how well it fits.

    A file belongs to the oldest bucket whose target it has reached, so each
    bucket covers ``[target, next_target)`` and the oldest bucket has no upper
    bound. The fit is the time elapsed past the target; the smallest fit is
    the newest copy that is already old enough. Files younger than every
    target get no bucket.
    """
    age = now - modified_at
    for rule in sorted(schedule, key=lambda r: r.target, reverse=True):
        if age >= rule.target:
            return Classification(bucket=rule.bucket, fit=age - rule.target)
    return Classification(bucket=None)


def select(
    candidates: Iterable[CandidateFile],
    now: datetime,
    schedule: Iterable[BucketRule] = RETENTION_SCHEDULE,
) -> RetentionResult:
    schedule = tuple(schedule)
    unique = list(dict.fromkeys(candidates))
    return partition(unique, collect_winners(unique, now, schedule), schedule)


def collect_winners(
    candidates: Iterable[CandidateFile],
    now: datetime,
    schedule: Iterable[BucketRule] = RETENTION_SCHEDULE,
) -> Winners:
    schedule = tuple(schedule)
    if now.tzinfo is None:
        # naive "now" is local wall-clock time; scanned mtimes are UTC-aware
        now = now.astimezone(timezone.utc)
    winners: Winners = {}
    for candidate in candidates:
        classification = classify(candidate.modified_at, now, schedule)
        if classification.bucket is None or classification.fit is None:
            continue
        _offer(winners, classification.bucket, classification.fit, candidate)
    return winners


def merge(left: Winners, right: Winners) -> Winners:
    """Combine winners collected from two disjoint slices of the candidates."""
    merged: Winners = dict(left)
    for bucket, (fit, candidate) in right.items():
        _offer(merged, bucket, fit, candidate)
    return merged


def partition(
    candidates: Iterable[CandidateFile],
    winners: Winners,
    schedule: Iterable[BucketRule] = RETENTION_SCHEDULE,
) -> RetentionResult:
    keep = {
        rule.bucket: winners[rule.bucket][1]
        for rule in schedule
        if rule.bucket in winners
    }
    kept = set(keep.values())
    delete = sorted(
        {c for c in candidates if c not in kept},
        key=lambda c: (c.sort_key, c.modified_at),
    )
    return RetentionResult(keep=keep, delete=delete)


def _offer(winners: Winners, bucket: Bucket, fit: timedelta, candidate: CandidateFile) -> None:
    incumbent = winners.get(bucket)
    if incumbent is None or _rank(fit, candidate) < _rank(*incumbent):
        winners[bucket] = (fit, candidate)


def _rank(fit: timedelta, candidate: CandidateFile) -> tuple[timedelta, str, datetime]:
    return (fit, candidate.sort_key, candidate.modified_at)
