"""Dashboard aggregator — turns a snapshot of stored CVs into stats, experience groups and trends."""

import logging
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from config.models import (
    DashboardStats,
    DashboardSummary,
    SubmissionRecord,
    SubmissionStatus,
    TrendPoint,
)
from config.settings import get_portal_config

logger = logging.getLogger(__name__)


def compute_stats(records: Sequence[SubmissionRecord]) -> DashboardStats:
    """Totals per status and mean years of experience (0.0 for no records)."""
    total = len(records)
    pending = sum(1 for r in records if r.status == SubmissionStatus.PENDING.value)
    accepted = sum(1 for r in records if r.status == SubmissionStatus.ACCEPTED.value)
    average = sum(r.years_experience for r in records) / total if total else 0.0

    return DashboardStats(
        total=total,
        pending=pending,
        accepted=accepted,
        average_experience=average,
    )


def experience_label(years: int, width: int = 2) -> str:
    lower = (years // width) * width
    return f"{lower}-{lower + width} years"


def group_by_experience(
    records: Sequence[SubmissionRecord], width: int = 2
) -> Dict[str, List[SubmissionRecord]]:
    """
    Bucket records into `width`-year experience ranges.

    Groups appear in first-encountered order and keep input order inside each
    group. Builds a new mapping; the input sequence is not touched.
    """
    if width <= 0:
        raise ValueError("Experience bucket width must be positive")

    groups: Dict[str, List[SubmissionRecord]] = {}
    for record in records:
        groups.setdefault(experience_label(record.years_experience, width), []).append(record)
    return groups


def application_trends(
    records: Sequence[SubmissionRecord], today: Optional[date] = None, days: int = 7
) -> List[TrendPoint]:
    """
    Daily submission counts for the last `days` days (ending today) against the
    same day offset in the window before it. Records without a timestamp are skipped.
    """
    today = today or datetime.now(timezone.utc).date()
    per_day = Counter(
        _as_utc_date(r.created_at) for r in records if r.created_at is not None
    )

    window_start = today - timedelta(days=days - 1)
    points = []
    for offset in range(days):
        day = window_start + timedelta(days=offset)
        points.append(
            TrendPoint(
                day=day,
                current=per_day.get(day, 0),
                previous=per_day.get(day - timedelta(days=days), 0),
            )
        )
    return points


def _as_utc_date(moment: datetime) -> date:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


class DashboardAggregator:
    """
    Computes the dashboard summary from the current submissions.
    Positions are accepted alongside and passed through untouched.
    """

    def __init__(self, bucket_width: Optional[int] = None, trend_days: Optional[int] = None):
        portal = get_portal_config()
        self.bucket_width = bucket_width or portal.experience_bucket_width
        self.trend_days = trend_days or portal.trend_days

    def aggregate(
        self,
        records: Sequence[SubmissionRecord],
        positions: Optional[Sequence[Dict[str, Any]]] = None,
        today: Optional[date] = None,
    ) -> DashboardSummary:
        if not records:
            logger.info("No submissions to aggregate; returning empty dashboard summary.")

        summary = DashboardSummary(
            stats=compute_stats(records),
            experience_groups=group_by_experience(records, self.bucket_width),
            trends=application_trends(records, today=today, days=self.trend_days),
        )
        logger.debug(
            "Aggregated %d submissions into %d experience groups (%d positions)",
            summary.stats.total,
            len(summary.experience_groups),
            len(positions or []),
        )
        return summary
