from .core_models import (
    SubmissionStatus,
    SubmissionOutcome,
    SubmissionInput,
    SubmissionRecord,
    SubmissionResult,
    AdminSession,
    DashboardStats,
    TrendPoint,
    DashboardSummary,
    DashboardView,
)
from .attachment_models import CVAttachment

__all__ = [
    "SubmissionStatus",
    "SubmissionOutcome",
    "SubmissionInput",
    "SubmissionRecord",
    "SubmissionResult",
    "AdminSession",
    "DashboardStats",
    "TrendPoint",
    "DashboardSummary",
    "DashboardView",
    "CVAttachment",
]
