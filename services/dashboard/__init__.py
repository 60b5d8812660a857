"""Admin dashboard service for the CV Portal."""

from .aggregator import DashboardAggregator, compute_stats, group_by_experience, application_trends
from .loader import DashboardLoader
from .csv_exporter import SubmissionCSVExporter

__all__ = [
    "DashboardAggregator", "compute_stats", "group_by_experience", "application_trends",
    "DashboardLoader", "SubmissionCSVExporter",
]
