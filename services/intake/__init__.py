"""Intake service for the CV Portal."""

from .normalizer import SubmissionNormalizer, extract_years_of_experience, parse_skills
from .form_handler import CVSubmissionHandler, SubmissionInProgressError

__all__ = [
    "SubmissionNormalizer",
    "extract_years_of_experience",
    "parse_skills",
    "CVSubmissionHandler",
    "SubmissionInProgressError",
]
