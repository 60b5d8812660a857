"""Form normalization for CV intake."""

import logging
import re
from typing import List, Optional

from config.models import SubmissionInput, SubmissionRecord, SubmissionStatus

logger = logging.getLogger(__name__)

# First "<digits> year(s)" anywhere in the text; no boundary after "year"
_YEARS_PATTERN = re.compile(r"(\d+)\s*years?", re.IGNORECASE | re.ASCII)


def extract_years_of_experience(text: Optional[str]) -> int:
    """
    Best-effort years count from free-text experience.

    Returns the number in the first "<n> year"/"<n> years" occurrence
    (case-insensitive), ignoring anything after it, or 0 when there is none.
    Never raises.
    """
    if not text:
        return 0
    match = _YEARS_PATTERN.search(text)
    return int(match.group(1)) if match else 0


def parse_skills(text: Optional[str]) -> List[str]:
    """
    Split a comma-separated skills field into trimmed tokens, order kept.

    Interior empty tokens are kept; a single empty token left by a trailing
    comma is dropped, so an empty field gives [].
    """
    if text is None:
        return []
    tokens = [token.strip() for token in text.split(",")]
    if tokens[-1] == "":
        tokens.pop()
    return tokens


class SubmissionNormalizer:
    """Turns raw form values into a storage-ready record."""

    def normalize(self, form: SubmissionInput) -> SubmissionRecord:
        record = SubmissionRecord(
            applicant_name=form.full_name,
            years_experience=extract_years_of_experience(form.experience),
            skills=parse_skills(form.skills),
            status=SubmissionStatus.PENDING.value,
        )
        logger.debug(
            "Normalized CV for %s: %d years, %d skills",
            record.applicant_name,
            record.years_experience,
            len(record.skills),
        )
        return record
