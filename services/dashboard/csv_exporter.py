"""CSV export of dashboard submissions."""

import csv
import io
import logging
from typing import Any, Dict, List, Optional, Sequence

from config.models import SubmissionRecord
from config.settings import get_portal_config
from .aggregator import experience_label

logger = logging.getLogger(__name__)


class SubmissionCSVExporter:
    """
    Flattens submissions into spreadsheet-friendly CSV rows.
    Skills are joined with "|" so commas stay column separators.
    """

    def __init__(self, bucket_width: Optional[int] = None):
        self.bucket_width = bucket_width or get_portal_config().experience_bucket_width

    def export(self, records: Sequence[SubmissionRecord]) -> str:
        """Generate CSV text for the given submissions."""
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=self._get_csv_headers())
        writer.writeheader()
        for record in records:
            writer.writerow(self._record_to_row(record))

        logger.info(f"Exported CSV with {len(records)} submissions.")
        return buffer.getvalue()

    def _get_csv_headers(self) -> List[str]:
        """Consistent column order."""
        return [
            "id",
            "applicant_name",
            "years_experience",
            "experience_group",
            "skills",
            "status",
            "requirements_match",
            "cv_file_key",
            "created_at",
        ]

    def _record_to_row(self, record: SubmissionRecord) -> Dict[str, Any]:
        return {
            "id": record.id or "",
            "applicant_name": record.applicant_name,
            "years_experience": record.years_experience,
            "experience_group": experience_label(record.years_experience, self.bucket_width),
            "skills": "|".join(record.skills),
            "status": record.status,
            "requirements_match": "" if record.requirements_match is None else record.requirements_match,
            "cv_file_key": record.cv_file_key or "",
            "created_at": record.created_at.strftime("%Y-%m-%d %H:%M:%S") if record.created_at else "",
        }
