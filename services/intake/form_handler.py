"""CV form submit handler: normalize, store, and report a tri-state outcome."""

import logging
import threading
import uuid
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from config.models import (
    SubmissionInput,
    SubmissionOutcome,
    SubmissionRecord,
    SubmissionResult,
    SubmissionStatus,
)
from config.settings import get_supabase_config
from services.storage.attachment_handler import AttachmentHandler
from services.storage.base import DataStore
from services.storage.errors import StoreError
from .normalizer import SubmissionNormalizer

logger = logging.getLogger(__name__)


class SubmissionInProgressError(RuntimeError):
    """Raised when submit is called while a previous submit is still in flight."""


class CVSubmissionHandler:
    """
    Submit handler behind the applicant CV form.

    One handler serves one form instance: while a submit is in flight the
    `busy` flag is set and further submits are rejected until it clears.
    """

    SUCCESS_TITLE = "Success"
    SUCCESS_MESSAGE = "Your CV has been submitted successfully! We will review it and get back to you."
    DUPLICATE_TITLE = "CV Already Exists"
    DUPLICATE_MESSAGE = "You have already submitted a CV."
    FAILED_TITLE = "Error"
    FAILED_MESSAGE = "Failed to submit CV. Please try again."

    def __init__(
        self,
        store: DataStore,
        attachments: Optional[AttachmentHandler] = None,
        normalizer: Optional[SubmissionNormalizer] = None,
        table: Optional[str] = None,
    ):
        self.store = store
        self.attachments = attachments
        self.normalizer = normalizer or SubmissionNormalizer()
        self.table = table or get_supabase_config().submissions_table
        self._in_flight = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def submit(self, form: SubmissionInput) -> SubmissionResult:
        """Store one CV and return the outcome the form should display."""
        if not self._in_flight.acquire(blocking=False):
            logger.warning(f"Submit ignored for {form.full_name}: previous submission still in flight")
            raise SubmissionInProgressError("A submission is already in progress")

        try:
            return self._submit(form)
        finally:
            self._in_flight.release()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _submit(self, form: SubmissionInput) -> SubmissionResult:
        record = self.normalizer.normalize(form)

        if form.cv_file is not None:
            try:
                record.cv_file_key = self._upload_attachment(form)
            except (ClientError, BotoCoreError, OSError) as e:
                logger.error(f"Failed to store CV document for {record.applicant_name}: {e}")
                return self._failed()

        record.status = SubmissionStatus.PENDING.value
        try:
            stored = self.store.insert(self.table, record.to_insert_payload())
        except StoreError as e:
            self._discard_attachment(record.cv_file_key)
            if e.is_unique_violation:
                logger.info(f"Duplicate CV submission rejected for {record.applicant_name}")
                return SubmissionResult(
                    outcome=SubmissionOutcome.DUPLICATE,
                    title=self.DUPLICATE_TITLE,
                    message=self.DUPLICATE_MESSAGE,
                )
            logger.error(f"Error submitting CV for {record.applicant_name}: {e}")
            return self._failed()

        logger.info(f"CV submitted for {record.applicant_name} ({record.years_experience} years)")
        return SubmissionResult(
            outcome=SubmissionOutcome.SUBMITTED,
            title=self.SUCCESS_TITLE,
            message=self.SUCCESS_MESSAGE,
            record=self._stored_record(record, stored),
        )

    @staticmethod
    def _stored_record(record: SubmissionRecord, stored) -> SubmissionRecord:
        """Merge the store's representation into the record; keep the record if it won't validate."""
        if not isinstance(stored, dict):
            logger.warning(f"Unexpected insert response for {record.applicant_name}: {stored!r}")
            return record
        try:
            return SubmissionRecord(**{**record.model_dump(), **stored})
        except ValidationError as e:
            logger.warning(f"Ignoring invalid stored representation for {record.applicant_name}: {e}")
            return record

    def _upload_attachment(self, form: SubmissionInput) -> str:
        if self.attachments is None:
            raise OSError("No attachment storage configured")
        return self.attachments.upload_attachment(form.cv_file, f"cvs/{uuid.uuid4()}")

    def _discard_attachment(self, key: Optional[str]):
        if not key or self.attachments is None:
            return
        try:
            self.attachments.delete_object(key)
        except (ClientError, BotoCoreError, OSError) as e:
            logger.warning(f"Could not remove orphaned CV document {key}: {e}")

    def _failed(self) -> SubmissionResult:
        return SubmissionResult(
            outcome=SubmissionOutcome.FAILED,
            title=self.FAILED_TITLE,
            message=self.FAILED_MESSAGE,
        )
