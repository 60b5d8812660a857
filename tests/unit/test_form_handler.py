import pytest

from config.models import CVAttachment, SubmissionInput, SubmissionOutcome
from config.settings import SupabaseConfig
from services.intake.form_handler import CVSubmissionHandler, SubmissionInProgressError
from services.storage.attachment_handler import AttachmentHandler
from services.storage.errors import StoreError
from services.storage.local_backend import LocalStoreBackend
from services.storage.supabase_backend import SupabaseBackend


class FailingStore(LocalStoreBackend):
    def __init__(self, base_dir, error):
        super().__init__(base_dir)
        self.error = error
        self.inserts = 0

    def insert(self, table, row):
        self.inserts += 1
        raise self.error


def _form(**overrides) -> SubmissionInput:
    values = {
        "full_name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "+1 234 567 8900",
        "education": "Private tutoring",
        "experience": "5 years in software development",
        "skills": "JavaScript, React, Node.js",
    }
    values.update(overrides)
    return SubmissionInput(**values)


def test_successful_submit_stores_pending_record(tmp_path) -> None:
    store = LocalStoreBackend(str(tmp_path / "db"))
    handler = CVSubmissionHandler(store=store, table="cvs")

    result = handler.submit(_form())

    assert result.outcome == SubmissionOutcome.SUBMITTED
    assert result.title == "Success"
    assert result.reset_form is True
    assert result.record.id
    assert result.record.created_at is not None

    rows = store.select("cvs")
    assert len(rows) == 1
    assert rows[0]["applicant_name"] == "Ada Lovelace"
    assert rows[0]["years_experience"] == 5
    assert rows[0]["skills"] == ["JavaScript", "React", "Node.js"]
    assert rows[0]["status"] == "pending"
    assert not handler.busy


def test_unique_violation_yields_duplicate_not_failure(tmp_path) -> None:
    handler = CVSubmissionHandler(store=LocalStoreBackend(str(tmp_path / "db")), table="cvs")
    handler.submit(_form())

    result = handler.submit(_form(experience="6 years"))

    assert result.outcome == SubmissionOutcome.DUPLICATE
    assert result.title == "CV Already Exists"
    assert result.message == "You have already submitted a CV."
    assert result.reset_form is False


def test_other_store_errors_yield_generic_failure(tmp_path) -> None:
    store = FailingStore(str(tmp_path / "db"), StoreError("permission denied", code="42501", status=403))
    handler = CVSubmissionHandler(store=store, table="cvs")

    result = handler.submit(_form())

    assert result.outcome == SubmissionOutcome.FAILED
    assert result.message == "Failed to submit CV. Please try again."
    assert result.reset_form is False
    assert not handler.busy


def test_network_failure_is_a_generic_failure(tmp_path) -> None:
    store = FailingStore(str(tmp_path / "db"), StoreError("Network error: timed out", code="network"))
    result = CVSubmissionHandler(store=store, table="cvs").submit(_form())
    assert result.outcome == SubmissionOutcome.FAILED


def test_submit_while_in_flight_is_rejected(tmp_path) -> None:
    class ReentrantStore(LocalStoreBackend):
        handler = None
        busy_during_insert = None
        rejected = False

        def insert(self, table, row):
            self.busy_during_insert = self.handler.busy
            try:
                self.handler.submit(_form(full_name="Second Click"))
            except SubmissionInProgressError:
                self.rejected = True
            return super().insert(table, row)

    store = ReentrantStore(str(tmp_path / "db"))
    handler = CVSubmissionHandler(store=store, table="cvs")
    store.handler = handler

    result = handler.submit(_form())

    assert result.outcome == SubmissionOutcome.SUBMITTED
    assert store.busy_during_insert is True
    assert store.rejected is True
    assert [r["applicant_name"] for r in store.select("cvs")] == ["Ada Lovelace"]
    assert handler.busy is False


def test_attachment_is_stored_and_linked(tmp_path) -> None:
    store = LocalStoreBackend(str(tmp_path / "db"))
    attachments = AttachmentHandler()
    handler = CVSubmissionHandler(store=store, attachments=attachments, table="cvs")

    result = handler.submit(_form(cv_file=CVAttachment(filename="ada.pdf", data=b"%PDF-1.4")))

    key = result.record.cv_file_key
    assert key.startswith("cvs/") and key.endswith("/ada.pdf")
    assert attachments.check_file_exists(key)
    assert store.select("cvs")[0]["cv_file_key"] == key


def test_attachment_removed_when_insert_is_a_duplicate(tmp_path) -> None:
    store = LocalStoreBackend(str(tmp_path / "db"))
    attachments = AttachmentHandler()
    handler = CVSubmissionHandler(store=store, attachments=attachments, table="cvs")
    handler.submit(_form())

    result = handler.submit(_form(cv_file=CVAttachment(filename="ada.pdf", data=b"%PDF-1.4")))

    assert result.outcome == SubmissionOutcome.DUPLICATE
    assert list((tmp_path / "store").rglob("ada.pdf")) == []


def test_attachment_without_storage_fails_without_insert(tmp_path) -> None:
    store = FailingStore(str(tmp_path / "db"), StoreError("should not be called"))
    handler = CVSubmissionHandler(store=store, table="cvs")

    result = handler.submit(_form(cv_file=CVAttachment(filename="ada.doc", data=b"doc")))

    assert result.outcome == SubmissionOutcome.FAILED
    assert store.inserts == 0


class GatewayPageSession:
    """HTTP session that answers every call with a 200 HTML page."""

    class Response:
        status_code = 200
        text = "<html><body>Service temporarily unavailable</body></html>"

        def json(self):
            raise ValueError("Expecting value: line 1 column 1 (char 0)")

    def request(self, method, url, **kwargs):
        return self.Response()


def test_non_json_insert_response_is_a_generic_failure() -> None:
    config = SupabaseConfig(url="https://project.supabase.co", anon_key="anon-key")
    store = SupabaseBackend(config, session=GatewayPageSession())
    handler = CVSubmissionHandler(store=store, table="cvs")

    result = handler.submit(_form())

    assert result.outcome == SubmissionOutcome.FAILED
    assert result.message == "Failed to submit CV. Please try again."
    assert handler.busy is False


@pytest.mark.parametrize("stored", [{"years_experience": -5}, {"skills": "React"}, "created", None])
def test_unusable_insert_representation_keeps_normalized_record(tmp_path, stored) -> None:
    class OddReplyStore(LocalStoreBackend):
        def insert(self, table, row):
            super().insert(table, row)
            return stored

    store = OddReplyStore(str(tmp_path / "db"))
    handler = CVSubmissionHandler(store=store, table="cvs")

    result = handler.submit(_form())

    assert result.outcome == SubmissionOutcome.SUBMITTED
    assert result.record.applicant_name == "Ada Lovelace"
    assert result.record.years_experience == 5
    assert result.record.skills == ["JavaScript", "React", "Node.js"]
    assert handler.busy is False
