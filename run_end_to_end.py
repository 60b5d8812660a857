# run_end_to_end.py
import logging
import os
import sys

# Force local environment BEFORE importing services that use config
os.environ["PORTAL_ENV"] = "local"
os.environ.setdefault("PORTAL_LOCAL_ROOT", "./local_store")

from config.models import SubmissionInput
from services.intake.form_handler import CVSubmissionHandler
from services.dashboard.loader import DashboardLoader
from services.storage.attachment_handler import AttachmentHandler
from services.storage.factory import get_data_store

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)

ADMIN_TOKEN = "local-admin-token"

SAMPLE_CVS = [
    {"full_name": "Ada Lovelace", "email": "ada@example.com",
     "experience": "5 years in software development", "skills": "Python, Mathematics, Analysis"},
    {"full_name": "Alan Turing", "email": "alan@example.com",
     "experience": "Over 10 YEARS of experience, 2 years as lead", "skills": "Cryptography, Logic"},
    {"full_name": "Grace Hopper", "email": "grace@example.com",
     "experience": "3 years compiler work", "skills": "COBOL, Compilers,"},
    {"full_name": "Recent Graduate", "email": "grad@example.com",
     "experience": "Recent graduate", "skills": "JavaScript, React, Node.js"},
]


def run():
    store = get_data_store()
    store.register_session(ADMIN_TOKEN, user_id="admin-1", email="admin@example.com", is_admin=True)

    logger.info("=== STEP 1: Submit sample CVs ===")
    handler = CVSubmissionHandler(store=store, attachments=AttachmentHandler())
    for values in SAMPLE_CVS:
        result = handler.submit(SubmissionInput(**values))
        logger.info(f"{values['full_name']}: {result.outcome.value} ({result.message})")

    logger.info("=== STEP 2: Submit a duplicate ===")
    result = handler.submit(SubmissionInput(**SAMPLE_CVS[0]))
    logger.info(f"{SAMPLE_CVS[0]['full_name']}: {result.outcome.value} ({result.message})")

    logger.info("=== STEP 3: Load dashboard ===")
    loader = DashboardLoader(store=store)
    view = loader.load(loader.authorize(ADMIN_TOKEN))

    logger.info("=== END-TO-END COMPLETE ===")
    logger.info(view.summary.stats.model_dump_json(indent=2))
    for label, records in view.summary.experience_groups.items():
        logger.info(f"{label}: {', '.join(r.applicant_name for r in records)}")
    for section, message in view.errors.items():
        logger.warning(f"{section}: {message}")


if __name__ == "__main__":
    if len(sys.argv) > 1:
        os.environ["PORTAL_LOCAL_ROOT"] = sys.argv[1]
    run()
