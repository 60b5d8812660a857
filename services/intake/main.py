"""Command line entry point for CV intake."""

import logging
import sys
from typing import Optional

import click
from pydantic import ValidationError

from config.models import CVAttachment, SubmissionInput, SubmissionOutcome
from config.settings import configure_logging
from services.storage.attachment_handler import AttachmentHandler
from services.storage.factory import get_data_store
from .form_handler import CVSubmissionHandler

logger = logging.getLogger(__name__)


class IntakeService:
    """Wires the submit handler to the configured store and attachment storage."""

    def __init__(self):
        self.handler = CVSubmissionHandler(store=get_data_store(), attachments=AttachmentHandler())
        logger.info("Intake service initialized")


# ----------------------------------------------------------------------
# CLI Commands
# ----------------------------------------------------------------------
@click.group()
def cli():
    """CV Portal intake CLI."""
    configure_logging()


@cli.command()
@click.option("--name", "full_name", required=True, help="Applicant full name.")
@click.option("--email", default="", help="Contact email.")
@click.option("--phone", default="", help="Contact phone number.")
@click.option("--education", default="", help="Educational qualifications.")
@click.option("--experience", default="", help='Work experience, e.g. "5 years in software development".')
@click.option("--skills", default="", help='Comma-separated skills, e.g. "JavaScript, React, Node.js".')
@click.option("--cv-file", type=click.Path(exists=True, dir_okay=False), help="CV document (PDF, DOC, DOCX).")
def submit(
    full_name: str,
    email: str,
    phone: str,
    education: str,
    experience: str,
    skills: str,
    cv_file: Optional[str],
):
    """Submit one CV."""
    try:
        form = SubmissionInput(
            full_name=full_name,
            email=email,
            phone=phone,
            education=education,
            experience=experience,
            skills=skills,
            cv_file=CVAttachment.from_path(cv_file) if cv_file else None,
        )
    except ValidationError as e:
        for err in e.errors():
            click.echo(f"Invalid {'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}", err=True)
        sys.exit(1)

    result = IntakeService().handler.submit(form)
    click.echo(f"{result.title}: {result.message}")
    if result.outcome != SubmissionOutcome.SUBMITTED:
        sys.exit(1)


if __name__ == "__main__":
    cli()
