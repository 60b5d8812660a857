"""Command line entry point for the admin dashboard."""

import logging
import sys
from typing import Optional

import click

from config.models import DashboardView
from config.settings import configure_logging
from services.storage.errors import DashboardAccessError
from services.storage.factory import get_data_store
from .csv_exporter import SubmissionCSVExporter
from .loader import DashboardLoader

logger = logging.getLogger(__name__)


class DashboardService:
    """Authorizes an admin token and loads the dashboard view."""

    def __init__(self):
        self.loader = DashboardLoader(store=get_data_store())

    def view(self, access_token: Optional[str]) -> DashboardView:
        session = self.loader.authorize(access_token)
        return self.loader.load(session)


def _load_or_exit(access_token: Optional[str]) -> DashboardView:
    try:
        return DashboardService().view(access_token)
    except DashboardAccessError as e:
        click.echo(f"❌ Access denied: {e}", err=True)
        sys.exit(1)


def _echo_view(view: DashboardView):
    stats = view.summary.stats
    click.echo(f"Accepted applications: {stats.accepted}")
    click.echo(f"Pending review: {stats.pending}")
    click.echo(f"Total applicants: {stats.total}")
    click.echo(f"Average experience (years): {stats.average_experience:.1f}")
    click.echo(f"Open positions: {len(view.positions)}")

    click.echo("\nExperience distribution:")
    for label, records in view.summary.experience_groups.items():
        click.echo(f"  {label}: {len(records)}")

    click.echo("\nApplication trends (last days vs prior window):")
    for point in view.summary.trends:
        click.echo(f"  {point.day.isoformat()}: {point.current} (prior {point.previous})")

    for section, message in view.errors.items():
        click.echo(f"⚠️  {section}: {message}", err=True)


# -------------------------------------------------------------------------
# CLI COMMANDS
# -------------------------------------------------------------------------

@click.group()
def cli():
    """CV Portal admin dashboard CLI."""
    configure_logging()


@cli.command()
@click.option("--token", envvar="PORTAL_ACCESS_TOKEN", help="Admin access token.")
def show(token: Optional[str]):
    """Print dashboard statistics and groupings."""
    _echo_view(_load_or_exit(token))


@cli.command()
@click.option("--token", envvar="PORTAL_ACCESS_TOKEN", help="Admin access token.")
@click.option("--output", type=click.Path(dir_okay=False, writable=True), help="Write CSV here instead of stdout.")
def export(token: Optional[str], output: Optional[str]):
    """Export all submissions as CSV."""
    view = _load_or_exit(token)
    csv_data = SubmissionCSVExporter().export(view.submissions)

    if output:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(csv_data)
        click.echo(f"✅ Exported {len(view.submissions)} submissions to {output}")
    else:
        click.echo(csv_data, nl=False)

    for section, message in view.errors.items():
        click.echo(f"⚠️  {section}: {message}", err=True)


if __name__ == "__main__":
    cli()
