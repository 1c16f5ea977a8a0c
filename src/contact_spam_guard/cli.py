"""CLI entry point for Contact Spam Guard."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from . import __version__
from .auth import check_auth
from .classifier import classify
from .config import Settings
from .constants import DEFAULT_HOST, DEFAULT_PORT, SUBMISSIONS_LIST_LIMIT
from .display import (
    console,
    display_rules,
    display_submissions,
    display_validation,
    display_verdict,
    setup_logging,
)
from .export import export_submissions
from .gate import GateConfig, evaluate
from .models import ContactGuardError, MalformedSubmission, Submission
from .rules import DEFAULT_RULES, RuleSet, load_rules
from .store import SubmissionStore

_rules_option = click.option(
    "--rules",
    "rules_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON rules file (defaults to the built-in rules).",
)


def _load_rules(rules_path: Path | None) -> RuleSet:
    if rules_path is None:
        return DEFAULT_RULES
    try:
        return load_rules(rules_path)
    except ContactGuardError as e:
        raise click.ClickException(str(e)) from e


def _load_settings() -> Settings:
    try:
        return Settings()
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__, prog_name="contact-spam-guard")
def cli() -> None:
    """Contact Spam Guard - screen website contact form submissions."""


@cli.command()
@click.option("--host", default=DEFAULT_HOST, help="Interface to bind.")
@click.option("--port", default=DEFAULT_PORT, type=int, help="Port to listen on.")
@_rules_option
def serve(host: str, port: int, rules_path: Path | None) -> None:
    """Run the contact form HTTP endpoint."""
    import uvicorn

    from .app import build_app

    settings = _load_settings()
    if rules_path is not None:
        settings = settings.model_copy(update={"rules_file": rules_path})
    setup_logging(settings.log_level)

    try:
        app = build_app(settings)
    except (ContactGuardError, FileNotFoundError) as e:
        raise click.ClickException(str(e)) from e

    uvicorn.run(app, host=host, port=port, log_config=None)


@cli.command()
@click.argument("text", required=False)
@click.option(
    "-f", "--file", "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the text from a file.",
)
@click.option("--threshold", default=None, type=float, help="Spam threshold (default from settings).")
@_rules_option
def check(text: str | None, file_path: Path | None, threshold: float | None, rules_path: Path | None) -> None:
    """Score a piece of text (argument, file, or stdin)."""
    if file_path is not None:
        text = file_path.read_text(encoding="utf-8")
    elif text is None:
        text = sys.stdin.read()

    rules = _load_rules(rules_path)
    if threshold is None:
        threshold = _load_settings().spam_threshold

    display_verdict(classify(text, rules, threshold), threshold)


@cli.command()
@click.argument("payload", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_rules_option
def validate(payload: Path, rules_path: Path | None) -> None:
    """Run a JSON submission through the gate (without CAPTCHA)."""
    try:
        data = json.loads(payload.read_text(encoding="utf-8"))
        submission = Submission.from_payload(data)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{payload} is not valid JSON: {e}") from e
    except MalformedSubmission as e:
        raise click.ClickException(str(e)) from e

    settings = _load_settings()
    config = GateConfig(spam_threshold=settings.spam_threshold, rules=_load_rules(rules_path))
    result = evaluate(submission, config)
    display_validation(result)
    if not result.accepted:
        sys.exit(1)


@cli.command()
@_rules_option
def rules(rules_path: Path | None) -> None:
    """List the critical and scored rules."""
    display_rules(_load_rules(rules_path))


@cli.command()
@click.option("-n", "--limit", default=SUBMISSIONS_LIST_LIMIT, type=int, help="Number of submissions to show.")
def submissions(limit: int) -> None:
    """Show the most recent stored submissions."""
    with SubmissionStore(db_path=_load_settings().db_path) as store:
        rows = store.list_recent(limit=limit)

    if not rows:
        console.print("[dim]No submissions stored.[/dim]")
        return
    display_submissions(rows)


@cli.command(name="export")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "json"]),
    default="csv",
    help="Output format.",
)
@click.option("-o", "--output", required=True, help="Output file path.")
def export_cmd(fmt: str, output: str) -> None:
    """Export stored submissions to CSV or JSON."""
    with SubmissionStore(db_path=_load_settings().db_path) as store:
        rows = store.list_recent()

    if not rows:
        raise click.ClickException("No submissions stored.")

    export_submissions(rows, format=fmt, output_path=output)


@cli.command()
def auth() -> None:
    """Test or set up Google authentication."""
    if not check_auth():
        sys.exit(1)


@cli.group(name="store")
def store_group() -> None:
    """Manage the local submission store."""


@store_group.command(name="info")
def store_info() -> None:
    """Show store statistics."""
    with SubmissionStore(db_path=_load_settings().db_path) as store:
        info = store.get_info()

    if info["last_submission_date"] is None:
        console.print("[dim]Store is empty.[/dim]")
        return

    console.print(f"[bold]Database size:[/bold] {info['db_file_size'] / 1024:.1f} KB")
    console.print(f"[bold]Last submission:[/bold] {info['last_submission_date']}")
    console.print(f"[bold]Submissions:[/bold] {info['submission_count']}")


@store_group.command(name="clear")
@click.confirmation_option(prompt="Delete every stored submission?")
def store_clear() -> None:
    """Delete all stored submissions."""
    with SubmissionStore(db_path=_load_settings().db_path) as store:
        store.clear()
    console.print("[green]Store cleared.[/green]")
