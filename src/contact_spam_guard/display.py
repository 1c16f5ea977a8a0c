"""Rich-based display and logging setup for Contact Spam Guard."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .models import ClassificationVerdict, StoredSubmission, ValidationResult
from .rules import RuleSet

console = Console()


def setup_logging(level: str = "INFO") -> None:
    """Route standard logging through a RichHandler on the shared console."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _score_color(score: float, threshold: float) -> str:
    """Return a Rich color name based on how close the score is to the threshold."""
    if score >= threshold:
        return "red"
    if score >= threshold / 2:
        return "yellow"
    return "green"


def display_verdict(verdict: ClassificationVerdict, threshold: float) -> None:
    """Show a classification verdict with the rules that fired."""
    color = _score_color(verdict.score, threshold)
    label = "SPAM" if verdict.is_spam else "OK"

    lines = [
        f"[bold]Verdict:[/bold] [{color}]{label}[/{color}]",
        f"[bold]Score:[/bold] [{color}]{verdict.score:g}[/{color}] (threshold {threshold:g})",
    ]
    if verdict.triggered_critical_rule:
        lines.append(f"[bold]Critical rule:[/bold] [red]{verdict.triggered_critical_rule}[/red]")

    if verdict.hits:
        lines.append("")
        lines.append("[bold]Rule hits:[/bold]")
        for rule_label, count in verdict.hits:
            lines.append(f"  - {rule_label} x{count}")

    console.print(Panel("\n".join(lines), title="Classification"))


def display_validation(result: ValidationResult) -> None:
    """Show the gate's decision for a submission."""
    if result.accepted:
        console.print(Panel(f"[bold green]{result.reason_detail}[/bold green]", title="Accepted"))
        return

    console.print(
        Panel(
            f"[bold red]{result.reason_code.value}[/bold red]\n{result.reason_detail}",
            title="Rejected",
        )
    )


def display_rules(rules: RuleSet) -> None:
    """List critical and scored rules."""
    table = Table(title="Critical Rules")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Label")
    table.add_column("Pattern")
    for idx, rule in enumerate(rules.critical, start=1):
        table.add_row(str(idx), rule.label, rule.pattern.pattern)
    console.print(table)

    table = Table(title="Scored Rules")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Label")
    table.add_column("Pattern")
    table.add_column("Weight", justify="right")
    for idx, rule in enumerate(rules.scored, start=1):
        table.add_row(str(idx), rule.label, rule.pattern.pattern, str(rule.weight))
    console.print(table)

    ranges = ", ".join(f"{name} U+{start:04X}-U+{end:04X}" for name, start, end in rules.script_ranges)
    console.print(
        Panel(
            f"Ranges: {ranges}\n"
            f"Penalty {rules.foreign_script_penalty} when more than "
            f"{rules.foreign_script_ratio:.0%} of the text and at least "
            f"{rules.foreign_script_min_chars} characters",
            title="Foreign Script",
        )
    )


def display_submissions(submissions: list[StoredSubmission]) -> None:
    """Table of stored submissions, newest first."""
    table = Table(title="Submissions")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Received")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Subject")
    table.add_column("Status")

    for sub in submissions:
        table.add_row(str(sub.id), sub.timestamp, sub.name, sub.email, sub.subject, sub.status)

    console.print(table)
    console.print(Panel(f"Total submissions shown: {len(submissions)}", title="Summary"))
