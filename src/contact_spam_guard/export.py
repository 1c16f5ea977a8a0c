"""Export stored submissions to CSV or JSON."""

import csv
import json

from .models import StoredSubmission

_FIELDS = ["timestamp", "name", "email", "subject", "message", "status"]


def _as_row(sub: StoredSubmission) -> dict:
    return {
        "timestamp": sub.timestamp,
        "name": sub.name,
        "email": sub.email,
        "subject": sub.subject,
        "message": sub.message,
        "status": sub.status,
    }


def export_submissions(submissions: list[StoredSubmission], format: str, output_path: str) -> None:
    """Export submissions to a file.

    Args:
        submissions: Submissions to export, in the order they should appear.
        format: Output format, either 'csv' or 'json'.
        output_path: Path to write the output file.
    """
    if format == "csv":
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=_FIELDS)
            writer.writeheader()
            for sub in submissions:
                writer.writerow(_as_row(sub))
    elif format == "json":
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump([_as_row(sub) for sub in submissions], f, indent=2, ensure_ascii=False)
    else:
        raise ValueError(f"Unsupported export format: {format}")

    print(f"Results saved to {output_path}")
