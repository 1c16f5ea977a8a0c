"""SQLite store for accepted submissions."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime
from pathlib import Path

from .constants import STORE_DB_PATH, SUBMISSION_STATUS_NEW
from .models import StoredSubmission, Submission

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS submissions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT,
    name TEXT,
    email TEXT,
    subject TEXT,
    message TEXT,
    status TEXT
);
"""


class SubmissionStore:
    """Append-only SQLite store of accepted submissions.

    The client address is deliberately not a column.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or STORE_DB_PATH
        self.db_path = Path(self.db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        # Requests are recorded from a worker thread pool; every use of the
        # shared connection goes through _lock.
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._lock = threading.Lock()
        self._conn.row_factory = sqlite3.Row
        self._create_tables()

    def _create_tables(self) -> None:
        self._conn.executescript(_CREATE_TABLES_SQL)

    # --- public API ---

    def record(self, submission: Submission, timestamp: datetime) -> bool:
        """Append one submission in its own transaction."""
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT INTO submissions (timestamp, name, email, subject, message, status) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    timestamp.isoformat(),
                    submission.name,
                    submission.email,
                    submission.subject,
                    submission.message,
                    SUBMISSION_STATUS_NEW,
                ),
            )
        return True

    def list_recent(self, limit: int | None = None) -> list[StoredSubmission]:
        """Return submissions, newest first."""
        sql = "SELECT * FROM submissions ORDER BY id DESC"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)

        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [
            StoredSubmission(
                id=r["id"],
                timestamp=r["timestamp"],
                name=r["name"],
                email=r["email"],
                subject=r["subject"],
                message=r["message"],
                status=r["status"],
            )
            for r in rows
        ]

    def count(self) -> int:
        with self._lock:
            return self._count()

    def _count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) AS c FROM submissions").fetchone()["c"]

    def clear(self) -> None:
        """Drop and recreate all tables."""
        with self._lock:
            self._conn.executescript("DROP TABLE IF EXISTS submissions;")
            self._create_tables()

    def get_info(self) -> dict:
        """Return store statistics."""
        file_size = self.db_path.stat().st_size if self.db_path.exists() else 0

        with self._lock:
            last_row = self._conn.execute(
                "SELECT timestamp FROM submissions ORDER BY id DESC LIMIT 1"
            ).fetchone()
            submission_count = self._count()

        return {
            "db_file_size": file_size,
            "last_submission_date": last_row["timestamp"] if last_row else None,
            "submission_count": submission_count,
        }

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()

    # --- context manager ---

    def __enter__(self) -> SubmissionStore:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()
