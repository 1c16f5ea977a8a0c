"""Google Sheets and Gmail adapters for accepted submissions."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from googleapiclient.errors import HttpError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from contact_spam_guard.constants import SHEET_HEADERS, SHEET_NAME, SUBMISSION_STATUS_NEW
from contact_spam_guard.models import Submission
from contact_spam_guard.notifications import (
    build_mime_message,
    render_acknowledgment,
    render_operator_email,
)

logger = logging.getLogger(__name__)


def _is_retryable_http_error(exc: BaseException) -> bool:
    return isinstance(exc, HttpError) and exc.resp.status in (429, 500, 503)


_api_retry = retry(
    retry=retry_if_exception(_is_retryable_http_error),
    wait=wait_exponential(multiplier=1, min=1, max=30),
    stop=stop_after_attempt(4),
    reraise=True,
)


def _quoted(sheet_name: str) -> str:
    return "'" + sheet_name.replace("'", "''") + "'"


class SheetsRecorder:
    """Append accepted submissions as rows of a Google Sheet."""

    def __init__(self, service, spreadsheet_id: str, sheet_name: str = SHEET_NAME) -> None:
        self._service = service
        self._spreadsheet_id = spreadsheet_id
        self._sheet_name = sheet_name
        self._sheet_ready = False
        self._sheet_lock = threading.Lock()

    @_api_retry
    def _ensure_sheet(self) -> None:
        """Create the tab with a header row the first time it is needed."""
        meta = self._service.spreadsheets().get(
            spreadsheetId=self._spreadsheet_id,
            fields="sheets.properties.title",
        ).execute()
        titles = {s["properties"]["title"] for s in meta.get("sheets", [])}
        if self._sheet_name not in titles:
            self._service.spreadsheets().batchUpdate(
                spreadsheetId=self._spreadsheet_id,
                body={"requests": [{"addSheet": {"properties": {"title": self._sheet_name}}}]},
            ).execute()
            self._service.spreadsheets().values().update(
                spreadsheetId=self._spreadsheet_id,
                range=f"{_quoted(self._sheet_name)}!A1",
                valueInputOption="RAW",
                body={"values": [SHEET_HEADERS]},
            ).execute()
            logger.info("Created sheet %s", self._sheet_name)
        self._sheet_ready = True

    @_api_retry
    def _append(self, row: list[str]) -> None:
        self._service.spreadsheets().values().append(
            spreadsheetId=self._spreadsheet_id,
            range=f"{_quoted(self._sheet_name)}!A1",
            valueInputOption="RAW",
            insertDataOption="INSERT_ROWS",
            body={"values": [row]},
        ).execute()

    def record(self, submission: Submission, timestamp: datetime) -> bool:
        with self._sheet_lock:
            if not self._sheet_ready:
                self._ensure_sheet()

        self._append(
            [
                timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                submission.name,
                submission.email,
                submission.subject,
                submission.message,
                SUBMISSION_STATUS_NEW,
            ]
        )
        return True


class GmailNotifier:
    """Send the operator notification and the customer acknowledgment via Gmail."""

    def __init__(self, service, company_email: str, company_name: str) -> None:
        self._service = service
        self._company_email = company_email
        self._company_name = company_name

    @_api_retry
    def _send(self, body: dict) -> None:
        self._service.users().messages().send(userId="me", body=body).execute()

    def send(self, submission: Submission) -> None:
        now = datetime.now(timezone.utc)
        operator = render_operator_email(submission, self._company_email, now)
        self._send(build_mime_message(operator))

        ack = render_acknowledgment(submission, self._company_name, self._company_email)
        self._send(build_mime_message(ack))
        logger.info("Operator notification and acknowledgment sent")
