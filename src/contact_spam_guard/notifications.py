"""HTML email bodies for submission notifications."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from jinja2 import Environment, PackageLoader, select_autoescape

from .models import Submission

# Every value rendered into these templates is escaped.
jinja_env = Environment(
    loader=PackageLoader("contact_spam_guard", "templates"),
    autoescape=select_autoescape(["html", "xml"]),
)


@dataclass(frozen=True)
class EmailContent:
    """A rendered email ready to be wrapped in MIME."""

    to: str
    subject: str
    html: str
    reply_to: str | None = None


def render_operator_email(submission: Submission, to: str, submitted_at: datetime) -> EmailContent:
    """Notification for the site operator; replies go to the submitter."""
    html = jinja_env.get_template("operator_email.html").render(
        submission=submission,
        submitted_at=submitted_at.strftime("%B %d, %Y at %H:%M:%S"),
    )
    return EmailContent(
        to=to,
        subject=f"New Contact Form Submission: {submission.subject}",
        html=html,
        reply_to=submission.email,
    )


def render_acknowledgment(submission: Submission, company_name: str, company_email: str) -> EmailContent:
    """Auto-reply to the person who filled in the form."""
    html = jinja_env.get_template("acknowledgment_email.html").render(
        submission=submission,
        company_name=company_name,
        company_email=company_email,
    )
    return EmailContent(
        to=submission.email,
        subject=f"Thank you for contacting {company_name}",
        html=html,
    )


def _header(value: str) -> str:
    return " ".join(value.split())


def build_mime_message(content: EmailContent, sender: str = "me") -> dict:
    """Wrap rendered content in the ``{"raw": ...}`` body the Gmail API expects."""
    mime = MIMEMultipart("alternative")
    mime["To"] = _header(content.to)
    mime["Subject"] = _header(content.subject)
    if sender != "me":
        mime["From"] = sender
    if content.reply_to:
        mime["Reply-To"] = _header(content.reply_to)
    mime.attach(MIMEText(content.html, "html", "utf-8"))

    raw = base64.urlsafe_b64encode(mime.as_bytes()).decode("ascii")
    return {"raw": raw}
