"""Ports (interfaces) consumed by the gate and the HTTP layer.

Adapters for CAPTCHA verification, rate limiting, persistence and
notification implement these so the core never depends on a backend.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .models import Submission


class CaptchaVerifier(Protocol):
    """Checks a CAPTCHA token with a third-party service."""

    def verify(self, token: str, client_address: Optional[str]) -> bool:
        ...


class RateLimiter(Protocol):
    """Decides whether a client may submit right now."""

    def allow(self, client_address: Optional[str]) -> bool:
        ...


class SubmissionRecorder(Protocol):
    """Append-only store of accepted submissions."""

    def record(self, submission: Submission, timestamp: datetime) -> bool:
        ...


class Notifier(Protocol):
    """Sends the operator notification and the customer acknowledgment."""

    def send(self, submission: Submission) -> None:
        ...
