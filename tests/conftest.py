"""Shared fixtures for tests."""

from __future__ import annotations

import pytest

from contact_spam_guard.models import Submission


class RecordingVerifier:
    """CAPTCHA verifier stub that remembers how it was called."""

    def __init__(self, result=True, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    def verify(self, token: str, client_address: str | None) -> bool:
        self.calls.append((token, client_address))
        if self.error is not None:
            raise self.error
        return self.result


class StaticRateLimiter:
    def __init__(self, allowed=True, error: Exception | None = None) -> None:
        self.allowed = allowed
        self.error = error
        self.calls: list[str | None] = []

    def allow(self, client_address: str | None) -> bool:
        self.calls.append(client_address)
        if self.error is not None:
            raise self.error
        return self.allowed


@pytest.fixture
def valid_fields() -> dict:
    return {
        "name": "Jane O'Neil",
        "email": "jane.doe@example.com",
        "subject": "Kitchen renovation quote",
        "message": "Hi, I'd like a quote for a 2-bedroom renovation, thanks!",
    }


@pytest.fixture
def valid_submission(valid_fields: dict) -> Submission:
    return Submission(**valid_fields, captcha_token="tok_123", client_address="198.51.100.7")


@pytest.fixture
def valid_payload(valid_fields: dict) -> dict:
    return {**valid_fields, "cf-turnstile-response": "tok_123"}


@pytest.fixture
def recording_verifier() -> RecordingVerifier:
    return RecordingVerifier()


@pytest.fixture
def make_verifier():
    """Factory for CAPTCHA verifier stubs with a chosen result or error."""
    return RecordingVerifier


@pytest.fixture
def make_limiter():
    """Factory for rate limiter stubs with a chosen answer or error."""
    return StaticRateLimiter
