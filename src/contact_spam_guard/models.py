"""Data models for Contact Spam Guard."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from .constants import CAPTCHA_FIELD


class ContactGuardError(Exception):
    """Base class for errors raised by Contact Spam Guard."""


class MalformedSubmission(ContactGuardError):
    """The request body could not be turned into a Submission."""


class CaptchaVerificationError(ContactGuardError):
    """The CAPTCHA service could not be reached or answered nonsense."""


class RulesConfigError(ContactGuardError):
    """A rules file is missing fields or contains an invalid pattern."""


class AuthenticationRequired(ContactGuardError):
    """No usable Google token and the consent flow is not allowed to run."""


class ReasonCode(str, Enum):
    """Outcome codes returned by the classifier and the gate."""

    ACCEPTED = "ACCEPTED"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_LENGTH = "INVALID_LENGTH"
    INVALID_NAME = "INVALID_NAME"
    INVALID_EMAIL = "INVALID_EMAIL"
    PROHIBITED_CONTENT = "PROHIBITED_CONTENT"
    EXCESSIVE_CAPS = "EXCESSIVE_CAPS"
    CAPTCHA_FAILED = "CAPTCHA_FAILED"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class SubmissionPayload(BaseModel):
    """Shape of the JSON body posted by the contact form.

    Absent or null fields are allowed here so that field validation can
    report them; anything that is not a string is a malformed request.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: StrictStr | None = None
    email: StrictStr | None = None
    subject: StrictStr | None = None
    message: StrictStr | None = None
    captcha_token: StrictStr | None = Field(default=None, alias=CAPTCHA_FIELD)


@dataclass(frozen=True)
class Submission:
    """A single contact form submission."""

    name: str
    email: str
    subject: str
    message: str
    captcha_token: str | None = None
    client_address: str | None = None  # never persisted

    @classmethod
    def from_payload(
        cls, payload: Any, client_address: str | None = None
    ) -> Submission:
        """Build a Submission from a decoded JSON body.

        Raises :class:`MalformedSubmission` when the body is not an object
        or a field is not a string.
        """
        try:
            body = SubmissionPayload.model_validate(payload)
        except ValidationError as exc:
            raise MalformedSubmission(f"Malformed submission: {exc}") from exc

        return cls(
            name=body.name or "",
            email=body.email or "",
            subject=body.subject or "",
            message=body.message or "",
            captcha_token=body.captcha_token or None,
            client_address=client_address,
        )


@dataclass(frozen=True)
class ClassificationVerdict:
    """Result of scoring a single piece of text."""

    is_spam: bool
    score: float
    triggered_critical_rule: str | None = None
    hits: tuple[tuple[str, int], ...] = ()  # (rule label, occurrences)


@dataclass(frozen=True)
class ValidationResult:
    """Terminal accept/reject decision for a submission."""

    accepted: bool
    reason_code: ReasonCode
    reason_detail: str

    @classmethod
    def accept(cls, detail: str = "Validation passed") -> ValidationResult:
        return cls(accepted=True, reason_code=ReasonCode.ACCEPTED, reason_detail=detail)

    @classmethod
    def reject(cls, code: ReasonCode, detail: str) -> ValidationResult:
        return cls(accepted=False, reason_code=code, reason_detail=detail)


@dataclass(frozen=True)
class StoredSubmission:
    """A submission row read back from the local store."""

    id: int
    timestamp: str
    name: str
    email: str
    subject: str
    message: str
    status: str
