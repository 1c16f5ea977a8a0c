"""Submission gate - one accept/reject decision per submission.

The gate runs field validation, then the optional rate-limit and CAPTCHA
capabilities. Both capabilities fail closed: an error or an ambiguous answer
rejects the submission. The gate never stores or notifies anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .classifier import classify_fields
from .constants import SPAM_THRESHOLD
from .models import ReasonCode, Submission, ValidationResult
from .ports import CaptchaVerifier, RateLimiter
from .rules import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateConfig:
    """Settings the gate is constructed with; immutable for the process lifetime."""

    spam_threshold: float = SPAM_THRESHOLD
    require_captcha: bool = False
    captcha_verifier: Optional[CaptchaVerifier] = None
    rate_limiter: Optional[RateLimiter] = None
    rules: RuleSet = field(default=DEFAULT_RULES)


def _check_rate_limit(submission: Submission, limiter: RateLimiter) -> Optional[ValidationResult]:
    try:
        allowed = limiter.allow(submission.client_address)
    except Exception:  # noqa: BLE001
        logger.exception("Rate limiter failed; rejecting submission")
        allowed = False

    if allowed is True:
        return None
    return ValidationResult.reject(ReasonCode.RATE_LIMITED, "Rate limit exceeded")


def _check_captcha(submission: Submission, verifier: Optional[CaptchaVerifier]) -> Optional[ValidationResult]:
    failed = ValidationResult.reject(ReasonCode.CAPTCHA_FAILED, "CAPTCHA verification failed")

    if not submission.captcha_token:
        logger.info("CAPTCHA token missing")
        return failed
    if verifier is None:
        logger.error("CAPTCHA required but no verifier is configured")
        return failed

    try:
        verified = verifier.verify(submission.captcha_token, submission.client_address)
    except Exception as exc:  # noqa: BLE001
        logger.warning("CAPTCHA verification error: %s", exc)
        return failed

    if verified is not True:
        logger.info("CAPTCHA verification rejected the token")
        return failed
    return None


def evaluate(submission: Submission, config: GateConfig) -> ValidationResult:
    """Decide whether a submission is accepted.

    Returns the first rejection in check order; never raises for an
    expected rejection or for a failing capability.
    """
    result = classify_fields(
        submission.name,
        submission.email,
        submission.subject,
        submission.message,
        rules=config.rules,
        spam_threshold=config.spam_threshold,
    )
    if not result.accepted:
        logger.info("Submission rejected: %s (%s)", result.reason_code.value, result.reason_detail)
        return result

    if config.rate_limiter is not None:
        rejection = _check_rate_limit(submission, config.rate_limiter)
        if rejection:
            logger.info("Submission rejected: %s", rejection.reason_code.value)
            return rejection

    if config.require_captcha:
        rejection = _check_captcha(submission, config.captcha_verifier)
        if rejection:
            return rejection

    return result
