"""Spam scoring and field validation for contact submissions."""

from __future__ import annotations

import re

from .constants import (
    CAPS_MIN_MESSAGE_LENGTH,
    CAPS_RATIO_LIMIT,
    EMAIL_PATTERN,
    MAX_PLUS_SIGNS_IN_LOCAL_PART,
    MESSAGE_MAX_LENGTH,
    MESSAGE_MIN_LENGTH,
    NAME_PATTERN,
    SPAM_THRESHOLD,
    SUBJECT_MAX_LENGTH,
    SUBJECT_MIN_LENGTH,
    SUSPICIOUS_EMAIL_PATTERNS,
)
from .models import ClassificationVerdict, ReasonCode, ValidationResult
from .rules import DEFAULT_RULES, RuleSet

_NAME_RE = re.compile(NAME_PATTERN)
_EMAIL_RE = re.compile(EMAIL_PATTERN)
_SUSPICIOUS_EMAIL_RES = [
    (label, re.compile(pattern, re.IGNORECASE)) for label, pattern in SUSPICIOUS_EMAIL_PATTERNS
]
_UPPER_RE = re.compile(r"[A-Z]")


def count_foreign_script(text: str, rules: RuleSet = DEFAULT_RULES) -> int:
    """Count characters that fall inside the configured script ranges."""
    return sum(
        1
        for ch in text
        if any(start <= ord(ch) <= end for _, start, end in rules.script_ranges)
    )


def classify(
    text: object,
    rules: RuleSet = DEFAULT_RULES,
    spam_threshold: float = SPAM_THRESHOLD,
) -> ClassificationVerdict:
    """Score a piece of text against the rule set.

    Critical rules short-circuit: the first one that matches makes the text
    spam with ``score == spam_threshold``. Otherwise every scored rule adds
    ``weight * occurrences`` and a heavy share of non-Latin script adds a
    fixed penalty.
    """
    if not text or not isinstance(text, str):
        return ClassificationVerdict(is_spam=False, score=0)

    for rule in rules.critical:
        if rule.pattern.search(text):
            return ClassificationVerdict(
                is_spam=True,
                score=spam_threshold,
                triggered_critical_rule=rule.label,
                hits=((rule.label, 1),),
            )

    score = 0
    hits: list[tuple[str, int]] = []

    for rule in rules.scored:
        count = sum(1 for _ in rule.pattern.finditer(text))
        if count:
            score += count * rule.weight
            hits.append((rule.label, count))

    # A lone CJK character in a short field is over the ratio but not meaningful.
    foreign = count_foreign_script(text, rules)
    if foreign > len(text) * rules.foreign_script_ratio and foreign >= rules.foreign_script_min_chars:
        score += rules.foreign_script_penalty
        hits.append(("foreign_script", foreign))

    return ClassificationVerdict(is_spam=score >= spam_threshold, score=score, hits=tuple(hits))


def check_email(email: str) -> str | None:
    """Return a rejection detail for an unusable email address, else None."""
    if not _EMAIL_RE.match(email):
        return "Invalid email format"

    for label, pattern in _SUSPICIOUS_EMAIL_RES:
        if pattern.search(email):
            return f"Suspicious email pattern detected ({label})"

    local_part = email.rsplit("@", 1)[0]
    if local_part.count("+") > MAX_PLUS_SIGNS_IN_LOCAL_PART:
        return "Suspicious email pattern detected (multiple_plus)"

    return None


def caps_ratio(text: str) -> float:
    """Share of ASCII uppercase letters in text."""
    if not text:
        return 0.0
    return len(_UPPER_RE.findall(text)) / len(text)


def classify_fields(
    name: str,
    email: str,
    subject: str,
    message: str,
    rules: RuleSet = DEFAULT_RULES,
    spam_threshold: float = SPAM_THRESHOLD,
) -> ValidationResult:
    """Validate all four text fields of a submission.

    Checks run in a fixed order and only the first failure is reported:
    missing fields, prohibited content, lengths, name format, email shape,
    then capitalisation.
    """
    name, email, subject, message = (
        value.strip() if isinstance(value, str) else ""
        for value in (name, email, subject, message)
    )

    for field_name, value in (("name", name), ("email", email), ("subject", subject), ("message", message)):
        if not value:
            return ValidationResult.reject(ReasonCode.MISSING_FIELD, f"Missing required field: {field_name}")

    for field_name, value in (
        ("Message", message),
        ("Subject", subject),
        ("Name", name),
        ("Submission", f"{name} {subject} {message}"),
    ):
        if classify(value, rules, spam_threshold).is_spam:
            return ValidationResult.reject(
                ReasonCode.PROHIBITED_CONTENT, f"{field_name} contains prohibited content"
            )

    if len(message) < MESSAGE_MIN_LENGTH:
        return ValidationResult.reject(ReasonCode.INVALID_LENGTH, "Message too short")
    if len(message) > MESSAGE_MAX_LENGTH:
        return ValidationResult.reject(ReasonCode.INVALID_LENGTH, "Message too long")
    if len(subject) < SUBJECT_MIN_LENGTH:
        return ValidationResult.reject(ReasonCode.INVALID_LENGTH, "Subject too short")
    if len(subject) > SUBJECT_MAX_LENGTH:
        return ValidationResult.reject(ReasonCode.INVALID_LENGTH, "Subject too long")

    if not _NAME_RE.fullmatch(name):
        return ValidationResult.reject(ReasonCode.INVALID_NAME, "Invalid name format")

    email_problem = check_email(email)
    if email_problem:
        return ValidationResult.reject(ReasonCode.INVALID_EMAIL, email_problem)

    if len(message) > CAPS_MIN_MESSAGE_LENGTH and caps_ratio(message) > CAPS_RATIO_LIMIT:
        return ValidationResult.reject(ReasonCode.EXCESSIVE_CAPS, "Excessive capitalization detected")

    return ValidationResult.accept()
