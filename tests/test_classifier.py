"""Tests for the content classifier."""

import pytest

from contact_spam_guard.classifier import caps_ratio, check_email, classify, classify_fields, count_foreign_script
from contact_spam_guard.models import ReasonCode


# --- classify ---


def test_critical_pattern_is_spam_regardless_of_context():
    """A single critical match rejects even in otherwise polite text."""
    verdict = classify("Dear team, thanks for the lovely work. Also: viagra.")
    assert verdict.is_spam is True
    assert verdict.triggered_critical_rule == "pharma"
    assert verdict.score == 5


def test_critical_patterns_ignore_case():
    verdict = classify("Best CASINO in town")
    assert verdict.is_spam is True
    assert verdict.triggered_critical_rule == "gambling"


def test_critical_score_follows_threshold():
    verdict = classify("cheap cialis", spam_threshold=8)
    assert verdict.score == 8


def test_clean_text_scores_zero():
    verdict = classify("Hi, I'd like a quote for a 2-bedroom renovation, thanks!")
    assert verdict.is_spam is False
    assert verdict.score == 0
    assert verdict.hits == ()
    assert verdict.triggered_critical_rule is None


def test_promotional_shouting_is_spam():
    assert classify("FREE FREE FREE!!! Click here now to win $$$").is_spam is True


def test_promotional_shouting_without_critical_phrase_is_scored():
    """Exclamation run (3) plus three promotional words (1 each) reaches the threshold."""
    verdict = classify("FREE FREE FREE!!! win big")
    assert verdict.triggered_critical_rule is None
    assert verdict.score == 6
    assert verdict.is_spam is True
    assert dict(verdict.hits) == {"excessive_exclamation": 1, "promotional_words": 3}


def test_scored_rules_accumulate_per_occurrence():
    verdict = classify("Great deal!!! Really!!!")
    assert verdict.score == 6
    assert dict(verdict.hits) == {"excessive_exclamation": 2}


def test_below_threshold_is_not_spam():
    verdict = classify("Visit https://example.com for details")
    assert verdict.score == 2
    assert verdict.is_spam is False


def test_custom_threshold():
    assert classify("Visit https://example.com for details", spam_threshold=2).is_spam is True


def test_caps_rule_is_case_sensitive():
    assert classify("HELLO there").score == 2
    assert classify("hello there").score == 0


def test_promotional_words_ignore_case():
    assert dict(classify("FREE estimate").hits) == {"promotional_words": 1}


def test_repeated_chars():
    assert dict(classify("soooooo good").hits) == {"repeated_chars": 1}


def test_long_numbers_and_money():
    assert classify("Call 12345678901").score == 2
    assert classify("$100 and $200").score == 2


def test_empty_or_non_text_is_not_spam():
    for value in ("", None, 42, ["viagra"]):
        verdict = classify(value)
        assert verdict.is_spam is False
        assert verdict.score == 0


def test_score_is_monotonic_in_match_count():
    """Adding another occurrence never lowers the score."""
    scores = [classify(" ".join(["sale"] * n)).score for n in range(1, 8)]
    assert scores == sorted(scores)
    assert scores[-1] > scores[0]


def test_classify_is_deterministic():
    text = "Big SALE!!! Visit https://example.com now"
    assert classify(text) == classify(text)


def test_short_cjk_name_gets_no_script_penalty():
    verdict = classify("李明")
    assert verdict.score == 0
    assert verdict.hits == ()


def test_single_cjk_char_in_latin_text_gets_no_penalty():
    assert classify("Hello 李").score == 0


def test_long_foreign_script_text_gets_penalty():
    verdict = classify("这是一个很长的中文句子")
    assert verdict.score == 4
    assert verdict.is_spam is False
    assert dict(verdict.hits)["foreign_script"] == 11


def test_cyrillic_paragraph_gets_penalty():
    verdict = classify("Привет, как дела? Это сообщение написано на русском языке.")
    assert verdict.score == 4


def test_count_foreign_script():
    assert count_foreign_script("abc Привет 中文 שלום مرحبا") == 6 + 2 + 4 + 5


# --- helpers ---


def test_check_email_shapes():
    assert check_email("a+b@example.com") is None
    assert check_email("not-an-email") == "Invalid email format"
    assert "leading_digits" in check_email("12345678@test.com")
    assert "disposable_domain" in check_email("john@tempmail.com")
    assert "disposable_domain" in check_email("john@FAKE.org")
    assert "multiple_plus" in check_email("a+b+c@example.com")


def test_caps_ratio():
    assert caps_ratio("") == 0.0
    assert caps_ratio("ABcd") == 0.5


# --- classify_fields ---


def _fields(valid_fields, **overrides):
    return {**valid_fields, **overrides}


def test_valid_fields_accepted(valid_fields):
    result = classify_fields(**valid_fields)
    assert result.accepted is True
    assert result.reason_code is ReasonCode.ACCEPTED


def test_missing_field(valid_fields):
    result = classify_fields(**_fields(valid_fields, message="   "))
    assert result.accepted is False
    assert result.reason_code is ReasonCode.MISSING_FIELD
    assert "message" in result.reason_detail


def test_non_string_field_counts_as_missing(valid_fields):
    result = classify_fields(**_fields(valid_fields, subject=None))
    assert result.reason_code is ReasonCode.MISSING_FIELD


def test_prohibited_message(valid_fields):
    result = classify_fields(**_fields(valid_fields, message="Come and play at our casino tonight."))
    assert result.reason_code is ReasonCode.PROHIBITED_CONTENT
    assert result.reason_detail == "Message contains prohibited content"


def test_prohibited_subject(valid_fields):
    result = classify_fields(**_fields(valid_fields, subject="Cheap replica watches"))
    assert result.reason_code is ReasonCode.PROHIBITED_CONTENT
    assert result.reason_detail == "Subject contains prohibited content"


def test_prohibited_combined_text(valid_fields):
    """Fields that pass alone can still add up to spam together."""
    result = classify_fields(
        **_fields(valid_fields, subject="Question!!!", message="Can you call me back please!!!")
    )
    assert result.reason_code is ReasonCode.PROHIBITED_CONTENT
    assert result.reason_detail == "Submission contains prohibited content"


def test_message_too_short(valid_fields):
    result = classify_fields(**_fields(valid_fields, message="Too short"))
    assert result.reason_code is ReasonCode.INVALID_LENGTH
    assert result.reason_detail == "Message too short"


def test_message_too_long(valid_fields):
    result = classify_fields(**_fields(valid_fields, message="word " * 1001))
    assert result.reason_code is ReasonCode.INVALID_LENGTH
    assert result.reason_detail == "Message too long"


def test_subject_length_bounds(valid_fields):
    assert classify_fields(**_fields(valid_fields, subject="Hi")).reason_detail == "Subject too short"
    assert classify_fields(**_fields(valid_fields, subject="abc " * 60)).reason_detail == "Subject too long"


def test_cjk_name_is_invalid_name_not_prohibited(valid_fields):
    result = classify_fields(**_fields(valid_fields, name="李明"))
    assert result.reason_code is ReasonCode.INVALID_NAME


def test_name_with_digits_is_invalid(valid_fields):
    assert classify_fields(**_fields(valid_fields, name="John3")).reason_code is ReasonCode.INVALID_NAME


def test_suspicious_email_rejected(valid_fields):
    result = classify_fields(**_fields(valid_fields, email="12345678@test.com"))
    assert result.reason_code is ReasonCode.INVALID_EMAIL


def test_excessive_caps(valid_fields):
    result = classify_fields(**_fields(valid_fields, message="CALL ME BACK SOON RE THE ROOF JOB"))
    assert result.reason_code is ReasonCode.EXCESSIVE_CAPS


def test_short_caps_message_is_exempt(valid_fields):
    assert classify_fields(**_fields(valid_fields, message="OK CALL ME NOW")).accepted is True


def test_first_failure_wins(valid_fields):
    """Prohibited content is reported before the bad email."""
    result = classify_fields(
        **_fields(valid_fields, email="nope", message="Come and play at our casino tonight.")
    )
    assert result.reason_code is ReasonCode.PROHIBITED_CONTENT


# --- exact length and capitalisation limits ---


@pytest.mark.parametrize(
    "field, value",
    [
        ("message", "Hello abcd"),
        ("message", "abcdefghij" * 500),
        ("subject", "Hey"),
        ("subject", "abcdefghij" * 20),
        ("name", "Al"),
        ("name", "Ab" * 25),
    ],
)
def test_lengths_at_the_limit_are_accepted(valid_fields, field, value):
    assert classify_fields(**_fields(valid_fields, **{field: value})).accepted is True


@pytest.mark.parametrize(
    "field, value, reason",
    [
        ("message", "Hello abc", ReasonCode.INVALID_LENGTH),
        ("message", "abcdefghij" * 500 + "k", ReasonCode.INVALID_LENGTH),
        ("subject", "Hi", ReasonCode.INVALID_LENGTH),
        ("subject", "abcdefghij" * 20 + "k", ReasonCode.INVALID_LENGTH),
        ("name", "A", ReasonCode.INVALID_NAME),
        ("name", "Ab" * 25 + "c", ReasonCode.INVALID_NAME),
    ],
)
def test_lengths_one_past_the_limit_are_rejected(valid_fields, field, value, reason):
    assert classify_fields(**_fields(valid_fields, **{field: value})).reason_code is reason


def test_all_caps_message_of_twenty_chars_is_exempt(valid_fields):
    message = "ABCD EFGH IJKL MN OP"
    assert len(message) == 20
    assert classify_fields(**_fields(valid_fields, message=message)).accepted is True


def test_all_caps_message_of_twenty_one_chars_is_rejected(valid_fields):
    message = "ABCD EFGH IJKL MNO PQ"
    assert len(message) == 21
    result = classify_fields(**_fields(valid_fields, message=message))
    assert result.reason_code is ReasonCode.EXCESSIVE_CAPS


def test_caps_ratio_of_exactly_half_is_allowed(valid_fields):
    message = "ABcd" * 6
    assert caps_ratio(message) == 0.5
    assert classify_fields(**_fields(valid_fields, message=message)).accepted is True
    result = classify_fields(**_fields(valid_fields, message=message + "E"))
    assert result.reason_code is ReasonCode.EXCESSIVE_CAPS


def test_disposable_rule_matches_domain_prefix():
    """The disposable rule looks at how the domain starts, not the whole label."""
    assert "disposable_domain" in check_email("john@testing.com")
    assert "disposable_domain" in check_email("john@spammy.net")
    assert check_email("john@contest.com") is None
