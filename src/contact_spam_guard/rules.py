"""Rule compilation for the content classifier.

Rule sets are plain data: they are compiled once, at import time for the
defaults or at startup for a JSON rules file, and are read-only afterwards.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import (
    CRITICAL_PATTERNS,
    FOREIGN_SCRIPT_MIN_CHARS,
    FOREIGN_SCRIPT_PENALTY,
    FOREIGN_SCRIPT_RANGES,
    FOREIGN_SCRIPT_RATIO,
    SCORED_PATTERNS,
)
from .models import RulesConfigError


@dataclass(frozen=True)
class PatternRule:
    """A compiled lexical rule."""

    label: str
    pattern: re.Pattern
    weight: int = 0


@dataclass(frozen=True)
class RuleSet:
    """Everything the classifier needs to score a piece of text."""

    critical: tuple[PatternRule, ...]
    scored: tuple[PatternRule, ...]
    script_ranges: tuple[tuple[str, int, int], ...] = tuple(FOREIGN_SCRIPT_RANGES)
    foreign_script_ratio: float = FOREIGN_SCRIPT_RATIO
    foreign_script_min_chars: int = FOREIGN_SCRIPT_MIN_CHARS
    foreign_script_penalty: int = FOREIGN_SCRIPT_PENALTY


# --- rules file schema ---


class _Entry(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CriticalRuleConfig(_Entry):
    label: str = Field(min_length=1)
    pattern: str
    enabled: bool = True


class ScoredRuleConfig(CriticalRuleConfig):
    weight: int = Field(default=1, ge=0)
    ignore_case: bool = False


class ScriptRangeConfig(_Entry):
    name: str = Field(min_length=1)
    start: int = Field(ge=0)
    end: int = Field(ge=0)


class ForeignScriptConfig(_Entry):
    ratio: float = Field(default=FOREIGN_SCRIPT_RATIO, ge=0, le=1)
    min_chars: int = Field(default=FOREIGN_SCRIPT_MIN_CHARS, ge=0)
    penalty: int = Field(default=FOREIGN_SCRIPT_PENALTY, ge=0)
    ranges: list[ScriptRangeConfig] | None = None


class RulesConfig(_Entry):
    """A JSON rules file. Absent sections keep the built-in defaults."""

    critical: list[CriticalRuleConfig] = Field(
        default_factory=lambda: list(CRITICAL_PATTERNS), validate_default=True
    )
    scored: list[ScoredRuleConfig] = Field(
        default_factory=lambda: list(SCORED_PATTERNS), validate_default=True
    )
    foreign_script: ForeignScriptConfig = Field(default_factory=ForeignScriptConfig)


# --- compilation ---


def _compile(label: str, pattern: str, flags: int) -> re.Pattern:
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise RulesConfigError(f"Invalid pattern for rule {label!r}: {exc}") from exc


def build_critical_rules(entries: Iterable[CriticalRuleConfig]) -> tuple[PatternRule, ...]:
    """Compile critical rules. They always match case-insensitively."""
    return tuple(
        PatternRule(label=e.label, pattern=_compile(e.label, e.pattern, re.IGNORECASE))
        for e in entries
        if e.enabled
    )


def build_scored_rules(entries: Iterable[ScoredRuleConfig]) -> tuple[PatternRule, ...]:
    """Compile scored rules.

    Scored rules run against the original-case text, so they are
    case-sensitive unless the entry sets ``ignore_case``.
    """
    return tuple(
        PatternRule(
            label=e.label,
            pattern=_compile(e.label, e.pattern, re.IGNORECASE if e.ignore_case else 0),
            weight=e.weight,
        )
        for e in entries
        if e.enabled
    )


def build_rules(config: dict | None = None) -> RuleSet:
    """Build a RuleSet from a config mapping, falling back to the defaults.

    Recognised keys: ``critical``, ``scored`` and ``foreign_script`` (with
    ``ratio``, ``min_chars``, ``penalty`` and ``ranges``).
    """
    try:
        parsed = RulesConfig.model_validate(config or {})
    except ValidationError as exc:
        raise RulesConfigError(f"Invalid rules config: {exc}") from exc

    critical = build_critical_rules(parsed.critical)
    scored = build_scored_rules(parsed.scored)

    labels = [r.label for r in critical] + [r.label for r in scored]
    duplicates = sorted({label for label in labels if labels.count(label) > 1})
    if duplicates:
        raise RulesConfigError(f"Duplicate rule labels: {', '.join(duplicates)}")

    script = parsed.foreign_script
    ranges = tuple(FOREIGN_SCRIPT_RANGES)
    if script.ranges is not None:
        ranges = tuple((r.name, r.start, r.end) for r in script.ranges)

    return RuleSet(
        critical=critical,
        scored=scored,
        script_ranges=ranges,
        foreign_script_ratio=script.ratio,
        foreign_script_min_chars=script.min_chars,
        foreign_script_penalty=script.penalty,
    )


def load_rules(path: Path | str) -> RuleSet:
    """Load and compile a JSON rules file."""
    path = Path(path)
    if not path.exists():
        raise RulesConfigError(f"Rules file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            config = json.load(f)
        except json.JSONDecodeError as exc:
            raise RulesConfigError(f"Rules file {path} is not valid JSON: {exc}") from exc

    if not isinstance(config, dict):
        raise RulesConfigError(f"Rules file {path} must contain a JSON object")
    return build_rules(config)


DEFAULT_RULES = build_rules()
