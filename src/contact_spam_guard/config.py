"""Deployment settings, read once from the environment at process start."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .constants import (
    CAPTCHA_TIMEOUT_SECONDS,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
    SHEET_NAME,
    SPAM_THRESHOLD,
    STORE_DB_PATH,
)


class Settings(BaseSettings):
    """Everything the HTTP app needs to wire its adapters.

    All env vars are prefixed with ``CONTACT_GUARD_`` except the Turnstile
    secret, which keeps Cloudflare's conventional ``TURNSTILE_SECRET_KEY``.
    Example: ``CONTACT_GUARD_SPAM_THRESHOLD=7``
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTACT_GUARD_",
        env_ignore_empty=True,
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    # --- Classification ------------------------------------------------------
    spam_threshold: float = Field(
        default=SPAM_THRESHOLD,
        gt=0,
        allow_inf_nan=False,
        description="Score at or above which text is spam",
    )
    rules_file: Path | None = Field(default=None, description="JSON rules file")

    # --- CAPTCHA -------------------------------------------------------------
    require_captcha: bool = Field(default=False, description="Reject submissions without a verified token")
    turnstile_secret: str | None = Field(
        default=None,
        validation_alias="TURNSTILE_SECRET_KEY",
        description="Cloudflare Turnstile secret key",
    )
    captcha_timeout: float = Field(default=CAPTCHA_TIMEOUT_SECONDS, gt=0, allow_inf_nan=False)

    # --- Rate limiting -------------------------------------------------------
    rate_limit: int = Field(
        default=RATE_LIMIT_MAX_REQUESTS,
        ge=0,
        description="Submissions per address per window; 0 disables rate limiting",
    )
    rate_window: float = Field(default=RATE_LIMIT_WINDOW_SECONDS, gt=0, allow_inf_nan=False)

    # --- Storage -------------------------------------------------------------
    store: Literal["sqlite", "sheets"] = Field(default="sqlite", description="Submission store backend")
    db_path: Path = Field(default=STORE_DB_PATH, description="SQLite store location")
    spreadsheet_id: str | None = None
    sheet_name: str = SHEET_NAME

    # --- Notifications -------------------------------------------------------
    notify: bool = Field(default=False, description="Send operator and acknowledgment emails")
    company_email: str | None = None
    company_name: str = "Our Team"

    # --- Server --------------------------------------------------------------
    allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=("*",),
        description="Comma-separated CORS origins",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("store", "log_level", mode="before")
    @classmethod
    def _normalise_case(cls, value, info):
        if not isinstance(value, str):
            return value
        return value.strip().lower() if info.field_name == "store" else value.strip().upper()

    @field_validator("db_path")
    @classmethod
    def _expand_db_path(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        origins = tuple(o.strip() for o in value if o.strip())
        return origins or ("*",)

    @model_validator(mode="after")
    def _check_backends(self) -> Settings:
        if self.store == "sheets" and not self.spreadsheet_id:
            raise ValueError("CONTACT_GUARD_SPREADSHEET_ID is required for the sheets store")
        if self.notify and not self.company_email:
            raise ValueError("CONTACT_GUARD_COMPANY_EMAIL is required when notifications are on")
        return self
