"""HTTP entry point for contact form submissions."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import get_gmail_service, get_sheets_service
from .captcha import TurnstileVerifier
from .config import Settings
from .constants import LOG_PREVIEW_CHARS
from .gate import GateConfig, evaluate
from .google_client import GmailNotifier, SheetsRecorder
from .models import MalformedSubmission, ReasonCode, Submission
from .ports import Notifier, SubmissionRecorder
from .rate_limit import InMemoryRateLimiter
from .rules import DEFAULT_RULES, load_rules
from .store import SubmissionStore

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, reason: Optional[ReasonCode] = None) -> JSONResponse:
    body: dict = {"success": False, "error": error}
    if reason is not None:
        body["reason"] = reason.value
    return JSONResponse(body, status_code=status_code)


def _internal_error() -> JSONResponse:
    return _error(500, "Internal server error", ReasonCode.INTERNAL_ERROR)


def client_address(request: Request) -> Optional[str]:
    """First hop of X-Forwarded-For, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def create_app(
    gate_config: GateConfig,
    recorder: SubmissionRecorder,
    notifier: Optional[Notifier] = None,
    allowed_origins: tuple[str, ...] = ("*",),
) -> FastAPI:
    """Create the FastAPI app around an already-built gate config and adapters."""
    app = FastAPI(title="contact-spam-guard", docs_url=None, redoc_url=None)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(allowed_origins),
        allow_methods=["POST"],
        allow_headers=["Content-Type"],
    )

    @app.get("/api/health")
    async def health() -> JSONResponse:
        return JSONResponse({"message": "Contact form endpoint is working!"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return _error(405, "Method not allowed")
        return await http_exception_handler(request, exc)

    @app.post("/api/contact")
    async def contact(request: Request) -> JSONResponse:
        try:
            payload = await request.json()
            submission = Submission.from_payload(payload, client_address=client_address(request))
        except (json.JSONDecodeError, UnicodeDecodeError, MalformedSubmission) as exc:
            logger.warning("Rejected malformed request body: %s", exc)
            return _internal_error()
        except Exception:
            logger.exception("Failed to read request body")
            return _internal_error()

        try:
            result = await run_in_threadpool(evaluate, submission, gate_config)
        except Exception:
            logger.exception("Gate evaluation failed")
            return _internal_error()

        if not result.accepted:
            status_code = 429 if result.reason_code is ReasonCode.RATE_LIMITED else 400
            return _error(status_code, result.reason_detail, result.reason_code)

        try:
            recorded = await run_in_threadpool(recorder.record, submission, datetime.now(timezone.utc))
        except Exception:
            logger.exception("Failed to record submission")
            return _internal_error()
        if not recorded:
            logger.error("Recorder refused the submission")
            return _internal_error()

        if notifier is not None:
            try:
                await run_in_threadpool(notifier.send, submission)
            except Exception:
                # The submission is already stored; a lost email is not the caller's problem.
                logger.exception("Failed to send notifications")

        preview = submission.message[:LOG_PREVIEW_CHARS]
        if len(submission.message) > LOG_PREVIEW_CHARS:
            preview += "..."
        logger.info("Accepted submission: subject=%r message=%r", submission.subject, preview)

        return JSONResponse({"success": True, "message": "Message sent successfully!"})

    return app


def build_gate_config(settings: Settings) -> GateConfig:
    """Turn deployment settings into the immutable gate configuration."""
    rules = load_rules(settings.rules_file) if settings.rules_file else DEFAULT_RULES

    verifier = None
    if settings.turnstile_secret:
        verifier = TurnstileVerifier(settings.turnstile_secret, timeout=settings.captcha_timeout)
    elif settings.require_captcha:
        logger.warning(
            "CAPTCHA is required but TURNSTILE_SECRET_KEY is not set. "
            "Every submission will be rejected!"
        )

    limiter = None
    if settings.rate_limit > 0:
        limiter = InMemoryRateLimiter(settings.rate_limit, settings.rate_window)

    return GateConfig(
        spam_threshold=settings.spam_threshold,
        require_captcha=settings.require_captcha,
        captcha_verifier=verifier,
        rate_limiter=limiter,
        rules=rules,
    )


def build_app(settings: Settings) -> FastAPI:
    """Wire adapters from settings and create the app."""
    gate_config = build_gate_config(settings)

    if settings.store == "sheets":
        recorder: SubmissionRecorder = SheetsRecorder(
            get_sheets_service(), settings.spreadsheet_id, settings.sheet_name
        )
    else:
        recorder = SubmissionStore(db_path=settings.db_path)

    notifier = None
    if settings.notify:
        notifier = GmailNotifier(get_gmail_service(), settings.company_email, settings.company_name)

    return create_app(gate_config, recorder, notifier, allowed_origins=settings.allowed_origins)
