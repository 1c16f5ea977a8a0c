"""Cloudflare Turnstile CAPTCHA verification."""

from __future__ import annotations

import logging

import httpx

from .constants import CAPTCHA_TIMEOUT_SECONDS, TURNSTILE_VERIFY_URL
from .models import CaptchaVerificationError

logger = logging.getLogger(__name__)


class TurnstileVerifier:
    """Verify Turnstile tokens against the siteverify endpoint.

    Transport errors, timeouts, non-200 answers and malformed bodies raise
    :class:`CaptchaVerificationError`; the gate treats that as a failure.
    A well-formed ``{"success": false}`` answer returns False.
    """

    def __init__(
        self,
        secret_key: str,
        timeout: float = CAPTCHA_TIMEOUT_SECONDS,
        verify_url: str = TURNSTILE_VERIFY_URL,
        client: httpx.Client | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._verify_url = verify_url
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def verify(self, token: str, client_address: str | None = None) -> bool:
        data = {"secret": self._secret_key, "response": token}
        if client_address:
            data["remoteip"] = client_address

        try:
            response = self._client.post(self._verify_url, data=data)
        except httpx.HTTPError as exc:
            raise CaptchaVerificationError(f"Turnstile request failed: {exc}") from exc

        if response.status_code != 200:
            raise CaptchaVerificationError(f"Turnstile API error: {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise CaptchaVerificationError("Turnstile returned a non-JSON body") from exc

        success = body.get("success") if isinstance(body, dict) else None
        if not isinstance(success, bool):
            raise CaptchaVerificationError("Turnstile response has no boolean 'success'")

        if not success:
            logger.info("Turnstile rejected token: %s", body.get("error-codes", []))
        return success

    def close(self) -> None:
        self._client.close()
