"""Transactional email through the external mail gateway (one GET per message)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

TEMPLATE_PROVISIONAL_PASSWORD = "senha"
TEMPLATE_WELCOME = "bemvindo"
TEMPLATE_RECOVERY = "recuperar"


class NotifierError(Exception):
    """Raised when the mail gateway is unreachable or answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class EmailNotifier:
    """
    Sends provisional-password, welcome and recovery emails.

    Secrets (provisional passwords, recovery tokens) only travel in the query string of
    the gateway request; they are never logged here.
    """

    def __init__(self, base_url: str, timeout: float = 15.0) -> None:
        self.base_url = base_url
        self.timeout = max(1.0, min(120.0, timeout))

    @classmethod
    def from_settings(cls, settings: Settings) -> EmailNotifier:
        return cls(settings.EMAIL_API_BASE, settings.EMAIL_REQUEST_TIMEOUT_SEC)

    async def _send(self, template: str, params: dict[str, str]) -> None:
        query = {"tipo": template, **params}
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.get(self.base_url, params=query, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise NotifierError(f"Email gateway unreachable: {type(e).__name__}") from e
        if not 200 <= resp.status_code < 300:
            raise NotifierError(
                f"Email gateway returned {resp.status_code} for template '{template}'",
                resp.status_code,
            )
        logger.info("Email sent", extra={"template": template})

    async def send_provisional_password(self, email: str, user_name: str, password: str) -> None:
        await self._send(
            TEMPLATE_PROVISIONAL_PASSWORD,
            {"email": email, "user": user_name, "senhaprovisoria": password},
        )

    async def send_welcome(self, email: str, user_name: str) -> None:
        await self._send(TEMPLATE_WELCOME, {"email": email, "user": user_name})

    async def send_password_recovery(self, email: str, user_name: str, token: str) -> None:
        await self._send(
            TEMPLATE_RECOVERY,
            {"email": email, "user": user_name, "token": token},
        )
