"""Tests for the email gateway client (httpx mocked)."""

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from app.services.notifier import EmailNotifier, NotifierError

BASE_URL = "https://mail.example.test/exec"


def _mock_client(mock_client_class: MagicMock, status_code: int = 200) -> MagicMock:
    mock_instance = MagicMock()
    mock_instance.get = AsyncMock(return_value=MagicMock(status_code=status_code))
    mock_client_class.return_value.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_client_class.return_value.__aexit__ = AsyncMock(return_value=None)
    return mock_instance


class TestEmailNotifier(unittest.TestCase):
    @patch("app.services.notifier.httpx.AsyncClient")
    def test_provisional_password_query(self, mock_client_class: MagicMock) -> None:
        client = _mock_client(mock_client_class)
        asyncio.run(
            EmailNotifier(BASE_URL).send_provisional_password("a@example.org", "Ana", "abc12345")
        )
        args, kwargs = client.get.call_args
        self.assertEqual(args[0], BASE_URL)
        self.assertEqual(
            kwargs["params"],
            {"tipo": "senha", "email": "a@example.org", "user": "Ana", "senhaprovisoria": "abc12345"},
        )

    @patch("app.services.notifier.httpx.AsyncClient")
    def test_welcome_and_recovery_templates(self, mock_client_class: MagicMock) -> None:
        client = _mock_client(mock_client_class)
        notifier = EmailNotifier(BASE_URL)
        asyncio.run(notifier.send_welcome("a@example.org", "Ana"))
        self.assertEqual(client.get.call_args.kwargs["params"]["tipo"], "bemvindo")
        asyncio.run(notifier.send_password_recovery("a@example.org", "Ana", "t0k3n"))
        params = client.get.call_args.kwargs["params"]
        self.assertEqual(params["tipo"], "recuperar")
        self.assertEqual(params["token"], "t0k3n")

    @patch("app.services.notifier.httpx.AsyncClient")
    def test_non_2xx_raises(self, mock_client_class: MagicMock) -> None:
        _mock_client(mock_client_class, status_code=503)
        with self.assertRaises(NotifierError) as ctx:
            asyncio.run(EmailNotifier(BASE_URL).send_welcome("a@example.org", "Ana"))
        self.assertEqual(ctx.exception.status_code, 503)

    @patch("app.services.notifier.httpx.AsyncClient")
    def test_transport_error_raises(self, mock_client_class: MagicMock) -> None:
        client = _mock_client(mock_client_class)
        client.get.side_effect = httpx.ConnectError("refused")
        with self.assertRaises(NotifierError):
            asyncio.run(EmailNotifier(BASE_URL).send_welcome("a@example.org", "Ana"))

    def test_timeout_is_clamped(self) -> None:
        self.assertEqual(EmailNotifier(BASE_URL, timeout=0.1).timeout, 1.0)
        self.assertEqual(EmailNotifier(BASE_URL, timeout=500).timeout, 120.0)


if __name__ == "__main__":
    unittest.main()
