"""Outbound email.

The transport is the only piece that talks to the network; ``EmailService``
bounds every send with a timeout and turns any transport failure into a
``DispatchFailure`` for its callers to log.
"""

import asyncio
import logging
from datetime import UTC, datetime
from html import escape
from typing import Any, Protocol

import httpx

from haulbook.config import settings

logger = logging.getLogger(__name__)


class DispatchFailure(Exception):
    """An outbound notification could not be delivered."""


class EmailTransport(Protocol):
    async def send(self, to: str, subject: str, html: str) -> None: ...


class SendGridTransport:
    """Email transport over the SendGrid v3 HTTP API."""

    API_URL = "https://api.sendgrid.com/v3/mail/send"

    def __init__(
        self,
        api_key: str | None = None,
        from_address: str | None = None,
        from_name: str | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.sendgrid_api_key
        self.from_address = from_address or settings.email_from_address
        self.from_name = from_name or settings.email_from_name
        self._http_client: httpx.AsyncClient | None = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def send(self, to: str, subject: str, html: str) -> None:
        if not self.api_key:
            raise DispatchFailure("SendGrid API key is not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.from_address, "name": self.from_name},
            "subject": subject,
            "content": [{"type": "text/html", "value": html}],
        }

        response = await self.http_client.post(self.API_URL, headers=headers, json=payload)
        if response.status_code not in (200, 202):
            raise DispatchFailure(
                f"SendGrid rejected message to {to}: {response.status_code} {response.text[:200]}"
            )


class EmailService:
    """Sends email through a transport with a hard timeout."""

    def __init__(self, transport: EmailTransport, timeout: float | None = None) -> None:
        self.transport = transport
        self.timeout = timeout if timeout is not None else settings.email_timeout_seconds

    async def send(self, to: str, subject: str, html: str) -> None:
        """Send one email.

        Raises:
            DispatchFailure: On timeout or any transport error
        """
        try:
            await asyncio.wait_for(self.transport.send(to, subject, html), timeout=self.timeout)
        except DispatchFailure:
            raise
        except asyncio.TimeoutError as e:
            raise DispatchFailure(f"Email to {to} timed out after {self.timeout}s") from e
        except Exception as e:
            raise DispatchFailure(f"Email to {to} failed: {e}") from e

        logger.info(f"Email sent to {to}: {subject}")

    def render(self, title: str, body: str, rows: dict[str, str] | None = None) -> str:
        """Render a minimal HTML email. Every caller-supplied value is escaped."""
        rows_html = ""
        if rows:
            rows_html = "".join(
                f"<tr><td style=\"padding: 4px 12px 4px 0; color: #6b7280;\">{escape(label)}</td>"
                f"<td style=\"padding: 4px 0;\">{escape(str(value))}</td></tr>"
                for label, value in rows.items()
            )
            rows_html = f"<table style=\"margin-top: 16px;\">{rows_html}</table>"

        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="utf-8">
            <meta name="viewport" content="width=device-width, initial-scale=1.0">
        </head>
        <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                     max-width: 600px; margin: 0 auto; padding: 20px; color: #333;">
            <div style="background-color: #f9fafb; border-radius: 8px; padding: 24px;">
                <h1 style="color: #111827; font-size: 24px; margin-bottom: 16px;">{escape(title)}</h1>
                <p style="color: #4b5563; font-size: 16px; line-height: 1.6;">{escape(body)}</p>
                {rows_html}
            </div>
            <p style="color: #9ca3af; font-size: 12px; margin-top: 24px; text-align: center;">
                &copy; {datetime.now(UTC).year} {settings.app_name}. All rights reserved.
            </p>
        </body>
        </html>
        """
