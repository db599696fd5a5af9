from __future__ import annotations

import html
import logging
from typing import Any, Dict, List, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.config import settings
from app.domain.errors import EmailDeliveryError, EmailNotConfigured
from app.domain.models import PaletteView

logger = logging.getLogger("palette_mailer")

MAX_EMAIL_SWATCHES = 6


def _email_swatch_hexes(view: PaletteView) -> List[str]:
    hexes = [s.hex for s in view.swatches] + list(view.colours.keys())
    return hexes[:MAX_EMAIL_SWATCHES]


def render_palette_email(view: PaletteView, seasonal_type: str, palette_url: str) -> str:
    label = html.escape(seasonal_type)
    url = html.escape(palette_url, quote=True)
    swatches = "".join(
        f'<div style="height: 40px; width: 40px; border-radius: 8px; background-color: {h}; '
        f'margin: 0 4px; display: inline-block;"></div>'
        for h in _email_swatch_hexes(view)
    )

    return f"""
    <div style="font-family: 'Helvetica', sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; color: #333;">
      <h1 style="color: #2d3748; font-size: 24px; margin-bottom: 16px; text-align: center;">Your {label} Color Palette</h1>
      <p style="font-size: 16px; line-height: 1.5; margin-bottom: 24px;">
        Thanks for discovering your seasonal color palette! Here's your personalized color guide to help enhance your style.
      </p>
      <div style="background-color: #f7fafc; border-radius: 12px; padding: 24px; margin-bottom: 24px; text-align: center;">
        <h2 style="color: #4a5568; font-size: 18px; margin-bottom: 16px;">Your Colors</h2>
        <div style="display: block; text-align: center; margin-bottom: 16px;">{swatches}</div>
        <p style="font-size: 14px; color: #718096;">These colors are specially selected to complement your {label} type.</p>
      </div>
      <div style="text-align: center; margin-top: 32px;">
        <a href="{url}" style="background-color: #4a5568; color: white; padding: 12px 24px; border-radius: 8px; text-decoration: none; font-weight: bold; display: inline-block;">
          View Your Full Palette
        </a>
      </div>
      <p style="font-size: 14px; color: #718096; margin-top: 32px; text-align: center;">
        This email was sent because you requested your color palette from My Color Palette.
      </p>
    </div>
    """


class PaletteMailer:
    """Transactional email through the Resend HTTP API."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        sender: Optional[str] = None,
        app_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.base_url = (base_url or settings.RESEND_BASE_URL).rstrip("/")
        self.sender = sender or settings.EMAIL_FROM
        self.app_url = (app_url if app_url is not None else settings.APP_URL).rstrip("/")
        self.timeout = settings.EMAIL_TIMEOUT_SECONDS
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise EmailNotConfigured("missing_env:RESEND_API_KEY")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def palette_url(self, palette_id: int) -> str:
        if not self.app_url:
            logger.warning("email_link_relative", extra={"palette_id": palette_id})
        return f"{self.app_url}/{palette_id}"

    def build_message(self, to: str, view: PaletteView, seasonal_type: str) -> Dict[str, Any]:
        return {
            "from": self.sender,
            "to": [to],
            "subject": f"Your {view.sub_season.value} Color Palette",
            "html": render_palette_email(view, seasonal_type, self.palette_url(view.id)),
        }

    async def send(self, to: str, view: PaletteView, seasonal_type: str) -> str:
        headers = self._headers()
        message = self.build_message(to, view, seasonal_type)
        try:
            r = await self._post(headers, message)
        except httpx.HTTPError as e:
            logger.error("email_transport_failed", extra={"error": str(e)})
            raise EmailDeliveryError(f"resend_transport_error: {e}") from e

        if r.status_code >= 400:
            logger.error("email_send_failed", extra={"status_code": r.status_code, "body": r.text[:300]})
            raise EmailDeliveryError(f"resend_error status={r.status_code}")

        try:
            email_id = str((r.json() or {}).get("id") or "")
        except ValueError:
            email_id = ""
        logger.info("email_sent", extra={"palette_id": view.id, "email_id": email_id})
        return email_id

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4.0),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.TransportError)),
    )
    async def _post(self, headers: Dict[str, str], message: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.post(f"{self.base_url}/emails", headers=headers, json=message)
