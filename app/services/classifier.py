from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from app.config import settings
from app.domain.errors import ClassifierConfigError
from app.domain.models import ClassificationResult, ClassifyOutcome
from app.services.prompts import build_classification_prompt, classification_schema

logger = logging.getLogger("season_classifier")


def _extract_message(obj: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """First choice's message; {} when there is none, None when the shape is wrong."""
    choices = obj.get("choices")
    if choices is None or choices == []:
        return {}
    if not isinstance(choices, list) or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    if message is None:
        return {}
    return message if isinstance(message, dict) else None


class SeasonClassifier:
    """
    Single best-effort call to an OpenAI-compatible chat completions endpoint.

    No retry and no caching: each upload gets exactly one attempt. Failures
    after the request is issued come back as ClassifyOutcome(ok=False).
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.base_url = (base_url or settings.OPENAI_BASE_URL).rstrip("/")
        self.model = model or settings.OPENAI_VISION_MODEL
        self.timeout = timeout if timeout is not None else settings.CLASSIFY_TIMEOUT_SECONDS
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ClassifierConfigError("missing_env:OPENAI_API_KEY")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def build_payload(self, photo_url: str) -> Dict[str, Any]:
        prompt = build_classification_prompt()
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": prompt["system"]},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt["user"]},
                        {"type": "image_url", "image_url": {"url": photo_url}},
                    ],
                },
            ],
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": "seasonal_color_classification",
                    "strict": True,
                    "schema": classification_schema(),
                },
            },
        }

    async def classify(self, photo_url: str) -> ClassifyOutcome:
        # Raises before any network activity when the credential is missing.
        headers = self._headers()
        payload = self.build_payload(photo_url)
        url = f"{self.base_url}/chat/completions"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            logger.warning("classify_timeout", extra={"timeout_s": self.timeout})
            return ClassifyOutcome.failure("upstream_timeout", str(e))
        except httpx.TransportError as e:
            logger.warning("classify_transport_error", extra={"error": str(e)})
            return ClassifyOutcome.failure("upstream_transport", str(e))

        if r.status_code >= 400:
            logger.warning(
                "classify_http_error",
                extra={"status_code": r.status_code, "req_id": r.headers.get("x-request-id")},
            )
            return ClassifyOutcome.failure(f"upstream_http_{r.status_code}", r.text)

        return self.parse_response(r)

    @staticmethod
    def parse_response(r: httpx.Response) -> ClassifyOutcome:
        try:
            body = r.json()
        except json.JSONDecodeError as e:
            return ClassifyOutcome.failure("invalid_json", f"response body: {e}")
        if not isinstance(body, dict):
            return ClassifyOutcome.failure("invalid_json", f"unexpected body type {type(body).__name__}")

        message = _extract_message(body)
        if message is None:
            return ClassifyOutcome.failure("invalid_json", "unexpected completion shape")
        if message.get("refusal"):
            return ClassifyOutcome.failure("model_refusal", str(message["refusal"]))

        content = message.get("content")
        if content is None:
            content = ""
        if not isinstance(content, str):
            return ClassifyOutcome.failure("invalid_json", f"unexpected content type {type(content).__name__}")
        content = content.strip()
        if not content:
            return ClassifyOutcome.failure("empty_content", "model returned no content")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            return ClassifyOutcome.failure("invalid_json", f"{e}: {content[:200]}")

        try:
            result = ClassificationResult.model_validate(data)
        except ValidationError as e:
            return ClassifyOutcome.failure("schema_invalid", str(e))

        return ClassifyOutcome.success(result)
