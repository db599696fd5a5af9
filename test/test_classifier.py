import json

import httpx
import pytest

from app.domain.enums import SubSeason
from app.domain.errors import ClassifierConfigError
from app.services.classifier import SeasonClassifier
from app.services.prompts import classification_schema

PHOTO_URL = "https://example.blob.core.windows.net/palette-uploads/uploads/a.jpg"


def _completion(content: str, **message_extra) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content, **message_extra}}]}


def _classifier(handler) -> SeasonClassifier:
    return SeasonClassifier(
        api_key="sk-test",
        base_url="https://llm.test/v1",
        model="vision-test",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_missing_key_fails_before_any_network_call():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    clf = SeasonClassifier(api_key="", transport=httpx.MockTransport(handler))
    with pytest.raises(ClassifierConfigError):
        await clf.classify(PHOTO_URL)
    assert calls == []


@pytest.mark.asyncio
async def test_success_sends_image_and_schema(light_spring_payload):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion(json.dumps(light_spring_payload)))

    outcome = await _classifier(handler).classify(PHOTO_URL)

    assert outcome.ok
    assert outcome.result.sub_season is SubSeason.light_spring
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"

    body = seen["body"]
    assert body["model"] == "vision-test"
    user_parts = body["messages"][1]["content"]
    assert {"type": "image_url", "image_url": {"url": PHOTO_URL}} in user_parts
    assert body["response_format"]["json_schema"]["schema"] == classification_schema()


@pytest.mark.asyncio
async def test_http_error_becomes_failed_outcome():
    outcome = await _classifier(lambda r: httpx.Response(429, text="rate limited")).classify(PHOTO_URL)
    assert not outcome.ok
    assert outcome.error_code == "upstream_http_429"


@pytest.mark.asyncio
async def test_timeout_becomes_failed_outcome():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    outcome = await _classifier(handler).classify(PHOTO_URL)
    assert outcome.error_code == "upstream_timeout"


@pytest.mark.asyncio
async def test_transport_error_becomes_failed_outcome():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    outcome = await _classifier(handler).classify(PHOTO_URL)
    assert outcome.error_code == "upstream_transport"


@pytest.mark.asyncio
async def test_schema_invalid_response(light_spring_payload):
    light_spring_payload["recommendedColors"][0]["hex"] = "coral"
    handler = lambda r: httpx.Response(200, json=_completion(json.dumps(light_spring_payload)))
    outcome = await _classifier(handler).classify(PHOTO_URL)
    assert not outcome.ok
    assert outcome.error_code == "schema_invalid"
    assert outcome.result is None


@pytest.mark.asyncio
async def test_repeated_hex_is_schema_invalid(light_spring_payload):
    light_spring_payload["recommendedColors"][1]["hex"] = "#ff6f61"
    handler = lambda r: httpx.Response(200, json=_completion(json.dumps(light_spring_payload)))
    outcome = await _classifier(handler).classify(PHOTO_URL)
    assert outcome.error_code == "schema_invalid"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, code",
    [
        (_completion("not json at all"), "invalid_json"),
        (_completion(""), "empty_content"),
        (_completion("", refusal="I can't help with that."), "model_refusal"),
        ({"choices": []}, "empty_content"),
        ({"choices": [None]}, "invalid_json"),
        ({"choices": "oops"}, "invalid_json"),
        ({"choices": [{"message": "hi"}]}, "invalid_json"),
        ({"choices": [{"message": {"content": [{"type": "text", "text": "{}"}]}}]}, "invalid_json"),
        ({"choices": [{"message": {"content": None}}]}, "empty_content"),
        ({}, "empty_content"),
    ],
)
async def test_malformed_completions(body, code):
    outcome = await _classifier(lambda r: httpx.Response(200, json=body)).classify(PHOTO_URL)
    assert outcome.error_code == code


def test_schema_lists_the_full_taxonomy():
    schema = classification_schema()
    props = schema["properties"]
    assert len(props["subseason"]["enum"]) == 12
    assert props["recommendedColors"]["minItems"] == 3
    assert props["recommendedColors"]["maxItems"] == 3
    assert props["gender"]["enum"] == ["male", "female"]
