import json

import httpx
import pytest

from trait_dials.core.errors import (
    MissingConfiguration,
    UpstreamMalformed,
    UpstreamRejected,
    UpstreamUnavailable,
)
from trait_dials.llm.client import GenerationClient, extract_content

from conftest import TEST_API_KEY, chat_completion, make_settings, mock_transport


@pytest.mark.asyncio
async def test_generate_sends_json_object_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json=chat_completion('{"levels": {}}'))

    client = GenerationClient(
        make_settings(openai_model="gpt-4o-mini"),
        transport=mock_transport(handler),
    )

    data = await client.generate("system text", "user text")

    request = seen["request"]
    body = json.loads(request.content)
    assert request.method == "POST"
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"
    assert request.headers["Authorization"] == f"Bearer {TEST_API_KEY}"
    assert body == {
        "model": "gpt-4o-mini",
        "temperature": 0.2,
        "messages": [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ],
        "response_format": {"type": "json_object"},
    }
    assert extract_content(data) == '{"levels": {}}'


def test_default_model():
    assert GenerationClient(make_settings()).model == "gpt-4o"


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_any_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=chat_completion("{}"))

    client = GenerationClient(make_settings(openai_api_key=None), transport=mock_transport(handler))

    with pytest.raises(MissingConfiguration) as exc_info:
        await client.generate("s", "u")

    assert exc_info.value.message == "Missing OPENAI_API_KEY"
    assert calls == []


@pytest.mark.asyncio
async def test_transport_failure_is_upstream_unavailable(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = GenerationClient(settings, transport=mock_transport(handler))

    with pytest.raises(UpstreamUnavailable) as exc_info:
        await client.generate("s", "u")

    assert exc_info.value.status_code == 500
    assert "ReadTimeout" in exc_info.value.message


@pytest.mark.asyncio
async def test_non_json_body_is_upstream_malformed(settings):
    page = "<html>" + "Bad gateway " * 50 + "</html>"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text=page)

    client = GenerationClient(settings, transport=mock_transport(handler))

    with pytest.raises(UpstreamMalformed) as exc_info:
        await client.generate("s", "u")

    err = exc_info.value
    assert err.status_code == 502
    assert err.to_payload() == {"error": "Upstream returned non-JSON", "snippet": page[:200]}


@pytest.mark.asyncio
async def test_rejection_passes_status_and_message_through(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

    client = GenerationClient(settings, transport=mock_transport(handler))

    with pytest.raises(UpstreamRejected) as exc_info:
        await client.generate("s", "u")

    assert exc_info.value.status_code == 429
    assert exc_info.value.to_payload() == {"error": "Rate limit reached"}


@pytest.mark.asyncio
async def test_rejection_without_message_uses_default(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"detail": "nope"})

    client = GenerationClient(settings, transport=mock_transport(handler))

    with pytest.raises(UpstreamRejected) as exc_info:
        await client.generate("s", "u")

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "OpenAI API error"


@pytest.mark.parametrize("data", [
    None,
    {},
    {"choices": []},
    {"choices": ["x"]},
    {"choices": [{"message": None}]},
    {"choices": [{"message": {}}]},
])
def test_extract_content_tolerates_missing_shape(data):
    assert extract_content(data) is None
