"""Unit tests for the Gemini REST adapter."""

import json

import httpx
import pytest

from lingua.errors import GeminiError
from lingua.gemini_client import GeminiClient, RequestPayload, audio_part, text_part


def _reply(parts):
    return httpx.Response(200, json={"candidates": [{"content": {"role": "model", "parts": parts}}]})


def _client(handler) -> GeminiClient:
    return GeminiClient("test-key", base_url="https://gemini.test/v1beta/", transport=httpx.MockTransport(handler))


@pytest.mark.unit
def test_client_requires_key() -> None:
    with pytest.raises(ValueError):
        GeminiClient("")


@pytest.mark.unit
def test_payload_body_includes_generation_config() -> None:
    payload = RequestPayload(
        parts=[audio_part("QUJD"), text_part("Transcribe")],
        system_instruction="You are an examiner",
        response_mime_type="application/json",
    )
    body = payload.to_body()

    assert body["contents"] == [
        {
            "role": "user",
            "parts": [
                {"inlineData": {"mimeType": "audio/webm; codecs=opus", "data": "QUJD"}},
                {"text": "Transcribe"},
            ],
        }
    ]
    assert body["systemInstruction"] == {"parts": [{"text": "You are an examiner"}]}
    assert body["generationConfig"] == {"responseMimeType": "application/json"}


@pytest.mark.unit
def test_payload_without_config_has_no_generation_config() -> None:
    body = RequestPayload(parts=[text_part("hi")]).to_body()
    assert "generationConfig" not in body
    assert "systemInstruction" not in body


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_content_posts_to_model_endpoint() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return _reply([{"text": '{"score": '}, {"text": "7}"}])

    async with _client(handler) as client:
        result = await client.generate_content("gemini-2.5-flash", RequestPayload(parts=[text_part("hi")]))

    assert seen["url"] == "https://gemini.test/v1beta/models/gemini-2.5-flash:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"]["contents"][0]["parts"] == [{"text": "hi"}]
    assert result.text == '{"score": 7}'
    assert result.audio_base64 == ""


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_content_extracts_audio() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert body["generationConfig"]["responseModalities"] == ["AUDIO"]
        return _reply([{"inlineData": {"mimeType": "audio/L16;rate=24000", "data": "UENN"}}])

    payload = RequestPayload(
        parts=[text_part("Hello")],
        response_modalities=["AUDIO"],
        speech_config={"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": "Kore"}}},
    )
    async with _client(handler) as client:
        result = await client.generate_content("gemini-3-flash-preview", payload)

    assert result.audio_base64 == "UENN"
    assert result.text == ""


@pytest.mark.unit
@pytest.mark.asyncio
async def test_http_error_raises_gemini_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": {"code": 503, "message": "The model is overloaded."}})

    async with _client(handler) as client:
        with pytest.raises(GeminiError, match="overloaded") as exc_info:
            await client.generate_content("gemini-3-pro-preview", RequestPayload(parts=[text_part("hi")]))

    assert exc_info.value.status_code == 503


@pytest.mark.unit
@pytest.mark.asyncio
async def test_network_error_raises_gemini_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(GeminiError, match="connection refused"):
            await client.generate_content("gemini-2.5-flash", RequestPayload(parts=[text_part("hi")]))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unexpected_payload_raises_gemini_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})

    async with _client(handler) as client:
        with pytest.raises(GeminiError, match="Unexpected Gemini response"):
            await client.generate_content("gemini-2.5-flash", RequestPayload(parts=[text_part("hi")]))
