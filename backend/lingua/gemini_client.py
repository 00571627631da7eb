from __future__ import annotations
import httpx
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from .errors import GeminiError
from .settings import settings


def text_part(text: str) -> Dict[str, Any]:
	return {"text": text}


def audio_part(data_base64: str, mime_type: str = "audio/webm; codecs=opus") -> Dict[str, Any]:
	return {"inlineData": {"mimeType": mime_type, "data": data_base64}}


@dataclass
class RequestPayload:
	"""One generateContent request; built per call and dropped afterwards."""
	parts: List[Dict[str, Any]]
	system_instruction: Optional[str] = None
	response_mime_type: Optional[str] = None
	response_modalities: Optional[List[str]] = None
	speech_config: Optional[Dict[str, Any]] = None
	role: str = "user"

	def to_body(self) -> Dict[str, Any]:
		body: Dict[str, Any] = {"contents": [{"role": self.role, "parts": self.parts}]}
		if self.system_instruction:
			body["systemInstruction"] = {"parts": [{"text": self.system_instruction}]}
		generation_config: Dict[str, Any] = {}
		if self.response_mime_type:
			generation_config["responseMimeType"] = self.response_mime_type
		if self.response_modalities:
			generation_config["responseModalities"] = self.response_modalities
		if self.speech_config:
			generation_config["speechConfig"] = self.speech_config
		if generation_config:
			body["generationConfig"] = generation_config
		return body


@dataclass
class GenerateResult:
	text: str = ""
	audio_base64: str = ""
	raw: Dict[str, Any] = field(default_factory=dict, repr=False)


class GeminiClient:
	def __init__(
		self,
		api_key: str,
		*,
		base_url: Optional[str] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		if not api_key:
			raise ValueError("Gemini API key is required")
		self.api_key = api_key
		self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
		self._client = httpx.AsyncClient(
			timeout=timeout if timeout is not None else settings.gemini_timeout_seconds,
			transport=transport,
		)

	async def __aenter__(self) -> "GeminiClient":
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()

	def endpoint(self, model: str) -> str:
		return f"{self.base_url}/models/{model}:generateContent"

	async def generate_content(self, model: str, payload: RequestPayload) -> GenerateResult:
		headers = {"x-goog-api-key": self.api_key}
		try:
			r = await self._client.post(self.endpoint(model), headers=headers, json=payload.to_body())
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise GeminiError(
				f"Gemini returned HTTP {http_err.response.status_code} for {model}: {_error_message(http_err.response)}",
				status_code=http_err.response.status_code,
			) from http_err
		except httpx.RequestError as net_err:
			raise GeminiError(f"Gemini request failed for {model}: {net_err}") from net_err
		try:
			data = r.json()
			parts = data["candidates"][0]["content"]["parts"]
		except Exception as err:
			raise GeminiError(f"Unexpected Gemini response: {r.text[:500]}") from err
		texts: List[str] = []
		audio = ""
		for part in parts:
			if "text" in part:
				texts.append(part["text"])
			inline = part.get("inlineData") or part.get("inline_data")
			if inline and not audio:
				audio = inline.get("data") or ""
		return GenerateResult(text="".join(texts), audio_base64=audio, raw=data)

	async def aclose(self) -> None:
		await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
	try:
		return str(response.json()["error"]["message"])
	except Exception:
		return response.text[:200]
