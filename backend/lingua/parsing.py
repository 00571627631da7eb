from __future__ import annotations
import json
import re
from typing import Any, Dict

from pydantic import ValidationError

from .errors import MalformedResponseError
from .schemas import AIResponse


_OPEN_FENCE_RE = re.compile(r"^\s*```[\w-]*[ \t]*\n?")
_CLOSE_FENCE_RE = re.compile(r"\n?```\s*$")


def strip_code_fences(text: str) -> str:
	"""Remove ```json / ``` markers wrapped around model output.

	Only the outermost fences are removed; backticks inside JSON strings stay.
	"""
	stripped = _OPEN_FENCE_RE.sub("", text or "", count=1)
	stripped = _CLOSE_FENCE_RE.sub("", stripped, count=1)
	return stripped.strip()


def parse_model_json(raw_text: str) -> Dict[str, Any]:
	cleaned = strip_code_fences(raw_text)
	try:
		data = json.loads(cleaned)
	except json.JSONDecodeError as err:
		raise MalformedResponseError(f"Malformed model response: {err}") from err
	if not isinstance(data, dict):
		raise MalformedResponseError(f"Malformed model response: expected a JSON object, got {type(data).__name__}")
	return data


def parse_ai_response(raw_text: str) -> AIResponse:
	data = parse_model_json(raw_text)
	try:
		return AIResponse.model_validate(data)
	except ValidationError as err:
		raise MalformedResponseError(f"Model response does not match the result shape: {err}") from err
