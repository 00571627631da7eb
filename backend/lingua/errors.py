from __future__ import annotations
from typing import List, Optional


class TutorError(Exception):
	"""Base class for errors raised by the tutor core."""


class MissingCredentialError(TutorError):
	def __init__(self, message: str = "API key is missing. Open Settings and add your Gemini API key.") -> None:
		super().__init__(message)


class GeminiError(TutorError):
	"""The Gemini API call failed (network, HTTP status or unexpected payload)."""

	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


class MalformedResponseError(TutorError):
	"""Model output did not match the expected JSON contract."""


class ExhaustedFallbackError(TutorError):
	"""Every candidate model failed for one logical operation."""

	def __init__(self, label: str, last_error: Optional[BaseException], attempts: Optional[List[object]] = None) -> None:
		last_message = str(last_error) if last_error is not None else "unknown error"
		super().__init__(
			f"[{label}] System overloaded or model error. Please try again later. (Last error: {last_message})"
		)
		self.label = label
		self.last_error = last_error
		self.attempts = list(attempts or [])
