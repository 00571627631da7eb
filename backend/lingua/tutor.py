"""
Task callers for the tutor.

Each method builds the request for one task, runs it through the model
fallback chain and parses the model output inside the attempt, so malformed
output from one model moves on to the next model like any other failure.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from .errors import ExhaustedFallbackError, MalformedResponseError
from .fallback import ClientFactory, call_with_retry
from .gemini_client import GeminiClient, RequestPayload, audio_part, text_part
from .parsing import parse_ai_response, parse_model_json
from .preferences import FALLBACK_ORDER
from .prompts import (
	WRITING_TASK_TYPES,
	build_examiner_instruction,
	build_examiner_prompt,
	build_pronunciation_prompt,
	build_session_grading_prompt,
	build_writing_prompt,
)
from .schemas import AIResponse, ChatMessage, ExaminerTurn
from .settings import settings


logger = logging.getLogger(__name__)

AUDIO_MIME_TYPE = "audio/webm; codecs=opus"
SPEAKING_PLACEHOLDER = "(Audio Transcript Placeholder)"


def _json_request(parts: List[dict], system_instruction: Optional[str] = None) -> RequestPayload:
	return RequestPayload(parts=parts, system_instruction=system_instruction, response_mime_type="application/json")


def _ai_response_operation(payload: RequestPayload) -> Callable[[str, GeminiClient], Any]:
	async def operation(model: str, client: GeminiClient) -> AIResponse:
		result = await client.generate_content(model, payload)
		return parse_ai_response(result.text or "{}")
	return operation


class TutorService:
	def __init__(
		self,
		api_key: str,
		preferred_model: Optional[str] = None,
		*,
		fallback_order: Iterable[str] = FALLBACK_ORDER,
		client_factory: ClientFactory = GeminiClient,
		voice_name: Optional[str] = None,
		audio_mime_type: str = AUDIO_MIME_TYPE,
	) -> None:
		self.api_key = api_key
		self.preferred_model = preferred_model
		self.fallback_order = tuple(fallback_order)
		self.client_factory = client_factory
		self.voice_name = voice_name or settings.gemini_tts_voice
		self.audio_mime_type = audio_mime_type

	async def _call(self, label: str, operation: Callable[[str, Any], Any]) -> Any:
		return await call_with_retry(
			label,
			operation,
			api_key=self.api_key,
			preferred_model=self.preferred_model,
			fallback_order=self.fallback_order,
			client_factory=self.client_factory,
		)

	async def generate_speech(self, text: str) -> str:
		"""Synthesize ``text`` as base64 audio; returns "" if every model fails."""
		payload = RequestPayload(
			parts=[text_part(text)],
			response_modalities=["AUDIO"],
			speech_config={"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": self.voice_name}}},
		)

		async def operation(model: str, client: GeminiClient) -> str:
			result = await client.generate_content(model, payload)
			if not result.audio_base64:
				raise MalformedResponseError("No audio generated")
			return result.audio_base64

		try:
			return await self._call("generateSpeech", operation)
		except ExhaustedFallbackError as err:
			logger.warning("Speech synthesis unavailable, continuing without audio: %s", err)
			return ""

	async def analyze_writing(self, text: str, task_type: str = "General") -> AIResponse:
		if task_type not in WRITING_TASK_TYPES:
			task_type = "General"
		payload = _json_request([text_part(build_writing_prompt(text, task_type))])
		return await self._call("analyzeWriting", _ai_response_operation(payload))

	async def interact_with_examiner(
		self,
		history: List[ChatMessage],
		topic: str,
		user_audio_base64: Optional[str] = None,
		specific_question: Optional[str] = None,
		is_finish: bool = False,
		*,
		with_audio: bool = True,
	) -> ExaminerTurn:
		"""Run one interview turn.

		Stage one transcribes the student's answer (if any) and produces the
		examiner's next utterance. Stage two voices that utterance; it is a
		separate fallback-protected call and its failure only leaves the audio
		empty.
		"""
		parts: List[dict] = []
		if user_audio_base64:
			parts.append(audio_part(user_audio_base64, self.audio_mime_type))
		parts.append(
			text_part(
				build_examiner_prompt(
					topic,
					has_audio=bool(user_audio_base64),
					specific_question=specific_question,
					is_finish=is_finish,
				)
			)
		)
		payload = _json_request(parts, build_examiner_instruction(history, topic))

		async def operation(model: str, client: GeminiClient) -> ExaminerTurn:
			result = await client.generate_content(model, payload)
			data = parse_model_json(result.text or "{}")
			reply = str(data.get("response") or "").strip()
			if not reply:
				raise MalformedResponseError("Examiner response is empty")
			return ExaminerTurn(userTranscription=str(data.get("transcription") or ""), aiResponse=reply)

		turn: ExaminerTurn = await self._call("interactWithExaminer", operation)
		if with_audio:
			turn.aiAudioBase64 = await self.generate_speech(turn.aiResponse)
		return turn

	async def grade_speaking_session(
		self,
		history: List[ChatMessage],
		topic: str,
		last_audio_base64: Optional[str] = None,
	) -> AIResponse:
		parts: List[dict] = []
		if last_audio_base64:
			parts.append(audio_part(last_audio_base64, self.audio_mime_type))
		parts.append(text_part(build_session_grading_prompt(history, topic)))
		payload = _json_request(parts)
		return await self._call("gradeSpeakingSession", _ai_response_operation(payload))

	async def analyze_speaking(self, audio_base64: str, topic: str = "General English") -> AIResponse:
		history = [ChatMessage(role="user", text=SPEAKING_PLACEHOLDER)]
		return await self.grade_speaking_session(history, topic, audio_base64)

	async def analyze_pronunciation(self, audio_base64: str, target_text: str) -> AIResponse:
		payload = _json_request([
			audio_part(audio_base64, self.audio_mime_type),
			text_part(build_pronunciation_prompt(target_text)),
		])
		return await self._call("analyzePronunciation", _ai_response_operation(payload))
