"""
Speaking Practice Module
========================

Endpoints for the speaking side of the tutor: a short examiner-led interview,
grading of the finished interview, one-shot speaking analysis and
read-aloud pronunciation coaching.

All model calls go through ``TutorService`` and therefore through the model
fallback chain. Audio is exchanged as base64 strings (browser recordings,
``audio/webm; codecs=opus`` by default).

API Endpoints:
- POST /speaking/turn: Next examiner utterance (and its audio)
- POST /speaking/grade: Score a finished interview transcript
- POST /speaking/analyze: Score a single recorded answer
- POST /speaking/pronunciation: Score a read-aloud attempt of a sentence
- POST /speaking/speech: Voice arbitrary examiner text
"""

from __future__ import annotations

import base64
import binascii
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db import get_db
from ..history import record_practice
from ..schemas import AIResponse, ChatMessage, ExaminerTurn
from ..tutor import TutorService
from .auth import User, get_current_user
from .common import get_tutor, tutor_errors


router = APIRouter(prefix="/speaking", tags=["speaking"])

DEFAULT_TOPIC = "General English"


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class TurnRequest(BaseModel):
	"""
	Request model for one interview turn.

	Without ``audio_base64`` the examiner opens the interview. With
	``is_finish`` the examiner closes it instead of asking another question.
	"""
	history: List[ChatMessage] = Field(default_factory=list)
	topic: str = DEFAULT_TOPIC
	audio_base64: Optional[str] = None
	question: Optional[str] = Field(default=None, description="Exact next question to ask, if fixed")
	is_finish: bool = False
	with_audio: bool = True


class GradeRequest(BaseModel):
	history: List[ChatMessage]
	topic: str = DEFAULT_TOPIC
	last_audio_base64: Optional[str] = None


class AnalyzeRequest(BaseModel):
	audio_base64: str
	topic: str = DEFAULT_TOPIC


class PronunciationRequest(BaseModel):
	audio_base64: str
	target_text: str


class SpeechRequest(BaseModel):
	text: str


class SpeechResponse(BaseModel):
	audio_base64: str


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def _require_audio(audio_base64: Optional[str]) -> str:
	"""Validate a base64 audio payload.

	Args:
		audio_base64: Base64-encoded recording from the client

	Returns:
		The payload with surrounding whitespace removed

	Raises:
		HTTPException: If the payload is missing, empty or not base64
	"""
	data = (audio_base64 or "").strip()
	if not data:
		raise HTTPException(status_code=400, detail="audio_base64 is required")
	try:
		decoded = base64.b64decode(data, validate=True)
	except (binascii.Error, ValueError):
		raise HTTPException(status_code=400, detail="audio_base64 is not valid base64")
	if not decoded:
		raise HTTPException(status_code=400, detail="Empty audio payload received.")
	return data


# ============================================================================
# API ENDPOINTS
# ============================================================================

@router.post("/turn", response_model=ExaminerTurn)
async def turn(req: TurnRequest, tutor: TutorService = Depends(get_tutor)):
	"""Produce the examiner's next utterance.

	The student's answer (if any) is transcribed in the same call. The
	utterance is then voiced as a separate step; if no model can produce
	audio the turn is still returned with an empty ``aiAudioBase64``.
	"""
	audio = _require_audio(req.audio_base64) if req.audio_base64 else None
	with tutor_errors():
		return await tutor.interact_with_examiner(
			req.history,
			req.topic,
			user_audio_base64=audio,
			specific_question=req.question,
			is_finish=req.is_finish,
			with_audio=req.with_audio,
		)


@router.post("/grade", response_model=AIResponse)
async def grade(
	req: GradeRequest,
	user: User = Depends(get_current_user),
	tutor: TutorService = Depends(get_tutor),
	db: Session = Depends(get_db),
):
	"""Score a finished interview against the 10-point speaking rubric."""
	if not req.history:
		raise HTTPException(status_code=400, detail="history is required")
	audio = _require_audio(req.last_audio_base64) if req.last_audio_base64 else None
	with tutor_errors():
		result = await tutor.grade_speaking_session(req.history, req.topic, audio)
	record_practice(db, user.username, "speaking", result.score, f"{req.topic}: {result.feedback}")
	return result


@router.post("/analyze", response_model=AIResponse)
async def analyze(req: AnalyzeRequest, tutor: TutorService = Depends(get_tutor)):
	audio = _require_audio(req.audio_base64)
	with tutor_errors():
		return await tutor.analyze_speaking(audio, req.topic)


@router.post("/pronunciation", response_model=AIResponse)
async def pronunciation(req: PronunciationRequest, tutor: TutorService = Depends(get_tutor)):
	target = (req.target_text or "").strip()
	if not target:
		raise HTTPException(status_code=400, detail="target_text is required")
	audio = _require_audio(req.audio_base64)
	with tutor_errors():
		return await tutor.analyze_pronunciation(audio, target)


@router.post("/speech", response_model=SpeechResponse)
async def speech(req: SpeechRequest, tutor: TutorService = Depends(get_tutor)):
	text = (req.text or "").strip()
	if not text:
		raise HTTPException(status_code=400, detail="text is required")
	with tutor_errors():
		return SpeechResponse(audio_base64=await tutor.generate_speech(text))
