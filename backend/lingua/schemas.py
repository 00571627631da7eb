from __future__ import annotations
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


FeedbackType = Literal["grammar", "vocabulary", "pronunciation", "coherence"]
FEEDBACK_TYPES = ("grammar", "vocabulary", "pronunciation", "coherence")


class FeedbackItem(BaseModel):
	original: str = ""
	correction: str = ""
	explanation: str = ""
	type: FeedbackType = "grammar"

	@field_validator("type", mode="before")
	@classmethod
	def _normalize_type(cls, value: object) -> str:
		# Models vary the casing and invent tags like "spelling"
		tag = str(value or "").strip().lower()
		return tag if tag in FEEDBACK_TYPES else "grammar"


class AIResponse(BaseModel):
	"""Structured scoring result the model is instructed to emit."""
	score: float
	scoreBreakdown: Optional[Dict[str, float]] = None
	feedback: str = ""
	# Presentation order
	detailedErrors: List[FeedbackItem] = Field(default_factory=list)
	improvedVersion: Optional[str] = None
	transcription: Optional[str] = None


class ChatMessage(BaseModel):
	role: Literal["ai", "user"]
	text: str
	audioUrl: Optional[str] = None


class ExaminerTurn(BaseModel):
	userTranscription: str = ""
	aiResponse: str
	# Empty when synthesis was skipped or failed
	aiAudioBase64: str = ""


class HistoryItem(BaseModel):
	id: str
	date: str
	mode: Literal["speaking", "writing"]
	score: float
	summary: str


class UserStats(BaseModel):
	speakingScore: List[float] = Field(default_factory=list)
	writingScore: List[float] = Field(default_factory=list)
	lessonsCompleted: int = 0
	streak: int = 0
	lastPractice: str = ""
