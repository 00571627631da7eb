from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import Literal
from sqlalchemy.orm import Session

from ..db import get_db
from ..history import record_practice
from ..schemas import AIResponse
from ..tutor import TutorService
from .auth import get_current_user, User
from .common import get_tutor, tutor_errors


router = APIRouter(prefix="/write", tags=["writing"])

MAX_TEXT_CHARS = 8000


class AnalyzeWritingRequest(BaseModel):
	text: str
	task_type: Literal["IELTS", "TOEIC", "General"] = "General"


@router.post("/analyze", response_model=AIResponse)
async def analyze(
	req: AnalyzeWritingRequest,
	user: User = Depends(get_current_user),
	tutor: TutorService = Depends(get_tutor),
	db: Session = Depends(get_db),
):
	text = (req.text or "").strip()
	if not text:
		raise HTTPException(status_code=400, detail="text is required")
	# Optional safety clamp to avoid extremely long prompts
	if len(text) > MAX_TEXT_CHARS:
		text = text[:MAX_TEXT_CHARS]
	with tutor_errors():
		result = await tutor.analyze_writing(text, req.task_type)
	record_practice(db, user.username, "writing", result.score, result.feedback or text)
	return result
