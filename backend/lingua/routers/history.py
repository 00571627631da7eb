from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..history import compute_stats, list_history, to_item
from ..models import PracticeHistory
from ..schemas import HistoryItem, UserStats
from .auth import User, get_current_user


router = APIRouter(prefix="/history", tags=["history"])


@router.get("", response_model=List[HistoryItem])
async def history(limit: int = Query(default=50, ge=1, le=500), user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	return [to_item(row) for row in list_history(db, user.username, limit)]


@router.get("/stats", response_model=UserStats)
async def stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	rows = db.query(PracticeHistory).filter(PracticeHistory.username == user.username).all()
	return compute_stats(rows)
