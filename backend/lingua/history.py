from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from .models import PracticeHistory
from .schemas import HistoryItem, UserStats


SUMMARY_LIMIT = 200


def record_practice(db: Session, username: str, mode: str, score: float, summary: str) -> PracticeHistory:
	row = PracticeHistory(username=username, mode=mode, score=float(score), summary=(summary or "")[:SUMMARY_LIMIT])
	db.add(row)
	db.commit()
	return row


def list_history(db: Session, username: str, limit: int = 50) -> List[PracticeHistory]:
	return (
		db.query(PracticeHistory)
		.filter(PracticeHistory.username == username)
		.order_by(PracticeHistory.created_at.desc())
		.limit(limit)
		.all()
	)


def to_item(row: PracticeHistory) -> HistoryItem:
	return HistoryItem(
		id=row.id,
		date=row.created_at.isoformat(),
		mode=row.mode,
		score=row.score,
		summary=row.summary or "",
	)


def practice_streak(days: Sequence[date], today: date) -> int:
	"""Consecutive practice days ending today (or yesterday, if not yet today)."""
	seen = set(days)
	cursor = today if today in seen else today - timedelta(days=1)
	streak = 0
	while cursor in seen:
		streak += 1
		cursor -= timedelta(days=1)
	return streak


def compute_stats(rows: Sequence[PracticeHistory], today: Optional[date] = None) -> UserStats:
	today = today or datetime.utcnow().date()
	ordered = sorted(rows, key=lambda r: r.created_at)
	if not ordered:
		return UserStats()
	return UserStats(
		speakingScore=[r.score for r in ordered if r.mode == "speaking"],
		writingScore=[r.score for r in ordered if r.mode == "writing"],
		lessonsCompleted=len(ordered),
		streak=practice_streak([r.created_at.date() for r in ordered], today),
		lastPractice=ordered[-1].created_at.isoformat(),
	)
