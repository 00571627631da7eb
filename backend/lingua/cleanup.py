from __future__ import annotations
from datetime import datetime, timedelta
from sqlalchemy import delete
from sqlalchemy.orm import Session

from .models import PracticeHistory


def purge_history_older_than(db: Session, days: int) -> int:
	if days <= 0:
		return 0
	threshold = datetime.utcnow() - timedelta(days=days)
	res = db.execute(delete(PracticeHistory).where(PracticeHistory.created_at < threshold))
	db.commit()
	return res.rowcount or 0
