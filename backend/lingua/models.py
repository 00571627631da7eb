from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, Text
from .db import Base


class StudentSettings(Base):
	__tablename__ = "student_settings"
	# One row per student name
	username = Column(String(128), primary_key=True, index=True)
	api_key = Column(String(256), nullable=True)
	selected_model = Column(String(64), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class PracticeHistory(Base):
	__tablename__ = "practice_history"
	id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
	username = Column(String(128), index=True, nullable=False)
	# "speaking" or "writing"
	mode = Column(String(16), nullable=False)
	score = Column(Float, nullable=False, default=0.0)
	summary = Column(Text, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
