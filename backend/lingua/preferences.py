from __future__ import annotations
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from .models import StudentSettings
from .settings import Settings, settings as default_settings


DEFAULT_MODEL = "gemini-3-flash-preview"

SUPPORTED_MODELS: List[Dict[str, str]] = [
	{"id": "gemini-3-flash-preview", "name": "Gemini 3 Flash", "desc": "Fastest, low latency (Default)"},
	{"id": "gemini-3-pro-preview", "name": "Gemini 3 Pro", "desc": "High intelligence, complex tasks"},
	{"id": "gemini-2.5-flash", "name": "Gemini 2.5 Flash", "desc": "Balanced performance"},
]

# Keep in sync with SUPPORTED_MODELS
FALLBACK_ORDER = ("gemini-3-flash-preview", "gemini-3-pro-preview", "gemini-2.5-flash")


def is_supported_model(model: Optional[str]) -> bool:
	return bool(model) and any(m["id"] == model for m in SUPPORTED_MODELS)


def resolve_api_key(stored_key: Optional[str] = None, config: Optional[Settings] = None) -> str:
	"""Return the student's saved key, else the server key, else ""."""
	key = (stored_key or "").strip()
	if key:
		return key
	config = config or default_settings
	return (config.gemini_api_key or "").strip()


def resolve_preferred_model(stored_model: Optional[str] = None) -> str:
	if is_supported_model(stored_model):
		return stored_model  # type: ignore[return-value]
	return DEFAULT_MODEL


def build_candidate_chain(preferred: str, fallback_order: Iterable[str] = FALLBACK_ORDER) -> List[str]:
	chain: List[str] = []
	for model in [preferred, *fallback_order]:
		if model and model not in chain:
			chain.append(model)
	return chain


class PreferenceStore:
	"""Per-student API key and model selection backed by the database."""

	def __init__(self, db: Session, username: str) -> None:
		self.db = db
		self.username = username

	def _row(self) -> Optional[StudentSettings]:
		return self.db.get(StudentSettings, self.username)

	def stored_api_key(self) -> Optional[str]:
		row = self._row()
		return row.api_key if row else None

	def stored_model(self) -> Optional[str]:
		row = self._row()
		return row.selected_model if row else None

	def api_key(self) -> str:
		return resolve_api_key(self.stored_api_key())

	def preferred_model(self) -> str:
		return resolve_preferred_model(self.stored_model())

	def save(self, *, api_key: Optional[str] = None, selected_model: Optional[str] = None) -> StudentSettings:
		if selected_model is not None and not is_supported_model(selected_model):
			raise ValueError(f"Unsupported model: {selected_model}")
		row = self._row() or StudentSettings(username=self.username)
		if api_key is not None:
			row.api_key = api_key.strip() or None
		if selected_model is not None:
			row.selected_model = selected_model
		self.db.add(row)
		self.db.commit()
		return row
