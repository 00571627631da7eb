from __future__ import annotations
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..db import get_db
from ..preferences import FALLBACK_ORDER, SUPPORTED_MODELS, PreferenceStore
from .auth import User, get_current_user


router = APIRouter(prefix="/settings", tags=["settings"])


class SettingsResponse(BaseModel):
	selected_model: str
	has_api_key: bool
	supported_models: List[Dict[str, str]]
	fallback_order: List[str]


class UpdateSettingsRequest(BaseModel):
	api_key: Optional[str] = None
	selected_model: Optional[str] = None


def _describe(store: PreferenceStore) -> SettingsResponse:
	# The key itself is never sent back
	return SettingsResponse(
		selected_model=store.preferred_model(),
		has_api_key=bool(store.api_key()),
		supported_models=SUPPORTED_MODELS,
		fallback_order=list(FALLBACK_ORDER),
	)


@router.get("", response_model=SettingsResponse)
async def read_settings(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	return _describe(PreferenceStore(db, user.username))


@router.put("", response_model=SettingsResponse)
async def update_settings(req: UpdateSettingsRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	store = PreferenceStore(db, user.username)
	try:
		store.save(api_key=req.api_key, selected_model=req.selected_model)
	except ValueError as e:
		raise HTTPException(status_code=400, detail=str(e))
	return _describe(store)
