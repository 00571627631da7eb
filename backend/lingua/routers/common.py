from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import ExhaustedFallbackError, MissingCredentialError
from ..preferences import PreferenceStore
from ..tutor import TutorService
from .auth import User, get_current_user


def get_tutor(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> TutorService:
	store = PreferenceStore(db, user.username)
	return TutorService(store.api_key(), store.preferred_model())


@contextmanager
def tutor_errors() -> Iterator[None]:
	"""Translate tutor failures into HTTP errors for the UI."""
	try:
		yield
	except MissingCredentialError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except ExhaustedFallbackError as e:
		raise HTTPException(status_code=502, detail=str(e))
