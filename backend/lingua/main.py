from fastapi import FastAPI

from .db import get_db, init_db
from .cleanup import purge_history_older_than
from .preferences import DEFAULT_MODEL
from .settings import settings
from .routers import auth
from .routers import preferences
from .routers import write
from .routers import speaking
from .routers import history
import asyncio
import logging

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Lingua Tutor API")
app.include_router(auth.router)
app.include_router(preferences.router)
app.include_router(write.router)
app.include_router(speaking.router)
app.include_router(history.router)


@app.get("/info")
def root():
	return {
		"status": "ok",
		"gemini_configured": bool(settings.gemini_api_key),
		"default_model": DEFAULT_MODEL,
	}


def _purge_history() -> None:
	db = next(get_db())
	try:
		removed = purge_history_older_than(db, settings.history_retention_days)
		if removed:
			logger.info("Purged %d old practice history rows", removed)
	except Exception:
		logger.exception("History cleanup failed")
	finally:
		db.close()


async def _cleanup_watcher():
	# Run daily after the startup pass
	while True:
		await asyncio.sleep(24 * 60 * 60)
		_purge_history()


@app.on_event("startup")
async def startup_event():
	init_db()
	_purge_history()
	asyncio.create_task(_cleanup_watcher())
