"""FastAPI trigger for event-driven runs (schedulers, cron webhooks)."""
import logging
import threading
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.security import APIKeyHeader
from pydantic import BaseModel

from bbnotify.config import Config
from bbnotify.errors import BookBuildingNotifyError
from bbnotify.jobs.runner import open_runner

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-KEY", auto_error=False)


class RunResponse(BaseModel):
    """Response model for a run."""

    status: str
    message: str
    summary: Optional[dict] = None


def create_app(config: Config, dry_run: bool = False) -> FastAPI:
    """Build the trigger app around an already loaded configuration."""
    app = FastAPI(title="Book-building Notify API", version="0.1.0")
    run_lock = threading.Lock()

    def verify_api_key(api_key: Optional[str] = Depends(API_KEY_HEADER)) -> bool:
        """Verify API key if configured."""
        if config.api_key and api_key != config.api_key:
            raise HTTPException(status_code=403, detail="Invalid API key")
        return True

    @app.get("/health")
    def health():
        """Health check endpoint (no auth required)."""
        return {
            "status": "ok",
            "timestamp": datetime.now(config.tz).isoformat(),
            "running": run_lock.locked(),
        }

    @app.post("/run", response_model=RunResponse)
    def run(_: bool = Depends(verify_api_key)):
        """Run one notification pass. Overlapping runs are rejected."""
        if not run_lock.acquire(blocking=False):
            raise HTTPException(status_code=409, detail="A run is already in progress")
        try:
            with open_runner(config, dry_run=dry_run) as runner:
                report = runner.run()
        except BookBuildingNotifyError as e:
            logger.error(f"Run failed: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Run failed: {e}") from e
        finally:
            run_lock.release()

        return RunResponse(
            status="ok",
            message=f"Processed {report.processed} schedules",
            summary=report.get_summary(),
        )

    return app
