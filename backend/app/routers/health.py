import os
import time

from fastapi import APIRouter, Depends, HTTPException

from app.config import Settings
from app.dependencies import get_settings

router = APIRouter()

_started_at = time.monotonic()


@router.get("/health")
def health_check(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "ok": True,
        "uptime": round(time.monotonic() - _started_at, 3),
        "env": settings.env,
    }


@router.get("/debug/uploads")
def list_uploads(settings: Settings = Depends(get_settings)) -> dict:
    """List stored upload filenames; 404 unless ``debug_uploads`` is enabled."""
    if not settings.debug_uploads:
        raise HTTPException(status_code=404, detail="Not found")
    files = sorted(
        name for name in os.listdir(settings.upload_dir) if not name.startswith(".")
    )
    return {"ok": True, "count": len(files), "files": files}
