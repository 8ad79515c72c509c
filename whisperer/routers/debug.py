# whisperer/routers/debug.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from whisperer.core.config import get_settings
from whisperer.core.database import get_db
from whisperer.core.exceptions import NotFoundError
from whisperer.core.llm_list import HOSTED_PROVIDERS, default_claude_model_id
from whisperer.core.storage import bucket_root

router = APIRouter()


@router.get("/debug")
def debug_status(db: Session = Depends(get_db)):
    """Connectivity report for operators. Hidden unless ENABLE_DEBUG is set."""
    settings = get_settings()
    if not settings.enable_debug:
        raise NotFoundError()

    database = {"connected": False}
    try:
        db.execute(text("SELECT 1"))
        database = {"connected": True, "time": datetime.now(timezone.utc).isoformat()}
    except Exception as e:
        database["error"] = str(e)

    return {
        "database": database,
        "providers": {provider: bool(settings.env_key_for(provider)) for provider in HOSTED_PROVIDERS},
        "storage": {"root": bucket_root(), "bucket": settings.storage_bucket},
        "defaultModel": default_claude_model_id(),
    }
