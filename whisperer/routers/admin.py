# whisperer/routers/admin.py
"""
Operator-only routes.

Both routes answer 404 to anyone who is not allowed to use them, so their
existence is not advertised.
"""
import json
import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from whisperer.core import storage
from whisperer.core.auth import get_current_profile
from whisperer.core.config import get_settings
from whisperer.core.database import get_db
from whisperer.core.exceptions import ForbiddenAsNotFoundError, NotFoundError, ValidationFailedError
from whisperer.models.assistant import Assistant
from whisperer.models.chat import Chat
from whisperer.models.collection import Collection
from whisperer.models.file import File, FileItem
from whisperer.models.links import (
    AssistantCollection,
    AssistantFile,
    ChatFile,
    CollectionFile,
    CollectionWorkspace,
    FileWorkspace,
)
from whisperer.models.profile import Profile
from whisperer.schemas.assistant import AssistantResponse

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_FIELDS = (
    "name",
    "description",
    "prompt",
    "temperature",
    "context_length",
    "include_profile_context",
    "include_workspace_instructions",
    "model",
    "image_path",
    "sharing",
    "folder_id",
    "embeddings_provider",
)


def _trimmed(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def pick_update_fields(updates: dict) -> dict:
    return {key: value for key, value in updates.items() if key in ALLOWED_FIELDS}


async def _json_body(request: Request):
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationFailedError("Invalid JSON payload.")


@router.post("/admin/assistants/update")
async def update_assistant(
    request: Request,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """
    Body: `{"assistantId": ..., "updates": {...}}`. Only the columns in
    ALLOWED_FIELDS are written; anything else in `updates` is ignored.
    """
    if profile.user_role != "admin":
        raise ForbiddenAsNotFoundError()

    body = await _json_body(request)
    if not isinstance(body, dict):
        raise ValidationFailedError("Invalid JSON payload.")

    assistant_id = _trimmed(body.get("assistantId"))
    if not assistant_id:
        raise ValidationFailedError("assistantId is required.")

    updates = body.get("updates")
    if not isinstance(updates, dict):
        raise ValidationFailedError("updates must be an object.")

    fields = pick_update_fields(updates)
    if not fields:
        raise ValidationFailedError("No valid fields provided.")

    assistant = db.query(Assistant).filter(Assistant.id == assistant_id).first()
    if assistant is None:
        raise NotFoundError("Assistant not found.")

    for key, value in fields.items():
        setattr(assistant, key, value)
    db.commit()
    db.refresh(assistant)

    logger.info("Admin %s updated assistant %s: %s", profile.user_id, assistant.id, sorted(fields))
    return {"assistant": AssistantResponse.model_validate(assistant).model_dump()}


def _admin_token(request: Request) -> Optional[str]:
    token = request.headers.get("x-admin-token")
    if token:
        return token
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header[len("bearer "):].strip()
    return None


def collection_counts(db: Session, collection_id: str) -> dict:
    return {
        "collections": db.query(Collection).filter(Collection.id == collection_id).count(),
        "collection_files": db.query(CollectionFile).filter(CollectionFile.collection_id == collection_id).count(),
        "collection_workspaces": db.query(CollectionWorkspace)
        .filter(CollectionWorkspace.collection_id == collection_id)
        .count(),
        "assistant_collections": db.query(AssistantCollection)
        .filter(AssistantCollection.collection_id == collection_id)
        .count(),
        "chats": db.query(Chat).filter(Chat.collection_id == collection_id).count(),
    }


def file_counts(db: Session, file_id: str) -> dict:
    return {
        "files": db.query(File).filter(File.id == file_id).count(),
        "file_items": db.query(FileItem).filter(FileItem.file_id == file_id).count(),
        "chat_files": db.query(ChatFile).filter(ChatFile.file_id == file_id).count(),
        "collection_files": db.query(CollectionFile).filter(CollectionFile.file_id == file_id).count(),
        "assistant_files": db.query(AssistantFile).filter(AssistantFile.file_id == file_id).count(),
        "file_workspaces": db.query(FileWorkspace).filter(FileWorkspace.file_id == file_id).count(),
    }


@router.post("/admin/verify-deletion")
async def verify_deletion(request: Request, db: Session = Depends(get_db)):
    """
    Reports what is left behind after a collection or file was deleted.

    Authenticated by the shared `ADMIN_VERIFY_TOKEN`, sent as `x-admin-token`
    or a bearer token. Body: any of `collectionId`, `fileId`, `filePath`.
    A section is returned only for the keys that were given.
    """
    expected = get_settings().admin_verify_token
    token = _admin_token(request)
    if not expected or not token or not secrets.compare_digest(token, expected):
        raise ForbiddenAsNotFoundError()

    body = await _json_body(request)
    if not isinstance(body, dict):
        raise ValidationFailedError("Invalid JSON payload.")

    collection_id = _trimmed(body.get("collectionId"))
    file_id = _trimmed(body.get("fileId"))
    file_path = _trimmed(body.get("filePath"))
    if not (collection_id or file_id or file_path):
        raise ValidationFailedError("Provide a collectionId, fileId, or filePath.")

    result = {"timestamp": datetime.now(timezone.utc).isoformat()}
    try:
        if collection_id:
            result["collection"] = {"id": collection_id, **collection_counts(db, collection_id)}
        if file_id:
            result["file"] = {"id": file_id, **file_counts(db, file_id)}
        if file_path:
            result["storage"] = storage.object_status(file_path)
    except Exception as e:
        logger.exception("Deletion check failed")
        return JSONResponse(status_code=500, content={"message": str(e) or "Internal server error"})

    return result
