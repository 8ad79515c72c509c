# whisperer/routers/assistant.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from whisperer.core import assistant_flow
from whisperer.core.access import (
    owned_assistant,
    owned_collection,
    owned_file,
    owned_tool,
    visible_assistant,
    visible_assistants_query,
)
from whisperer.core.auth import get_current_user
from whisperer.core.database import get_db
from whisperer.core.llm_list import default_claude_model_id, resolve_claude_model_id
from whisperer.core.updates import collect_updates
from whisperer.models.assistant import Assistant
from whisperer.models.chat import Chat
from whisperer.models.links import AssistantCollection, AssistantFile, AssistantTool
from whisperer.models.user import User
from whisperer.schemas.assistant import AssistantCreate, AssistantResponse, AssistantUpdate, ToolResponse
from whisperer.schemas.chat import ModifiedRequest, ModifiedResponse
from whisperer.schemas.file import CollectionResponse, FileResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[AssistantResponse])
def list_assistants(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """The caller's assistants plus public and system ones, system assistants first."""
    return (
        visible_assistants_query(db, user.id)
        .order_by(Assistant.is_system.desc(), Assistant.created_at.desc())
        .all()
    )


@router.post("", response_model=AssistantResponse)
def create_assistant(payload: AssistantCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    data = payload.model_dump()
    data["model"] = resolve_claude_model_id(data["model"]) if data["model"] else default_claude_model_id()
    assistant = Assistant(user_id=user.id, is_system=False, **data)
    db.add(assistant)
    db.commit()
    db.refresh(assistant)
    return assistant


@router.get("/{assistant_id}", response_model=AssistantResponse)
def get_assistant(assistant_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return visible_assistant(db, user.id, assistant_id)


@router.patch("/{assistant_id}", response_model=AssistantResponse)
def update_assistant(
    assistant_id: str,
    payload: AssistantUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Edit an assistant the caller owns. Public and system assistants owned by
    someone else are read-only and report as not found here. Chats already
    started from the assistant keep their own copy of the settings.
    """
    assistant = owned_assistant(db, user.id, assistant_id)
    updates = collect_updates(payload, Assistant)
    if "model" in updates:
        updates["model"] = resolve_claude_model_id(updates["model"])
    for key, value in updates.items():
        setattr(assistant, key, value)
    db.commit()
    db.refresh(assistant)
    return assistant


@router.delete("/{assistant_id}")
def delete_assistant(assistant_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete an assistant and its links. Chats started from it keep their
    settings snapshot and lose only the reference.
    """
    assistant = owned_assistant(db, user.id, assistant_id)
    for link_model in (AssistantFile, AssistantCollection, AssistantTool):
        db.query(link_model).filter(link_model.assistant_id == assistant.id).delete()
    db.query(Chat).filter(Chat.assistant_id == assistant.id).update({Chat.assistant_id: None})
    db.delete(assistant)
    db.commit()
    return {"detail": "Assistant deleted successfully."}


@router.post("/{assistant_id}/modified", response_model=ModifiedResponse)
def check_modified(
    assistant_id: str,
    payload: ModifiedRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Whether the given chat settings differ from the assistant's stored ones."""
    assistant = visible_assistant(db, user.id, assistant_id)
    return ModifiedResponse(isModified=assistant_flow.is_modified(assistant, payload.chatSettings))


# Linked files / collections / tools

@router.get("/{assistant_id}/files", response_model=List[FileResponse])
def list_assistant_files(assistant_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    assistant = visible_assistant(db, user.id, assistant_id)
    return assistant_flow.get_assistant_files(db, assistant.id)


@router.post("/{assistant_id}/files/{file_id}")
def link_assistant_file(assistant_id: str, file_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    assistant = owned_assistant(db, user.id, assistant_id)
    file_record = owned_file(db, user.id, file_id)
    exists = db.query(AssistantFile).filter(
        AssistantFile.assistant_id == assistant.id, AssistantFile.file_id == file_record.id
    ).first()
    if not exists:
        db.add(AssistantFile(user_id=user.id, assistant_id=assistant.id, file_id=file_record.id))
        db.commit()
    return {"detail": "File linked to assistant."}


@router.delete("/{assistant_id}/files/{file_id}")
def unlink_assistant_file(assistant_id: str, file_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    assistant = owned_assistant(db, user.id, assistant_id)
    db.query(AssistantFile).filter(AssistantFile.assistant_id == assistant.id, AssistantFile.file_id == file_id).delete()
    db.commit()
    return {"detail": "File unlinked from assistant."}


@router.get("/{assistant_id}/collections", response_model=List[CollectionResponse])
def list_assistant_collections(assistant_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    assistant = visible_assistant(db, user.id, assistant_id)
    return assistant_flow.get_assistant_collections(db, assistant.id)


@router.post("/{assistant_id}/collections/{collection_id}")
def link_assistant_collection(
    assistant_id: str,
    collection_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    assistant = owned_assistant(db, user.id, assistant_id)
    collection = owned_collection(db, user.id, collection_id)
    exists = db.query(AssistantCollection).filter(
        AssistantCollection.assistant_id == assistant.id, AssistantCollection.collection_id == collection.id
    ).first()
    if not exists:
        db.add(AssistantCollection(user_id=user.id, assistant_id=assistant.id, collection_id=collection.id))
        db.commit()
    return {"detail": "Collection linked to assistant."}


@router.delete("/{assistant_id}/collections/{collection_id}")
def unlink_assistant_collection(
    assistant_id: str,
    collection_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    assistant = owned_assistant(db, user.id, assistant_id)
    db.query(AssistantCollection).filter(
        AssistantCollection.assistant_id == assistant.id, AssistantCollection.collection_id == collection_id
    ).delete()
    db.commit()
    return {"detail": "Collection unlinked from assistant."}


@router.get("/{assistant_id}/tools", response_model=List[ToolResponse])
def list_assistant_tools(assistant_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    assistant = visible_assistant(db, user.id, assistant_id)
    return assistant_flow.get_assistant_tools(db, assistant.id)


@router.post("/{assistant_id}/tools/{tool_id}")
def link_assistant_tool(assistant_id: str, tool_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    assistant = owned_assistant(db, user.id, assistant_id)
    tool = owned_tool(db, user.id, tool_id)
    exists = db.query(AssistantTool).filter(
        AssistantTool.assistant_id == assistant.id, AssistantTool.tool_id == tool.id
    ).first()
    if not exists:
        db.add(AssistantTool(user_id=user.id, assistant_id=assistant.id, tool_id=tool.id))
        db.commit()
    return {"detail": "Tool linked to assistant."}


@router.delete("/{assistant_id}/tools/{tool_id}")
def unlink_assistant_tool(assistant_id: str, tool_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    assistant = owned_assistant(db, user.id, assistant_id)
    db.query(AssistantTool).filter(AssistantTool.assistant_id == assistant.id, AssistantTool.tool_id == tool_id).delete()
    db.commit()
    return {"detail": "Tool unlinked from assistant."}
