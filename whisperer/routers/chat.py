# whisperer/routers/chat.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from whisperer.core import assistant_flow
from whisperer.core.access import owned_chat, owned_file, owned_workspace, visible_assistant
from whisperer.core.auth import get_current_user
from whisperer.core.database import get_db
from whisperer.core.llm_list import resolve_claude_model_id
from whisperer.core.updates import collect_updates
from whisperer.models.chat import Chat
from whisperer.models.file import File as FileModel
from whisperer.models.links import ChatFile
from whisperer.models.profile import Profile
from whisperer.models.user import User
from whisperer.schemas.chat import (
    ChatCreate,
    ChatResponse,
    ChatUpdate,
    QuickSettingsRequest,
    QuickSettingsResponse,
    StartChatResponse,
    ToolItem,
)
from whisperer.schemas.file import FileResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _workspace_chats(db: Session, workspace_id: str) -> List[Chat]:
    return db.query(Chat).filter(Chat.workspace_id == workspace_id).order_by(Chat.created_at.desc()).all()


def _session_state(db: Session, user: User, workspace_id: str) -> assistant_flow.ChatSessionState:
    workspace = owned_workspace(db, user.id, workspace_id)
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    return assistant_flow.ChatSessionState(profile=profile, selected_workspace=workspace)


@router.get("/workspaces/{workspace_id}/chats", response_model=List[ChatResponse])
def list_chats(workspace_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Chats in a workspace, most recent first."""
    workspace = owned_workspace(db, user.id, workspace_id)
    return _workspace_chats(db, workspace.id)


@router.post("/workspaces/{workspace_id}/chats", response_model=ChatResponse)
def create_chat(
    workspace_id: str,
    payload: ChatCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a chat with the given settings, or the workspace defaults when
    none are sent. The settings are copied onto the chat row.
    """
    workspace = owned_workspace(db, user.id, workspace_id)
    if payload.assistant_id:
        visible_assistant(db, user.id, payload.assistant_id)
    settings = payload.chat_settings or assistant_flow.workspace_chat_settings(workspace)

    chat = Chat(
        user_id=user.id,
        workspace_id=workspace.id,
        assistant_id=payload.assistant_id,
        collection_id=payload.collection_id,
        name=payload.name,
        model=settings.model,
        prompt=settings.prompt,
        temperature=settings.temperature,
        context_length=settings.contextLength,
        include_profile_context=settings.includeProfileContext,
        include_workspace_instructions=settings.includeWorkspaceInstructions,
        embeddings_provider=settings.embeddingsProvider,
    )
    db.add(chat)
    db.commit()
    db.refresh(chat)
    return chat


@router.post("/workspaces/{workspace_id}/quick-settings", response_model=QuickSettingsResponse)
def quick_settings(
    workspace_id: str,
    payload: QuickSettingsRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Resolve a quick-settings pick. Send an **assistantId** to load that
    assistant's settings, files and tools, or null to fall back to the
    workspace defaults.
    """
    state = _session_state(db, user, workspace_id)
    assistant = visible_assistant(db, user.id, payload.assistantId) if payload.assistantId else None

    assistant_flow.select_quick_setting(db, state, assistant)

    return QuickSettingsResponse(
        selectedAssistantId=state.selected_assistant.id if state.selected_assistant else None,
        chatSettings=state.chat_settings,
        chatFiles=state.chat_files,
        selectedTools=[ToolItem.model_validate(tool) for tool in state.selected_tools],
        showFilesDisplay=state.show_files_display,
        isModified=assistant_flow.is_modified(state.selected_assistant, state.chat_settings),
    )


@router.post("/workspaces/{workspace_id}/assistants/{assistant_id}/chats", response_model=StartChatResponse)
def start_assistant_chat(
    workspace_id: str,
    assistant_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Start a new chat from an assistant: the assistant's settings are copied
    onto the chat, and the response carries the URL of the new chat.
    """
    state = _session_state(db, user, workspace_id)
    state.chats = _workspace_chats(db, workspace_id)
    assistant = visible_assistant(db, user.id, assistant_id)

    chat, redirect_url = assistant_flow.start_chat_with_assistant(db, state, assistant)
    return StartChatResponse(chat=ChatResponse.model_validate(chat), redirectUrl=redirect_url)


@router.get("/chats/{chat_id}", response_model=ChatResponse)
def get_chat(chat_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return owned_chat(db, user.id, chat_id)


@router.patch("/chats/{chat_id}", response_model=ChatResponse)
def update_chat(chat_id: str, payload: ChatUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Rename a chat or change its own settings snapshot."""
    chat = owned_chat(db, user.id, chat_id)
    updates = collect_updates(payload, Chat)
    if "model" in updates:
        updates["model"] = resolve_claude_model_id(updates["model"])
    for key, value in updates.items():
        setattr(chat, key, value)
    db.commit()
    db.refresh(chat)
    return chat


@router.delete("/chats/{chat_id}")
def delete_chat(chat_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete the chat identified by `chat_id`.

    Returns a message indicating successful deletion.
    """
    chat = owned_chat(db, user.id, chat_id)
    db.query(ChatFile).filter(ChatFile.chat_id == chat.id).delete()
    db.delete(chat)
    db.commit()
    return {"detail": "Chat deleted successfully."}


@router.get("/chats/{chat_id}/files", response_model=List[FileResponse])
def list_chat_files(chat_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    chat = owned_chat(db, user.id, chat_id)
    return (
        db.query(FileModel)
        .join(ChatFile, ChatFile.file_id == FileModel.id)
        .filter(ChatFile.chat_id == chat.id)
        .order_by(ChatFile.id)
        .all()
    )


@router.post("/chats/{chat_id}/files/{file_id}")
def attach_chat_file(chat_id: str, file_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    chat = owned_chat(db, user.id, chat_id)
    file_record = owned_file(db, user.id, file_id)
    exists = db.query(ChatFile).filter(ChatFile.chat_id == chat.id, ChatFile.file_id == file_record.id).first()
    if not exists:
        db.add(ChatFile(user_id=user.id, chat_id=chat.id, file_id=file_record.id))
        db.commit()
    return {"detail": "File attached to chat."}


@router.delete("/chats/{chat_id}/files/{file_id}")
def detach_chat_file(chat_id: str, file_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    chat = owned_chat(db, user.id, chat_id)
    db.query(ChatFile).filter(ChatFile.chat_id == chat.id, ChatFile.file_id == file_id).delete()
    db.commit()
    return {"detail": "File detached from chat."}
