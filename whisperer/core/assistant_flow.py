# whisperer/core/assistant_flow.py
"""
Turns an assistant pick (or "none") into effective chat settings, and starts
chats from assistants.

The caller's session state is an explicit ChatSessionState passed to each
operation. Every operation does all of its database reads or writes first and
only then touches the state. A failed call therefore leaves the state exactly
as it was: tools and files are never observed half-replaced, and a chat that
failed to insert never appears in state.chats.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from whisperer.core.llm_list import resolve_claude_model_id
from whisperer.models.assistant import Assistant
from whisperer.models.chat import Chat
from whisperer.models.collection import Collection
from whisperer.models.file import File
from whisperer.models.links import AssistantCollection, AssistantFile, AssistantTool, CollectionFile
from whisperer.models.profile import Profile
from whisperer.models.tool import Tool
from whisperer.models.workspace import Workspace
from whisperer.schemas.chat import ChatFileItem, ChatSettings

logger = logging.getLogger(__name__)

# Chats and quick settings always embed with this provider.
EMBEDDINGS_PROVIDER = "openai"


@dataclass
class ChatSessionState:
    profile: Optional[Profile] = None
    selected_workspace: Optional[Workspace] = None
    selected_assistant: Optional[Assistant] = None
    chat_settings: Optional[ChatSettings] = None
    chat_files: List[ChatFileItem] = field(default_factory=list)
    selected_tools: List[Tool] = field(default_factory=list)
    show_files_display: bool = False
    chats: List[Chat] = field(default_factory=list)


def get_assistant_files(db: Session, assistant_id: str) -> List[File]:
    return (
        db.query(File)
        .join(AssistantFile, AssistantFile.file_id == File.id)
        .filter(AssistantFile.assistant_id == assistant_id)
        .order_by(AssistantFile.id)
        .all()
    )


def get_assistant_collections(db: Session, assistant_id: str) -> List[Collection]:
    return (
        db.query(Collection)
        .join(AssistantCollection, AssistantCollection.collection_id == Collection.id)
        .filter(AssistantCollection.assistant_id == assistant_id)
        .order_by(AssistantCollection.id)
        .all()
    )


def get_collection_files(db: Session, collection_id: str) -> List[File]:
    return (
        db.query(File)
        .join(CollectionFile, CollectionFile.file_id == File.id)
        .filter(CollectionFile.collection_id == collection_id)
        .order_by(CollectionFile.id)
        .all()
    )


def get_assistant_tools(db: Session, assistant_id: str) -> List[Tool]:
    return (
        db.query(Tool)
        .join(AssistantTool, AssistantTool.tool_id == Tool.id)
        .filter(AssistantTool.assistant_id == assistant_id)
        .order_by(AssistantTool.id)
        .all()
    )


def collect_assistant_files(db: Session, assistant_id: str) -> List[File]:
    """
    The assistant's own files, then the files of each linked collection in
    collection order. A file reachable both ways appears more than once.
    """
    all_files = list(get_assistant_files(db, assistant_id))
    for collection in get_assistant_collections(db, assistant_id):
        all_files.extend(get_collection_files(db, collection.id))
    return all_files


def assistant_chat_settings(assistant: Assistant) -> ChatSettings:
    return ChatSettings(
        model=resolve_claude_model_id(assistant.model),
        prompt=assistant.prompt,
        temperature=assistant.temperature,
        contextLength=assistant.context_length,
        includeProfileContext=assistant.include_profile_context,
        includeWorkspaceInstructions=assistant.include_workspace_instructions,
        embeddingsProvider=EMBEDDINGS_PROVIDER,
    )


def workspace_chat_settings(workspace: Workspace) -> ChatSettings:
    return ChatSettings(
        model=resolve_claude_model_id(workspace.default_model),
        prompt=workspace.default_prompt,
        temperature=workspace.default_temperature,
        contextLength=workspace.default_context_length,
        includeProfileContext=workspace.include_profile_context,
        includeWorkspaceInstructions=workspace.include_workspace_instructions,
        embeddingsProvider=EMBEDDINGS_PROVIDER,
    )


def select_quick_setting(db: Session, state: ChatSessionState, assistant: Optional[Assistant]) -> ChatSessionState:
    """
    Applies a quick-settings pick to state.

    With an assistant: tools are replaced by exactly the assistant's tools,
    chat files by the collected file list, and settings come from the
    assistant. The files panel is forced open only when files were found.

    With None: assistant, files and tools are cleared and, if a workspace is
    selected, settings fall back to its defaults.
    """
    if assistant is None:
        state.selected_assistant = None
        state.chat_files = []
        state.selected_tools = []
        if state.selected_workspace is not None:
            state.chat_settings = workspace_chat_settings(state.selected_workspace)
        return state

    all_files = collect_assistant_files(db, assistant.id)
    tools = get_assistant_tools(db, assistant.id)
    chat_settings = assistant_chat_settings(assistant)

    state.selected_assistant = assistant
    state.selected_tools = list(tools)
    state.chat_files = [ChatFileItem(id=f.id, name=f.name, type=f.type) for f in all_files]
    if state.chat_files:
        state.show_files_display = True
    state.chat_settings = chat_settings

    logger.debug(
        "Selected assistant %s: %d files, %d tools",
        assistant.id,
        len(state.chat_files),
        len(state.selected_tools),
    )
    return state


def is_modified(assistant: Optional[Assistant], chat_settings: Optional[ChatSettings]) -> bool:
    """True when the live settings have drifted from the selected assistant's stored values."""
    if chat_settings is None or assistant is None:
        return False
    return (
        assistant.include_profile_context != chat_settings.includeProfileContext
        or assistant.include_workspace_instructions != chat_settings.includeWorkspaceInstructions
        or assistant.context_length != chat_settings.contextLength
        or assistant.model != chat_settings.model
        or assistant.prompt != chat_settings.prompt
        or assistant.temperature != chat_settings.temperature
    )


def build_assistant_chat(state: ChatSessionState, assistant: Assistant) -> Chat:
    # Without a loaded profile the chat is attributed to the assistant's
    # owner, which is not necessarily the caller.
    user_id = state.profile.user_id if state.profile is not None else assistant.user_id
    return Chat(
        user_id=user_id,
        workspace_id=state.selected_workspace.id,
        assistant_id=assistant.id,
        name=f"Chat with {assistant.name}",
        context_length=assistant.context_length,
        include_profile_context=assistant.include_profile_context,
        include_workspace_instructions=assistant.include_workspace_instructions,
        model=resolve_claude_model_id(assistant.model),
        prompt=assistant.prompt,
        temperature=assistant.temperature,
        embeddings_provider=EMBEDDINGS_PROVIDER,
    )


def start_chat_with_assistant(db: Session, state: ChatSessionState, assistant: Assistant) -> Optional[Tuple[Chat, str]]:
    """
    Creates a chat pre-filled from the assistant and returns it with the URL
    to navigate to. Returns None when no workspace is selected.

    State is only updated after the insert commits; on failure the exception
    propagates and neither state.chats nor the selected assistant change.
    """
    workspace = state.selected_workspace
    if workspace is None:
        return None

    chat = build_assistant_chat(state, assistant)
    db.add(chat)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to create chat for assistant %s", assistant.id)
        raise
    db.refresh(chat)

    logger.info("Chat %s created for assistant %s", chat.id, assistant.name)

    state.chats = [chat, *state.chats]
    state.selected_assistant = assistant
    return chat, f"/{workspace.id}/chat/{chat.id}"
