# whisperer/core/access.py
"""
Ownership lookups shared by the routers. Rows the caller cannot see are
reported as not found, whether or not they exist.
"""
from sqlalchemy import or_
from sqlalchemy.orm import Session

from whisperer.core.exceptions import NotFoundError
from whisperer.models.assistant import Assistant
from whisperer.models.chat import Chat
from whisperer.models.collection import Collection
from whisperer.models.file import File
from whisperer.models.prompt import Prompt
from whisperer.models.tool import Tool
from whisperer.models.workspace import Workspace


def owned_workspace(db: Session, user_id: str, workspace_id: str) -> Workspace:
    workspace = db.query(Workspace).filter(Workspace.id == workspace_id, Workspace.user_id == user_id).first()
    if not workspace:
        raise NotFoundError("Workspace not found.")
    return workspace


def visible_assistants_query(db: Session, user_id: str):
    return db.query(Assistant).filter(
        or_(
            Assistant.user_id == user_id,
            Assistant.sharing == "public",
            Assistant.is_system == True,  # noqa: E712
        )
    )


def visible_assistant(db: Session, user_id: str, assistant_id: str) -> Assistant:
    assistant = visible_assistants_query(db, user_id).filter(Assistant.id == assistant_id).first()
    if not assistant:
        raise NotFoundError("Assistant not found.")
    return assistant


def owned_assistant(db: Session, user_id: str, assistant_id: str) -> Assistant:
    assistant = db.query(Assistant).filter(Assistant.id == assistant_id, Assistant.user_id == user_id).first()
    if not assistant:
        raise NotFoundError("Assistant not found.")
    return assistant


def owned_chat(db: Session, user_id: str, chat_id: str) -> Chat:
    chat = db.query(Chat).filter(Chat.id == chat_id, Chat.user_id == user_id).first()
    if not chat:
        raise NotFoundError("Chat not found.")
    return chat


def owned_file(db: Session, user_id: str, file_id: str) -> File:
    file_record = db.query(File).filter(File.id == file_id, File.user_id == user_id).first()
    if not file_record:
        raise NotFoundError("File not found.")
    return file_record


def owned_collection(db: Session, user_id: str, collection_id: str) -> Collection:
    collection = db.query(Collection).filter(Collection.id == collection_id, Collection.user_id == user_id).first()
    if not collection:
        raise NotFoundError("Collection not found.")
    return collection


def owned_tool(db: Session, user_id: str, tool_id: str) -> Tool:
    tool = db.query(Tool).filter(Tool.id == tool_id, Tool.user_id == user_id).first()
    if not tool:
        raise NotFoundError("Tool not found.")
    return tool


def owned_prompt(db: Session, user_id: str, prompt_id: str) -> Prompt:
    prompt = db.query(Prompt).filter(Prompt.id == prompt_id, Prompt.user_id == user_id).first()
    if not prompt:
        raise NotFoundError("Prompt not found.")
    return prompt
