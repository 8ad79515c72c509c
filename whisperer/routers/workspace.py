# whisperer/routers/workspace.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from whisperer.core.access import owned_workspace
from whisperer.core.auth import get_current_user
from whisperer.core.database import get_db
from whisperer.core.exceptions import ValidationFailedError
from whisperer.core.llm_list import default_claude_model_id, resolve_claude_model_id
from whisperer.core.updates import collect_updates
from whisperer.models.chat import Chat
from whisperer.models.links import ChatFile, CollectionWorkspace, FileWorkspace
from whisperer.models.user import User
from whisperer.models.workspace import Workspace
from whisperer.schemas.workspace import WorkspaceCreate, WorkspaceResponse, WorkspaceUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[WorkspaceResponse])
def list_workspaces(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """The caller's workspaces, home workspace first."""
    return (
        db.query(Workspace)
        .filter(Workspace.user_id == user.id)
        .order_by(Workspace.is_home.desc(), Workspace.created_at)
        .all()
    )


@router.post("", response_model=WorkspaceResponse)
def create_workspace(payload: WorkspaceCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Create a new, non-home workspace. Only the home workspace is created at
    sign-in; every other one comes through here.
    """
    data = payload.model_dump()
    data["default_model"] = resolve_claude_model_id(data["default_model"]) if data["default_model"] else default_claude_model_id()
    workspace = Workspace(user_id=user.id, is_home=False, **data)
    db.add(workspace)
    db.commit()
    db.refresh(workspace)
    return workspace


@router.get("/{workspace_id}", response_model=WorkspaceResponse)
def get_workspace(workspace_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return owned_workspace(db, user.id, workspace_id)


@router.patch("/{workspace_id}", response_model=WorkspaceResponse)
def update_workspace(
    workspace_id: str,
    payload: WorkspaceUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Rename a workspace or change its default chat settings. The default
    model is normalized to a known Claude model on write.
    """
    workspace = owned_workspace(db, user.id, workspace_id)
    updates = collect_updates(payload, Workspace)
    if "default_model" in updates:
        updates["default_model"] = resolve_claude_model_id(updates["default_model"])

    for key, value in updates.items():
        setattr(workspace, key, value)
    db.commit()
    db.refresh(workspace)
    return workspace


@router.delete("/{workspace_id}")
def delete_workspace(workspace_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete a workspace and its chats. Files and collections survive; only
    their links to this workspace go. The home workspace cannot be deleted.
    """
    workspace = owned_workspace(db, user.id, workspace_id)
    if workspace.is_home:
        raise ValidationFailedError("The home workspace cannot be deleted.")

    chat_ids = [chat.id for chat in db.query(Chat.id).filter(Chat.workspace_id == workspace.id)]
    if chat_ids:
        db.query(ChatFile).filter(ChatFile.chat_id.in_(chat_ids)).delete(synchronize_session=False)
    db.query(FileWorkspace).filter(FileWorkspace.workspace_id == workspace.id).delete()
    db.query(CollectionWorkspace).filter(CollectionWorkspace.workspace_id == workspace.id).delete()
    db.delete(workspace)
    db.commit()
    logger.info("Deleted workspace %s", workspace_id)
    return {"detail": "Workspace and all associated data deleted successfully."}
