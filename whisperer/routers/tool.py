# whisperer/routers/tool.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from whisperer.core.access import owned_tool
from whisperer.core.auth import get_current_user
from whisperer.core.database import get_db
from whisperer.core.updates import collect_updates
from whisperer.models.links import AssistantTool
from whisperer.models.tool import Tool
from whisperer.models.user import User
from whisperer.schemas.assistant import ToolCreate, ToolResponse, ToolUpdate

router = APIRouter()


@router.get("", response_model=List[ToolResponse])
def list_tools(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return (
        db.query(Tool)
        .filter(or_(Tool.user_id == user.id, Tool.sharing == "public"))
        .order_by(Tool.created_at.desc())
        .all()
    )


@router.post("", response_model=ToolResponse)
def create_tool(payload: ToolCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    tool = Tool(
        user_id=user.id,
        name=payload.name,
        description=payload.description,
        url=payload.url,
        schema=payload.openapi_schema,
        custom_headers=payload.custom_headers,
        sharing=payload.sharing,
    )
    db.add(tool)
    db.commit()
    db.refresh(tool)
    return tool


@router.get("/{tool_id}", response_model=ToolResponse)
def get_tool(tool_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return owned_tool(db, user.id, tool_id)


@router.patch("/{tool_id}", response_model=ToolResponse)
def update_tool(tool_id: str, payload: ToolUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    tool = owned_tool(db, user.id, tool_id)
    updates = collect_updates(payload, Tool, renames={"openapi_schema": "schema"})
    for key, value in updates.items():
        setattr(tool, key, value)
    db.commit()
    db.refresh(tool)
    return tool


@router.delete("/{tool_id}")
def delete_tool(tool_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    tool = owned_tool(db, user.id, tool_id)
    db.query(AssistantTool).filter(AssistantTool.tool_id == tool.id).delete()
    db.delete(tool)
    db.commit()
    return {"detail": "Tool deleted successfully."}
