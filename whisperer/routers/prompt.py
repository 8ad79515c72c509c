# whisperer/routers/prompt.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from whisperer.core.access import owned_prompt
from whisperer.core.auth import get_current_user
from whisperer.core.database import get_db
from whisperer.core.updates import collect_updates
from whisperer.models.prompt import Prompt
from whisperer.models.user import User
from whisperer.schemas.assistant import PromptCreate, PromptResponse, PromptUpdate

router = APIRouter()


@router.get("", response_model=List[PromptResponse])
def list_prompts(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Own prompts plus public ones shared by admins (read-only)."""
    return (
        db.query(Prompt)
        .filter(or_(Prompt.user_id == user.id, Prompt.sharing == "public"))
        .order_by(Prompt.created_at.desc())
        .all()
    )


@router.post("", response_model=PromptResponse)
def create_prompt(payload: PromptCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    prompt = Prompt(user_id=user.id, **payload.model_dump())
    db.add(prompt)
    db.commit()
    db.refresh(prompt)
    return prompt


@router.patch("/{prompt_id}", response_model=PromptResponse)
def update_prompt(prompt_id: str, payload: PromptUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    prompt = owned_prompt(db, user.id, prompt_id)
    updates = collect_updates(payload, Prompt)
    for key, value in updates.items():
        setattr(prompt, key, value)
    db.commit()
    db.refresh(prompt)
    return prompt


@router.delete("/{prompt_id}")
def delete_prompt(prompt_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    prompt = owned_prompt(db, user.id, prompt_id)
    db.delete(prompt)
    db.commit()
    return {"detail": "Prompt deleted successfully."}
