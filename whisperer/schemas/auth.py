# whisperer/schemas/auth.py
from pydantic import BaseModel, EmailStr
from typing import Optional


class SessionUser(BaseModel):
    id: str
    email: EmailStr
    name: Optional[str] = None
    image: Optional[str] = None


class SessionResponse(BaseModel):
    user: SessionUser
    profile_id: Optional[str] = None
    home_workspace_id: Optional[str] = None
    expires: int
