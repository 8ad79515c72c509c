# whisperer/schemas/workspace.py
from pydantic import BaseModel, ConfigDict
from typing import Optional


class WorkspaceCreate(BaseModel):
    name: str
    description: str = ""
    instructions: str = ""
    default_model: Optional[str] = None
    default_prompt: str = "You are a friendly, helpful AI assistant."
    default_temperature: float = 0.5
    default_context_length: int = 4096
    include_profile_context: bool = True
    include_workspace_instructions: bool = True
    embeddings_provider: str = "openai"


class WorkspaceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    instructions: Optional[str] = None
    default_model: Optional[str] = None
    default_prompt: Optional[str] = None
    default_temperature: Optional[float] = None
    default_context_length: Optional[int] = None
    include_profile_context: Optional[bool] = None
    include_workspace_instructions: Optional[bool] = None
    embeddings_provider: Optional[str] = None


class WorkspaceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str
    instructions: str
    is_home: bool
    default_model: str
    default_prompt: str
    default_temperature: float
    default_context_length: int
    include_profile_context: bool
    include_workspace_instructions: bool
    embeddings_provider: str
    created_at: Optional[str] = None
