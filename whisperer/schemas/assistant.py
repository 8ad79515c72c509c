# whisperer/schemas/assistant.py
from pydantic import BaseModel, ConfigDict
from typing import Optional


class AssistantCreate(BaseModel):
    name: str
    description: str = ""
    prompt: str = ""
    model: Optional[str] = None
    temperature: float = 0.5
    context_length: int = 4096
    include_profile_context: bool = True
    include_workspace_instructions: bool = True
    embeddings_provider: str = "openai"
    image_path: str = ""
    sharing: str = "private"
    folder_id: Optional[str] = None


class AssistantUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    prompt: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    context_length: Optional[int] = None
    include_profile_context: Optional[bool] = None
    include_workspace_instructions: Optional[bool] = None
    embeddings_provider: Optional[str] = None
    image_path: Optional[str] = None
    sharing: Optional[str] = None
    folder_id: Optional[str] = None


class AssistantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    folder_id: Optional[str] = None
    name: str
    description: str
    image_path: str
    prompt: str
    model: str
    temperature: float
    context_length: int
    include_profile_context: bool
    include_workspace_instructions: bool
    embeddings_provider: str
    sharing: str
    is_system: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PromptCreate(BaseModel):
    name: str
    content: str = ""
    sharing: str = "private"
    folder_id: Optional[str] = None


class PromptUpdate(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = None
    sharing: Optional[str] = None
    folder_id: Optional[str] = None


class PromptResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    content: str
    sharing: str
    folder_id: Optional[str] = None


class ToolCreate(BaseModel):
    name: str
    description: str = ""
    url: str = ""
    openapi_schema: str = "{}"
    custom_headers: str = "{}"
    sharing: str = "private"


class ToolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str
    url: str
    sharing: str


class ToolUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    openapi_schema: Optional[str] = None
    custom_headers: Optional[str] = None
    sharing: Optional[str] = None
