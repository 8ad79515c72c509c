# whisperer/schemas/chat.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union


class ChatSettings(BaseModel):
    model: str
    prompt: str = ""
    temperature: float = 0.5
    contextLength: int = 4096
    includeProfileContext: bool = True
    includeWorkspaceInstructions: bool = True
    embeddingsProvider: str = "openai"


class ChatMessage(BaseModel):
    role: str
    content: Union[str, List[Dict[str, Any]]]


class ChatRequest(BaseModel):
    chatSettings: ChatSettings
    messages: List[ChatMessage] = Field(min_length=1)
    fileIds: List[str] = []


class CommandRequest(BaseModel):
    input: str


class CommandResponse(BaseModel):
    content: str


class ChatCreate(BaseModel):
    name: str
    assistant_id: Optional[str] = None
    collection_id: Optional[str] = None
    chat_settings: Optional[ChatSettings] = None


class ChatUpdate(BaseModel):
    name: Optional[str] = None
    model: Optional[str] = None
    prompt: Optional[str] = None
    temperature: Optional[float] = None
    context_length: Optional[int] = None
    include_profile_context: Optional[bool] = None
    include_workspace_instructions: Optional[bool] = None
    collection_id: Optional[str] = None


class ChatResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    user_id: str
    workspace_id: str
    assistant_id: Optional[str] = None
    collection_id: Optional[str] = None
    model: str
    prompt: str
    temperature: float
    context_length: int
    include_profile_context: bool
    include_workspace_instructions: bool
    embeddings_provider: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ChatFileItem(BaseModel):
    id: str
    name: str
    type: str
    file: None = None


class ToolItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    url: str


class QuickSettingsRequest(BaseModel):
    # null selects "use workspace defaults"
    assistantId: Optional[str] = None


class QuickSettingsResponse(BaseModel):
    selectedAssistantId: Optional[str] = None
    chatSettings: Optional[ChatSettings] = None
    chatFiles: List[ChatFileItem]
    selectedTools: List[ToolItem]
    showFilesDisplay: bool
    isModified: bool


class ModifiedRequest(BaseModel):
    chatSettings: ChatSettings


class ModifiedResponse(BaseModel):
    isModified: bool


class StartChatResponse(BaseModel):
    chat: ChatResponse
    redirectUrl: str
