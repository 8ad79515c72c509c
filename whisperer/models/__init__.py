from .base import Base
from .user import User, Account, UserSession
from .profile import Profile
from .workspace import Workspace
from .assistant import Assistant
from .chat import Chat
from .file import File, FileItem
from .collection import Collection
from .prompt import Prompt
from .tool import Tool
from .links import (
    AssistantFile,
    AssistantCollection,
    AssistantTool,
    CollectionFile,
    CollectionWorkspace,
    ChatFile,
    FileWorkspace,
)

__all__ = [
    "Base",
    "User",
    "Account",
    "UserSession",
    "Profile",
    "Workspace",
    "Assistant",
    "Chat",
    "File",
    "FileItem",
    "Collection",
    "Prompt",
    "Tool",
    "AssistantFile",
    "AssistantCollection",
    "AssistantTool",
    "CollectionFile",
    "CollectionWorkspace",
    "ChatFile",
    "FileWorkspace",
]
