# whisperer/schemas/file.py
from pydantic import BaseModel, ConfigDict
from typing import Optional


class FileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str
    file_path: str
    type: str
    size: int
    tokens: int
    document_type: Optional[str] = None
    logline: Optional[str] = None
    genre: Optional[str] = None
    page_count: Optional[int] = None
    created_at: Optional[str] = None


class FileUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    document_type: Optional[str] = None
    logline: Optional[str] = None
    genre: Optional[str] = None
    page_count: Optional[int] = None


class CollectionFile(BaseModel):
    """A file as listed inside a collection."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    description: Optional[str] = None
    size: Optional[int] = None
    tokens: Optional[int] = None
    document_type: Optional[str] = None
    logline: Optional[str] = None
    genre: Optional[str] = None
    page_count: Optional[int] = None


class CollectionCreate(BaseModel):
    name: str
    description: str = ""
    workspace_id: Optional[str] = None


class CollectionUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class CollectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str
    sharing: str
    created_at: Optional[str] = None


class LinkFileRequest(BaseModel):
    file_id: str
