# whisperer/models/links.py
"""
Join tables. The integer primary key doubles as the stored order: listing
the linked side of any join orders by it, so items come back in the order
they were attached.
"""
from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint

from whisperer.models.base import Base, utcnow_iso


class AssistantFile(Base):
    __tablename__ = "assistant_files"
    __table_args__ = (UniqueConstraint("assistant_id", "file_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    assistant_id = Column(String, ForeignKey("assistants.id"), nullable=False, index=True)
    file_id = Column(String, ForeignKey("files.id"), nullable=False, index=True)
    created_at = Column(String, default=utcnow_iso)


class AssistantCollection(Base):
    __tablename__ = "assistant_collections"
    __table_args__ = (UniqueConstraint("assistant_id", "collection_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    assistant_id = Column(String, ForeignKey("assistants.id"), nullable=False, index=True)
    collection_id = Column(String, ForeignKey("collections.id"), nullable=False, index=True)
    created_at = Column(String, default=utcnow_iso)


class AssistantTool(Base):
    __tablename__ = "assistant_tools"
    __table_args__ = (UniqueConstraint("assistant_id", "tool_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    assistant_id = Column(String, ForeignKey("assistants.id"), nullable=False, index=True)
    tool_id = Column(String, ForeignKey("tools.id"), nullable=False, index=True)
    created_at = Column(String, default=utcnow_iso)


class CollectionFile(Base):
    __tablename__ = "collection_files"
    __table_args__ = (UniqueConstraint("collection_id", "file_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    collection_id = Column(String, ForeignKey("collections.id"), nullable=False, index=True)
    file_id = Column(String, ForeignKey("files.id"), nullable=False, index=True)
    created_at = Column(String, default=utcnow_iso)


class CollectionWorkspace(Base):
    __tablename__ = "collection_workspaces"
    __table_args__ = (UniqueConstraint("collection_id", "workspace_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    collection_id = Column(String, ForeignKey("collections.id"), nullable=False, index=True)
    workspace_id = Column(String, ForeignKey("workspaces.id"), nullable=False, index=True)
    created_at = Column(String, default=utcnow_iso)


class ChatFile(Base):
    __tablename__ = "chat_files"
    __table_args__ = (UniqueConstraint("chat_id", "file_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    chat_id = Column(String, ForeignKey("chats.id"), nullable=False, index=True)
    file_id = Column(String, ForeignKey("files.id"), nullable=False, index=True)
    created_at = Column(String, default=utcnow_iso)


class FileWorkspace(Base):
    __tablename__ = "file_workspaces"
    __table_args__ = (UniqueConstraint("file_id", "workspace_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    file_id = Column(String, ForeignKey("files.id"), nullable=False, index=True)
    workspace_id = Column(String, ForeignKey("workspaces.id"), nullable=False, index=True)
    created_at = Column(String, default=utcnow_iso)
