# whisperer/models/chat.py
from sqlalchemy import Column, String, Boolean, Integer, Float, ForeignKey
from sqlalchemy.orm import relationship

from whisperer.models.base import Base, new_id, utcnow_iso


class Chat(Base):
    __tablename__ = "chats"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String, nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    workspace_id = Column(String, ForeignKey("workspaces.id"), nullable=False)
    assistant_id = Column(String, ForeignKey("assistants.id"))
    collection_id = Column(String, ForeignKey("collections.id"))

    # Snapshot of the effective settings at creation time. Not a live
    # reference: editing the assistant later leaves existing chats alone.
    model = Column(String, nullable=False)
    prompt = Column(String, nullable=False, default="")
    temperature = Column(Float, nullable=False)
    context_length = Column(Integer, nullable=False)
    include_profile_context = Column(Boolean, nullable=False)
    include_workspace_instructions = Column(Boolean, nullable=False)
    embeddings_provider = Column(String, nullable=False, default="openai")

    sharing = Column(String, nullable=False, default="private")
    created_at = Column(String, default=utcnow_iso)
    updated_at = Column(String, onupdate=utcnow_iso)

    # Relationships
    workspace = relationship("Workspace", back_populates="chats")
