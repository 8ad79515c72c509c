# whisperer/models/workspace.py
from sqlalchemy import Column, String, Boolean, Integer, Float, ForeignKey, Index
from sqlalchemy.orm import relationship

from whisperer.models.base import Base, new_id, utcnow_iso


class Workspace(Base):
    __tablename__ = "workspaces"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    instructions = Column(String, nullable=False, default="")
    is_home = Column(Boolean, nullable=False, default=False)

    # Chat settings used when no assistant is selected
    default_model = Column(String, nullable=False)
    default_prompt = Column(String, nullable=False, default="")
    default_temperature = Column(Float, nullable=False, default=0.5)
    default_context_length = Column(Integer, nullable=False, default=4096)
    include_profile_context = Column(Boolean, nullable=False, default=True)
    include_workspace_instructions = Column(Boolean, nullable=False, default=True)
    embeddings_provider = Column(String, nullable=False, default="openai")

    created_at = Column(String, default=utcnow_iso)
    updated_at = Column(String, onupdate=utcnow_iso)

    # Relationships
    owner = relationship("User", back_populates="workspaces")
    chats = relationship("Chat", back_populates="workspace", cascade="all, delete-orphan")


# At most one home workspace per user.
Index(
    "uq_workspaces_one_home_per_user",
    Workspace.user_id,
    unique=True,
    sqlite_where=Workspace.is_home == True,  # noqa: E712
    postgresql_where=Workspace.is_home == True,  # noqa: E712
)
