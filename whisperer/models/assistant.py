# whisperer/models/assistant.py
from sqlalchemy import Column, String, Boolean, Integer, Float, ForeignKey

from whisperer.models.base import Base, new_id, utcnow_iso


class Assistant(Base):
    __tablename__ = "assistants"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    folder_id = Column(String)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    image_path = Column(String, nullable=False, default="")

    prompt = Column(String, nullable=False, default="")
    model = Column(String, nullable=False)
    temperature = Column(Float, nullable=False, default=0.5)
    context_length = Column(Integer, nullable=False, default=4096)
    include_profile_context = Column(Boolean, nullable=False, default=True)
    include_workspace_instructions = Column(Boolean, nullable=False, default=True)
    embeddings_provider = Column(String, nullable=False, default="openai")

    # "private" or "public"; public assistants are read-only to everyone but the owner
    sharing = Column(String, nullable=False, default="private")
    # System assistants are read-only and start a chat immediately when picked
    is_system = Column(Boolean, nullable=False, default=False)

    created_at = Column(String, default=utcnow_iso)
    updated_at = Column(String, onupdate=utcnow_iso)
