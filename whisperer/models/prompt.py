# whisperer/models/prompt.py
from sqlalchemy import Column, String, ForeignKey

from whisperer.models.base import Base, new_id, utcnow_iso


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    folder_id = Column(String)
    name = Column(String, nullable=False)
    content = Column(String, nullable=False, default="")
    sharing = Column(String, nullable=False, default="private")
    created_at = Column(String, default=utcnow_iso)
    updated_at = Column(String, onupdate=utcnow_iso)
