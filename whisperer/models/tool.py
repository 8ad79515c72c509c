# whisperer/models/tool.py
from sqlalchemy import Column, String, ForeignKey

from whisperer.models.base import Base, new_id, utcnow_iso


class Tool(Base):
    __tablename__ = "tools"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    folder_id = Column(String)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    url = Column(String, nullable=False, default="")
    schema = Column(String, nullable=False, default="{}")  # OpenAPI document, JSON text
    custom_headers = Column(String, nullable=False, default="{}")
    sharing = Column(String, nullable=False, default="private")
    created_at = Column(String, default=utcnow_iso)
    updated_at = Column(String, onupdate=utcnow_iso)
