# whisperer/models/file.py
from sqlalchemy import Column, String, Integer, ForeignKey

from whisperer.models.base import Base, new_id, utcnow_iso


class File(Base):
    __tablename__ = "files"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    folder_id = Column(String)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    file_path = Column(String, nullable=False)  # object key under the storage bucket
    type = Column(String, nullable=False)
    size = Column(Integer, nullable=False, default=0)
    tokens = Column(Integer, nullable=False, default=0)
    sharing = Column(String, nullable=False, default="private")

    # Screenplay metadata, free text
    document_type = Column(String)
    logline = Column(String)
    genre = Column(String)
    page_count = Column(Integer)

    created_at = Column(String, default=utcnow_iso)
    updated_at = Column(String, onupdate=utcnow_iso)


class FileItem(Base):
    """Extracted text of a file, one row per stored chunk."""

    __tablename__ = "file_items"

    id = Column(String, primary_key=True, index=True, default=new_id)
    file_id = Column(String, ForeignKey("files.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    content = Column(String, nullable=False)
    tokens = Column(Integer, nullable=False, default=0)
    created_at = Column(String, default=utcnow_iso)
