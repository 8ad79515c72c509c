# whisperer/models/user.py
from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from whisperer.models.base import Base, new_id, utcnow_iso


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String)
    # Unique email is what keeps two concurrent first logins from both provisioning.
    email = Column(String, unique=True, nullable=False)
    image = Column(String)
    created_at = Column(String, default=utcnow_iso)

    # Relationships
    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    workspaces = relationship("Workspace", back_populates="owner", cascade="all, delete-orphan")
    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan")
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("provider", "provider_account_id"),)

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    type = Column(String, nullable=False, default="oauth")
    provider = Column(String, nullable=False)
    provider_account_id = Column(String, nullable=False)
    refresh_token = Column(String)
    access_token = Column(String)
    expires_at = Column(Integer)
    token_type = Column(String)
    scope = Column(String)
    id_token = Column(String)

    user = relationship("User", back_populates="accounts")


class UserSession(Base):
    __tablename__ = "sessions"

    id = Column(String, primary_key=True, index=True, default=new_id)
    session_token = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    expires = Column(Integer, nullable=False)  # epoch seconds, UTC

    user = relationship("User", back_populates="sessions")
