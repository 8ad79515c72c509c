# whisperer/models/profile.py
from sqlalchemy import Column, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from whisperer.models.base import Base, new_id, utcnow_iso


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), unique=True, nullable=False)
    display_name = Column(String, nullable=False, default="User")
    username = Column(String, unique=True, nullable=False)
    bio = Column(String, nullable=False, default="")
    profile_context = Column(String, nullable=False, default="")
    image_url = Column(String, nullable=False, default="")
    image_path = Column(String, nullable=False, default="")
    has_onboarded = Column(Boolean, nullable=False, default=False)
    use_azure_openai = Column(Boolean, nullable=False, default=False)
    user_role = Column(String, nullable=False, default="user")

    # Per-provider API keys; empty string means "not set".
    anthropic_api_key = Column(String, nullable=False, default="")
    openai_api_key = Column(String, nullable=False, default="")
    openai_organization_id = Column(String, nullable=False, default="")
    mistral_api_key = Column(String, nullable=False, default="")
    google_gemini_api_key = Column(String, nullable=False, default="")
    groq_api_key = Column(String, nullable=False, default="")
    perplexity_api_key = Column(String, nullable=False, default="")
    openrouter_api_key = Column(String, nullable=False, default="")
    azure_openai_api_key = Column(String, nullable=False, default="")
    azure_openai_endpoint = Column(String, nullable=False, default="")

    created_at = Column(String, default=utcnow_iso)
    updated_at = Column(String, onupdate=utcnow_iso)

    user = relationship("User", back_populates="profile")
