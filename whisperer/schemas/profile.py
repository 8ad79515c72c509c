# whisperer/schemas/profile.py
from pydantic import BaseModel, ConfigDict
from typing import Optional


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    display_name: str
    username: str
    bio: str
    profile_context: str
    image_url: str
    image_path: str
    has_onboarded: bool
    user_role: str
    anthropic_api_key: str
    openai_api_key: str
    openai_organization_id: str
    mistral_api_key: str
    google_gemini_api_key: str
    groq_api_key: str
    perplexity_api_key: str
    openrouter_api_key: str
    azure_openai_api_key: str
    azure_openai_endpoint: str


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = None
    profile_context: Optional[str] = None
    has_onboarded: Optional[bool] = None
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_organization_id: Optional[str] = None
    mistral_api_key: Optional[str] = None
    google_gemini_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    perplexity_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    azure_openai_api_key: Optional[str] = None
    azure_openai_endpoint: Optional[str] = None
