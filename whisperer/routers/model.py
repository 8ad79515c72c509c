# whisperer/routers/model.py
from fastapi import APIRouter, Depends

from whisperer.core.auth import get_current_profile
from whisperer.core.config import get_settings
from whisperer.core.llm_list import HOSTED_PROVIDERS, fetch_hosted_models
from whisperer.models.profile import Profile
from whisperer.schemas.model import HostedModelsResponse, KeysResponse

router = APIRouter()


@router.get("/keys", response_model=KeysResponse)
def read_env_keys():
    """Which providers have a server-side key, so the client can skip asking the user."""
    settings = get_settings()
    return KeysResponse(isUsingEnvKeyMap={p: bool(settings.env_key_for(p)) for p in HOSTED_PROVIDERS})


@router.get("/models", response_model=HostedModelsResponse)
def read_hosted_models(profile: Profile = Depends(get_current_profile)):
    """
    Models available to the caller: a provider's models are listed when
    either the profile or the server environment holds a key for it.
    """
    return fetch_hosted_models(profile)
