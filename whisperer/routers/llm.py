# whisperer/routers/llm.py
"""
Proxy routes in front of the LLM providers.

Each route checks that a key is available, forwards the conversation and
relays the provider's text as a plain streamed body. The upstream request is
opened before the response starts, so provider errors still come back as a
JSON `{"message": ...}` with the provider's status code.
"""
import logging
from typing import Optional

import requests
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from whisperer.core import providers
from whisperer.core.auth import get_current_profile
from whisperer.core.config import get_settings
from whisperer.core.exceptions import ApiKeyNotFoundError, NotFoundError, WhispererException
from whisperer.core.llm_list import (
    MISTRAL_LLM_LIST,
    default_claude_model_id,
    max_output_tokens,
    resolve_claude_model_id,
)
from whisperer.core.retrieval import augment_with_retrieval
from whisperer.models.profile import Profile
from whisperer.schemas.chat import ChatRequest, CommandRequest, CommandResponse

logger = logging.getLogger(__name__)

router = APIRouter()

PROVIDER_NAMES = {
    "anthropic": "Anthropic",
    "openai": "OpenAI",
    "mistral": "Mistral",
    "pollinations": "Pollinations",
}

COMMAND_SYSTEM_PROMPT = "Respond to the user."


def check_api_key(api_key: Optional[str], provider_name: str) -> str:
    if not api_key:
        raise ApiKeyNotFoundError(provider_name)
    return api_key


def server_or_profile_key(provider: str, profile: Profile) -> Optional[str]:
    """The server's key wins over the one saved on the profile."""
    return get_settings().env_key_for(provider) or getattr(profile, f"{provider}_api_key", "") or None


def provider_error_response(provider_name: str, error: Exception) -> JSONResponse:
    """
    Maps a failure to the JSON error the client shows. Missing and rejected
    keys get a message pointing at the profile settings; everything else keeps
    the upstream status and message.
    """
    if isinstance(error, WhispererException):
        message, status_code = error.message, error.status_code
    elif isinstance(error, requests.HTTPError) and error.response is not None:
        message, status_code = str(error), error.response.status_code
    else:
        logger.exception("%s request failed", provider_name)
        message = str(error) or "An unexpected error occurred"
        status_code = getattr(error, "status_code", None) or 500

    if "api key not found" in message.lower():
        message = f"{provider_name} API Key not found. Please set it in your profile settings."
    elif status_code == 401:
        message = f"{provider_name} API Key is incorrect. Please fix it in your profile settings."

    return JSONResponse(status_code=status_code, content={"message": message})


def _open_stream(provider: str, payload: ChatRequest, profile: Profile):
    settings = payload.chatSettings
    messages = [m.model_dump() for m in payload.messages]

    if provider == "anthropic":
        api_key = check_api_key(server_or_profile_key("anthropic", profile), "Anthropic")
        if payload.fileIds:
            messages = augment_with_retrieval(messages, payload.fileIds, settings.embeddingsProvider)
        model = resolve_claude_model_id(settings.model)
        return providers.stream_anthropic(api_key, model, messages, settings.temperature, max_output_tokens(model))

    if provider == "openai":
        api_key = check_api_key(server_or_profile_key("openai", profile), "OpenAI")
        return providers.stream_openai_compatible(
            api_key, settings.model, messages, max_output_tokens(settings.model), temperature=settings.temperature
        )

    if provider == "mistral":
        # Mistral only ever uses the key saved on the profile.
        api_key = check_api_key(profile.mistral_api_key, "Mistral")
        messages = augment_with_retrieval(messages, payload.fileIds, settings.embeddingsProvider)
        known = {llm.modelId for llm in MISTRAL_LLM_LIST}
        model = settings.model if settings.model in known else MISTRAL_LLM_LIST[0].modelId
        return providers.stream_openai_compatible(
            api_key,
            model,
            messages,
            max_output_tokens(model),
            base_url=providers.MISTRAL_BASE_URL,
            provider_name="Mistral",
        )

    if provider == "pollinations":
        return providers.stream_pollinations(settings.model, messages)

    raise NotFoundError(f"Unknown provider: {provider}")


@router.post("/chat/{provider}")
def chat(provider: str, payload: ChatRequest, profile: Profile = Depends(get_current_profile)):
    """
    Stream a completion from **provider** (anthropic, openai, mistral or
    pollinations). The body carries `chatSettings`, `messages` and optionally
    `fileIds` for retrieval.

    Retrieval failures are not skipped: they fail the request like any other
    upstream error.
    """
    if provider not in PROVIDER_NAMES:
        raise NotFoundError(f"Unknown provider: {provider}")
    provider_name = PROVIDER_NAMES[provider]

    try:
        stream = _open_stream(provider, payload, profile)
    except Exception as e:
        return provider_error_response(provider_name, e)

    return StreamingResponse(stream, media_type="text/plain; charset=utf-8")


@router.post("/command", response_model=CommandResponse)
def command(payload: CommandRequest, profile: Profile = Depends(get_current_profile)):
    """One-shot completion from the default Claude model, returned as JSON."""
    try:
        api_key = check_api_key(server_or_profile_key("anthropic", profile), "Anthropic")
        model = default_claude_model_id()
        content = providers.complete_anthropic(
            api_key,
            model,
            [{"role": "user", "content": payload.input}],
            temperature=0,
            max_tokens=max_output_tokens(model),
            system=COMMAND_SYSTEM_PROMPT,
        )
    except Exception as e:
        return provider_error_response("Anthropic", e)

    return CommandResponse(content=content)
