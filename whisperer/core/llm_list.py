# whisperer/core/llm_list.py
"""
Static catalogue of the models each provider exposes.

Nothing here talks to a provider; it is a lookup table plus the resolver that
maps stale or unknown model ids onto a known Claude model.
"""
from typing import Dict, List

from whisperer.core.config import get_settings
from whisperer.schemas.model import LLM, LLMPricing

ANTHROPIC_PLATFORM_LINK = "https://docs.anthropic.com/claude/reference/getting-started-with-the-api"
OPENAI_PLATFORM_LINK = "https://platform.openai.com/docs/overview"
MISTRAL_PLATFORM_LINK = "https://docs.mistral.ai/"
POLLINATIONS_PLATFORM_LINK = "https://pollinations.ai"


def _usd(input_cost: float, output_cost: float) -> LLMPricing:
    return LLMPricing(currency="USD", unit="1M tokens", inputCost=input_cost, outputCost=output_cost)


def _claude(model_id: str, name: str, image_input: bool = True, pricing: LLMPricing = None) -> LLM:
    return LLM(
        modelId=model_id,
        modelName=name,
        provider="anthropic",
        hostedId=model_id,
        platformLink=ANTHROPIC_PLATFORM_LINK,
        imageInput=image_input,
        pricing=pricing,
    )


ANTHROPIC_LLM_LIST: List[LLM] = [
    _claude("claude-2.1", "Claude 2", image_input=False, pricing=_usd(8, 24)),
    _claude("claude-instant-1.2", "Claude Instant", image_input=False, pricing=_usd(0.8, 2.4)),
    _claude("claude-3-haiku-20240307", "Claude 3 Haiku", pricing=_usd(0.25, 1.25)),
    _claude("claude-3-sonnet-20240229", "Claude 3 Sonnet", pricing=_usd(3, 15)),
    _claude("claude-3-opus-20240229", "Claude 3 Opus", pricing=_usd(15, 75)),
    _claude("claude-3-5-sonnet-20240620", "Claude 3.5 Sonnet", pricing=_usd(3, 15)),
    _claude("claude-3-5-haiku-20241022", "Claude 3.5 Haiku"),
    _claude("claude-3-7-sonnet-20250219", "Claude 3.7 Sonnet"),
    _claude("claude-sonnet-4-20250514", "Claude 4 Sonnet"),
    _claude("claude-opus-4-20250514", "Claude 4 Opus"),
    _claude("claude-opus-4-1-20250805", "Claude 4.1 Opus"),
    _claude("claude-sonnet-4-5-20250929", "Claude 4.5 Sonnet"),
    _claude("claude-haiku-4-5-20251001", "Claude 4.5 Haiku"),
    _claude("claude-opus-4-5-20251101", "Claude 4.5 Opus"),
]

OPENAI_LLM_LIST: List[LLM] = [
    LLM(
        modelId="gpt-4o",
        modelName="GPT-4o",
        provider="openai",
        hostedId="gpt-4o",
        platformLink=OPENAI_PLATFORM_LINK,
        imageInput=True,
        pricing=_usd(5, 15),
    ),
    LLM(
        modelId="gpt-4-turbo-preview",
        modelName="GPT-4 Turbo",
        provider="openai",
        hostedId="gpt-4-turbo-preview",
        platformLink=OPENAI_PLATFORM_LINK,
        imageInput=False,
        pricing=_usd(10, 30),
    ),
]

MISTRAL_LLM_LIST: List[LLM] = [
    LLM(
        modelId="mistral-large-latest",
        modelName="Mistral Large",
        provider="mistral",
        hostedId="mistral-large-latest",
        platformLink=MISTRAL_PLATFORM_LINK,
        imageInput=False,
        pricing=_usd(8, 24),
    ),
    LLM(
        modelId="mistral-small-latest",
        modelName="Mistral Small",
        provider="mistral",
        hostedId="mistral-small-latest",
        platformLink=MISTRAL_PLATFORM_LINK,
        imageInput=False,
        pricing=_usd(2, 6),
    ),
]


def _pollinations(model_id: str, hosted_id: str, name: str, image_input: bool) -> LLM:
    return LLM(
        modelId=model_id,
        modelName=name,
        provider="pollinations",
        hostedId=hosted_id,
        platformLink=POLLINATIONS_PLATFORM_LINK,
        imageInput=image_input,
        pricing=_usd(0, 0),  # free
    )


POLLINATIONS_LLM_LIST: List[LLM] = [
    _pollinations("pollinations-openai", "openai", "Pollinations OpenAI", True),
    _pollinations("pollinations-openai-large", "openai-large", "Pollinations OpenAI Large", True),
    _pollinations("pollinations-mistral", "mistral", "Pollinations Mistral", True),
    _pollinations("pollinations-llama", "llama", "Pollinations Llama 3.3", False),
]

LLM_LIST: List[LLM] = [*ANTHROPIC_LLM_LIST]

LLM_LIST_MAP: Dict[str, List[LLM]] = {
    "openai": OPENAI_LLM_LIST,
    "anthropic": ANTHROPIC_LLM_LIST,
    "mistral": MISTRAL_LLM_LIST,
    "pollinations": POLLINATIONS_LLM_LIST,
}

# Providers whose models are only offered when a key is configured.
HOSTED_PROVIDERS = ["openai", "anthropic", "mistral"]

FALLBACK_CLAUDE_MODEL_ID = "claude-3-5-sonnet-20240620"

_CLAUDE_IDS = {llm.modelId for llm in ANTHROPIC_LLM_LIST}


def default_claude_model_id() -> str:
    """The configured default, or the fallback when the configured one is not a Claude model."""
    configured = get_settings().default_claude_model_id
    if configured and configured in _CLAUDE_IDS:
        return configured
    return FALLBACK_CLAUDE_MODEL_ID


def resolve_claude_model_id(model_id=None) -> str:
    if model_id in _CLAUDE_IDS:
        return model_id
    return default_claude_model_id()


def _limits(max_temperature: float, max_context: int, max_output: int) -> Dict[str, float]:
    return {
        "MIN_TEMPERATURE": 0.0,
        "MAX_TEMPERATURE": max_temperature,
        "MAX_TOKEN_OUTPUT_LENGTH": max_output,
        "MAX_CONTEXT_LENGTH": max_context,
    }


CHAT_SETTING_LIMITS: Dict[str, Dict[str, float]] = {
    "claude-2.1": _limits(1.0, 200000, 4096),
    "claude-instant-1.2": _limits(1.0, 100000, 4096),
    "claude-3-haiku-20240307": _limits(1.0, 200000, 4096),
    "claude-3-sonnet-20240229": _limits(1.0, 200000, 4096),
    "claude-3-opus-20240229": _limits(1.0, 200000, 4096),
    "claude-3-5-sonnet-20240620": _limits(1.0, 200000, 8192),
    "claude-3-5-haiku-20241022": _limits(1.0, 200000, 8192),
    "claude-3-7-sonnet-20250219": _limits(1.0, 200000, 64000),
    "claude-sonnet-4-20250514": _limits(1.0, 200000, 64000),
    "claude-opus-4-20250514": _limits(1.0, 200000, 32000),
    "claude-opus-4-1-20250805": _limits(1.0, 200000, 32000),
    "claude-sonnet-4-5-20250929": _limits(1.0, 200000, 64000),
    "claude-haiku-4-5-20251001": _limits(1.0, 200000, 64000),
    "claude-opus-4-5-20251101": _limits(1.0, 200000, 64000),
    "gpt-4o": _limits(2.0, 128000, 4096),
    "gpt-4-turbo-preview": _limits(2.0, 128000, 4096),
    "mistral-large-latest": _limits(1.0, 32000, 8000),
    "mistral-small-latest": _limits(1.0, 32000, 8000),
}

DEFAULT_MAX_TOKEN_OUTPUT_LENGTH = 4096


def max_output_tokens(model_id: str) -> int:
    limits = CHAT_SETTING_LIMITS.get(model_id)
    if not limits:
        return DEFAULT_MAX_TOKEN_OUTPUT_LENGTH
    return int(limits["MAX_TOKEN_OUTPUT_LENGTH"])


def fetch_hosted_models(profile) -> dict:
    """
    Models the user can pick from: a hosted provider's list is included when
    either the profile or the server environment carries a key for it.
    """
    settings = get_settings()
    env_key_map = {provider: bool(settings.env_key_for(provider)) for provider in HOSTED_PROVIDERS}

    hosted_models: List[LLM] = []
    for provider in HOSTED_PROVIDERS:
        profile_key = getattr(profile, f"{provider}_api_key", "") if profile else ""
        if profile_key or env_key_map[provider]:
            hosted_models.extend(LLM_LIST_MAP[provider])

    return {"envKeyMap": env_key_map, "hostedModels": hosted_models}
