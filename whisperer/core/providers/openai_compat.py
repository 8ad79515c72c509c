# whisperer/core/providers/openai_compat.py
import logging
from typing import Iterator, List, Optional

import openai
from openai import OpenAI

from whisperer.core.config import get_settings
from whisperer.core.exceptions import UpstreamProviderError

logger = logging.getLogger(__name__)

MISTRAL_BASE_URL = "https://api.mistral.ai/v1"


def stream_chat(
    api_key: str,
    model: str,
    messages: List[dict],
    max_tokens: int,
    temperature: Optional[float] = None,
    base_url: Optional[str] = None,
    provider_name: str = "OpenAI",
) -> Iterator[str]:
    """
    Streams a chat completion from any OpenAI-compatible endpoint (OpenAI
    itself, or Mistral through its OpenAI-compatible base URL).
    """
    client = OpenAI(api_key=api_key, base_url=base_url, timeout=get_settings().provider_timeout)

    req_params = {
        "model": model,
        "messages": messages,
        "max_tokens": max_tokens,
        "stream": True,
    }
    if temperature is not None:
        req_params["temperature"] = temperature

    try:
        response = client.chat.completions.create(**req_params)
    except openai.APIStatusError as e:
        logger.warning("%s returned %s for model %s", provider_name, e.status_code, model)
        raise UpstreamProviderError(provider_name, e.status_code, e.message)

    return _iter_deltas(response)


def _iter_deltas(response) -> Iterator[str]:
    for chunk in response:
        if not chunk.choices:
            continue
        content = chunk.choices[0].delta.content
        if content:
            yield content
