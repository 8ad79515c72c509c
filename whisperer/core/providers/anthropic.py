# whisperer/core/providers/anthropic.py
"""
Anthropic Messages API over httpx.

stream_chat() opens the upstream request before returning, so an error status
from Anthropic is raised here as UpstreamProviderError rather than surfacing
halfway through a streamed response.
"""
import json
import logging
from typing import Iterator, List, Optional, Tuple

import httpx

from whisperer.core.config import get_settings
from whisperer.core.exceptions import UpstreamProviderError

logger = logging.getLogger(__name__)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
PROVIDER_NAME = "Anthropic"


def split_system(messages: List[dict]) -> Tuple[str, List[dict]]:
    """Anthropic takes the system prompt as a separate field, not as a message."""
    system_parts = []
    conversation = []
    for message in messages:
        if message["role"] == "system":
            system_parts.append(message["content"])
        else:
            conversation.append({"role": message["role"], "content": message["content"]})
    return "\n\n".join(system_parts), conversation


def _headers(api_key: str) -> dict:
    return {
        "x-api-key": api_key,
        "anthropic-version": ANTHROPIC_VERSION,
        "content-type": "application/json",
    }


def _error_message(response: httpx.Response) -> str:
    try:
        error = response.json().get("error")
        if isinstance(error, dict):
            return error.get("message") or response.text
        return str(error) if error else response.text
    except (ValueError, AttributeError):
        return response.text


def _payload(model: str, messages: List[dict], temperature: float, max_tokens: int, system: Optional[str], stream: bool) -> dict:
    payload = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "stream": stream,
    }
    if system:
        payload["system"] = system
    return payload


def stream_chat(api_key: str, model: str, messages: List[dict], temperature: float, max_tokens: int) -> Iterator[str]:
    system, conversation = split_system(messages)
    client = httpx.Client(timeout=get_settings().provider_timeout)
    request = client.build_request(
        "POST",
        ANTHROPIC_MESSAGES_URL,
        headers=_headers(api_key),
        json=_payload(model, conversation, temperature, max_tokens, system, stream=True),
    )
    try:
        response = client.send(request, stream=True)
    except Exception:
        client.close()
        raise

    if response.status_code >= 400:
        response.read()
        message = _error_message(response)
        response.close()
        client.close()
        logger.warning("Anthropic returned %s for model %s", response.status_code, model)
        raise UpstreamProviderError(PROVIDER_NAME, response.status_code, message)

    return _iter_text_deltas(client, response)


def _iter_text_deltas(client: httpx.Client, response: httpx.Response) -> Iterator[str]:
    try:
        for line in response.iter_lines():
            if not line.startswith("data:"):
                continue
            event = json.loads(line[len("data:"):].strip())
            if event.get("type") == "content_block_delta":
                delta = event.get("delta", {})
                if delta.get("type") == "text_delta":
                    yield delta.get("text", "")
    finally:
        response.close()
        client.close()


def complete(api_key: str, model: str, messages: List[dict], temperature: float, max_tokens: int, system: Optional[str] = None) -> str:
    """Single non-streaming call; returns the text of the first content block."""
    with httpx.Client(timeout=get_settings().provider_timeout) as client:
        response = client.post(
            ANTHROPIC_MESSAGES_URL,
            headers=_headers(api_key),
            json=_payload(model, messages, temperature, max_tokens, system, stream=False),
        )
    if response.status_code >= 400:
        raise UpstreamProviderError(PROVIDER_NAME, response.status_code, _error_message(response))

    content = response.json().get("content") or []
    if not content:
        return ""
    return content[0].get("text", "")
