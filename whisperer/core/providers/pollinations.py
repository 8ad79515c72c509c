# whisperer/core/providers/pollinations.py
import logging
from typing import Iterator, List
from urllib.parse import quote

import httpx

from whisperer.core.config import get_settings
from whisperer.core.exceptions import UpstreamProviderError, ValidationFailedError

logger = logging.getLogger(__name__)

POLLINATIONS_TEXT_URL = "https://text.pollinations.ai"
PROVIDER_NAME = "Pollinations"

POLLINATIONS_MODEL_MAP = {
    "pollinations-openai": "openai",
    "pollinations-openai-large": "openai-large",
    "pollinations-mistral": "mistral",
    "pollinations-llama": "llama",
}


def hosted_model(model_id: str) -> str:
    return POLLINATIONS_MODEL_MAP.get(model_id, "openai")


def build_url(model_id: str, messages: List[dict]) -> str:
    """The prompt is the last user message, sent in the URL path."""
    user_messages = [m for m in messages if m["role"] == "user"]
    if not user_messages:
        raise ValidationFailedError("No user message found")
    prompt = quote(str(user_messages[-1]["content"]), safe="")
    return f"{POLLINATIONS_TEXT_URL}/{prompt}?model={hosted_model(model_id)}&stream=true"


def stream_chat(model_id: str, messages: List[dict]) -> Iterator[str]:
    url = build_url(model_id, messages)
    client = httpx.Client(timeout=get_settings().provider_timeout)
    try:
        response = client.send(client.build_request("GET", url), stream=True)
    except Exception:
        client.close()
        raise

    if response.status_code >= 400:
        response.read()
        text = response.text
        response.close()
        client.close()
        raise UpstreamProviderError(
            PROVIDER_NAME,
            response.status_code,
            f"Pollinations API returned {response.status_code}: {text}",
        )

    return _iter_body(client, response)


def _iter_body(client: httpx.Client, response: httpx.Response) -> Iterator[str]:
    try:
        for text in response.iter_text():
            if text:
                yield text
    finally:
        response.close()
        client.close()
