from .anthropic import stream_chat as stream_anthropic, complete as complete_anthropic
from .openai_compat import stream_chat as stream_openai_compatible, MISTRAL_BASE_URL
from .pollinations import stream_chat as stream_pollinations

__all__ = [
    "stream_anthropic",
    "complete_anthropic",
    "stream_openai_compatible",
    "stream_pollinations",
    "MISTRAL_BASE_URL",
]
