# whisperer/core/retrieval.py
import logging
from typing import List

import requests

from whisperer.core.config import get_settings

logger = logging.getLogger(__name__)

SOURCE_COUNT = 5
RETRIEVAL_TIMEOUT = 10


def retrieve(user_input: str, file_ids: List[str], embeddings_provider: str = "openai") -> list:
    """
    Asks the retrieval endpoint for the snippets most relevant to user_input.

    Errors are not swallowed: a failed retrieval fails the chat request.
    """
    payload = {
        "userInput": user_input,
        "fileIds": file_ids,
        "embeddingsProvider": embeddings_provider,
        "sourceCount": SOURCE_COUNT,
    }
    r = requests.post(get_settings().retrieval_endpoint, json=payload, timeout=RETRIEVAL_TIMEOUT)
    r.raise_for_status()
    results = r.json().get("results", [])
    logger.info("Retrieved %d snippets for %d files", len(results), len(file_ids))
    return results


def augment_with_retrieval(messages: List[dict], file_ids: List[str], embeddings_provider: str = "openai") -> List[dict]:
    """
    Returns messages plus one trailing system message holding the retrieved
    snippets. The input list is left unchanged.
    """
    results = retrieve(messages[-1]["content"], file_ids, embeddings_provider)
    snippets = "\n".join(result["content"] for result in results)
    return [*messages, {"role": "system", "content": f"Retrieved data: {snippets}"}]
