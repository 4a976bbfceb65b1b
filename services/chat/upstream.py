from typing import Any, List, Optional

import httpx

from config import Settings

# fixed generation parameters sent with every completion request
TEMPERATURE = 0.7
MAX_TOKENS = 800
TOP_P = 1.0
FREQUENCY_PENALTY = 0
PRESENCE_PENALTY = 0


def build_payload(model: str, messages: List[Any]) -> dict:
    return {
        "model": model,
        "messages": messages,
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
        "top_p": TOP_P,
        "frequency_penalty": FREQUENCY_PENALTY,
        "presence_penalty": PRESENCE_PENALTY,
    }


async def send_completion(
    settings: Settings,
    messages: List[Any],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """Call the chat-completions endpoint and return the raw response.

    Status codes are left for the caller to interpret.
    """
    async with httpx.AsyncClient(timeout=settings.upstream_timeout, transport=transport) as client:
        return await client.post(
            f"{settings.openai_base_url}/chat/completions",
            headers={
                "Authorization": f"Bearer {settings.openai_api_key}",
                "Content-Type": "application/json",
            },
            json=build_payload(settings.openai_model, messages),
        )
