"""
RelayHandler — forwards a conversation to the upstream chat-completions API
and turns whatever comes back into a ChatResponse.

Every failure is raised as one of the HTTPException subclasses in
exceptions.py; main.py renders them as {"success": false, "error": ...}.
"""

import logging
from typing import Any, List, Optional

import httpx
from fastapi import HTTPException

from config import Settings
from exceptions import (
    ConfigurationError,
    InternalError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimited,
)
from models import ChatResponse, Usage
from upstream import send_completion

logger = logging.getLogger("chat-relay")

FALLBACK_MESSAGE = "I could not generate a response."


def _upstream_error_message(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message") or None
    return str(error) if error else None


def _first_choice_content(data: dict) -> Optional[str]:
    choices = data.get("choices") or []
    if not choices:
        return None
    message = (choices[0] or {}).get("message") or {}
    return message.get("content")


def _usage(data: dict) -> Usage:
    usage = data.get("usage") or {}
    return Usage(
        promptTokens=usage.get("prompt_tokens") or 0,
        completionTokens=usage.get("completion_tokens") or 0,
        totalTokens=usage.get("total_tokens") or 0,
    )


class RelayHandler:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    async def handle(self, messages: List[Any]) -> ChatResponse:
        if not self.settings.openai_api_key:
            logger.error("OPENAI_API_KEY is not configured")
            raise ConfigurationError()

        try:
            response = await send_completion(self.settings, messages, transport=self.transport)
            if not response.is_success:
                self._raise_for_upstream(response)
            data = response.json()
            result = ChatResponse(
                success=True,
                message=_first_choice_content(data) or FALLBACK_MESSAGE,
                usage=_usage(data),
            )
        except HTTPException:
            raise
        except Exception as e:
            # no traceback: transport errors can quote the Authorization header
            detail = self._redact(str(e))
            logger.error("Chat relay failed: %s: %s", type(e).__name__, detail)
            raise InternalError(detail)

        logger.info(
            "Relayed %d messages to %s (%d tokens)",
            len(messages), self.settings.openai_model, result.usage.totalTokens,
        )
        return result

    def _redact(self, text: str) -> str:
        key = (self.settings.openai_api_key or "").strip()
        return text.replace(key, "***") if key else text

    def _raise_for_upstream(self, response: httpx.Response) -> None:
        status = response.status_code
        if status == 401:
            # the provider's 401 message echoes part of the key, so only the status is logged
            logger.error("Upstream rejected the credential (401)")
            raise UpstreamAuthError()
        if status == 429:
            logger.warning("Upstream rate limit hit (429)")
            raise UpstreamRateLimited()

        message = _upstream_error_message(response)
        if message:
            message = self._redact(message)
        logger.error("Upstream error %s: %s", status, message)
        if message:
            raise UpstreamError(message)
        raise UpstreamError()
