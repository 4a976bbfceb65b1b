"""Chat Relay — request/response models."""

from typing import Any, List, Optional

from pydantic import BaseModel


class ChatRequest(BaseModel):
    # items are {"role": ..., "content": ...} dicts, forwarded to the upstream untouched
    messages: List[Any]


class Usage(BaseModel):
    promptTokens: int = 0
    completionTokens: int = 0
    totalTokens: int = 0


class ChatResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    usage: Optional[Usage] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    service: str
