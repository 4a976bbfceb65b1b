"""
Chat Relay
Handles: forwarding chat conversations to the OpenAI chat-completions API
Port: 8002

The OpenAI key lives only in the server environment. Clients POST
{"messages": [...]} and get back {"success", "message", "usage"} or
{"success": false, "error"}; the key never leaves this process.
"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings
from dependencies import get_relay_handler
from exceptions import InvalidInput, MethodNotAllowed
from models import ChatRequest, ChatResponse, HealthResponse
from relay import RelayHandler

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("chat-relay")

# ── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(title="Chat Relay", version="1.0.0")


def error_response(exc: StarletteHTTPException) -> JSONResponse:
    body = ChatResponse(success=False, error=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return error_response(exc)


@app.exception_handler(405)
async def method_not_allowed(request: Request, exc: StarletteHTTPException):
    error = MethodNotAllowed()
    error.headers = exc.headers
    return error_response(error)


@app.exception_handler(RequestValidationError)
async def invalid_input(request: Request, exc: RequestValidationError):
    logger.info("Rejected chat request: %s", [e["loc"] for e in exc.errors()])
    return error_response(InvalidInput())


# ── Endpoints ─────────────────────────────────────────────────────────────────

@app.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(body: ChatRequest, relay: RelayHandler = Depends(get_relay_handler)):
    return await relay.handle(body.messages)


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok", "service": "chat-relay"}


# Entry point for serverless runtimes that invoke a Lambda-style handler.
handler = Mangum(app, lifespan="off")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8002, reload=True)
