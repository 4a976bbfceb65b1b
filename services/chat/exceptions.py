from fastapi import HTTPException

class MethodNotAllowed(HTTPException):
    def __init__(self, detail: str = "method not allowed"):
        super().__init__(status_code=405, detail=detail)

class InvalidInput(HTTPException):
    def __init__(self, detail: str = "invalid message format"):
        super().__init__(status_code=400, detail=detail)

class ConfigurationError(HTTPException):
    def __init__(self, detail: str = "API key not configured. Set OPENAI_API_KEY in the deployment environment."):
        super().__init__(status_code=500, detail=detail)

class UpstreamAuthError(HTTPException):
    def __init__(self, detail: str = "Invalid API key. Check the OPENAI_API_KEY configuration."):
        super().__init__(status_code=500, detail=detail)

class UpstreamRateLimited(HTTPException):
    def __init__(self, detail: str = "Usage limit exceeded. Try again in a few moments."):
        super().__init__(status_code=429, detail=detail)

class UpstreamError(HTTPException):
    def __init__(self, message: str = "unknown error"):
        super().__init__(status_code=500, detail=f"Upstream error: {message}")

class InternalError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=f"Internal server error: {detail}")
