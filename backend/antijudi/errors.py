"""Error codes and exceptions for the simulator protocol."""
from enum import Enum

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from antijudi.config import settings


class ErrorCode(str, Enum):
    """Protocol error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_BET = "INVALID_BET"
    ROUND_IN_PROGRESS = "ROUND_IN_PROGRESS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.INVALID_BET: 400,
    ErrorCode.ROUND_IN_PROGRESS: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Whether the client may retry the same request later
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_REQUEST: False,
    ErrorCode.INVALID_BET: False,
    ErrorCode.ROUND_IN_PROGRESS: True,
    ErrorCode.INTERNAL_ERROR: True,
}


class ErrorBody(BaseModel):
    """Error body shape."""

    code: str
    message: str
    recoverable: bool


class ErrorResponse(BaseModel):
    """Full error response."""

    protocolVersion: str = settings.protocol_version
    error: ErrorBody


class GameError(Exception):
    """Base game error that maps to protocol error response."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.status_code = ERROR_HTTP_STATUS[code]
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        """Convert to JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorResponse(
                error=ErrorBody(
                    code=self.code.value,
                    message=self.message,
                    recoverable=self.recoverable,
                )
            ).model_dump(),
        )
