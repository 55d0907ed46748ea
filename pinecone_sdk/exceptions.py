"""
Custom exceptions for the Pinecone SDK.
"""
from enum import Enum
from typing import Any, Optional

import grpc  # type: ignore


class StatusKind(str, Enum):
    """Server-reported failure categories, shared by both planes."""
    NOT_FOUND = "NOT_FOUND"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    FAILED_PRECONDITION = "FAILED_PRECONDITION"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
    INTERNAL = "INTERNAL"
    UNAVAILABLE = "UNAVAILABLE"
    UNKNOWN = "UNKNOWN"


_HTTP_STATUS_TO_KIND = {
    400: StatusKind.INVALID_ARGUMENT,
    401: StatusKind.UNAUTHORIZED,
    403: StatusKind.FORBIDDEN,
    404: StatusKind.NOT_FOUND,
    409: StatusKind.CONFLICT,
    412: StatusKind.FAILED_PRECONDITION,
    422: StatusKind.INVALID_ARGUMENT,
    429: StatusKind.RESOURCE_EXHAUSTED,
    500: StatusKind.INTERNAL,
    503: StatusKind.UNAVAILABLE,
}

_GRPC_CODE_TO_KIND = {
    grpc.StatusCode.NOT_FOUND: StatusKind.NOT_FOUND,
    grpc.StatusCode.INVALID_ARGUMENT: StatusKind.INVALID_ARGUMENT,
    grpc.StatusCode.OUT_OF_RANGE: StatusKind.INVALID_ARGUMENT,
    grpc.StatusCode.UNAUTHENTICATED: StatusKind.UNAUTHORIZED,
    grpc.StatusCode.PERMISSION_DENIED: StatusKind.FORBIDDEN,
    grpc.StatusCode.ALREADY_EXISTS: StatusKind.CONFLICT,
    grpc.StatusCode.ABORTED: StatusKind.CONFLICT,
    grpc.StatusCode.FAILED_PRECONDITION: StatusKind.FAILED_PRECONDITION,
    grpc.StatusCode.RESOURCE_EXHAUSTED: StatusKind.RESOURCE_EXHAUSTED,
    grpc.StatusCode.INTERNAL: StatusKind.INTERNAL,
    grpc.StatusCode.DATA_LOSS: StatusKind.INTERNAL,
    grpc.StatusCode.UNAVAILABLE: StatusKind.UNAVAILABLE,
}

# Codes that mean the request never got a server verdict.
TRANSPORT_GRPC_CODES = frozenset({
    grpc.StatusCode.UNAVAILABLE,
    grpc.StatusCode.DEADLINE_EXCEEDED,
})


class PineconeException(Exception):
    """Base exception for all Pinecone SDK errors."""
    pass


class PineconeConfigurationError(PineconeException):
    """Raised for client configuration errors."""
    pass


class PineconeMissingCredentialError(PineconeConfigurationError):
    """Raised when no API key is given as an argument or in the environment."""
    pass


class PineconeInvalidHeadersError(PineconeConfigurationError):
    """Raised when additional headers are not a JSON object of strings."""
    pass


class PineconeTransportError(PineconeException):
    """Raised when a request could not be delivered (connection, TLS, transport timeout)."""
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class PineconeSerializationError(PineconeException):
    """Raised when a response cannot be decoded into the expected shape."""
    pass


class PineconeStatusError(PineconeException):
    """Raised for errors reported by the Pinecone API."""
    def __init__(
        self,
        message: str,
        kind: StatusKind = StatusKind.UNKNOWN,
        status_code: Any = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.details = details

    @classmethod
    def from_http_response(cls, operation: str, status_code: int, body: Any) -> "PineconeStatusError":
        details = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                details = error.get("message")
            elif isinstance(error, str):
                details = error
        elif body:
            details = str(body)
        kind = _HTTP_STATUS_TO_KIND.get(status_code, StatusKind.UNKNOWN)
        return cls(f"Failed to {operation}", kind=kind, status_code=status_code, details=details)

    @classmethod
    def from_grpc_error(cls, operation: str, grpc_error: grpc.RpcError) -> "PineconeStatusError":
        code = grpc_error.code() if callable(getattr(grpc_error, "code", None)) else None
        details = grpc_error.details() if callable(getattr(grpc_error, "details", None)) else None
        kind = _GRPC_CODE_TO_KIND.get(code, StatusKind.UNKNOWN)
        status_code = code.name if hasattr(code, "name") else code
        return cls(f"Failed to {operation}", kind=kind, status_code=status_code, details=details or str(grpc_error))

    def __str__(self):
        base_str = super().__str__()
        base_str += f" ({self.kind.value}"
        if self.status_code is not None:
            base_str += f", status code: {self.status_code}"
        base_str += ")"
        if self.details:
            base_str += f" Details: {self.details}"
        return base_str


class PineconeWaitTimeoutError(PineconeException):
    """Raised when an index is not ready before the wait policy's deadline."""
    def __init__(self, index_name: str, elapsed: float):
        super().__init__(f'Index "{index_name}" not ready after {elapsed:.1f}s')
        self.index_name = index_name
        self.elapsed = elapsed


class PineconeIndexInitializationError(PineconeException):
    """Raised when the server reports that index initialization failed."""
    def __init__(self, index_name: str):
        super().__init__(f'Index "{index_name}" failed to initialize')
        self.index_name = index_name


class PineconeCancelledError(PineconeException):
    """Raised when a wait is cancelled by the caller before reaching a result."""
    def __init__(self, index_name: str):
        super().__init__(f'Wait for index "{index_name}" was cancelled')
        self.index_name = index_name
