from .exceptions import (
    handle_error,
    ContestHubError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ValidationError,
    ConflictError,
    UpstreamError,
)

__all__ = [
    'handle_error',
    'ContestHubError',
    'NotFoundError',
    'UnauthorizedError',
    'ForbiddenError',
    'ValidationError',
    'ConflictError',
    'UpstreamError',
]
