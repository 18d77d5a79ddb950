import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ContestHubError(Exception):
    """Failure with an HTTP status; subclasses fix the status and default text."""
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message=None, payload=None):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.payload = payload

    def to_dict(self):
        body = dict(self.payload or ())
        body['message'] = self.message
        return body


class ValidationError(ContestHubError):
    default_message = "Validation error"


class UnauthorizedError(ContestHubError):
    """No credential accompanied a protected request."""
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(ContestHubError):
    """The credential is invalid or its role is not allowed."""
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ContestHubError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(ContestHubError):
    """The target is not in a state that allows the operation."""
    status_code = 409
    default_message = "Conflict"


class UpstreamError(ContestHubError):
    """The store, identity provider or payment gateway failed."""
    status_code = 502
    default_message = "Upstream service failure"


def handle_error(e):
    if isinstance(e, ContestHubError):
        status, body = e.status_code, e.to_dict()
    elif isinstance(e, HTTPException):
        status, body = e.code, {'message': e.description}
    else:
        logger.exception("Unhandled error while serving request")
        failure = UpstreamError("An upstream service failed to complete the request")
        status, body = failure.status_code, failure.to_dict()
    response = jsonify(body)
    response.status_code = status
    return response
