"""Request correlation id carried in a context variable.

The id is bound for the lifetime of one HTTP request and picked up by the
logging filter, so every log line of a matching or report pass can be traced
back to the request that triggered it.
"""

import uuid
from contextvars import ContextVar, Token
from typing import Optional

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST_ID = "no-request-id"

# Longer incoming ids are replaced to keep log lines bounded
MAX_REQUEST_ID_LENGTH = 128

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    return uuid.uuid4().hex


def get_request_id() -> str:
    """Current request id, or "no-request-id" outside a request."""
    return request_id_var.get() or NO_REQUEST_ID


def set_request_id(request_id: Optional[str]) -> Token:
    """Bind a request id, generating one when the incoming value is unusable.

    Returns:
        Token for request_id_var.reset()
    """
    if not request_id or len(request_id) > MAX_REQUEST_ID_LENGTH:
        request_id = generate_request_id()
    return request_id_var.set(request_id)
