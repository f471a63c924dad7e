from __future__ import annotations

import logging
from typing import Any

from flask import jsonify, request

from ..core.exceptions import (
    AllocationExhaustedError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (AllocationExhaustedError, 500),
    (PersistenceError, 500),
)


def request_data() -> dict[str, Any]:
    """Query string merged with the JSON body (body wins)."""
    data: dict[str, Any] = dict(request.args.items())
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        data.update(body)
    return data


def ok(message: str | None = None, status: int = 200, **payload):
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(exc: DomainError):
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
    if isinstance(exc, PersistenceError):
        logger.error("Persistence failure: %s", exc)
        return fail("Server error", status)
    return fail(str(exc), status)
