"""DRF exception handler producing ``{"success": false, "message": ...}`` bodies."""

from __future__ import annotations

import logging
from typing import Any

from django.db import DatabaseError  # type: ignore
from rest_framework import exceptions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.exceptions import DomainError, StoreError

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields"


def _flatten(data: Any, prefix: str = "") -> list[str]:
    """Turn DRF error detail structures into flat ``field: message`` strings."""

    if isinstance(data, dict):
        messages: list[str] = []
        for key, value in data.items():
            nested_prefix = "" if key in ("detail", "non_field_errors") else f"{prefix}{key}"
            messages.extend(_flatten(value, nested_prefix))
        return messages
    if isinstance(data, (list, tuple)):
        return [message for item in data for message in _flatten(item, prefix)]
    return [f"{prefix}: {data}" if prefix else str(data)]


def _has_code(codes: Any, code: str) -> bool:
    if isinstance(codes, dict):
        return any(_has_code(value, code) for value in codes.values())
    if isinstance(codes, (list, tuple)):
        return any(_has_code(value, code) for value in codes)
    return codes == code


def _error_response(message: str, status_code: int, errors: list[str] | None = None) -> Response:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return Response(body, status=status_code)


def api_exception_handler(exc: Exception, context: dict) -> Response | None:
    """Installed as REST_FRAMEWORK["EXCEPTION_HANDLER"]."""

    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if isinstance(exc, DomainError):
        if isinstance(exc, StoreError):
            logger.error("Store failure in %s: %s", view_name, exc, exc_info=exc)
        else:
            logger.info("%s in %s: %s", exc.__class__.__name__, view_name, exc.message)
        return _error_response(exc.message, exc.status_code, exc.errors)

    if isinstance(exc, DatabaseError):
        logger.error("Database error in %s: %s", view_name, exc, exc_info=exc)
        return _error_response(StoreError.default_message, status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = exception_handler(exc, context)
    if response is None:
        return None

    errors = _flatten(response.data)
    body: dict[str, Any] = {"success": False}
    if isinstance(exc, exceptions.ValidationError):
        if _has_code(exc.get_codes(), "required"):
            body["message"] = MISSING_FIELDS_MESSAGE
        else:
            body["message"] = errors[0] if errors else "Invalid request data"
        body["errors"] = errors
    else:
        body["message"] = errors[0] if errors else "Request failed"

    # Keep DRF's status and headers (WWW-Authenticate, Allow, Retry-After).
    response.data = body
    return response
