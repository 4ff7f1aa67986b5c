"""API error type and Flask error handlers producing the JSON envelope."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .logging_config import get_logger

logger = get_logger("errors")


class ApiError(Exception):
    """An error that maps directly onto an HTTP status and user-facing message."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []

    @classmethod
    def bad_request(cls, message: str = "Bad request", errors=None) -> ApiError:
        return cls(400, message, errors)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> ApiError:
        return cls(401, message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden") -> ApiError:
        return cls(403, message)

    @classmethod
    def not_found(cls, message: str = "Resource not found") -> ApiError:
        return cls(404, message)

    @classmethod
    def conflict(cls, message: str = "Resource already exists") -> ApiError:
        return cls(409, message)

    @classmethod
    def validation(cls, field_errors: Mapping[str, list[str]]) -> ApiError:
        """Build a 400 from form-style ``{field: [messages]}`` errors."""
        errors = [
            {"field": field, "message": message}
            for field, messages in field_errors.items()
            for message in messages
        ]
        return cls(400, "Validation failed", errors)

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "message": self.message, "errors": self.errors}


def _error_response(status_code: int, message: str, errors=None):
    payload = {"success": False, "message": message, "errors": errors or []}
    return jsonify(payload), status_code


def register_error_handlers(app: Flask) -> None:
    """Translate exceptions into ``{success: false, message, errors}`` responses."""

    @app.errorhandler(ApiError)
    def _handle_api_error(exc: ApiError):
        if exc.status_code >= 500:
            logger.error("API error: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        if exc.code == 404:
            return _error_response(404, f"Route {request.path} not found")
        return _error_response(exc.code or 500, exc.description or exc.name)

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        logger.warning("Integrity error: %s", exc.orig)
        return _error_response(409, "Resource conflicts with existing data")

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled error")
        return _error_response(500, "Internal Server Error")
