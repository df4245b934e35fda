"""Centralised error handling and custom exceptions.

This module defines the exception classes raised by the store adapters
and the ordered collection service, and the Flask error handlers that
serialise them into JSON responses. The service layer signals specific
error conditions without coupling itself to HTTP response codes; the
handlers registered by the application factory translate them.

Every error body has the same shape::

    {"error": "<human readable message>", "code": "<MACHINE_CODE>", "details": {...}}
"""
from __future__ import annotations

import logging

from flask import jsonify
from marshmallow import ValidationError as SchemaValidationError
from werkzeug.exceptions import InternalServerError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors that map onto a transport status."""

    code = "SERVICE_ERROR"
    status_code = 500

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self, status_code: int | None = None):
        response = {"error": self.message, "code": self.code}
        if self.details:
            response["details"] = self.details
        return jsonify(response), status_code or self.status_code


class InvalidRequest(ServiceError):
    """Raised when a payload is malformed or semantically invalid.

    Covers stale full-resequence lists: the client should re-fetch the
    current order and retry with a fresh list.
    """

    code = "INVALID_REQUEST"
    status_code = 400


class Forbidden(ServiceError):
    """Raised when a request references items of another owner."""

    code = "FORBIDDEN"
    status_code = 403


class NotFound(ServiceError):
    """Raised when one or more referenced items do not exist."""

    code = "NOT_FOUND"
    status_code = 404


class ConflictError(ServiceError):
    """Raised when the collection changed since the version the client saw."""

    code = "CONFLICT"
    status_code = 409


class StorageError(ServiceError):
    """Raised when the backing store fails; safe to retry the whole call."""

    code = "STORAGE_ERROR"
    status_code = 500


def invalid_from_schema(err: SchemaValidationError) -> InvalidRequest:
    """Convert a marshmallow validation failure into ``InvalidRequest``."""
    messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
    return InvalidRequest("Request payload is invalid.", {"fields": messages})


def register_error_handlers(app) -> None:
    """Register custom error handlers on the given Flask app."""

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        if err.status_code >= 500:
            logger.exception("%s: %s", err.code, err.message)
        return err.to_response()

    @app.errorhandler(InternalServerError)
    def handle_internal_error(err: InternalServerError):
        # Flask has already logged the original exception
        return jsonify({"error": "Internal server error", "code": "INTERNAL_ERROR"}), 500
