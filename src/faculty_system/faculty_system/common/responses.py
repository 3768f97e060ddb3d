from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, PersistenceError

logger = logging.getLogger(__name__)


def success(data: Any = None, message: str = "Success", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def error(message: str = "Error", status: int = 500):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    """Request JSON as a dict; anything else (missing, array, garbage) reads as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(PersistenceError)
    def _persistence_error(e: PersistenceError):
        logger.error("Persistence failure on %s %s: %s", request.method, request.path, e)
        return error("Server error", 500)

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("Unhandled domain failure: %s", e)
            return error("Server error", e.status_code)
        return error(str(e), e.status_code)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected_error(e: Exception):
        logger.exception("Unexpected error on %s %s", request.method, request.path)
        message = f"Server error: {e}" if app.config.get("DEBUG") else "Server error"
        return error(message, 500)
