from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError
from ..logging_config import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Translate exceptions into `{"error": ...}` JSON responses."""

    @app.errorhandler(DomainError)
    def _domain_error(err: DomainError):
        body = {"error": str(err)}
        body.update(err.payload())
        return jsonify(body), err.status_code

    @app.errorhandler(404)
    def _not_found(_err):
        return jsonify({"error": "Route not found"}), 404

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        return jsonify({"error": err.description}), err.code

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        logger.exception("Unhandled error: %s", err)
        return jsonify({"error": "Internal server error"}), 500
