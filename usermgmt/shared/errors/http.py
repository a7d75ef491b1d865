# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from usermgmt.shared.logging import logger

from .base import AppError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def _http_error_code(exc: HTTPException) -> str:
    return (exc.name or "http_error").lower().replace(" ", "_")


def _where() -> str:
    return f"{request.method} {request.path}"


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    """Render every failure as ``{"error": code, ...}`` JSON."""

    @app.errorhandler(AppError)
    def _on_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error(f"{exc.code} while handling {_where()}: {exc}")
        else:
            logger.info(f"Rejected {_where()} with {exc.code} ({int(exc.status)})")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _on_http_error(exc: HTTPException):
        status = exc.code or default_status
        return jsonify({"error": _http_error_code(exc)}), status

    @app.errorhandler(Exception)
    def _on_unexpected(exc: Exception):
        if debug_mode:
            logger.opt(exception=exc).error(
                f"Unhandled {type(exc).__name__} while handling {_where()} "
                f"user={getattr(g, 'user_id', None)} body_size={request.content_length or 0}"
            )
        else:
            logger.error(f"Unhandled {type(exc).__name__} while handling {_where()}")
        return jsonify({"error": "internal_error"}), default_status
