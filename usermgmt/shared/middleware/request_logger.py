# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
import secrets
import time

from flask import Flask, Response, g, request

from usermgmt.shared.logging import bind_correlation_id, logger, reset_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._\-]{1,64}$")
_HIDDEN_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})


def _request_id() -> str:
    inbound = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_RE.match(inbound):
        return inbound
    return secrets.token_urlsafe(8)


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or request.remote_addr or "unknown"


def _visible_headers() -> dict[str, str]:
    return {
        name: ("<hidden>" if name.lower() in _HIDDEN_HEADERS else value)
        for name, value in request.headers.items()
    }


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    @app.before_request
    def _open_request() -> None:
        g.correlation_id = _request_id()
        bind_correlation_id(g.correlation_id)
        g.request_start_time = time.perf_counter()

        if debug_mode:
            logger.debug(
                f"--> {request.method} {request.path} from {_client_ip()} "
                f"args={sorted(request.args)} headers={_visible_headers()} "
                f"body_size={request.content_length or 0}"
            )
        else:
            logger.info(f"--> {request.method} {request.path} from {_client_ip()}")

    @app.after_request
    def _close_request(response: Response) -> Response:
        started = g.get("request_start_time", time.perf_counter())
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            f"<-- {request.method} {request.path} {response.status_code} "
            f"in {elapsed_ms:.1f} ms user={g.get('user_id')}"
        )
        response.headers.setdefault(REQUEST_ID_HEADER, g.get("correlation_id", "-"))
        return response

    @app.teardown_request
    def _release_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.warning(f"Request aborted by {type(exc).__name__}")
        reset_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
