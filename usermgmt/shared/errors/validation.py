# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _field_name(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Flatten pydantic errors into ``{"fields": [...], "errors": [...]}``.

    Neither the submitted input nor pydantic's message text is included.
    """
    problems: list[dict[str, Any]] = []
    for item in exc.errors(include_input=False, include_url=False):
        problem: dict[str, Any] = {"field": _field_name(item["loc"]), "type": item["type"]}
        ctx = item.get("ctx")
        if ctx:
            problem["ctx"] = {key: str(value) for key, value in ctx.items()}
        problems.append(problem)

    return {
        "fields": sorted({problem["field"] for problem in problems}),
        "errors": problems,
    }


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(
        message="invalid request body",
        context=format_pydantic_errors(exc),
    ) from exc


__all__ = ["format_pydantic_errors", "raise_validation_error"]
