# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_MASK = "***REDACTED***"


@dataclass(frozen=True, slots=True)
class _Redaction:
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _rule(regex: str, replacement: str, *, ignore_case: bool = True) -> _Redaction:
    flags = re.IGNORECASE if ignore_case else 0
    return _Redaction(re.compile(regex, flags), replacement)


# Order matters: header and bearer rules run before the bare JWT rule so the
# surrounding key stays readable in the log line.
REDACTIONS: tuple[_Redaction, ...] = (
    _rule(r"(authorization\s*:\s*)(bearer\s+)?\S+", rf"\1\2{_MASK}"),
    _rule(r"(bearer\s+)[\w\-.]{16,}", rf"\1{_MASK}"),
    _rule(r"\beyJ[\w\-]+\.[\w\-]+\.[\w\-]+", "***JWT***", ignore_case=False),
    _rule(r"((?:jwt_)?secret(?:_key)?\s*[:=]\s*['\"]?)[^'\"\s,]+", rf"\1{_MASK}"),
    _rule(r"(password_hash\s*[:=]\s*['\"]?)[^'\"\s,]+", rf"\1{_MASK}"),
    _rule(r"(password\s*[:=]\s*['\"]?)[^'\"\s,]+", rf"\1{_MASK}"),
    _rule(r"(token\s*[:=]\s*['\"]?)[\w\-.]{16,}", rf"\1{_MASK}"),
    # Keep the domain so support can still tell tenants apart.
    _rule(r"[\w.%+\-]+@([\w\-]+(?:\.[\w\-]+)*\.[a-z]{2,})", r"***@\1"),
)


def sanitize_message(message: str) -> str:
    for redaction in REDACTIONS:
        message = redaction.apply(message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """Loguru filter: scrub the rendered message, never drop the record."""
    record["message"] = sanitize_message(record["message"])
    return True
