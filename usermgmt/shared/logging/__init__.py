# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig


from .logger import (
    bind_correlation_id,
    logger,
    reset_correlation_id,
    setup_logging,
)
from .sensitive_filter import sanitize_message

__all__ = [
    "bind_correlation_id",
    "logger",
    "reset_correlation_id",
    "sanitize_message",
    "setup_logging",
]
