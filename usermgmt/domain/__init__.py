# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import Credential, TokenClaims, User

__all__ = [
    "Credential",
    "TokenClaims",
    "User",
]
