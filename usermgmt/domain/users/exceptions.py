# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from usermgmt.shared.errors.base import CryptoError, DomainError, StorageError


class EmailAlreadyRegisteredError(DomainError):
    code = "email_already_registered"
    message = "email already registered"


class CredentialAlreadyExistsError(DomainError):
    code = "credential_already_exists"
    status = HTTPStatus.CONFLICT
    message = "credential already exists for user"


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "user not found"


class AuthenticationError(DomainError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"
    message = "invalid email or password"


class MissingTokenError(AuthenticationError):
    code = "missing_token"
    message = "authorization header is required"


class InvalidTokenError(AuthenticationError):
    code = "invalid_token"
    message = "invalid token"


class ExpiredTokenError(InvalidTokenError):
    code = "token_expired"
    message = "token expired"


class CredentialNotFoundError(StorageError):
    code = "credential_not_found"


class PasswordHashingError(CryptoError):
    code = "password_hashing_failed"


class TokenSigningError(CryptoError):
    code = "token_signing_failed"
