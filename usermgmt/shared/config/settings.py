# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_INSECURE_SECRETS = frozenset({"dev", "development", "test", "changeme", "your-super-secret-key"})
_MIN_PRODUCTION_SECRET_LENGTH = 32


def _is_weak_secret(secret: str) -> bool:
    return secret.lower() in _INSECURE_SECRETS or len(secret) < _MIN_PRODUCTION_SECRET_LENGTH


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


def _parse_csv(value: str | list[str]) -> list[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class _EnvSection(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", validate_by_name=True, extra="ignore"
    )


class JwtConfig(_EnvSection):
    secret: str = Field("dev", alias="JWT_SECRET")
    # Older secrets still accepted for verification while tokens signed with them expire.
    previous_secrets: Annotated[list[str], NoDecode] = Field(
        default_factory=list, alias="JWT_PREVIOUS_SECRETS"
    )
    ttl_hours: float = Field(24.0, gt=0, alias="JWT_TTL_HOURS")
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    revoke_on_logout: bool = Field(False, alias="JWT_REVOKE_ON_LOGOUT")

    @field_validator("previous_secrets", mode="before")
    @classmethod
    def _parse_previous(cls, value: str | list[str]) -> list[str]:
        return _parse_csv(value)

    @field_validator("algorithm")
    @classmethod
    def _only_hmac(cls, value: str) -> str:
        if value not in ("HS256", "HS384", "HS512"):
            raise ValueError("only HMAC-SHA2 signing algorithms are supported")
        return value

    @field_validator("revoke_on_logout", mode="before")
    @classmethod
    def _parse_revoke(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.ttl_hours)


class PasswordConfig(_EnvSection):
    # werkzeug method string, e.g. "scrypt" or "pbkdf2:sha256:600000"
    hash_method: str = Field("scrypt", alias="PASSWORD_HASH_METHOD")
    min_length: int = Field(6, ge=1, alias="PASSWORD_MIN_LENGTH")


class SecurityConfig(_EnvSection):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        ["*"], alias="ALLOWED_ORIGINS"
    )

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        return _parse_csv(value)

    @field_validator("enable_hsts", mode="before")
    @classmethod
    def _parse_hsts(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class ObservabilityConfig(_EnvSection):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")
    service_name: str = Field("usermgmt", alias="SERVICE_NAME")

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_metrics(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _jwt_config_factory() -> JwtConfig:
    return JwtConfig()  # type: ignore[call-arg]


def _password_config_factory() -> PasswordConfig:
    return PasswordConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _observability_config_factory() -> ObservabilityConfig:
    return ObservabilityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")

    jwt: JwtConfig = Field(default_factory=_jwt_config_factory)
    password: PasswordConfig = Field(default_factory=_password_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    observability: ObservabilityConfig = Field(default_factory=_observability_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        validate_by_name=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if _is_weak_secret(self.jwt.secret):
            print(
                "FATAL: JWT_SECRET must be a non-default value of at least "
                f"{_MIN_PRODUCTION_SECRET_LENGTH} characters when APP_ENV={self.app_env}",
                file=sys.stderr,
            )
            sys.exit(1)

        for warning in self.production_warnings():
            print(f"WARNING: {warning}", file=sys.stderr)
        return self

    def production_warnings(self) -> list[str]:
        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("ALLOWED_ORIGINS accepts any origin")
        if not self.security.enable_hsts:
            warnings.append("ENABLE_HSTS is off")
        if not self.jwt.revoke_on_logout:
            warnings.append("JWT_REVOKE_ON_LOGOUT is off; logout does not invalidate tokens")
        return warnings

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AppConfig",
    "JwtConfig",
    "ObservabilityConfig",
    "PasswordConfig",
    "SecurityConfig",
    "load_config",
]
