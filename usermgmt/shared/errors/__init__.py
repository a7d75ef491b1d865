from .base import (
    AppError,
    CryptoError,
    DomainError,
    InfrastructureError,
    StorageError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "CryptoError",
    "DomainError",
    "InfrastructureError",
    "StorageError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
