"""Security modules"""
from rbm.core.security.encryption import (
    AuthenticationFailure,
    InvalidPayload,
    SecretVault,
    get_secret_vault,
)

__all__ = [
    "AuthenticationFailure",
    "InvalidPayload",
    "SecretVault",
    "get_secret_vault",
]
