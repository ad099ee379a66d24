"""Security helpers: secrets, password hashing and session tokens."""
from .credentials import TokenClaims, create_access_token, decode_access_token, hash_password, verify_password
from .secrets import MissingSecretError, is_placeholder, require_secret

__all__ = [
    "TokenClaims",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
    "MissingSecretError",
    "is_placeholder",
    "require_secret",
]
