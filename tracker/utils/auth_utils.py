"""
Authentication utilities for EVC Track.

Sign-in itself is handled by an external auth/session service. The upstream
proxy forwards the authenticated user id in a header; this module reads it
and, when a proxy token hash is configured, checks that the request really
came through the proxy.

Provides functions for:
- Resolving the owner identity of a request
- Generating and hashing proxy tokens
- Generating secret keys
"""

import logging
import secrets
from typing import Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from exceptions import AuthenticationError

logger = logging.getLogger(__name__)

MAX_IDENTITY_LENGTH = 64


def generate_api_token(prefix: str = "evc", length: int = 32) -> str:
    """
    Generate a secure random token.

    Returns:
        Token string in format: prefix_<random_hex>

    Example:
        >>> token = generate_api_token()
        >>> token.startswith("evc_")
        True
    """
    return f"{prefix}_{secrets.token_hex(length)}"


def generate_secret_key(length: int = 32) -> str:
    """Generate a Flask SECRET_KEY value."""
    return secrets.token_urlsafe(length)


def hash_proxy_token(token: str, method: str = "pbkdf2:sha256") -> str:
    """Hash a proxy token for storage in AUTH_PROXY_TOKEN_HASH."""
    return generate_password_hash(token, method=method)


def verify_proxy_token(token: Optional[str], hashed_token: str) -> bool:
    """Verify a proxy token against its hash."""
    if not token:
        return False
    return check_password_hash(hashed_token, token)


def resolve_identity(headers: Mapping[str, str], config: Mapping) -> Optional[str]:
    """
    Return the authenticated owner id for a request, or None for a guest.

    Args:
        headers: Request headers
        config: Flask config (AUTH_USER_HEADER, AUTH_PROXY_TOKEN_HEADER,
            AUTH_PROXY_TOKEN_HASH)

    Raises:
        AuthenticationError: an identity was asserted but the proxy token is
            missing or wrong, or the identity is malformed
    """
    identity = (headers.get(config["AUTH_USER_HEADER"]) or "").strip()
    if not identity:
        return None

    if len(identity) > MAX_IDENTITY_LENGTH:
        raise AuthenticationError("Invalid user identity")

    token_hash = config.get("AUTH_PROXY_TOKEN_HASH")
    if token_hash:
        token = headers.get(config["AUTH_PROXY_TOKEN_HEADER"])
        if not verify_proxy_token(token, token_hash):
            logger.warning("Rejected identity header without a valid proxy token")
            raise AuthenticationError("Invalid proxy token")

    return identity
