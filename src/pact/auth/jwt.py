"""Access token verification.

Tokens are issued by the identity service; this API only verifies them.
The ``sub`` claim carries the user's database ID.
"""

from __future__ import annotations

from typing import Any

import jwt

from pact.config import get_settings


def verify_token(token: str, expected_type: str = "access") -> dict[str, Any]:
    """
    Decode and validate a bearer token.

    Raises:
        jwt.InvalidTokenError: On bad signature, expiry, issuer or token type.
    """
    settings = get_settings()
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        issuer=settings.jwt_issuer,
        options={"require": ["sub", "exp"]},
    )
    if payload.get("type", "access") != expected_type:
        msg = f"Expected {expected_type} token"
        raise jwt.InvalidTokenError(msg)
    return payload
