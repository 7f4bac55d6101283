"""Signed session tokens (JWT, HS256 by default)."""

from datetime import datetime, timezone

import jwt

from genchat.configs.system import AuthConfig
from genchat.core.exceptions import InvalidSessionError
from genchat.core.models import User

CLAIM_SUBJECT = "sub"
CLAIM_EMAIL = "email"


def issue_token(user: User, config: AuthConfig) -> str:
    """Sign a session token for ``user`` valid for ``config.token_ttl``."""
    now = datetime.now(timezone.utc)
    payload = {
        CLAIM_SUBJECT: user.id,
        CLAIM_EMAIL: user.email,
        "iat": now,
        "exp": now + config.token_ttl,
    }
    return jwt.encode(
        payload,
        config.token_secret.get_secret_value(),
        algorithm=config.token_algorithm,
    )


def decode_token(token: str, config: AuthConfig) -> str:
    """Verify ``token`` and return the user id it was issued for.

    Raises:
        InvalidSessionError: bad signature, expired, or missing subject.
    """
    try:
        payload = jwt.decode(
            token,
            config.token_secret.get_secret_value(),
            algorithms=[config.token_algorithm],
            options={"require": [CLAIM_SUBJECT, "exp"]},
        )
    except jwt.InvalidTokenError as exc:
        raise InvalidSessionError() from exc
    return str(payload[CLAIM_SUBJECT])
