"""Prefixed ID generation for the genchat application.

All public-facing IDs use a ``{prefix}_{random}`` format so that any
ID can be visually identified by its origin:

- ``user_a8Kx3nQ9mP2r``: user account
- ``conv_L7wBd4Fj9Ks2``: conversation
"""

import secrets
import string

_ALPHABET = string.ascii_letters + string.digits  # a-z A-Z 0-9
_DEFAULT_LENGTH = 12  # ~71 bits of entropy

PREFIX_USER = "user"
PREFIX_CONVERSATION = "conv"
PREFIX_OAUTH_STATE = "state"


def generate_id(prefix: str, length: int = _DEFAULT_LENGTH) -> str:
    """Generate a prefixed random ID.

    Args:
        prefix: Short descriptor (e.g. ``"user"``, ``"conv"``).
        length: Number of random alphanumeric characters after the prefix.

    Returns:
        ``"{prefix}_{random}"`` string.
    """
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}_{suffix}"


def new_user_id() -> str:
    return generate_id(PREFIX_USER)


def new_conversation_id() -> str:
    return generate_id(PREFIX_CONVERSATION)
