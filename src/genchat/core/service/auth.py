"""Signup, password login, Google login and session verification."""

import logging

from genchat.configs.system import AuthConfig, GoogleOAuthConfig
from genchat.core.auth.passwords import hash_password, verify_password
from genchat.core.auth.tokens import decode_token, issue_token
from genchat.core.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    GoogleOnlyAccountError,
    InvalidCredentialsError,
    NotFoundError,
)
from genchat.core.models import GoogleProfile, User
from genchat.infra.id_utils import new_user_id
from genchat.infra.store.base import UserStore

from .validation import require

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(
        self,
        users: UserStore,
        config: AuthConfig,
        google_config: GoogleOAuthConfig | None = None,
    ) -> None:
        self._users = users
        self._config = config
        self._google_config = google_config or GoogleOAuthConfig()

    async def signup(
        self, name: str | None, email: str | None, password: str | None
    ) -> User:
        require(name=name, email=email, password=password)
        email = normalize_email(email)
        if await self._users.get_by_email(email) is not None:
            raise DuplicateEmailError()
        user = await self._users.create(
            User(
                id=new_user_id(),
                name=name.strip(),
                email=email,
                password_hash=hash_password(password),
            )
        )
        logger.info("Registered user %s", user.id)
        return user

    async def login(self, email: str | None, password: str | None) -> tuple[User, str]:
        require(email=email, password=password)
        user = await self._users.get_by_email(normalize_email(email))
        if user is None:
            raise InvalidCredentialsError("User not found")
        if user.password_hash is None:
            raise GoogleOnlyAccountError()
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return user, issue_token(user, self._config)

    async def google_login(self, profile: GoogleProfile) -> tuple[User, str]:
        """Find the account linked to ``profile``; create it on first sight.

        Raises:
            DuplicateEmailError: the email belongs to a password account.
        """
        user = await self._users.get_by_google_id(profile.id)
        if user is None:
            user = await self._users.create(
                User(
                    id=new_user_id(),
                    name=profile.display_name,
                    email=normalize_email(profile.email),
                    google_id=profile.id,
                    picture_url=profile.photo_url
                    or self._google_config.default_picture_url,
                )
            )
            logger.info("Registered Google user %s", user.id)
        return user, issue_token(user, self._config)

    def authenticate(self, token: str | None) -> str:
        """Return the user id carried by a session token."""
        if not token:
            raise AuthenticationError()
        return decode_token(token, self._config)

    async def get_user(self, user_id: str) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
