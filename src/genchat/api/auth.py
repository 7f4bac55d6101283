"""Account routes: signup, login, logout, Google OAuth, session checks."""

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import RedirectResponse

from genchat.configs.system import AuthConfig
from genchat.core.exceptions import GenChatError, OAuthError
from genchat.infra.id_utils import PREFIX_OAUTH_STATE, generate_id

from .deps import (
    AuthConfigDep,
    AuthServiceDep,
    GoogleClientDep,
    SessionUserDep,
    ensure_owner,
)
from .models import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

OAUTH_STATE_COOKIE = "oauthState"
OAUTH_STATE_MAX_AGE = 600  # seconds

router = APIRouter(tags=["auth"])


def set_session_cookie(response: Response, token: str, config: AuthConfig) -> None:
    response.set_cookie(
        key=config.cookie_name,
        value=token,
        max_age=int(config.token_ttl.total_seconds()),
        httponly=True,
        secure=config.cookie_secure,
        samesite=config.cookie_samesite,
    )


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
)
async def signup(body: SignupRequest, auth: AuthServiceDep) -> MessageResponse:
    await auth.signup(body.name, body.email, body.password)
    return MessageResponse(message="User registered successfully!")


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    auth: AuthServiceDep,
    config: AuthConfigDep,
) -> LoginResponse:
    user, token = await auth.login(body.email, body.password)
    set_session_cookie(response, token, config)
    return LoginResponse(message="Login successful", user_id=user.id)


@router.get("/logout")
async def logout(config: AuthConfigDep) -> RedirectResponse:
    response = RedirectResponse(config.client_url, status_code=status.HTTP_302_FOUND)
    response.delete_cookie(
        config.cookie_name,
        httponly=True,
        secure=config.cookie_secure,
        samesite=config.cookie_samesite,
    )
    return response


@router.get("/google")
async def google_login(google: GoogleClientDep) -> RedirectResponse:
    """Send the browser to Google's consent screen."""
    state = generate_id(PREFIX_OAUTH_STATE, length=24)
    response = RedirectResponse(
        google.authorization_url(state), status_code=status.HTTP_302_FOUND
    )
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        max_age=OAUTH_STATE_MAX_AGE,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/google-auth/callback")
async def google_callback(
    request: Request,
    google: GoogleClientDep,
    auth: AuthServiceDep,
    config: AuthConfigDep,
    code: str | None = None,
    state: str | None = None,
) -> RedirectResponse:
    """Finish the OAuth flow: exchange the code, sign in, set the cookie."""
    try:
        expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
        if not code or not state or state != expected_state:
            raise OAuthError("OAuth state mismatch or missing code")
        profile = await google.fetch_profile(code)
        _user, token = await auth.google_login(profile)
    except GenChatError as exc:
        logger.warning("Google sign-in failed: %s (%s)", exc.message, exc.code)
        response = RedirectResponse(
            f"{config.client_url}/login?error=auth_failed",
            status_code=status.HTTP_302_FOUND,
        )
    else:
        response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
        set_session_cookie(response, token, config)
    response.delete_cookie(OAUTH_STATE_COOKIE, httponly=True, samesite="lax")
    return response


@router.get("/protected")
async def protected(user_id: SessionUserDep) -> dict[str, str]:
    return {"message": "User authenticated", "userId": user_id}


@router.get("/user/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str, session_user_id: SessionUserDep, auth: AuthServiceDep
) -> UserResponse:
    ensure_owner(session_user_id, user_id)
    user = await auth.get_user(user_id)
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        picture_url=user.picture_url,
        google_account=user.google_id is not None,
    )
