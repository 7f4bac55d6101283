"""Google OAuth2 authorization-code flow over httpx.

``build_google_client`` is a lifespan builder that owns one pooled
``httpx.AsyncClient`` for the token and userinfo endpoints.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Annotated
from urllib.parse import urlencode

import httpx
from fastapi import Depends, FastAPI, Request

from genchat.configs.config import AppConfig, get_app_config
from genchat.configs.system import GoogleOAuthConfig
from genchat.core.exceptions import OAuthError
from genchat.core.models import GoogleProfile
from genchat.infra.lifespan import get_app
from genchat.infra.telemetry import SPAN_GOOGLE_EXCHANGE, tracer

logger = logging.getLogger(__name__)


class GoogleOAuthClient:
    """Builds the consent URL and exchanges a callback code for a profile."""

    def __init__(self, config: GoogleOAuthConfig, http: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self._config.client_id,
            "redirect_uri": self._config.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self._config.scopes),
            "state": state,
            "prompt": "select_account",
        }
        return f"{self._config.authorize_url}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> GoogleProfile:
        """Exchange ``code`` for an access token and read the user profile.

        Raises:
            OAuthError: on any transport, HTTP or payload failure.
        """
        with tracer.start_as_current_span(SPAN_GOOGLE_EXCHANGE):
            try:
                token_response = await self._http.post(
                    self._config.token_url,
                    data={
                        "code": code,
                        "client_id": self._config.client_id,
                        "client_secret": self._config.client_secret.get_secret_value(),
                        "redirect_uri": self._config.redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                token_response.raise_for_status()
                access_token = token_response.json()["access_token"]

                info_response = await self._http.get(
                    self._config.userinfo_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                info_response.raise_for_status()
                info = info_response.json()
                return GoogleProfile(
                    id=str(info["id"]),
                    display_name=info.get("name") or info["email"],
                    email=info["email"],
                    photo_url=info.get("picture"),
                )
            except (httpx.HTTPError, KeyError, ValueError) as exc:
                logger.warning("Google code exchange failed: %s", exc)
                raise OAuthError() from exc


async def build_google_client(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Lifespan builder: attach a ``GoogleOAuthClient`` to ``app.state``."""
    http = httpx.AsyncClient(timeout=config.google.timeout.total_seconds())
    app.state.google_client = GoogleOAuthClient(config.google, http)
    yield
    await http.aclose()


def get_google_client(request: Request) -> GoogleOAuthClient:
    """FastAPI dependency: reads from ``app.state``."""
    return request.app.state.google_client
