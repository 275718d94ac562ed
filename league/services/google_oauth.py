"""Google OAuth 2.0 authorization-code flow."""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode

import httpx
import jwt

import config
from league.schemas import IdentityAssertion

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = ("openid", "email", "profile")


class OAuthError(Exception):
    """Google refused or could not be reached."""


def create_state() -> str:
    """Signed, short-lived value echoed back by Google to tie the callback to our redirect."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=config.OAUTH_STATE_EXPIRE_MINUTES)
    payload = {"nonce": secrets.token_urlsafe(16), "exp": expire}
    return jwt.encode(payload, config.SESSION_SECRET, algorithm=config.OAUTH_STATE_ALGORITHM)


def verify_state(state: Optional[str]) -> bool:
    if not state:
        return False
    try:
        jwt.decode(state, config.SESSION_SECRET, algorithms=[config.OAUTH_STATE_ALGORITHM])
    except jwt.InvalidTokenError:
        return False
    return True


class GoogleOAuthClient:
    """Talks to Google's OAuth and userinfo endpoints."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._transport = transport

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def fetch_identity(self, code: str) -> IdentityAssertion:
        """Exchange an authorization code for the signed-in user's profile."""
        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                r = await client.post(
                    TOKEN_URL,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                if r.status_code != 200:
                    raise OAuthError(f"Token exchange failed ({r.status_code}): {r.text}")
                access_token = r.json().get("access_token")
                if not access_token:
                    raise OAuthError("Token response had no access_token")
                r = await client.get(
                    USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                if r.status_code != 200:
                    raise OAuthError(f"Userinfo request failed ({r.status_code}): {r.text}")
                profile = r.json()
        except httpx.HTTPError as e:
            raise OAuthError(f"Could not reach Google: {e}") from e

        subject = profile.get("sub")
        if not subject:
            raise OAuthError("Userinfo response had no subject")
        email = profile.get("email")
        return IdentityAssertion(
            subject=str(subject),
            email=email,
            display_name=profile.get("name") or email or "Player",
        )


def get_google_client() -> GoogleOAuthClient:
    """FastAPI dependency. Overridden in tests."""
    return GoogleOAuthClient(
        client_id=config.GOOGLE_CLIENT_ID,
        client_secret=config.GOOGLE_CLIENT_SECRET,
        redirect_uri=f"{config.SERVER_BASE_URL.rstrip('/')}/auth/google/callback",
    )
