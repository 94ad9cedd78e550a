"""Google OAuth glue: authorization redirect and code → identity exchange."""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from schedulehub.config import get_settings

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


@dataclass(frozen=True)
class ExternalIdentity:
    external_id: str
    email: str
    display_name: str


class ExternalAuthError(Exception):
    """The provider rejected the code or returned an unusable profile."""


class GoogleOAuthClient:
    def __init__(self, client_id: str, client_secret: str, callback_url: str):
        self._client_id = client_id
        self._client_secret = client_secret
        self._callback_url = callback_url

    def authorization_url(self, state: str | None = None) -> str:
        params = {
            "client_id": self._client_id,
            "redirect_uri": self._callback_url,
            "response_type": "code",
            "scope": "openid email profile",
        }
        if state:
            params["state"] = state
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def fetch_identity(self, code: str) -> ExternalIdentity:
        """Exchange an authorization code and read the user's profile."""
        try:
            async with httpx.AsyncClient(timeout=10) as client:
                token_resp = await client.post(GOOGLE_TOKEN_URL, data={
                    "code": code,
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "redirect_uri": self._callback_url,
                    "grant_type": "authorization_code",
                })
                if not token_resp.is_success:
                    raise ExternalAuthError(f"token exchange failed ({token_resp.status_code})")
                access_token = token_resp.json().get("access_token")
                if not access_token:
                    raise ExternalAuthError("token exchange returned no access_token")

                info_resp = await client.get(
                    GOOGLE_USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"}
                )
                if not info_resp.is_success:
                    raise ExternalAuthError(f"userinfo failed ({info_resp.status_code})")
                profile = info_resp.json()
        except httpx.HTTPError as exc:
            raise ExternalAuthError(f"provider unreachable: {exc}") from exc

        if not profile.get("sub") or not profile.get("email"):
            raise ExternalAuthError("profile is missing sub or email")
        return ExternalIdentity(
            external_id=str(profile["sub"]),
            email=profile["email"],
            display_name=profile.get("name") or profile["email"],
        )


def get_oauth_client() -> GoogleOAuthClient | None:
    """Dependency: the configured provider client, or None when not configured."""
    settings = get_settings()
    if not settings.external_auth_enabled:
        return None
    return GoogleOAuthClient(
        settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET, settings.OAUTH_CALLBACK_URL
    )
