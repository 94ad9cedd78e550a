"""Authentication API routes."""

import json
import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from schedulehub.auth import service
from schedulehub.auth.guard import get_identity
from schedulehub.auth.oauth import ExternalAuthError, GoogleOAuthClient, get_oauth_client
from schedulehub.config import get_settings
from schedulehub.exceptions import NotConfigured, ValidationError
from schedulehub.schemas import Identity, LoginRequest, LoginResponse, UserOut
from schedulehub.store import Store, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_out(account) -> UserOut:
    return UserOut(id=account.id, name=account.name, email=account.email, role=account.role)


# ─── Password Login ───────────────────────────────────────────

@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, store: Store = Depends(get_store)):
    """Exchange email + password for a 24-hour access token.

    Returns `{token, user}`. 400 when either field is missing,
    401 for an unknown email or a wrong password.
    """
    if not body.email or not body.password:
        raise ValidationError("Email and password required")

    token, account = await service.login(store.staff, body.email, body.password)
    return LoginResponse(token=token, user=_user_out(account))


@router.get("/me", response_model=Identity)
async def me(identity: Identity = Depends(get_identity)):
    """Echo the identity carried by the current token."""
    return identity


# ─── External Identity (Google) ──────────────────────────────

@router.get("/external/login")
async def external_login(oauth: GoogleOAuthClient | None = Depends(get_oauth_client)):
    """Redirect the browser to the identity provider's consent page."""
    if oauth is None:
        raise NotConfigured("External login is not configured")
    return RedirectResponse(oauth.authorization_url(), status_code=307)


@router.get("/external/callback")
async def external_callback(
    code: str | None = Query(default=None),
    oauth: GoogleOAuthClient | None = Depends(get_oauth_client),
    store: Store = Depends(get_store),
):
    """Provider callback.

    Resolves the provider identity to a staff account (creating or linking
    as needed), then redirects to the frontend with `token` and a JSON `user`
    in the query string. Any provider failure redirects with
    `error=auth_failed`.
    """
    settings = get_settings()
    frontend = settings.FRONTEND_URL.rstrip("/")
    failure = RedirectResponse(f"{frontend}/?{urlencode({'error': 'auth_failed'})}", status_code=303)

    if oauth is None or not code:
        return failure

    try:
        identity = await oauth.fetch_identity(code)
    except ExternalAuthError as exc:
        logger.warning("External login failed: %s", exc)
        return failure

    account = await service.external_authenticate(
        store.staff, identity.external_id, identity.email, identity.display_name
    )
    token = service.issue_token(account)
    user = json.dumps(_user_out(account).model_dump(mode="json"))
    return RedirectResponse(f"{frontend}/?{urlencode({'token': token, 'user': user})}", status_code=303)
