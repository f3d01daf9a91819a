# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – login, registration, current-user info.

Security notes
--------------
* Login returns the *same* error message whether the email doesn't exist or
  the password is wrong.  This prevents user-enumeration attacks.
* Registration does say "User already exists": the caller is about to own
  that address anyway, so nothing secret is disclosed.
"""

from fastapi import APIRouter, Depends, status

from auth.credentials import CredentialStore
from auth.schemas import AuthResponse, LoginRequest, MeResponse, RegisterRequest, UserPublic
from core.container import get_credential_store, get_token_service
from core.logger import logger
from core.security import TokenClaims, TokenService, get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """Authenticate and return a signed bearer token."""
    user = credentials.authenticate(body.email, body.password)
    logger.info("User logged in: id=%s email=%s", user.id, user.email)
    return AuthResponse(token=tokens.issue(user), user=UserPublic.model_validate(user))


# ---------------------------------------------------------------------------
# POST /auth/register
# ---------------------------------------------------------------------------


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """Create a ``user``-role account and log it in straight away."""
    user = credentials.register(name=body.name, email=body.email, password=body.password)
    return AuthResponse(token=tokens.issue(user), user=UserPublic.model_validate(user))


# ---------------------------------------------------------------------------
# GET /auth/me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=MeResponse)
def me(
    current_user: TokenClaims = Depends(get_current_user),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Return the authenticated user's public profile (no secrets)."""
    user = credentials.get(current_user.id)
    return MeResponse(user=UserPublic.model_validate(user))
