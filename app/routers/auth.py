"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request

from app.dependencies import CurrentUser, get_current_user
from app.rate_limit import limiter
from app.schemas.auth import LoginRequest, SignupRequest, TokenResponse, UpdateProfileRequest, VerifyResponse
from app.schemas.user import UserPublic, UserResponse
from app.services.auth import get_auth_service
from app.services.jwt import get_jwt_service
from app.services.voices import public_user
from app.store import Store, get_store

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/signup", response_model=TokenResponse)
@limiter.limit("5/minute")
def signup(request: Request, body: SignupRequest, store: Store = Depends(get_store)) -> TokenResponse:
    """Register a new user account."""
    result = get_auth_service().signup(store, body.email, body.password, body.city, body.country)
    return TokenResponse(token=result.token, user=UserPublic(**public_user(result.user)))


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, store: Store = Depends(get_store)) -> TokenResponse:
    """Authenticate and receive a JWT token."""
    result = get_auth_service().login(store, body.email, body.password)
    return TokenResponse(token=result.token, user=UserPublic(**public_user(result.user)))


@router.put("/update", response_model=UserResponse)
def update_profile(
    body: UpdateProfileRequest,
    user: CurrentUser = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> UserResponse:
    """Update the caller's city and/or country."""
    updated = get_auth_service().update_profile(store, user.user_id, body.city, body.country)
    return UserResponse(user=UserPublic(**public_user(updated)))


@router.get("/verify", response_model=VerifyResponse)
def verify_token(token: str) -> VerifyResponse:
    """Verify a JWT token and return the user id it carries."""
    payload = get_jwt_service().decode_token(token)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return VerifyResponse(valid=True, user_id=payload["sub"])
