"""
Authentication API endpoints.

Provides register, login, logout and current-user endpoints.
"""

import logging
from fastapi import APIRouter, Depends, status
from backend.app.core.dependencies import get_current_user, get_store, get_bearer_token
from backend.app.core.exceptions import AuthenticationError
from backend.app.core.jwt import create_access_token
from backend.app.core.security import get_password_hash, verify_password
from backend.app.core.token_revocation import revoke_token
from backend.app.schemas.auth import UserRegister, UserLogin, TokenResponse
from backend.app.schemas.user import UserCreate, UserRecord, UserResponse
from backend.app.store.base import RecordStore

logger = logging.getLogger("finance.auth")

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_response(user: UserRecord) -> TokenResponse:
    jwt_payload = {
        "sub": user.username,
        "user_id": user.id,
        "role": user.role.value,
        "full_name": user.full_name,
    }
    return TokenResponse(
        access_token=create_access_token(data=jwt_payload),
        token_type="bearer",
        user_id=user.id,
        username=user.username,
        full_name=user.full_name,
        role=user.role,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    store: RecordStore = Depends(get_store)
):
    """
    Register a new client or accountant.
    
    Usernames are unique; a taken username is rejected with 400.
    """
    new_user = await store.create_user(UserCreate(
        username=user_data.username,
        hashed_password=get_password_hash(user_data.password),
        email=user_data.email,
        full_name=user_data.full_name,
        role=user_data.role,
        profile_image_url=user_data.profile_image_url,
    ))
    logger.info("User registered", extra={"user_id": new_user.id, "role": new_user.role.value})
    return _token_response(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    store: RecordStore = Depends(get_store)
):
    """
    Login user and return JWT token.
    
    Failed attempts are logged without revealing which check failed.
    """
    user = await store.get_user_by_username(credentials.username)
    
    if user is None or not verify_password(credentials.password, user.hashed_password):
        logger.warning("Login failed", extra={"username": credentials.username})
        raise AuthenticationError("Invalid credentials")
    
    logger.info("Login succeeded", extra={"user_id": user.id})
    return _token_response(user)


@router.post("/logout")
async def logout(
    token: str = Depends(get_bearer_token),
    current_user: UserRecord = Depends(get_current_user)
):
    """Revoke the bearer token used for this request."""
    revoked = await revoke_token(token, current_user.id)
    return {"status": "success", "revoked": revoked}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: UserRecord = Depends(get_current_user)
):
    """
    Get current authenticated user information.
    
    The password hash is never part of the response.
    """
    return UserResponse.model_validate(current_user)
