"""
Request dependencies for FastAPI.

Resolves the application's record store and services from app.state, and
authenticates the caller from a JWT bearer token.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from backend.app.core.exceptions import AuthenticationError, TokenRevokedError
from backend.app.core.jwt import decode_access_token
from backend.app.core.token_revocation import is_token_revoked
from backend.app.schemas.user import UserRecord
from backend.app.store.base import RecordStore

# HTTP Bearer security scheme; missing credentials are reported as 401 below
security = HTTPBearer(auto_error=False)


def get_store(request: Request) -> RecordStore:
    """The record store created at startup."""
    return request.app.state.store


def get_workflow(request: Request):
    """The workflow service created at startup."""
    return request.app.state.workflow


def get_file_storage(request: Request):
    """The upload storage created at startup."""
    return request.app.state.file_storage


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: RecordStore = Depends(get_store)
) -> UserRecord:
    """
    FastAPI dependency for JWT authentication.
    
    Checks:
    1. A bearer token is present
    2. Token signature and expiry are valid
    3. Token has not been revoked by logout
    4. User still exists in the record store
    
    Returns:
        The caller's stored user record
        
    Raises:
        AuthenticationError / TokenRevokedError (401) if any check fails
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")
    
    token = credentials.credentials
    
    # 1. Decode and validate JWT
    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Could not validate credentials")
    
    user_id = payload.get("user_id")
    if not user_id:
        raise AuthenticationError("Invalid token payload")
    
    # 2. Check if this specific token has been revoked
    if await is_token_revoked(token):
        raise TokenRevokedError()
    
    # 3. Real-time check against the store
    user = await store.get_user(user_id)
    if user is None:
        raise AuthenticationError("User not found")
    
    return user


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    if credentials is None:
        raise AuthenticationError("Authentication required")
    return credentials.credentials
