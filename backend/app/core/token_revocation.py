"""
Token Revocation using Redis.

Implements token blacklisting so that a logged-out JWT stops working
before its natural expiry.
"""

import logging
from redis.exceptions import RedisError
import backend.app.core.redis_client as redis_client_module
from backend.app.core.config import settings

logger = logging.getLogger("finance.auth")

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


async def revoke_token(token: str, user_id: int) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.
    
    Args:
        token: The JWT token string to revoke
        user_id: User ID who owns the token
        
    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        # Tokens auto-expire anyway, so the blacklist entry only needs to outlive them
        ttl_seconds = settings.access_token_expire_minutes * 60
        
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        await redis_client_module.redis_client.set(key, str(user_id), ex=ttl_seconds)
        return True
    except RedisError:
        logger.warning("Could not revoke token for user %s", user_id, exc_info=True)
        return False


async def is_token_revoked(token: str) -> bool:
    """
    Check if a token has been revoked.
    
    Fails open when Redis is unreachable.
    
    Args:
        token: JWT token string to check
        
    Returns:
        True if token is revoked, False otherwise
    """
    try:
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        exists = await redis_client_module.redis_client.exists(key)
        return exists > 0
    except RedisError:
        logger.warning("Token revocation check unavailable, allowing request", exc_info=True)
        return False
