"""
Configuration settings for the Business Finance Backend.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings."""
    
    # Application
    app_name: str = "Business Finance Backend"
    api_version: str = "v1"
    debug: bool = True
    log_level: str = "INFO"
    
    # Record store: "memory" keeps everything in-process, "sql" uses database_url
    storage_backend: str = "memory"
    
    # Database Configuration (only used by the sql store)
    database_url: str = "sqlite+aiosqlite:///./finance.db"
    db_echo: bool = False
    db_pool_size: int = 20
    db_max_overflow: int = 10
    
    # Security Configuration (JWT)
    secret_key: str = "your-secret-key-change-this-in-production-min-32-chars"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    
    # Redis Configuration (token revocation)
    redis_url: str = "redis://localhost:6379/0"
    redis_decode_responses: bool = True
    
    # Uploads
    upload_dir: str = "uploads"
    max_upload_bytes: int = 5 * 1024 * 1024
    allowed_upload_types: List[str] = [
        "application/pdf",
        "image/jpeg",
        "image/png",
        "image/jpg",
    ]
    
    # Workflow
    seed_demo_users: bool = True
    accountant_notification_policy: str = "first"  # "first" or "all"
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
