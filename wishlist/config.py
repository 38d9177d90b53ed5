"""
Configuration management for the Wishlist Resolver.
Handles environment variables and application settings.
"""
import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""
    
    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console
    
    # Page fetching
    FETCH_TIMEOUT: float = float(os.getenv("FETCH_TIMEOUT", "10"))
    MAX_RESPONSE_SIZE: int = int(os.getenv("MAX_RESPONSE_SIZE", str(2 * 1024 * 1024)))
    
    # Rate limiting (per client IP, fixed window)
    RATE_LIMIT_WINDOW: int = int(os.getenv("RATE_LIMIT_WINDOW", "600"))
    RATE_LIMIT_MAX: int = int(os.getenv("RATE_LIMIT_MAX", "30"))
    
    # Image search fallback
    IMAGE_SEARCH_TIMEOUT: float = float(os.getenv("IMAGE_SEARCH_TIMEOUT", "8"))
    
    # CORS
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")
    
    @classmethod
    def get_cors_origins(cls) -> List[str]:
        """Return configured CORS origins as a list."""
        return [origin.strip() for origin in cls.CORS_ORIGINS.split(",") if origin.strip()]


config = Config()
