"""
Configuration module for the farm finance backend.

Loads environment variables and validates required settings.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Supabase Configuration
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    # Publishable key (replacement for the legacy anon key), respects RLS
    SUPABASE_PUBLISHABLE_KEY: str = os.getenv("SUPABASE_PUBLISHABLE_KEY", "")

    # JWT Verification - Supabase JWT Signing Keys (ES256 with JWKS)
    # Format: https://<project-id>.supabase.co/auth/v1/.well-known/jwks.json
    @property
    def SUPABASE_JWKS_URL(self) -> str:
        """Get the JWKS URL for JWT verification."""
        if not self.SUPABASE_URL:
            return ""
        return f"{self.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"

    @property
    def SUPABASE_JWT_ISSUER(self) -> str:
        """Issuer claim Supabase puts in user access tokens."""
        return f"{self.SUPABASE_URL.rstrip('/')}/auth/v1"

    # Record store
    FARM_FINANCE_TABLE: str = os.getenv("FARM_FINANCE_TABLE", "farm_finances")
    DEFAULT_YIELD_UNIT: str = os.getenv("DEFAULT_YIELD_UNIT", "kg")
    DEFAULT_PRICE_UNIT: str = os.getenv("DEFAULT_PRICE_UNIT", "per kg")

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Settings ("*" keeps the endpoint open to any web origin)
    CORS_ALLOWED_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "*").split(",")
        if origin.strip()
    ]
    CORS_ALLOWED_HEADERS: List[str] = [
        "authorization",
        "x-client-info",
        "apikey",
        "content-type",
        "x-supabase-client-platform",
        "x-supabase-client-platform-version",
        "x-supabase-client-runtime",
        "x-supabase-client-runtime-version",
    ]

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required settings are configured.

        Raises:
            ValueError: If any required setting is missing.
        """
        required_settings = {
            "SUPABASE_URL": cls.SUPABASE_URL,
            "SUPABASE_PUBLISHABLE_KEY": cls.SUPABASE_PUBLISHABLE_KEY,
        }

        missing = [key for key, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"


# Create a singleton instance
settings = Settings()

# Validate settings on module import (fail fast if misconfigured).
# Tests and introspection set VALIDATE_CONFIG=false to skip this.
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            print(f"Warning: {e}")
            print("   The app may not work correctly until you configure your .env file.")
        else:
            raise
