"""
Configuration module for the Shop Advisor recommendation core.

Loads environment variables and validates required settings.
"""
import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Google Gemini API
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    # Upper bound for a single generate_content call before it counts as failed
    GEMINI_TIMEOUT_SECONDS: float = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "15"))

    # Response cache (remote-derived responses only)
    RESPONSE_CACHE_TTL_SECONDS: float = float(os.getenv("RESPONSE_CACHE_TTL_SECONDS", "300"))
    RESPONSE_CACHE_MAX_ENTRIES: int = int(os.getenv("RESPONSE_CACHE_MAX_ENTRIES", "20"))

    # Product catalog; empty means the JSON file shipped with the package
    CATALOG_PATH: str = os.getenv("CATALOG_PATH", "")

    # Supabase-backed key-value store (history and favorites)
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_PUBLISHABLE_KEY: str = os.getenv("SUPABASE_PUBLISHABLE_KEY", "")
    KV_STORE_TABLE: str = os.getenv("KV_STORE_TABLE", "kv_store")

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required settings are configured.

        Raises:
            ValueError: If any required setting is missing.
        """
        required_settings = {
            "GOOGLE_API_KEY": cls.GOOGLE_API_KEY,
        }

        missing = [key for key, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"

    @classmethod
    def supabase_configured(cls) -> bool:
        """Whether a persistent key-value store can be created."""
        return bool(cls.SUPABASE_URL and cls.SUPABASE_PUBLISHABLE_KEY)


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured).
# Without a Gemini key every query degrades to the keyword fallback, so
# development only warns.
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        if settings.is_development():
            print(f"Warning: {e}")
            print("   Recommendations will use the offline keyword fallback until GOOGLE_API_KEY is set.")
        else:
            raise
