"""
Core Configuration - Environment variables and app settings
Uses Pydantic BaseSettings for type-safe configuration management
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables

    Every field has a default, so the engine runs without a .env file
    """

    # Application settings
    app_name: str = Field(default="JetSweep Leave-By API", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment: development, staging, production")
    debug: bool = Field(default=False, description="Debug mode")

    # Recent searches persistence
    recent_searches_enabled: bool = Field(
        default=True,
        description="Record each computed timeline in the recent-search history"
    )
    recent_searches_file: Path = Field(
        default=Path(".jetsweep") / "recent_searches.json",
        description="JSON file holding the recent-search history"
    )
    recent_searches_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum number of recent searches kept"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string"
    )

    # CORS Settings (for frontend integration)
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173", "http://localhost:8000"],
        description="Allowed CORS origins"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value"""
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="JETSWEEP_",
        case_sensitive=False,
        extra="ignore"
    )

    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment == "production"

    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment == "development"

    def get_log_config(self) -> dict:
        """Get logging configuration"""
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": self.log_format
                },
                "json": {
                    "()": "pythonjsonlogger.json.JsonFormatter",
                    "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": self.log_level,
                    "formatter": "json" if self.is_production() else "default",
                    "stream": "ext://sys.stdout"
                }
            },
            "root": {
                "level": self.log_level,
                "handlers": ["console"]
            }
        }


# Singleton settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton)

    Returns:
        Settings instance

    Raises:
        ValueError: If environment variables hold invalid values
    """
    global _settings

    if _settings is None:
        try:
            _settings = Settings()
        except Exception as e:
            # Provide helpful error message
            raise ValueError(
                f"Failed to load settings. Please check your .env file. Error: {str(e)}"
            )

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing)

    Returns:
        New Settings instance
    """
    global _settings
    _settings = None
    return get_settings()


if __name__ == "__main__":
    # Test configuration loading
    print("🧪 Testing Configuration\n")
    print("=" * 60)

    try:
        settings = get_settings()

        print("\n📋 Application Settings:")
        print(f"  App Name: {settings.app_name}")
        print(f"  Version: {settings.app_version}")
        print(f"  Environment: {settings.environment}")
        print(f"  Debug: {settings.debug}")

        print("\n🕘 Recent Searches:")
        print(f"  Enabled: {settings.recent_searches_enabled}")
        print(f"  File: {settings.recent_searches_file}")
        print(f"  Limit: {settings.recent_searches_limit}")

        print("\n📝 Logging:")
        print(f"  Level: {settings.log_level}")

        print("\n✅ Configuration loaded successfully!")

    except ValueError as e:
        print(f"\n❌ Configuration Error: {str(e)}")
        print("\nCheck the JETSWEEP_* variables in your .env file")
