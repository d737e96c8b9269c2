"""
Application configuration loaded from environment variables.

All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with validation.
    
    All settings are loaded from environment variables with the same name.
    Use .env file for local development.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    
    # Letter content
    organization_name: str = Field(
        default="RASMAL GROUP",
        description="Organization shown in the header of the synthesized template"
    )
    city: str = Field(
        default="Casablanca",
        description="City printed on the 'Fait à ...' date line"
    )
    copyright_year: int = Field(
        default=2025,
        ge=2000,
        description="Year printed in the template footer"
    )
    font_size: float = Field(
        default=11,
        gt=4,
        le=24,
        description="Base font size (points) of the letter body"
    )
    
    # Letterhead uploads
    max_letterhead_bytes: int = Field(
        default=5 * 1024 * 1024,
        gt=0,
        description="Maximum accepted size of an uploaded letterhead PDF"
    )
    
    # Output
    output_dir: Path = Field(
        default=Path("./output"),
        description="Directory where the CLI writes generated orders"
    )
    
    # Server
    debug: bool = Field(
        default=False,
        description="Enable debug mode with detailed error messages"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.
    
    Settings are loaded once at startup and cached for subsequent calls.
    This ensures consistent configuration across the application lifecycle.
    """
    return Settings()
