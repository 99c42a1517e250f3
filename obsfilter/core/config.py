"""
Configuration Management

Centralized configuration using Pydantic Settings.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application
    app_name: str = "obsfilter"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", validation_alias="ENV")
    debug: bool = False
    log_level: str = "INFO"

    # Database
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: Optional[str] = None
    neo4j_password: Optional[str] = None
    neo4j_database: Optional[str] = None
    neo4j_pool_size: int = Field(default=50, ge=1)
    neo4j_acquisition_timeout: float = Field(default=30.0, gt=0)

    # Streaming
    stream_chunk_size: int = Field(default=8192, ge=1, description="Bytes per streamed chunk")


# Global settings instance
settings = Settings()
