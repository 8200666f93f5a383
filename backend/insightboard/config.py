"""Configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # CORS Settings
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Comma-separated list of allowed CORS origins"
    )

    # Database Configuration
    database: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )
    mongodb_database: str = Field(default="test", description="MongoDB database name")
    collection_name: str = Field(default="insights", description="Insight collection")
    server_selection_timeout_ms: int = Field(
        default=5000,
        description="How long the driver waits for a reachable server"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Observability
    logfire_token: str = Field(
        default="",
        description="Logfire observability token"
    )

    # Query Limits
    pagination_default_limit: int = Field(
        default=10,
        description="Default page size for search"
    )
    pagination_max_limit: int = Field(
        default=0,
        description="Maximum page size for search, 0 for no cap"
    )
    categories_limit: int = Field(
        default=10,
        description="Maximum records returned by the category filter"
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, v):
        """Parse comma-separated origins into a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("database")
    @classmethod
    def validate_database(cls, v: str) -> str:
        """Validate that the connection string looks like a MongoDB URI."""
        if not v.strip():
            raise ValueError("Database connection string cannot be empty")
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("Database connection string must be a mongodb:// or mongodb+srv:// URI")
        return v

    @field_validator("pagination_default_limit", "categories_limit")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Limits must be at least 1")
        return v

    @field_validator("pagination_max_limit")
    @classmethod
    def validate_max_limit(cls, v: int) -> int:
        if v < 0:
            raise ValueError("pagination_max_limit cannot be negative")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    return Settings()
