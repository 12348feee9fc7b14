"""Configuration management using Pydantic Settings."""

import os
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LLM provider
    llm_provider: Literal["openai", "bedrock"] = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    bedrock_model_id: str = "us.amazon.nova-pro-v1:0"
    aws_region: str = "us-east-1"
    aws_profile: Optional[str] = None
    llm_temperature: float = 0.7
    llm_max_tokens: int = 6000

    # Timeouts (seconds)
    generation_timeout_seconds: float = 60.0
    pricing_timeout_seconds: float = 10.0

    # Trip shape
    max_trip_days: int = 30
    default_days_before_event: int = 2

    # App Configuration
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    class Config:
        """Pydantic configuration."""
        env_file = os.path.join(os.path.dirname(__file__), "..", "..", ".env")
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
