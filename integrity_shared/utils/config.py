"""
Integrity Shared Config
Environment configuration management using Pydantic
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    # Application
    app_env: str = Field(default="development", description="Environment (dev/prod)")
    debug: bool = Field(default=True, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=True, description="Emit JSON formatted logs")
    service_name: str = Field(default="integrity-service", description="Service identifier")
    service_port: int = Field(default=8000, description="Service port")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
