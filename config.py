"""Configuration for the metrics textfile writer"""
from pathlib import Path
from typing import Literal, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Environment-based settings, validated by Pydantic"""

    # Output
    output_file: Optional[Path] = Field(default=None, description="Write to this file instead of stdout")
    sort_labels: bool = Field(default=False, description="Emit labels sorted by name instead of in given order")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="WARNING", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Also write logs to this file")
    environment: str = Field(default="production", description="Log rendering mode (development for console output)")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        """Accept lower-case level names such as LOG_LEVEL=debug"""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @validator('environment', pre=True)
    def normalize_environment(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @validator('output_file', 'log_file')
    def ensure_parent_directories(cls, v):
        """Ensure parent directories exist for file paths"""
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    def is_development(self) -> bool:
        """Check if console log rendering is selected"""
        return self.environment == "development"
