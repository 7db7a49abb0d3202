"""
gradestats/settings.py

Application settings read from the environment (prefix GRADESTATS_) or a .env file.
The calculation engine has no settings of its own; this only covers the API process.
"""

import os
from typing import List, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class Settings(BaseSettings):
    # app
    APP_TITLE: str = "Grade Statistics API"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # comma separated, "*" allows every origin
    CORS_ORIGINS: str = "*"

    # directory holding grades.json and classes.json
    DATA_DIR: str = os.path.join(PROJECT_ROOT, "data", "demo")

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="GRADESTATS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @property
    def cors_origin_list(self) -> List[str]:
        return [s.strip() for s in self.CORS_ORIGINS.split(",") if s.strip()]


settings = Settings()
