from functools import lru_cache
from typing import List

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the Fitness Future backend."""

    #----------------------------------------------------------
    # External API settings
    #----------------------------------------------------------
    gemini_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="API key for authenticating with the Gemini image generation service.",
    )

    image_model_id: str = Field(
        default="gemini-2.0-flash-exp-image-generation",
        description="Gemini model id used to edit the uploaded photo.",
    )

    #----------------------------------------------------------
    # Request handling
    #----------------------------------------------------------
    default_mime_type: str = Field(
        default="image/jpeg",
        description="MIME type assumed when the upload does not declare one.",
    )

    allowed_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser.",
    )

    model_config = SettingsConfigDict(
        env_prefix="FITFUTURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key.get_secret_value().strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
