from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "image-resize-cache"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    origin_bucket: str = Field(validation_alias=AliasChoices("origin_bucket", "bucket_name"))
    cache_bucket: str
    aws_region: str = "us-east-1"
    s3_endpoint_url: str | None = None

    max_dimension: int = 4000
    cache_control: str = "public, max-age=31536000"
    jpeg_quality: int = 80


@lru_cache
def get_settings() -> Settings:
    return Settings()
