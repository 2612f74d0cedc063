from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):

    APP_NAME: str = "video-upload-api"
    LOG_LEVEL: str = "INFO"
    PORT: int = 8091
    PUBLIC_BASE_URL: Optional[str] = None

    ASSETS_ROOT: str = "./assets"
    DATABASE_URL: str = "sqlite:///./videos.db"

    MINIO_ENDPOINT: str = Field(...)
    MINIO_ACCESS_KEY: str = Field(...)
    MINIO_SECRET_KEY: str = Field(...)
    MINIO_BUCKET: str = "videos"
    MINIO_REGION: Optional[str] = None
    CDN_DISTRIBUTION: Optional[str] = None

    JWT_SECRET: str = Field(...)
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 60

    MAX_VIDEO_UPLOAD_BYTES: int = 1 << 30
    MAX_THUMBNAIL_UPLOAD_BYTES: int = 10 << 20

    FFMPEG_BINARY: str = "ffmpeg"
    FFPROBE_BINARY: str = "ffprobe"
    # None means external tools may run without a bound
    TOOL_TIMEOUT_SECONDS: Optional[float] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def public_base_url(self) -> str:
        if self.PUBLIC_BASE_URL:
            return self.PUBLIC_BASE_URL.rstrip("/")
        return f"http://localhost:{self.PORT}"


@lru_cache
def get_settings() -> BaseConfig:
    return BaseConfig()


settings = get_settings()
