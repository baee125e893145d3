"""Policy settings for the media asset subsystem.

Infrastructure names (bucket, tables, endpoint) are read by the AWS
adapters; this module holds the limits and tuning knobs.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.constants import (
    ALLOWED_MIME_TYPES,
    DEFAULT_BASE_FOLDER,
    DEFAULT_LOCK_LEASE_SECONDS,
    DEFAULT_LOCK_POLL_INTERVAL,
    DEFAULT_LOCK_WAIT_SECONDS,
    DEFAULT_REMOTE_CONNECT_TIMEOUT,
    DEFAULT_REMOTE_MAX_ATTEMPTS,
    DEFAULT_REMOTE_READ_TIMEOUT,
    MAX_ASSETS_PER_PARENT,
    MAX_FILE_SIZE,
)


class MediaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MEDIA_", extra="ignore")

    max_assets_per_parent: int = Field(MAX_ASSETS_PER_PARENT, ge=1)
    max_file_size: int = Field(MAX_FILE_SIZE, ge=1)
    allowed_content_types: frozenset[str] = ALLOWED_MIME_TYPES
    base_folder: str = DEFAULT_BASE_FOLDER
    public_base_url: str | None = None

    lock_lease_seconds: int = Field(DEFAULT_LOCK_LEASE_SECONDS, ge=1)
    lock_wait_seconds: float = Field(DEFAULT_LOCK_WAIT_SECONDS, ge=0)
    lock_poll_interval: float = Field(DEFAULT_LOCK_POLL_INTERVAL, gt=0)

    remote_max_attempts: int = Field(DEFAULT_REMOTE_MAX_ATTEMPTS, ge=1)
    remote_connect_timeout: int = Field(DEFAULT_REMOTE_CONNECT_TIMEOUT, ge=1)
    remote_read_timeout: int = Field(DEFAULT_REMOTE_READ_TIMEOUT, ge=1)

    @property
    def remote_call_budget(self) -> int:
        """Worst-case seconds a single media store call may take across retries."""
        return self.remote_max_attempts * (self.remote_connect_timeout + self.remote_read_timeout)

    @model_validator(mode="after")
    def lease_outlasts_remote_calls(self) -> "MediaSettings":
        # The upload lock is held across a media store call and is never renewed.
        if self.lock_lease_seconds <= self.remote_call_budget:
            raise ValueError(
                f"lock_lease_seconds must exceed the remote call budget "
                f"of {self.remote_call_budget}s"
            )
        return self


@lru_cache
def get_settings() -> MediaSettings:
    return MediaSettings()
