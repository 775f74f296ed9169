from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from soundblocks.protocol.constants import MIN_BLOCK_LENGTH


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="SOUNDBLOCKS_CLIENT_", extra="ignore"
    )

    relay_url: str = "ws://127.0.0.1:3000/ws"

    # Admission check: both sides of a new block must exceed this.
    min_block_length: float = MIN_BLOCK_LENGTH

    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_client_settings() -> ClientSettings:
    return ClientSettings()
