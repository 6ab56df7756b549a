from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "LedgerDeck"
    debug: bool = False

    # Which ledger adapter backs the collection
    store_backend: Literal["memory", "sql", "http"] = "sql"

    database_url: str = "sqlite+aiosqlite:///./ledgerdeck.db"

    store_url: str = "http://localhost:8545/ledger"
    store_timeout_seconds: float = 30.0

    # Well-known keys inside the store
    index_key: str = "card_keys"
    record_key_prefix: str = "card_"

    # How long transaction notifications stay visible
    success_notification_seconds: float = 2.0
    error_notification_seconds: float = 3.0


settings = Settings()
