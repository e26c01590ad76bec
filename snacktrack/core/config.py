"""Application configuration."""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str

    # Facebook Messenger
    fb_page_token: str = ""
    fb_verify_token: str = ""
    fb_graph_api_url: str = "https://graph.facebook.com"
    fb_graph_api_version: str = "v18.0"

    # Restaurant
    restaurant_name: str = "SnackTrack"
    currency_symbol: str = "₱"

    # Data files (defaults ship with the package)
    menu_file: Optional[str] = None
    vocabulary_file: Optional[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
