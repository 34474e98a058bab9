from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pipeline configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    dev_mode: bool = False

    upload_endpoint: str = "https://nostr.build/api/v2/upload/files"
    max_file_size_bytes: int = 1024 * 1024 * 1024

    dimension_probe: str = "pillow"
    editor_max_width: int = 780
    editor_max_height: int = 240

    thumbnail_engine: str = "blurhash"
    blurhash_components_x: int = 4
    blurhash_components_y: int = 3

    uploaded_hash_timeout_seconds: int = 30
