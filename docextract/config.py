from pydantic_settings import BaseSettings, SettingsConfigDict

VERSION = "1.1.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    fetch_timeout_seconds: float = 30.0
    max_redirects: int = 5
    body_preview_chars: int = 200

    pdf_ready_timeout_seconds: float = 5.0

    build: str = VERSION


settings = Settings()
