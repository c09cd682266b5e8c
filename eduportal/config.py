from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    api_base_url: str = "http://127.0.0.1:8000/api/"
    debug: bool = False
    log_level: str = "INFO"
    # Large uploads share the same client, so the default is generous
    request_timeout_seconds: float = 300.0
    upload_timeout_seconds: float = 600.0

    # List views
    search_debounce_ms: int = 500
    default_page_size: int = 10

    # Local equivalent of the browser's localStorage["authTokens"]: {"access", "refresh", "user_id"}
    auth_tokens_path: str = ".auth_tokens.json"
    # Token refresh budget per METHOD:url before stored tokens are dropped
    max_refresh_attempts: int = 3
    refresh_retry_reset_seconds: int = 60

    @property
    def api_root(self) -> str:
        """API base URL with exactly one trailing slash."""
        return self.api_base_url.rstrip("/") + "/"

    @property
    def media_base_url(self) -> str:
        """Site root for media files: API base URL without its /api/ suffix."""
        base = self.api_base_url.rstrip("/")
        if base.endswith("/api"):
            base = base[: -len("/api")]
        return base

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0


settings = Settings()
