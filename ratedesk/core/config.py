from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR, DB_FILENAME, HTTP_TIMEOUT_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Rate Desk"
    debug: bool = True
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "ratedesk.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Rate providers, tried in this order for latest()
    xhost_base_url: str = "https://api.exchangerate.host"
    frankfurter_base_url: str = "https://api.frankfurter.app"
    erapi_base_url: str = "https://open.er-api.com/v6"
    http_timeout_seconds: float = 10.0

    # Snapshot older than this is ignored by expiry-checked reads
    rates_cache_max_age_hours: float = 24.0

    # Optional push registration endpoint; unset disables the hook
    push_registration_url: Optional[str] = None

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        # Ensure persistence directory exists
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        if self.rates_cache_max_age_hours <= 0:
            raise ValueError("rates_cache_max_age_hours must be positive")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
