from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Water Level Logger"
    display_timezone: str = "Asia/Kolkata"

    # HTTP
    host: str = "0.0.0.0"
    port: int = 5000
    cors_allowed_origins: str = "*"  # comma-separated

    # Logging
    log_level: str = "INFO"
    log_file: str = "water_logger.log"

    # Storage: "sqlite" for local use, "postgres" for a shared server
    db_backend: str = Field(default="sqlite")
    sqlite_path: str = Field(default="water_levels.db")

    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "water_logger"

    db_pool_size: int = 5
    db_timeout_seconds: float = 10.0

    # Upstream sensor backend
    upstream_url: str = "https://esp32-water-backend.onrender.com/api/water-level"
    upstream_timeout_seconds: float = 15.0

    # Polling (ticks land on multiples of the interval, i.e. top of the hour)
    poll_enabled: bool = True
    poll_interval_seconds: float = 3600

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


settings = Settings()
