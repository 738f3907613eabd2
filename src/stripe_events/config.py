"""Library configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    log_level: str = "warning"
    json_logs: bool = False

    # Webhooks
    webhook_secret: str = ""
    webhook_tolerance_seconds: int = 300
    expected_api_version: str | None = None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "STRIPE_EVENTS_",
    }


settings = Settings()
