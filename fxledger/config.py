"""Application configuration via environment variables."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Hosted deployments hand us a bare DATABASE_URL
    database_url: str = Field(
        default="sqlite:///./fxledger.db",
        validation_alias=AliasChoices("FXL_DATABASE_URL", "DATABASE_URL"),
    )
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Upstream exchange rates (KRW per unit)
    rates_url: str = "https://api.manana.kr/exchange/rate/KRW/USD,JPY,EUR.json"
    rates_timeout: float = 10.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    model_config = {"env_prefix": "FXL_", "env_file": ".env", "populate_by_name": True}

settings = Settings()
