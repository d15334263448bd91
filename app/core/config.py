from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Billsplit Backend"
    DATABASE_URL: str = "sqlite+aiosqlite:///./billsplit.db"
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # percentages of a split may drift this far from 100
    PERCENTAGE_TOLERANCE: Decimal = Decimal("0.001")

    # set by the upstream auth layer
    MEMBER_HEADER: str = "X-Member-Id"


settings = Settings()
