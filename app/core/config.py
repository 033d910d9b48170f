from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Supabase Auth
    SUPABASE_URL: str
    SUPABASE_JWT_SECRET: str

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Billing
    BILL_DUE_DAYS_BEFORE_MONTH_END: int = 5  # due date = first of next month minus this
    CURRENCY_SYMBOL: str = "₱"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
