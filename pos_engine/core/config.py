# pos_engine/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Payments
    KNOWN_PAYMENT_TYPES: list[str] = ["CASH", "CARD", "UPI", "DEBIT_CARD", "CREDIT_CARD"]
    PAYMENT_TYPE_LABELS: dict[str, str] = {
        "CASH": "Cash",
        "CARD": "Card",
        "UPI": "UPI",
        "DEBIT_CARD": "Debit Card",
        "CREDIT_CARD": "Credit Card",
    }
    DEFAULT_PAYMENT_TYPE: str = "CASH"

    # Reporting
    DEFAULT_TOP_PRODUCTS: int = 5
    DASHBOARD_DAYS: int = 7
    RECENT_ACTIVITY_LIMIT: int = 10

    # Alerts
    LOW_STOCK_THRESHOLD: int = 10
    INACTIVE_CASHIER_DAYS: int = 7

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="POS_",
        extra="ignore",
    )


settings = Settings()
