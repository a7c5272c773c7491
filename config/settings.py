from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaymentAccountConfig(BaseModel):
    """A payment account the node can trade with, loaded at startup."""

    id: str
    payment_method_id: str
    trade_currency_codes: list[str]
    country_code: str | None = None
    bank_id: str | None = None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # API password: no default, MUST be set in .env
    API_PASSWORD: str

    # Node identity: fingerprint of the local key ring's signature pubkey
    NODE_FINGERPRINT: str = "local-node"

    # Version tag appended to generated offer ids
    APP_VERSION: str = "1.7.0"

    # JSON list, e.g. [{"id": "acct-1", "payment_method_id": "SEPA", "trade_currency_codes": ["EUR"]}]
    # Without accounts the node can list offers but not create them.
    PAYMENT_ACCOUNTS: list[PaymentAccountConfig] = []

    # App
    APP_NAME: str = "Offer Service"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev


settings = Settings()
