from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    WHATSAPP_ACCOUNT_SID: str | None = None
    WHATSAPP_AUTH_TOKEN: str | None = None
    WHATSAPP_PHONE_NUMBER: str | None = None
    TWILIO_API_BASE_URL: str = "https://api.twilio.com/2010-04-01"
    PUBLIC_WEBHOOK_URL: str | None = None

    DEFAULT_TENANT_ID: str = "tenant-demo"
    BUSINESS_TIMEZONE: str = "Asia/Kolkata"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    AUTO_REPLY_ENABLED: bool = False

    CONVERSATION_STORE: str = "memory"
    CONVERSATION_DATA_DIR: str = "./data/conversations"
    CONVERSATION_IDLE_TIMEOUT_MINUTES: int = 60
    CONFLICT_WINDOW_MINUTES: int = 30
    REMINDER_LEAD_MINUTES: int = 60

    SALON_SEED_FILE: str | None = None


settings = Settings()
