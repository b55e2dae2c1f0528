from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Appointment Booking API"
    API_V1_STR: str = "/api"

    # Server
    PORT: int = 8000
    ENVIRONMENT: str = "development"

    # Database
    DATABASE_URL: str = "sqlite:///./bookings.db"

    # Security
    SECRET_KEY: str = "dev_secret_key"
    SESSION_COOKIE: str = "booking_session"
    SESSION_MAX_AGE: int = 60 * 60 * 8

    # Bootstrap account (created on startup if both are set)
    SUPERADMIN_NAME: str = ""
    SUPERADMIN_PASSWORD: str = ""

    # Listing
    PAGE_SIZE: int = 9

    # Business data (time slots, cutoff, notifications)
    COMPANY_CONFIG_PATH: str = "data/company_config.json"

    # Logging
    LOG_LEVEL: str = "INFO"
    ERROR_LOG_FILE: str = "logs/errors.log"

    # Notifications
    SMTP_SERVER: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
