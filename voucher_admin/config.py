from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Platform API
    API_URL: str = "http://localhost:3000/api/v1"
    API_KEY: Optional[str] = None
    API_TIMEOUT_SECONDS: Optional[float] = None  # None = no timeout

    # Public app (redemption links)
    APP_URL: str = "http://localhost:3001"

    # QR rendering
    QR_SERVICE_URL: str = "https://api.qrserver.com/v1/create-qr-code/"
    QR_IMAGE_SIZE: str = "200x200"

    # Voucher Settings
    VOUCHER_CODE_LENGTH: int = 8
    VOUCHER_CODE_ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    VOUCHER_EXPIRY_DAYS: int = 60

    # Lists
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    LIST_CACHE_TTL_SECONDS: int = 60

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: list = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
