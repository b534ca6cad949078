from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Store
    STORE_URL: str

    # HTTP
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = ""
    CORS_ORIGINS: str = ""
    STATIC_DIR: Optional[str] = None

    # Admin reads
    ADMIN_TOKEN: Optional[str] = None

    # Rate limiting
    RATE_LIMIT_MAX: int = 60
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # Mail
    MAIL_FROM: Optional[str] = None
    ADMIN_EMAIL: Optional[str] = None
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_STARTTLS: bool = True
    SMTP_TIMEOUT: float = 10.0

    # Application
    PROJECT_NAME: str = "Ticket Reservation Service"
    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins(self) -> List[str]:
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        return origins or ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
