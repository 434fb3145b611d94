from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import List, Optional

load_dotenv()

class Settings(BaseSettings):
    DATABASE_URL: str
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"

    # Redis settings
    REDIS_URL: str
    ACTIVITY_CACHE_TTL_SECONDS: int = 60

    # Comma separated list of emails that are always admins
    ADMIN_EMAILS: str = ""

    # Web push (VAPID)
    VAPID_PUBLIC_KEY: Optional[str] = None
    VAPID_PRIVATE_KEY: Optional[str] = None
    VAPID_CLAIMS_EMAIL: str = "mailto:contato@caminho-companion.com"

    # Donations
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_PUBLISHABLE_KEY: Optional[str] = None
    DONATION_CURRENCY: str = "brl"
    FRONTEND_BASE_URL: str = "http://localhost:5173"

    # Verification uploads (Google Cloud Storage)
    OBJECT_STORAGE_BUCKET: Optional[str] = None
    PRIVATE_OBJECT_DIR: str = "private"

    PROJECT_NAME: str = "Caminho Companion API"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Activity matching and coordination for Camino pilgrims"
    APP_NAME: str = "Caminho Companion"

    @property
    def admin_emails(self) -> List[str]:
        return [e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()]

    @property
    def push_enabled(self) -> bool:
        return bool(self.VAPID_PUBLIC_KEY and self.VAPID_PRIVATE_KEY)

    class Config:
        env_file = ".env"


settings = Settings()
