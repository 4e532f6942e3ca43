# worldforge/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Supabase configuration
    SUPABASE_URL: str = "http://localhost:54321"
    # Public key, user-scoped access
    SUPABASE_ANON_KEY: str = ""
    # Administrative key, used by health checks and seeding
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_JWT_SECRET: str

    # Database
    DATABASE_URL: str = "sqlite:///./worldforge.db"

    # API configuration
    API_PREFIX: str = "/api"
    APP_BASE_URL: str = "http://localhost:3000"

    # Secrets
    CSRF_SECRET: str = "change-me-csrf-secret"
    CSRF_TOKEN_TTL_SECONDS: int = 3600
    SEED_ADMIN_TOKEN: str = ""

    # Storage
    MAPS_BUCKET: str = "maps"

    # Invites
    INVITE_TTL_DAYS: int = 7

    # Uploads
    MAX_IMAGE_UPLOAD_BYTES: int = 10 * 1024 * 1024
    UPLOADS_PER_MINUTE: int = 20

    # Health
    HEALTH_SLOW_THRESHOLD_MS: int = 1000

    LOG_LEVEL: str = "INFO"


@lru_cache()
def get_settings():
    return Settings()
