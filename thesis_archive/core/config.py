from pydantic_settings import BaseSettings
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Thesis Archive"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./thesis_archive.db"
    DB_ECHO: bool = False

    # Connection pool (PostgreSQL outside development; SQLite never pools)
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # seconds

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours
    BCRYPT_ROUNDS: int = 12  # 4 for dev (fast), 12 for prod (secure)

    # Bootstrap admin account (created by `thesis-archive seed` / `create-admin`)
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:5173,http://localhost:8080,http://127.0.0.1:5173,http://127.0.0.1:8080"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 120
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    LOGIN_RATE_LIMIT: str = "5/minute"

    # ==========================================
    # File Upload / Storage
    # ==========================================
    MAX_UPLOAD_SIZE: int = 52428800  # 50MB
    ALLOWED_PDF_CONTENT_TYPES_STR: str = "application/pdf"
    STORAGE_MODE: str = "local"  # "local" or "s3"
    UPLOAD_PATH: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"

    # S3 / MinIO
    USE_MINIO: bool = False
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "us-east-1"
    S3_BUCKET_NAME: str = "thesis-archive"
    S3_KEY_PREFIX: str = "theses"
    MINIO_ENDPOINT: str = "localhost:9000"
    S3_PUBLIC_URL: str = ""  # e.g. CDN base URL; empty means derive from bucket

    @property
    def ALLOWED_PDF_CONTENT_TYPES(self) -> List[str]:
        return [t.strip() for t in self.ALLOWED_PDF_CONTENT_TYPES_STR.split(',') if t.strip()]

    # ==========================================
    # Institution defaults (used when the settings row is first created)
    # ==========================================
    DEFAULT_SCHOOL_NAME: str = "Tayabas Western Academy"
    DEFAULT_ABOUT_CONTENT: str = (
        "Access a comprehensive collection of thesis and research papers from our "
        "academic community. Explore groundbreaking work across departments and programs."
    )

    # ==========================================
    # Pagination
    # ==========================================
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._base_dir = Path(__file__).resolve().parent.parent.parent
        upload_dir = Path(self.UPLOAD_PATH)
        if not upload_dir.is_absolute():
            upload_dir = self._base_dir / upload_dir
        self._upload_dir = upload_dir

        if self.STORAGE_MODE == "local":
            self._upload_dir.mkdir(exist_ok=True, parents=True)
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    @property
    def BASE_DIR(self) -> Path:
        return self._base_dir

    @property
    def UPLOAD_DIR(self) -> Path:
        return self._upload_dir

    def is_dev_mode(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT == "development" or self.DEBUG


# Create settings instance
settings = Settings()
