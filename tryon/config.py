import os
from pydantic import BaseModel


class Settings(BaseModel):
    api_key: str = os.getenv("API_KEY", "change-me")

    # Third-party 3D avatar generation service
    avatar_api_base: str = os.getenv("AVATAR_API_BASE", "https://api.rodin.ai/v1")
    avatar_api_key: str | None = os.getenv("AVATAR_API_KEY")
    avatar_api_timeout: float = float(os.getenv("AVATAR_API_TIMEOUT", "120"))

    storage_dir: str = os.getenv("STORAGE_DIR", os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "storage")))

    # Clothing catalog (JSON array of items), loaded once at startup
    catalog_path: str = os.getenv("CATALOG_PATH", os.path.join(os.path.dirname(__file__), "data", "catalog.json"))

    cors_origin: str = os.getenv("CORS_ORIGIN", "http://localhost:3000")

    # Largest accepted photo upload in bytes
    max_upload_bytes: int = int(os.getenv("MAX_FILE_SIZE", "10485760"))

    # JWT
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    jwt_audience: str | None = os.getenv("JWT_AUDIENCE")
    jwt_issuer: str | None = os.getenv("JWT_ISSUER")
    jwt_ttl_seconds: int = int(os.getenv("JWT_TTL_SECONDS", "3600"))

    # Rate limit (token bucket)
    rate_limit_per_min: int = int(os.getenv("RATE_LIMIT_PER_MIN", "60"))
    rate_limit_burst: int = int(os.getenv("RATE_LIMIT_BURST", "30"))


settings = Settings()
