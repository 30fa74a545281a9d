from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    supabase_url: str = ""
    supabase_key: str = ""

    # Auth
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7
    password_min_length: int = 8

    # Uploads
    upload_dir: str = "uploads"
    thumbnail_max_width: int = 1200

    # Export pipeline
    html2canvas_src: str = "https://cdn.jsdelivr.net/npm/html2canvas@1.4.1/dist/html2canvas.min.js"
    capture_scale: int = 3
    capture_timeout: int = 60  # seconds
    page_load_timeout: int = 30000  # milliseconds
    viewport_width: int = 1280
    viewport_height: int = 1800
    unsupported_color_token: str = "oklch("
    fallback_color: str = "#000"

    class Config:
        # Look for .env in the repo root (two levels up from backend/resume_builder/)
        # In production, env vars are injected directly; .env is optional
        _env_path = os.path.join(os.path.dirname(__file__), "..", "..", ".env")
        env_file = _env_path if os.path.exists(_env_path) else None
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()
