from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    openai_api_key: str = ""  # empty = AI service not configured
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = ""
    openai_timeout_seconds: float = 60.0
    max_upload_size_bytes: int = 10 * 1024 * 1024  # 10MB
    s3_bucket: str = ""  # empty = inline data URL fallback
    s3_region: str = "us-east-1"
    s3_public_base_url: str = ""
    image_fetch_timeout_seconds: float = 30.0
    report_store: str = "memory"  # "memory" | "database"
    database_url: str = "sqlite+aiosqlite:///./data/reports.sqlite3"
    cors_origins: list[str] = ["http://localhost:8000", "http://127.0.0.1:8000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
