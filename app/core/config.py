import os
from typing import List, Optional
from pydantic import BaseModel
from dotenv import load_dotenv
from functools import lru_cache

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "").strip()
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    PROJECT_NAME: str = "YOI API"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ALLOW_ORIGINS: List[str] = _env_list("CORS_ALLOW_ORIGINS") or [
        "http://localhost:8081",
        "http://127.0.0.1:8081",
    ]

    SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL")
    # Prefer service role key when available to bypass RLS for server-side writes
    SUPABASE_KEY: Optional[str] = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_KEY")
    SUPABASE_JWT_SECRET: Optional[str] = os.getenv("SUPABASE_JWT_SECRET")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "authenticated")
    ALLOW_USER_ID_HEADER: bool = _env_bool("ALLOW_USER_ID_HEADER", True)

    PLAN_STORE: str = os.getenv("PLAN_STORE", "memory")
    PLAN_GENERATOR: str = os.getenv("PLAN_GENERATOR", "static")

    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    MODEL_NAME: str = os.getenv("MEALPLAN_MODEL", "gpt-4o-mini")
    TEMPERATURE: float = float(os.getenv("MEALPLAN_TEMPERATURE", "0.7"))
    LLM_RETRY_BACKOFF_SECONDS: float = float(os.getenv("MEALPLAN_RETRY_BACKOFF", "1.0"))


@lru_cache
def get_settings():
    return Settings()
