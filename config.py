"""
Runtime configuration, read from the environment (and a local .env file).
"""
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


def _int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str] = None
    supabase_secret_key: Optional[str] = None
    assessment_store: str = "memory"  # "memory" | "supabase"
    email_gate_question: int = 5  # 1-based; 0 disables the gate
    save_max_retries: int = 3
    save_backoff_seconds: float = 0.5
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    @property
    def uses_supabase(self) -> bool:
        return self.assessment_store == "supabase"


def load_settings() -> Settings:
    supabase_url = os.getenv("SUPABASE_URL")
    store = os.getenv("ASSESSMENT_STORE") or ("supabase" if supabase_url else "memory")
    if store not in ("memory", "supabase"):
        raise ValueError(f"ASSESSMENT_STORE must be 'memory' or 'supabase', got {store!r}")

    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        supabase_url=supabase_url.rstrip("/") if supabase_url else None,
        supabase_secret_key=os.getenv("SUPABASE_SECRET_KEY"),
        assessment_store=store,
        email_gate_question=_int("EMAIL_GATE_QUESTION", 5),
        save_max_retries=_int("SAVE_MAX_RETRIES", 3),
        save_backoff_seconds=_float("SAVE_BACKOFF_SECONDS", 0.5),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
