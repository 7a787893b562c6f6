from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional
from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()


def _csv(value: Optional[str], default: List[str]) -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./catalog.db"
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 10  # 10 days

    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    payment_api_url: str = "https://api.razorpay.com/v1"
    payment_currency: str = "INR"
    payment_timeout: float = 60.0

    hashids_salt: str = "gl-orders"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:5173"])
    log_level: str = "INFO"

    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    search_max_limit: int = 50


def load_settings() -> Settings:
    """Build settings from the process environment."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./catalog.db"),
        secret_key=os.getenv("SECRET_KEY", "change-me"),
        algorithm=os.getenv("ALGORITHM", "HS256"),
        access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 10)),
        razorpay_key_id=os.getenv("RAZORPAY_KEY_ID", ""),
        razorpay_key_secret=os.getenv("RAZORPAY_KEY_SECRET", ""),
        payment_api_url=os.getenv("PAYMENT_API_URL", "https://api.razorpay.com/v1"),
        payment_currency=os.getenv("PAYMENT_CURRENCY", "INR"),
        payment_timeout=float(os.getenv("PAYMENT_TIMEOUT", 60)),
        hashids_salt=os.getenv("HASHIDS_SALT", "gl-orders"),
        cors_origins=_csv(os.getenv("CORS_ORIGINS"), ["http://localhost:5173"]),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        admin_email=os.getenv("ADMIN_EMAIL") or None,
        admin_password=os.getenv("ADMIN_PASSWORD") or None,
        search_max_limit=int(os.getenv("SEARCH_MAX_LIMIT", 50)),
    )


# cached to avoid repeated env lookups
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
