"""Process settings loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    db_url: str = os.getenv("DB_URL", "sqlite:///./commitmail.sqlite3")
    timezone: str = os.getenv("TIMEZONE", "America/Los_Angeles")
    mail_recipient: str = os.getenv("MAIL_RECIPIENT", "")
    mail_sender_domain: str = os.getenv("MAIL_SENDER_DOMAIN", "commitmail.example.com")
    mail_api_url: str = os.getenv("MAIL_API_URL", "https://api.brevo.com/v3/smtp/email")
    mail_api_key: str = os.getenv("MAIL_API_KEY", "")
    github_api_url: str = os.getenv("GITHUB_API_URL", "https://api.github.com")
    github_token: str = os.getenv("GITHUB_TOKEN", "")
    github_webhook_secret: str = os.getenv("GITHUB_WEBHOOK_SECRET", "")
    styles_path: str = os.getenv(
        "STYLES_PATH", os.path.join(_PACKAGE_DIR, "assets", "styles.json")
    )
    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
