from __future__ import annotations
import logging
import os
from typing import Optional
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://resume-analyzer-backend.onrender.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"


class Settings(BaseModel):
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def _read_secrets() -> dict[str, str]:
    try:
        import streamlit as st  # type: ignore
        if hasattr(st, "secrets"):
            return dict(st.secrets)
    except Exception:
        # No secrets.toml outside a configured Streamlit deployment.
        pass
    return {}


def _get_secret(name: str, secrets: Optional[dict] = None) -> Optional[str]:
    if secrets is None:
        secrets = _read_secrets()
    return secrets.get(name) or os.getenv(name)


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid RESUME_ANALYZER_TIMEOUT {raw!r}, using {DEFAULT_TIMEOUT}s")
        return DEFAULT_TIMEOUT
    if value <= 0:
        logger.warning(f"Non-positive RESUME_ANALYZER_TIMEOUT {raw!r}, using {DEFAULT_TIMEOUT}s")
        return DEFAULT_TIMEOUT
    return value


def load_settings(secrets: Optional[dict] = None) -> Settings:
    """Resolve settings: Streamlit secrets first, then environment (and .env), then defaults."""
    if secrets is None:
        secrets = _read_secrets()
    api_url = (_get_secret("RESUME_ANALYZER_API_URL", secrets) or DEFAULT_API_URL).strip().rstrip("/")
    level = (_get_secret("LOG_LEVEL", secrets) or DEFAULT_LOG_LEVEL).strip().upper()
    return Settings(
        api_url=api_url or DEFAULT_API_URL,
        timeout=_parse_timeout(_get_secret("RESUME_ANALYZER_TIMEOUT", secrets)),
        log_level=level,
    )


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
