"""
CarCheck Service Configuration

Environment-based configuration for the evaluation service.
"""

import os
from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class ValidationLevel(str, Enum):
    """Validation strictness levels"""
    STRICT = "strict"
    NORMAL = "normal"
    LENIENT = "lenient"


class CarCheckConfig:
    """CarCheck service configuration"""

    # Service info
    SERVICE_NAME = "CarCheck Evaluation Service"
    SERVICE_VERSION = "1.0.0"

    # Text-generation provider (OpenAI compatible)
    LLM_API_URL = os.getenv("LLM_API_URL", "https://api.openai.com/v1")
    LLM_API_KEY = os.getenv("OPENAI_API_KEY", "")
    LLM_MODEL = os.getenv("LLM_MODEL", "gpt-3.5-turbo")
    LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    LLM_TIMEOUT = int(os.getenv("LLM_TIMEOUT", "60"))

    # Server config
    HOST = os.getenv("CARCHECK_HOST", "0.0.0.0")
    PORT = int(os.getenv("CARCHECK_PORT", "8000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Validation
    VALIDATION_LEVEL = ValidationLevel(os.getenv("VALIDATION_LEVEL", "normal"))

    # Browser
    BROWSER_USER_AGENT = os.getenv(
        "BROWSER_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    )
    BROWSER_VIEWPORT_WIDTH = int(os.getenv("BROWSER_VIEWPORT_WIDTH", "1920"))
    BROWSER_VIEWPORT_HEIGHT = int(os.getenv("BROWSER_VIEWPORT_HEIGHT", "1080"))
    BLOCKED_RESOURCE_TYPES = _env_list("BLOCKED_RESOURCE_TYPES", "image,stylesheet,font,media")
    PAGE_LOAD_TIMEOUT_MS = int(os.getenv("PAGE_LOAD_TIMEOUT_MS", "60000"))
    CONTENT_TIMEOUT_MS = int(os.getenv("CONTENT_TIMEOUT_MS", "10000"))
    DEBUG_SCREENSHOT_PATH = os.getenv("DEBUG_SCREENSHOT_PATH", "")

    # Listings
    ALLOWED_LISTING_HOSTS = _env_list("ALLOWED_LISTING_HOSTS", "yad2.co.il")

    # Logging
    LOG_REQUESTS = _env_bool("LOG_REQUESTS", "true")
    LOG_RESPONSES = _env_bool("LOG_RESPONSES", "false")
    EXPOSE_ERROR_DETAILS = _env_bool("EXPOSE_ERROR_DETAILS", "false")

    @classmethod
    def is_allowed_listing_url(cls, url: str, hosts: Optional[List[str]] = None) -> bool:
        """Check that a listing URL points at a supported site"""
        allowed = cls.ALLOWED_LISTING_HOSTS if hosts is None else hosts
        if not allowed:
            return True
        parsed = urlparse(url.strip())
        if parsed.scheme not in ("http", "https"):
            return False
        host = (parsed.hostname or "").lower()
        return any(host == h or host.endswith("." + h) for h in allowed)

    @classmethod
    def to_dict(cls) -> dict:
        """Export config as dictionary (the API key is never exported)"""
        return {
            "service_name": cls.SERVICE_NAME,
            "service_version": cls.SERVICE_VERSION,
            "llm": {
                "url": cls.LLM_API_URL,
                "model": cls.LLM_MODEL,
                "temperature": cls.LLM_TEMPERATURE,
                "timeout": cls.LLM_TIMEOUT,
                "api_key_configured": bool(cls.LLM_API_KEY),
            },
            "server": {
                "host": cls.HOST,
                "port": cls.PORT,
                "log_level": cls.LOG_LEVEL
            },
            "validation": {
                "level": cls.VALIDATION_LEVEL.value,
            },
            "browser": {
                "viewport": [cls.BROWSER_VIEWPORT_WIDTH, cls.BROWSER_VIEWPORT_HEIGHT],
                "blocked_resource_types": cls.BLOCKED_RESOURCE_TYPES,
                "page_load_timeout_ms": cls.PAGE_LOAD_TIMEOUT_MS,
                "content_timeout_ms": cls.CONTENT_TIMEOUT_MS,
                "debug_screenshot": bool(cls.DEBUG_SCREENSHOT_PATH),
            },
            "listings": {
                "allowed_hosts": cls.ALLOWED_LISTING_HOSTS,
            },
        }


# Example environment file (.env.local)
"""
# Text-generation provider
LLM_API_URL=https://api.openai.com/v1
OPENAI_API_KEY=sk-...
LLM_MODEL=gpt-3.5-turbo
LLM_TIMEOUT=60

# CarCheck Service
CARCHECK_HOST=0.0.0.0
CARCHECK_PORT=8000
LOG_LEVEL=INFO

# Validation (strict|normal|lenient)
VALIDATION_LEVEL=normal

# Browser
PAGE_LOAD_TIMEOUT_MS=60000
CONTENT_TIMEOUT_MS=10000
BLOCKED_RESOURCE_TYPES=image,stylesheet,font,media
DEBUG_SCREENSHOT_PATH=

# Listings
ALLOWED_LISTING_HOSTS=yad2.co.il

# Logging
LOG_REQUESTS=true
LOG_RESPONSES=false
EXPOSE_ERROR_DETAILS=false
"""
