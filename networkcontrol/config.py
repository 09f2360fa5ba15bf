# networkcontrol/config.py
"""
Network Control Configuration Module - Environment-based configuration
Covers the factomd endpoints, roster cache policy and the HTTP surface.
"""

import os
from typing import Optional
from functools import lru_cache

# Load .env file if present
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass  # python-dotenv not installed, rely on environment variables


class Settings:
    """Application settings loaded from environment variables"""

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None
    LOG_MAX_SIZE_MB: int = int(os.getenv("LOG_MAX_SIZE_MB", "50"))

    # ==========================================================================
    # HTTP Surface
    # ==========================================================================
    HOST: str = os.getenv("NETWORKCONTROL_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("NETWORKCONTROL_PORT", "8091"))

    # ==========================================================================
    # factomd Node
    # ==========================================================================
    FACTOMD_URL: str = os.getenv("FACTOMD_URL", "https://api.factomd.net")
    FACTOMD_API_PATH: str = os.getenv("FACTOMD_API_PATH", "/v2")
    FACTOMD_DEBUG_PATH: str = os.getenv("FACTOMD_DEBUG_PATH", "/debug")
    FACTOMD_TIMEOUT: float = float(os.getenv("FACTOMD_TIMEOUT", "30"))

    # ==========================================================================
    # Governance Policy
    # ==========================================================================
    ROSTER_CACHE_TTL: float = float(os.getenv("ROSTER_CACHE_TTL", "60"))
    TIMESTAMP_WINDOW_SECONDS: int = int(os.getenv("TIMESTAMP_WINDOW_SECONDS", "3600"))

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    def get_log_config(self) -> dict:
        """Get logging configuration for logging.config.dictConfig"""
        handlers = {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "filters": ["request_id"],
                "stream": "ext://sys.stdout"
            }
        }
        if self.LOG_FILE:
            handlers["file"] = {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "default",
                "filters": ["request_id"],
                "filename": self.LOG_FILE,
                "maxBytes": self.LOG_MAX_SIZE_MB * 1024 * 1024,
                "backupCount": 5
            }

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "request_id": {"()": "networkcontrol.api.middleware.RequestIdFilter"}
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s [%(levelname)s] [%(request_id)s] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S"
                }
            },
            "handlers": handlers,
            "root": {
                "level": self.LOG_LEVEL,
                "handlers": list(handlers)
            }
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
