# perfmon/config.py
"""
Centralized Configuration Management

Version: 1.0.0
Features:
- Support both local (.env) and Streamlit Cloud (secrets.toml)
- Singleton pattern for efficiency
- Type-safe getters with defaults
- DB_URL override for any SQLAlchemy URL (e.g. SQLite for local testing)
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any, Optional
from dataclasses import dataclass

# Initialize logger
logger = logging.getLogger(__name__)


def is_running_on_streamlit_cloud() -> bool:
    """Detect if running on Streamlit Cloud"""
    try:
        import streamlit as st
        return hasattr(st, 'secrets') and len(st.secrets) > 0
    except Exception:
        return False


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class DatabaseConfig:
    """Database configuration container"""
    host: str
    port: int
    user: str
    password: str
    database: str
    driver: str = "mysql+pymysql"
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'database': self.database,
            'driver': self.driver,
            'url': self.url,
        }

    def is_configured(self) -> bool:
        return bool(self.url) or all([self.host, self.user, self.password])


class Config:
    """
    Centralized configuration management

    Usage:
        from perfmon.config import config

        db_config = config.get_db_config()
        timeout = config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)

        if config.is_feature_enabled("SIGNUP"):
            ...
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.is_cloud = is_running_on_streamlit_cloud()
        self._load_config()
        self._initialized = True

    def _load_config(self):
        """Load configuration based on environment"""
        if self.is_cloud:
            self._load_cloud_config()
        else:
            self._load_local_config()

        self._load_app_config()
        self._log_config_status()

    def _load_cloud_config(self):
        """Load configuration from Streamlit Cloud secrets"""
        import streamlit as st

        db_secrets = st.secrets.get("DB_CONFIG", {})
        self._db_config = DatabaseConfig(
            host=db_secrets.get("host", ""),
            port=int(db_secrets.get("port", 3306)),
            user=db_secrets.get("user", ""),
            password=db_secrets.get("password", ""),
            database=db_secrets.get("database", "perfmon"),
            driver=db_secrets.get("driver", "mysql+pymysql"),
            url=db_secrets.get("url"),
        )

        # App settings in secrets are exported to env so _load_app_config sees them
        for key, value in dict(st.secrets.get("APP", {})).items():
            os.environ.setdefault(key, str(value))

        logger.info("☁️ Running in STREAMLIT CLOUD")

    def _load_local_config(self):
        """Load configuration from local .env file"""
        env_paths = [
            Path.cwd() / ".env",
            Path(__file__).parent.parent / ".env",
        ]

        for env_path in env_paths:
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded .env from: {env_path}")
                break

        self._db_config = DatabaseConfig(
            host=os.getenv("DB_HOST", ""),
            port=int(os.getenv("DB_PORT", "3306")),
            user=os.getenv("DB_USER", ""),
            password=os.getenv("DB_PASSWORD", ""),
            database=os.getenv("DB_NAME", "perfmon"),
            driver=os.getenv("DB_DRIVER", "mysql+pymysql"),
            url=os.getenv("DB_URL") or None,
        )

        if not self._db_config.is_configured():
            logger.error("Missing required database configuration")
            raise ValueError("Missing required database configuration. Please check .env file.")

        logger.info("💻 Running in LOCAL environment")

    def _load_app_config(self):
        """Load application-specific settings"""
        self._app_config = {
            # Session
            "SESSION_TIMEOUT_HOURS": int(os.getenv("SESSION_TIMEOUT_HOURS", "8")),

            # Database pool
            "DB_POOL_SIZE": int(os.getenv("DB_POOL_SIZE", "5")),
            "DB_POOL_RECYCLE": int(os.getenv("DB_POOL_RECYCLE", "3600")),

            # Cache
            "CACHE_TTL_SECONDS": int(os.getenv("CACHE_TTL_SECONDS", "300")),

            # Localization
            "TIMEZONE": os.getenv("TIMEZONE", "Asia/Jakarta"),

            # Feature flags
            "ENABLE_SIGNUP": _as_bool(os.getenv("ENABLE_SIGNUP"), True),
            "ENABLE_EXPORT": _as_bool(os.getenv("ENABLE_EXPORT"), True),
            "ENABLE_DEBUG_MODE": _as_bool(os.getenv("ENABLE_DEBUG_MODE"), False),
        }

    def _log_config_status(self):
        """Log configuration status"""
        if self._db_config.url:
            logger.info("✅ Database: explicit DB_URL")
        else:
            logger.info(f"✅ Database: {self._db_config.host}/{self._db_config.database}")
        logger.info(f"✅ Sign-up: {'Enabled' if self._app_config['ENABLE_SIGNUP'] else 'Disabled'}")

    # ==================== PUBLIC GETTERS ====================

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration as dictionary"""
        return self._db_config.to_dict()

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Get application setting with default"""
        return self._app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """Check if feature is enabled"""
        key = f"ENABLE_{feature.upper()}"
        return bool(self._app_config.get(key, True))

    # ==================== PROPERTIES ====================

    @property
    def db_config(self) -> Dict[str, Any]:
        return self.get_db_config()

    @property
    def app_config(self) -> Dict[str, Any]:
        return self._app_config.copy()

    @property
    def log_level(self) -> int:
        """DEBUG when ENABLE_DEBUG_MODE is set, otherwise INFO"""
        return logging.DEBUG if self._app_config.get("ENABLE_DEBUG_MODE") else logging.INFO


# ==================== SINGLETON INSTANCE ====================

config = Config()

IS_RUNNING_ON_CLOUD = config.is_cloud
APP_CONFIG = config.app_config

__all__ = [
    'config',
    'Config',
    'DatabaseConfig',
    'IS_RUNNING_ON_CLOUD',
    'APP_CONFIG',
]
