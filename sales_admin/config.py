# sales_admin/config.py
"""
Centralized Configuration Management

Version: 1.0.0
Features:
- Support both local (.env) and Streamlit Cloud (secrets.toml)
- Singleton pattern for efficiency
- Type-safe getters with defaults
- Data backend selection (Supabase REST or direct SQL)
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any, Optional
from dataclasses import dataclass

# Initialize logger
logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ('supabase', 'sql')


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or invalid"""


def is_running_on_streamlit_cloud() -> bool:
    """Detect if running on Streamlit Cloud"""
    try:
        import streamlit as st
        return hasattr(st, 'secrets') and len(st.secrets) > 0
    except Exception:
        return False


@dataclass
class SupabaseConfig:
    """Hosted project configuration container"""
    url: Optional[str] = None
    key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'key': self.key
        }

    def is_configured(self) -> bool:
        return bool(self.url and self.key)


@dataclass
class DatabaseConfig:
    """Direct SQL connection container"""
    url: Optional[str] = None
    pool_size: int = 5
    pool_recycle: int = 3600

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'pool_size': self.pool_size,
            'pool_recycle': self.pool_recycle
        }

    def is_configured(self) -> bool:
        return bool(self.url)


class Config:
    """
    Centralized configuration management

    Usage:
        from sales_admin.config import config

        # Get hosted project config
        supabase_config = config.get_supabase_config()

        # Which gateway backs the screens
        backend = config.data_backend

        # Get app settings
        timeout = config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)
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

        supabase_secrets = st.secrets.get("SUPABASE", {})
        self._supabase_config = SupabaseConfig(
            url=supabase_secrets.get("URL"),
            key=supabase_secrets.get("KEY")
        )

        db_secrets = st.secrets.get("DB_CONFIG", {})
        self._db_config = DatabaseConfig(
            url=db_secrets.get("url"),
            pool_size=int(db_secrets.get("pool_size", 5)),
            pool_recycle=int(db_secrets.get("pool_recycle", 3600))
        )

        self._data_backend = str(st.secrets.get("DATA_BACKEND", "supabase")).lower()

        logger.info("☁️ Running in STREAMLIT CLOUD")

    def _load_local_config(self):
        """Load configuration from local .env file"""
        # Find and load .env file
        env_paths = [
            Path.cwd() / ".env",
            Path(__file__).parent.parent / ".env",
        ]

        for env_path in env_paths:
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded .env from: {env_path}")
                break

        self._supabase_config = SupabaseConfig(
            url=os.getenv("SUPABASE_URL"),
            key=os.getenv("SUPABASE_KEY", os.getenv("SUPABASE_ANON_KEY"))
        )

        self._db_config = DatabaseConfig(
            url=os.getenv("DATABASE_URL"),
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "3600"))
        )

        self._data_backend = os.getenv("DATA_BACKEND", "supabase").lower()

        logger.info("💻 Running in LOCAL environment")

    def _load_app_config(self):
        """Load application-specific settings"""
        self._app_config = {
            # Session
            "SESSION_TIMEOUT_HOURS": int(os.getenv("SESSION_TIMEOUT_HOURS", "8")),

            # Cache
            "CACHE_TTL_SECONDS": int(os.getenv("CACHE_TTL_SECONDS", "300")),

            # Concurrent lookups per read
            "QUERY_WORKERS": int(os.getenv("QUERY_WORKERS", "4")),

            # Display
            "CURRENCY_LABEL": os.getenv("CURRENCY_LABEL", "TZS"),

            # Feature flags
            "ENABLE_CSV_EXPORT": os.getenv("ENABLE_CSV_EXPORT", "true").lower() == "true",
        }

    def _log_config_status(self):
        """Log configuration status"""
        logger.info(f"✅ Data backend: {self._data_backend}")
        logger.info(f"✅ Supabase: {'Configured' if self._supabase_config.is_configured() else 'Not configured'}")
        logger.info(f"✅ Direct SQL: {'Configured' if self._db_config.is_configured() else 'Not configured'}")

    # ==================== PUBLIC GETTERS ====================

    @property
    def data_backend(self) -> str:
        """Gateway backend name, validated on access"""
        if self._data_backend not in SUPPORTED_BACKENDS:
            raise ConfigurationError(
                f"Unsupported DATA_BACKEND '{self._data_backend}'. "
                f"Expected one of: {', '.join(SUPPORTED_BACKENDS)}"
            )
        return self._data_backend

    def get_supabase_config(self) -> Dict[str, Any]:
        """Get hosted project configuration as dictionary"""
        if not self._supabase_config.is_configured():
            logger.error("Missing required Supabase configuration")
            raise ConfigurationError("Missing SUPABASE_URL / SUPABASE_KEY. Please check .env file.")
        return self._supabase_config.to_dict()

    def get_db_config(self) -> Dict[str, Any]:
        """Get direct SQL configuration as dictionary"""
        if not self._db_config.is_configured():
            logger.error("Missing required database configuration")
            raise ConfigurationError("Missing DATABASE_URL. Please check .env file.")
        return self._db_config.to_dict()

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Get application setting with default"""
        return self._app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """Check if feature is enabled"""
        key = f"ENABLE_{feature.upper()}"
        return self._app_config.get(key, True)


# ==================== SINGLETON INSTANCE ====================

config = Config()

__all__ = [
    'config',
    'Config',
    'ConfigurationError',
    'SUPPORTED_BACKENDS',
]
