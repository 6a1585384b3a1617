"""
Utilities to centralize configuration handling across the WashDesk services.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class AppConfig:
    """Simple container for application level settings."""

    app_name: str
    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str
    supabase_jwt_secret: str
    # Direct Postgres connection to the Supabase database (policy management)
    db_host: str
    db_port: int
    db_user: str
    db_password: str
    db_name: str
    db_sslmode: str
    # Storage
    storage_default_bucket: str
    storage_buckets: list[str] = field(default_factory=list)
    # Stripe
    stripe_secret_key: str = ""
    stripe_sandbox_mode: bool = False
    # App settings
    secret_key: str = ""
    log_level: str = "INFO"
    default_locale: str = "en"
    debug_mode: bool = False
    flask_debug: bool = False
    cors_allowed_origins: list[str] = field(default_factory=list)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """
        Get boolean config value from AppConfig.

        Args:
            key: Configuration key (e.g., 'stripe_sandbox_mode')
            default: Default value if not set (defaults to False)

        Returns:
            bool: Configuration value
        """
        value = getattr(self, key, default)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    def get_string(self, key: str, default: str = "") -> str:
        value = getattr(self, key, default)
        return str(value) if value is not None else default

    @property
    def stripe_configured(self) -> bool:
        return bool(self.stripe_secret_key)

    @property
    def sqlalchemy_uri(self) -> str:
        """
        Build a SQLAlchemy PostgreSQL URI using psycopg2 as the driver.

        Points at the Postgres instance behind the Supabase project and includes
        the SSL mode Supabase requires for remote connections.
        """
        ssl_arg = f"?sslmode={self.db_sslmode}" if self.db_sslmode else ""
        return (
            f"postgresql+psycopg2://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}{ssl_arg}"
        )


def _read_env(name: str, default: str | None = None) -> str:
    """
    Internal helper to fetch environment variables with support for defaults.
    """
    value = os.getenv(name)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing required environment variable '{name}'")
        value = default
    return value


def read_bool(name: str, default: str = "false") -> bool:
    value = _read_env(name, default)
    return value.strip().lower() in {"1", "true", "yes", "on"}


def read_list(name: str, default: str = "") -> list[str]:
    value = _read_env(name, default)
    return [item.strip() for item in value.split(",") if item.strip()]


def validate_required_env_vars(skip_in_debug: bool = False) -> None:
    """
    Validate that all required environment variables are set.

    Fails fast during startup rather than on the first request that needs
    Supabase.

    Args:
        skip_in_debug: If True, skip validation when DEBUG_MODE=true

    Raises:
        RuntimeError: If any required variable is missing or has an invalid value
    """
    if skip_in_debug and read_bool("DEBUG_MODE", "false"):
        return

    errors = []

    secret_key = os.getenv("SECRET_KEY", "")
    if not secret_key or secret_key in ["change-me-please", "your-secret-key-here"]:
        errors.append(
            "SECRET_KEY must be configured with a secure random value. "
            'Generate with: python3 -c "import secrets; print(secrets.token_urlsafe(32))"'
        )

    for name in (
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPABASE_SERVICE_ROLE_KEY",
        "SUPABASE_JWT_SECRET",
    ):
        if not os.getenv(name, ""):
            errors.append(f"{name} must be configured")

    supabase_url = os.getenv("SUPABASE_URL", "")
    if supabase_url and not supabase_url.startswith(("http://", "https://")):
        errors.append(f"SUPABASE_URL must be an http(s) URL, got: {supabase_url}")

    if errors:
        error_msg = "\nConfiguration Errors - Missing or invalid environment variables:\n"
        for error in errors:
            error_msg += f"  - {error}\n"
        error_msg += "\nPlease check your .env file and ensure all required variables are set."
        raise RuntimeError(error_msg)


def load_config(app_name: str) -> AppConfig:
    """
    Produce an AppConfig instance populated from environment variables.

    Each service passes its desired `app_name` to keep logs easy to
    differentiate while still reusing the same config loader.
    """
    return AppConfig(
        app_name=app_name,
        # Supabase
        supabase_url=_read_env("SUPABASE_URL", "").rstrip("/"),
        supabase_anon_key=_read_env("SUPABASE_ANON_KEY", ""),
        supabase_service_role_key=_read_env("SUPABASE_SERVICE_ROLE_KEY", ""),
        supabase_jwt_secret=_read_env("SUPABASE_JWT_SECRET", ""),
        # Postgres behind Supabase
        db_host=_read_env("POSTGRES_HOST", "localhost"),
        db_port=int(_read_env("POSTGRES_PORT", "5432")),
        db_user=_read_env("POSTGRES_USER", "postgres"),
        db_password=_read_env("POSTGRES_PASSWORD", "postgres"),
        db_name=_read_env("POSTGRES_DB", "postgres"),
        db_sslmode=_read_env("POSTGRES_SSLMODE", "require"),
        # Storage
        storage_default_bucket=_read_env("STORAGE_DEFAULT_BUCKET", "images"),
        storage_buckets=read_list("STORAGE_BUCKETS", "images,branches,services"),
        # Stripe
        stripe_secret_key=_read_env("STRIPE_SECRET_KEY", ""),
        stripe_sandbox_mode=read_bool("STRIPE_SANDBOX_MODE", "false"),
        # App settings
        secret_key=_read_env("SECRET_KEY", "change-me-please"),
        log_level=_read_env("LOG_LEVEL", "INFO"),
        default_locale=_read_env("DEFAULT_LOCALE", "en"),
        debug_mode=read_bool("DEBUG_MODE", "false"),
        flask_debug=read_bool("FLASK_DEBUG", "false"),
        cors_allowed_origins=read_list("CORS_ALLOWED_ORIGINS", ""),
    )


_active_config: AppConfig | None = None


def set_active_config(config: AppConfig) -> None:
    """Register the configuration the running process was started with."""
    global _active_config
    _active_config = config


def get_active_config() -> AppConfig:
    """
    Return the configuration registered by the app factory or script.

    Falls back to loading from the environment for code paths that run
    outside of ``create_app`` (operator scripts, the i18n CLI).
    """
    global _active_config
    if _active_config is None:
        _active_config = load_config("washdesk")
    return _active_config
