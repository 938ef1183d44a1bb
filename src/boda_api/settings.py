"""Boda settings (conventional Pydantic v2 settings)."""

from __future__ import annotations

import json
import secrets
from datetime import timedelta
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar
from urllib.parse import urlparse

from pydantic import Field, PrivateAttr, SecretStr, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import DotEnvSettingsSource, EnvSettingsSource
from sqlalchemy.engine import make_url

# ---- Defaults ---------------------------------------------------------------

MODULE_DIR = Path(__file__).resolve().parent


def _detect_project_root() -> Path:
    """Pick the directory holding alembic.ini + migrations."""

    candidates = [
        MODULE_DIR.parent.parent,  # source layout: <root>/src/boda_api
        Path.cwd(),
    ]
    for candidate in candidates:
        if (candidate / "alembic.ini").exists() and (candidate / "migrations").exists():
            return candidate
    return candidates[0]


DEFAULT_PROJECT_ROOT = _detect_project_root()
DEFAULT_PUBLIC_URL = "http://localhost:8000"
DEFAULT_CORS_ORIGINS = ["http://localhost:3000"]
DEFAULT_SQLITE_PATH = Path("./data/db/boda.sqlite")
DEFAULT_ALEMBIC_INI = DEFAULT_PROJECT_ROOT / "alembic.ini"
DEFAULT_ALEMBIC_MIGRATIONS = DEFAULT_PROJECT_ROOT / "migrations"
DEFAULT_LOCALES = ["es", "en"]

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100

_LENIENT_LIST_FIELDS = {"server_cors_origins", "supported_locales"}

_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


# ---- Helpers ----------------------------------------------------------------

def _parse_duration(value: Any, *, field_name: str) -> timedelta:
    """Accept seconds (int/float/str) or '60s'/'5m'/'1h'/'14d'."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            raise ValueError(f"{field_name} must not be blank")
        try:
            seconds = float(s)
        except ValueError:
            unit = s[-1].lower()
            num = s[:-1].strip()
            if unit not in _UNIT_SECONDS or not num:
                raise ValueError(
                    f"{field_name} must be secs or 'Xs','Xm','Xh','Xd'"
                ) from None
            try:
                seconds = float(num) * _UNIT_SECONDS[unit]
            except ValueError as exc:
                raise ValueError(
                    f"{field_name} must be secs or 'Xs','Xm','Xh','Xd'"
                ) from exc
    else:
        raise TypeError(f"{field_name} must be number, duration string, or timedelta")
    if seconds <= 0:
        raise ValueError(f"{field_name} must be > 0 seconds")
    return timedelta(seconds=seconds)


def _list_from_env(value: Any, *, default: list[str]) -> list[str]:
    """JSON array or comma string; strip empties; dedupe preserving order."""
    if value in (None, "", []):
        items = list(default)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            items = list(default)
        elif s.startswith("["):
            try:
                parsed = json.loads(s)
            except json.JSONDecodeError as exc:
                raise ValueError("Expected a JSON array") from exc
            if not isinstance(parsed, list):
                raise ValueError("Expected a JSON array")
            items = [str(x).strip() for x in parsed if str(x).strip()]
        else:
            items = [seg.strip() for seg in s.split(",") if seg.strip()]
    elif isinstance(value, (list, tuple, set)):
        items = [str(x).strip() for x in value if str(x).strip()]
    else:
        raise TypeError("Expected string or list")

    seen, out = set(), []
    for x in items:
        if x not in seen:
            seen.add(x)
            out.append(x)
    return out


def _resolve_path(value: Path | str | None, *, default: Path) -> Path:
    """Expand, absolutize, and resolve a configurable path."""

    if value in (None, ""):
        candidate = default
    elif isinstance(value, Path):
        candidate = value
    else:
        candidate = Path(str(value).strip())
    return candidate.expanduser().resolve()


def _http_url(value: Any, *, env_name: str) -> str:
    s = str(value).strip()
    p = urlparse(s)
    if p.scheme not in {"http", "https"} or not p.netloc:
        raise ValueError(f"{env_name} must be an http(s) URL")
    return s.rstrip("/")


def _optional_secret(value: Any) -> SecretStr | None:
    if value in (None, ""):
        return None
    raw = value.get_secret_value() if isinstance(value, SecretStr) else str(value).strip()
    return SecretStr(raw) if raw else None


# ---- Settings ---------------------------------------------------------------

class _LenientEnvSettingsSource(EnvSettingsSource):
    """Environment source that preserves raw strings for list-like fields."""

    lenient_fields: ClassVar[set[str]] = _LENIENT_LIST_FIELDS

    def prepare_field_value(
        self,
        field_name: str,
        field,
        value: Any,
        value_is_complex: bool,
    ) -> Any:
        if field_name in self.lenient_fields and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)


class _LenientDotEnvSettingsSource(DotEnvSettingsSource):
    """Dotenv source that preserves raw strings for list-like fields."""

    lenient_fields: ClassVar[set[str]] = _LENIENT_LIST_FIELDS

    def prepare_field_value(
        self,
        field_name: str,
        field,
        value: Any,
        value_is_complex: bool,
    ) -> Any:
        if field_name in self.lenient_fields and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)


class Settings(BaseSettings):
    """FastAPI settings loaded from BODA_* environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BODA_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    _jwt_secret_generated: bool = PrivateAttr(default=False)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        env_source = _LenientEnvSettingsSource(
            settings_cls,
            case_sensitive=getattr(env_settings, "case_sensitive", None),
            env_prefix=getattr(env_settings, "env_prefix", None),
            env_nested_delimiter=getattr(env_settings, "env_nested_delimiter", None),
            env_ignore_empty=getattr(env_settings, "env_ignore_empty", None),
            env_parse_none_str=getattr(env_settings, "env_parse_none_str", None),
            env_parse_enums=getattr(env_settings, "env_parse_enums", None),
        )
        dotenv_source = _LenientDotEnvSettingsSource(
            settings_cls,
            env_file=getattr(dotenv_settings, "env_file", None),
            env_file_encoding=getattr(dotenv_settings, "env_file_encoding", None),
            case_sensitive=getattr(dotenv_settings, "case_sensitive", None),
            env_prefix=getattr(dotenv_settings, "env_prefix", None),
            env_nested_delimiter=getattr(dotenv_settings, "env_nested_delimiter", None),
            env_ignore_empty=getattr(dotenv_settings, "env_ignore_empty", None),
            env_parse_none_str=getattr(dotenv_settings, "env_parse_none_str", None),
            env_parse_enums=getattr(dotenv_settings, "env_parse_enums", None),
        )
        return (init_settings, env_source, dotenv_source, file_secret_settings)

    # Core
    app_name: str = "Boda API"
    app_version: str = "0.1.0"
    api_docs_enabled: bool = False
    docs_url: str = "/docs"
    redoc_url: str = "/redoc"
    openapi_url: str = "/openapi.json"
    logging_level: str = "INFO"

    # Server
    server_public_url: str = DEFAULT_PUBLIC_URL
    frontend_url: str | None = None
    server_cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    # Paths
    alembic_ini_path: Path = Field(default=DEFAULT_ALEMBIC_INI)
    alembic_migrations_dir: Path = Field(default=DEFAULT_ALEMBIC_MIGRATIONS)

    # Database
    database_url: str | None = None
    database_migrations_url: str | None = Field(
        default=None,
        description="Direct (non-pooled) connection used by Alembic; defaults to database_url.",
    )
    database_echo: bool = False
    database_pool_size: int = Field(5, ge=1)       # ignored by sqlite
    database_max_overflow: int = Field(10, ge=0)
    database_pool_timeout: int = Field(30, gt=0)
    database_sqlite_busy_timeout_ms: int = Field(30_000, ge=0)

    # JWT
    jwt_secret: SecretStr | None = Field(
        default=None,
        description=(
            "Secret used to sign session cookies and bearer tokens; set to a long random string "
            "(e.g. python -c 'import secrets; print(secrets.token_urlsafe(64))')"
        ),
    )
    jwt_algorithm: str = "HS256"
    jwt_access_ttl: timedelta = Field(default=timedelta(hours=12))

    # Sessions
    session_cookie_name: str = "boda_session"
    session_csrf_cookie_name: str = "boda_csrf"
    session_cookie_domain: str | None = None
    session_cookie_path: str = "/"

    # Auth policy
    registration_enabled: bool = True
    failed_login_lock_threshold: int = Field(5, ge=1)
    failed_login_lock_duration: timedelta = Field(default=timedelta(minutes=5))

    # Localization
    default_locale: str = "es"
    supported_locales: list[str] = Field(default_factory=lambda: list(DEFAULT_LOCALES))

    # Payments
    default_currency: str = "ARS"
    contribution_min_amount: Decimal = Field(default=Decimal("1.00"), gt=0)
    mercadopago_access_token: SecretStr | None = None
    mercadopago_public_key: str | None = None
    mercadopago_webhook_secret: SecretStr | None = None
    payment_request_timeout: timedelta = Field(default=timedelta(seconds=15))
    secret_encryption_key: SecretStr | None = None

    # ---- Validators ----

    @field_validator("server_public_url", mode="before")
    @classmethod
    def _v_public_url(cls, v: Any) -> str:
        return _http_url(v, env_name="BODA_SERVER_PUBLIC_URL")

    @field_validator("frontend_url", mode="before")
    @classmethod
    def _v_frontend_url(cls, v: Any) -> str | None:
        if v in (None, ""):
            return None
        return _http_url(v, env_name="BODA_FRONTEND_URL")

    @field_validator("logging_level", mode="before")
    @classmethod
    def _v_log_level(cls, v: Any) -> str:
        s = ("" if v is None else str(v).strip()).upper()
        return s or "INFO"

    @field_validator("server_cors_origins", mode="before")
    @classmethod
    def _v_cors(cls, v: Any) -> list[str]:
        return _list_from_env(v, default=DEFAULT_CORS_ORIGINS)

    @field_validator("supported_locales", mode="before")
    @classmethod
    def _v_locales(cls, v: Any) -> list[str]:
        return [item.lower() for item in _list_from_env(v, default=DEFAULT_LOCALES)]

    @field_validator("default_locale", mode="before")
    @classmethod
    def _v_default_locale(cls, v: Any) -> str:
        s = ("" if v is None else str(v).strip()).lower()
        return s or "es"

    @field_validator("default_currency", mode="before")
    @classmethod
    def _v_currency(cls, v: Any) -> str:
        s = ("" if v is None else str(v).strip()).upper()
        if len(s) != 3 or not s.isalpha():
            raise ValueError("BODA_DEFAULT_CURRENCY must be a 3-letter ISO 4217 code")
        return s

    @field_validator("jwt_secret", mode="before")
    @classmethod
    def _v_jwt_secret(cls, v: Any) -> SecretStr | None:
        if v is None:
            return None  # handled in finalize
        raw = v.get_secret_value() if isinstance(v, SecretStr) else str(v or "").strip()
        if raw and len(raw) < 32:
            raise ValueError(
                "BODA_JWT_SECRET must be at least 32 characters. Use a long random string."
            )
        return SecretStr(raw) if raw else None

    @field_validator(
        "mercadopago_access_token",
        "mercadopago_webhook_secret",
        "secret_encryption_key",
        mode="before",
    )
    @classmethod
    def _v_optional_secrets(cls, v: Any) -> SecretStr | None:
        return _optional_secret(v)

    @field_validator("mercadopago_public_key", "database_migrations_url", mode="before")
    @classmethod
    def _v_optional_strings(cls, v: Any) -> str | None:
        if v in (None, ""):
            return None
        return str(v).strip() or None

    @field_validator(
        "jwt_access_ttl",
        "failed_login_lock_duration",
        "payment_request_timeout",
        mode="before",
    )
    @classmethod
    def _v_durations(cls, v: Any, info: ValidationInfo) -> timedelta:
        return _parse_duration(v, field_name=info.field_name)

    # ---- Finalize ----

    @model_validator(mode="after")
    def _finalize(self) -> Settings:
        self.alembic_ini_path = _resolve_path(self.alembic_ini_path, default=DEFAULT_ALEMBIC_INI)
        self.alembic_migrations_dir = _resolve_path(
            self.alembic_migrations_dir, default=DEFAULT_ALEMBIC_MIGRATIONS
        )

        if not self.frontend_url:
            self.frontend_url = self.server_public_url

        if not self.database_url:
            sqlite = _resolve_path(DEFAULT_SQLITE_PATH, default=DEFAULT_SQLITE_PATH)
            self.database_url = f"sqlite+aiosqlite:///{sqlite.as_posix()}"

        backend = make_url(self.database_url).get_backend_name()
        if backend not in {"sqlite", "postgresql"}:
            raise ValueError("BODA_DATABASE_URL must point at SQLite or PostgreSQL")

        if self.default_locale not in self.supported_locales:
            raise ValueError("BODA_DEFAULT_LOCALE must be one of BODA_SUPPORTED_LOCALES")

        if self.jwt_secret is None or not self.jwt_secret.get_secret_value().strip():
            self.jwt_secret = SecretStr(secrets.token_urlsafe(64))
            self._jwt_secret_generated = True

        return self

    # ---- Convenience ----

    @property
    def jwt_secret_value(self) -> str:
        assert self.jwt_secret is not None
        return self.jwt_secret.get_secret_value()

    @property
    def jwt_secret_generated(self) -> bool:
        return self._jwt_secret_generated

    @property
    def encryption_key_value(self) -> str:
        if self.secret_encryption_key is not None:
            return self.secret_encryption_key.get_secret_value()
        return self.jwt_secret_value

    @property
    def mercadopago_access_token_value(self) -> str | None:
        if self.mercadopago_access_token is None:
            return None
        return self.mercadopago_access_token.get_secret_value()

    @property
    def mercadopago_webhook_secret_value(self) -> str | None:
        if self.mercadopago_webhook_secret is None:
            return None
        return self.mercadopago_webhook_secret.get_secret_value()


@lru_cache(maxsize=1)
def _build_settings() -> Settings:
    return Settings()


def get_settings() -> Settings:
    return _build_settings()


def reload_settings() -> Settings:
    _build_settings.cache_clear()
    return _build_settings()


__all__ = [
    "DEFAULT_CORS_ORIGINS",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_PUBLIC_URL",
    "MAX_PAGE_SIZE",
    "Settings",
    "get_settings",
    "reload_settings",
]
