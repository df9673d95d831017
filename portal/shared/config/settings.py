# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_SETTINGS = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)

_INSECURE_SECRETS = ("dev", "development", "test", "jwt_secret_key", "")


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///portal.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SETTINGS


class SecurityConfig(BaseSettings):
    # Tokens
    jwt_secret: str = Field("jwt_secret_key", alias="JWT_SECRET")
    jwt_ttl_seconds: int = Field(3600, ge=1, alias="JWT_TTL_SECONDS")

    # Password hashing
    password_hash_method: str = Field("scrypt", alias="PASSWORD_HASH_METHOD")
    hash_workers: int = Field(4, ge=1, alias="HASH_WORKERS")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        ["https://localhost:3000"], alias="ALLOWED_ORIGINS"
    )

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(100, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(15 * 60.0, gt=0, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(True, alias="ENABLE_HSTS")

    model_config = _SETTINGS

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class ServerConfig(BaseSettings):
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(5000, ge=1, le=65535, alias="PORT")
    ssl_cert_file: Path = Field(Path("certs/localhost.pem"), alias="SSL_CERT_FILE")
    ssl_key_file: Path = Field(Path("certs/localhost-key.pem"), alias="SSL_KEY_FILE")
    # Number of reverse proxies in front of the app whose X-Forwarded-* headers are trusted.
    trusted_proxy_hops: int = Field(0, ge=0, alias="TRUSTED_PROXY_HOPS")

    model_config = _SETTINGS

    def ssl_context(self) -> tuple[str, str] | None:
        if self.ssl_cert_file.is_file() and self.ssl_key_file.is_file():
            return str(self.ssl_cert_file), str(self.ssl_key_file)
        return None


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _server_config_factory() -> ServerConfig:
    return ServerConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: Path | None = Field(None, alias="LOG_FILE")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    server: ServerConfig = Field(default_factory=_server_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        validate_assignment=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.security.jwt_secret in _INSECURE_SECRETS:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure JWT_SECRET detected in production!\n"
                "   JWT_SECRET must be a strong random value in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if not self.security.enable_rate_limit:
            warnings.append("⚠️  Rate limiting is DISABLED")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if self.server.ssl_context() is None:
            warnings.append("⚠️  TLS certificate/key not found, serving plain HTTP")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = ["AppConfig", "DatabaseConfig", "SecurityConfig", "ServerConfig", "load_config"]
