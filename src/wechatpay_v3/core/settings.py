"""
Central configuration for wechatpay_v3.

Reads the merchant identity and client options from environment variables
(12-factor style) using pydantic-settings.

Usage:

    from wechatpay_v3.core.settings import get_settings
    from wechatpay_v3.core.identity import SigningIdentity

    settings = get_settings()
    identity = SigningIdentity.from_settings(settings)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_GATEWAY_URL = "https://api.mch.weixin.qq.com"


class IdentitySettings(BaseSettings):
    """
    Merchant identity. Key material is referenced by path; the PEM files are
    only read by ``SigningIdentity.from_settings``.
    """

    app_id: str = Field(default="", description="Application id (appid).")
    mch_id: str = Field(default="", description="Merchant id (mchid).")
    mch_key: SecretStr = Field(
        default=SecretStr(""),
        description="API v3 key, 32 bytes, used only for AES-256-GCM.",
    )
    private_key_path: Optional[str] = Field(
        default=None,
        description="Path to the merchant private key (apiclient_key.pem).",
    )
    private_key_serial: str = Field(
        default="",
        description="Serial number of the merchant API certificate.",
    )
    platform_cert_path: Optional[str] = Field(
        default=None,
        description="Path to the platform certificate PEM.",
    )

    model_config = SettingsConfigDict(env_prefix="WECHATPAY_")


class HTTPSettings(BaseSettings):
    gateway_url: str = Field(
        default=DEFAULT_GATEWAY_URL,
        description="Base URL of the payment gateway.",
    )
    http_timeout: float = Field(
        default=10.0,
        description="Per-request timeout in seconds.",
    )

    @field_validator("gateway_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(env_prefix="WECHATPAY_")


class RuntimeSettings(BaseSettings):
    log_level: str = Field(
        default="INFO",
        description="Package log level (DEBUG/INFO/WARNING/ERROR).",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        v = (v or "INFO").upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return "INFO"
        return v

    model_config = SettingsConfigDict(env_prefix="WECHATPAY_")


class WechatPaySettings(BaseSettings):
    """
    Root configuration object.

    Aggregates:
      - identity
      - http
      - runtime
    """

    identity: IdentitySettings = Field(default_factory=IdentitySettings)
    http: HTTPSettings = Field(default_factory=HTTPSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)

    model_config = SettingsConfigDict(env_prefix="WECHATPAY_")


@lru_cache(maxsize=1)
def get_settings() -> WechatPaySettings:
    """
    Cached accessor for WechatPaySettings.

    Call ``get_settings.cache_clear()`` after changing the environment.
    """
    return WechatPaySettings()


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Apply the configured log level to the package logger."""
    if level is None:
        level = get_settings().runtime.log_level
    logger = logging.getLogger("wechatpay_v3")
    logger.setLevel(level.upper())
    return logger
