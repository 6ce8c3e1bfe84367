from .identity import SigningIdentity, load_private_key, load_platform_certificate
from .settings import WechatPaySettings, get_settings, configure_logging

__all__ = [
    "SigningIdentity",
    "load_private_key",
    "load_platform_certificate",
    "WechatPaySettings",
    "get_settings",
    "configure_logging",
]
