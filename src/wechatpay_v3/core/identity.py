"""
Merchant signing identity.

A ``SigningIdentity`` is built once at startup and shared read-only by every
signer, verifier and decryptor. It is frozen; certificate rotation produces a
new identity via ``with_platform_certificate``.

KEY MANAGEMENT ASSUMPTIONS:
- Key material arrives already provisioned (PEM bytes or file paths)
- This module never writes keys anywhere
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from wechatpay_v3.protocol.errors import ConfigurationError

if TYPE_CHECKING:
    from wechatpay_v3.core.settings import WechatPaySettings


AES_KEY_BYTES = 32

PlatformKey = Union[x509.Certificate, RSAPublicKey]


def load_private_key(pem: bytes, password: Optional[bytes] = None) -> RSAPrivateKey:
    """Load an RSA private key (PKCS#1 or PKCS#8 PEM)."""
    try:
        private_key = serialization.load_pem_private_key(pem, password=password)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid merchant private key: {e}") from e
    if not isinstance(private_key, RSAPrivateKey):
        raise ConfigurationError(
            f"Expected RSA private key, got {type(private_key).__name__}"
        )
    return private_key


def load_platform_certificate(pem: bytes) -> PlatformKey:
    """
    Load the platform verification key.

    Accepts an X.509 certificate PEM or a bare RSA public key PEM.
    """
    if b"BEGIN CERTIFICATE" in pem:
        try:
            return x509.load_pem_x509_certificate(pem)
        except ValueError as e:
            raise ConfigurationError(f"Invalid platform certificate: {e}") from e
    try:
        public_key = serialization.load_pem_public_key(pem)
    except ValueError as e:
        raise ConfigurationError(f"Invalid platform public key: {e}") from e
    if not isinstance(public_key, RSAPublicKey):
        raise ConfigurationError(
            f"Expected RSA public key, got {type(public_key).__name__}"
        )
    return public_key


def _read_file(path: str, what: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ConfigurationError(f"Cannot read {what} at {path}: {e.strerror}") from e


@dataclass(frozen=True)
class SigningIdentity:
    """
    Process-wide merchant identity.

    Attributes:
        app_id: Application id bound to the merchant
        mch_id: Merchant id
        mch_key: API v3 key, AES-256-GCM key only (never logged)
        private_key: Merchant RSA private key
        private_key_serial: Serial of the merchant certificate
        platform_certificate: Gateway certificate or public key, verification only
    """
    app_id: Optional[str] = None
    mch_id: Optional[str] = None
    mch_key: Optional[bytes] = None
    private_key: Optional[RSAPrivateKey] = None
    private_key_serial: Optional[str] = None
    platform_certificate: Optional[PlatformKey] = None

    def __post_init__(self):
        if isinstance(self.mch_key, str):
            object.__setattr__(self, "mch_key", self.mch_key.encode("utf-8"))

    def __repr__(self) -> str:
        return (
            f"SigningIdentity(app_id={self.app_id!r}, mch_id={self.mch_id!r}, "
            f"private_key_serial={self.private_key_serial!r})"
        )

    def require(self, name: str):
        """Return a field value or raise ConfigurationError if it is unset."""
        value = getattr(self, name)
        if value is None or value == "" or value == b"":
            raise ConfigurationError(f"Signing identity field '{name}' is not configured")
        return value

    def aes_key(self) -> bytes:
        key = self.require("mch_key")
        if len(key) != AES_KEY_BYTES:
            raise ConfigurationError(
                f"mch_key must be exactly {AES_KEY_BYTES} bytes, got {len(key)}"
            )
        return key

    def platform_public_key(self) -> RSAPublicKey:
        platform = self.require("platform_certificate")
        if isinstance(platform, x509.Certificate):
            platform = platform.public_key()
        if not isinstance(platform, RSAPublicKey):
            raise ConfigurationError("Platform certificate does not carry an RSA key")
        return platform

    @property
    def platform_serial(self) -> Optional[str]:
        """Upper-case hex serial of the platform certificate, if it is an X.509 cert."""
        if isinstance(self.platform_certificate, x509.Certificate):
            return format(self.platform_certificate.serial_number, "X")
        return None

    def with_platform_certificate(self, certificate: PlatformKey) -> "SigningIdentity":
        return replace(self, platform_certificate=certificate)

    @classmethod
    def from_pem(
        cls,
        *,
        app_id: str,
        mch_id: str,
        mch_key: Union[str, bytes],
        private_key_pem: bytes,
        private_key_serial: str,
        platform_cert_pem: Optional[bytes] = None,
    ) -> "SigningIdentity":
        platform = load_platform_certificate(platform_cert_pem) if platform_cert_pem else None
        return cls(
            app_id=app_id,
            mch_id=mch_id,
            mch_key=mch_key,
            private_key=load_private_key(private_key_pem),
            private_key_serial=private_key_serial,
            platform_certificate=platform,
        )

    @classmethod
    def from_settings(cls, settings: "WechatPaySettings") -> "SigningIdentity":
        """Build an identity from settings, reading the referenced PEM files."""
        ident = settings.identity

        private_key = None
        if ident.private_key_path:
            private_key = load_private_key(
                _read_file(ident.private_key_path, "merchant private key")
            )

        platform = None
        if ident.platform_cert_path:
            platform = load_platform_certificate(
                _read_file(ident.platform_cert_path, "platform certificate")
            )

        return cls(
            app_id=ident.app_id or None,
            mch_id=ident.mch_id or None,
            mch_key=ident.mch_key.get_secret_value() or None,
            private_key=private_key,
            private_key_serial=ident.private_key_serial or None,
            platform_certificate=platform,
        )
