from .core.identity import SigningIdentity
from .core.settings import WechatPaySettings, get_settings, configure_logging
from .security.signer import RequestSigner, PaySignBuilder
from .security.verifier import CallbackVerifier
from .security.aes_gcm import CertificateDecryptor
from .transport.http import SignedHTTPTransport
from .protocol import (
    AuthorizationHeader,
    ClientPaymentParams,
    EncryptedEnvelope,
    PlatformCertificate,
    SignatureEnvelope,
    WechatPayError,
    ConfigurationError,
    SigningError,
    DecryptionError,
    TransportError,
    GatewayResponseError,
)

__all__ = [
    "SigningIdentity",
    "WechatPaySettings",
    "get_settings",
    "configure_logging",
    "RequestSigner",
    "PaySignBuilder",
    "CallbackVerifier",
    "CertificateDecryptor",
    "SignedHTTPTransport",
    "AuthorizationHeader",
    "ClientPaymentParams",
    "EncryptedEnvelope",
    "PlatformCertificate",
    "SignatureEnvelope",
    "WechatPayError",
    "ConfigurationError",
    "SigningError",
    "DecryptionError",
    "TransportError",
    "GatewayResponseError",
]
