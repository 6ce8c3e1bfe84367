from .enums import ErrorCode, SignType, AEADAlgorithm
from .errors import (
    WechatPayError,
    ConfigurationError,
    SigningError,
    DecryptionError,
    TransportError,
    GatewayResponseError,
)
from .models import (
    SignatureEnvelope,
    AuthorizationHeader,
    ClientPaymentParams,
    EncryptedEnvelope,
    PlatformCertificate,
)

__all__ = [
    "ErrorCode",
    "SignType",
    "AEADAlgorithm",
    "WechatPayError",
    "ConfigurationError",
    "SigningError",
    "DecryptionError",
    "TransportError",
    "GatewayResponseError",
    "SignatureEnvelope",
    "AuthorizationHeader",
    "ClientPaymentParams",
    "EncryptedEnvelope",
    "PlatformCertificate",
]
