from typing import Optional
from .enums import ErrorCode


class WechatPayError(Exception):
    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.code = code or ErrorCode.INTERNAL_ERROR


class ConfigurationError(WechatPayError):
    """Raised when a required identity field is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR)


class SigningError(WechatPayError):
    """Raised when the RSA signing operation itself fails."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SIGNING_ERROR)


class DecryptionError(WechatPayError):
    """Raised on AEAD tag mismatch or a malformed encrypted envelope."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DECRYPTION_ERROR)


class TransportError(WechatPayError):
    """Raised when the HTTP request could not be completed."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.TRANSPORT_ERROR)


class GatewayResponseError(WechatPayError):
    """Raised when the gateway answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            f"Gateway responded with HTTP {status_code}", ErrorCode.GATEWAY_ERROR
        )
        self.status_code = status_code
        self.body = body
