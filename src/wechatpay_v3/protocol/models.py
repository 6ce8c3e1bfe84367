"""
Protocol data types for WeChat Pay API v3.

All types are plain dataclasses. Values that travel over the wire use the
gateway's own field names in ``to_dict`` / ``from_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from cryptography import x509

from .enums import AEADAlgorithm, SignType


AUTHORIZATION_SCHEME = "WECHATPAY2-SHA256-RSA2048"


# ===========================================================================
# Outbound signing
# ===========================================================================


@dataclass(frozen=True)
class SignatureEnvelope:
    """
    One signature together with the timestamp and nonce it was made over.

    Attributes:
        signature: Base64-encoded RSA signature
        timestamp: Unix time in seconds
        nonce: Random hex string
    """
    signature: str
    timestamp: int
    nonce: str


@dataclass(frozen=True)
class AuthorizationHeader:
    """
    Value of the ``Authorization`` header for a signed API call.

    ``str(header)`` renders the header value. Parameter order is fixed by
    the protocol.
    """
    mch_id: str
    nonce_str: str
    serial_no: str
    signature: str
    timestamp: int
    scheme: str = AUTHORIZATION_SCHEME

    def params(self) -> Dict[str, str]:
        return {
            "mchid": self.mch_id,
            "nonce_str": self.nonce_str,
            "serial_no": self.serial_no,
            "signature": self.signature,
            "timestamp": str(self.timestamp),
        }

    @property
    def value(self) -> str:
        joined = ",".join(f'{key}="{val}"' for key, val in self.params().items())
        return f"{self.scheme} {joined}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ClientPaymentParams:
    """
    Parameters handed to the client-side payment widget (JSAPI / mini program).
    """
    timestamp: str
    nonce: str
    package: str
    pay_sign: str
    sign_type: str = SignType.RSA.value

    def to_dict(self) -> Dict[str, str]:
        return {
            "timeStamp": self.timestamp,
            "nonceStr": self.nonce,
            "package": self.package,
            "paySign": self.pay_sign,
            "signType": self.sign_type,
        }


# ===========================================================================
# Inbound encrypted data
# ===========================================================================


@dataclass(frozen=True)
class EncryptedEnvelope:
    """
    AEAD envelope as delivered by the gateway.

    Matches both ``encrypt_certificate`` entries of the certificate list and
    the ``resource`` object of callback notifications.

    Attributes:
        associated_data: Additional authenticated data (may be empty)
        nonce: GCM nonce, raw (not base64)
        ciphertext: Base64 of ciphertext followed by the 16-byte tag
        algorithm: Always AEAD_AES_256_GCM for API v3
    """
    associated_data: str
    nonce: str
    ciphertext: str
    algorithm: str = AEADAlgorithm.AES_256_GCM.value
    original_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "algorithm": self.algorithm,
            "associated_data": self.associated_data,
            "nonce": self.nonce,
            "ciphertext": self.ciphertext,
        }
        if self.original_type is not None:
            result["original_type"] = self.original_type
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EncryptedEnvelope":
        if not isinstance(data, dict):
            raise TypeError(f"Expected envelope object, got {type(data).__name__}")
        return cls(
            associated_data=data.get("associated_data") or "",
            nonce=data["nonce"],
            ciphertext=data["ciphertext"],
            algorithm=data.get("algorithm", AEADAlgorithm.AES_256_GCM.value),
            original_type=data.get("original_type"),
        )


@dataclass(frozen=True)
class PlatformCertificate:
    """
    A decrypted platform certificate from a certificate-refresh response.

    The caller owns ``certificate`` once returned.
    """
    serial_no: str
    effective_time: Optional[str]
    expire_time: Optional[str]
    certificate: bytes

    def load(self) -> x509.Certificate:
        """Parse the PEM bytes into an X.509 certificate."""
        return x509.load_pem_x509_certificate(self.certificate)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "serial_no": self.serial_no,
            "effective_time": self.effective_time,
            "expire_time": self.expire_time,
            "certificate": self.certificate,
        }
