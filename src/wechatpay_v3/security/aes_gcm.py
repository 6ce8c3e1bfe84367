"""
AES-256-GCM decryption of gateway-encrypted fields.

Envelope layout (API v3):
- key: merchant API v3 key (32 bytes)
- nonce: raw string, used as the GCM IV as-is
- associated_data: additional authenticated data
- ciphertext: base64(encrypted_data || tag), tag is the trailing 16 bytes

The tag is always checked. A mismatch raises and no plaintext is returned.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Dict, List, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from wechatpay_v3.core.identity import SigningIdentity
from wechatpay_v3.protocol.enums import AEADAlgorithm
from wechatpay_v3.protocol.errors import DecryptionError
from wechatpay_v3.protocol.models import EncryptedEnvelope, PlatformCertificate
from wechatpay_v3.utils.json import json_loads

logger = logging.getLogger(__name__)

TAG_LENGTH = 16


def _as_bytes(value: Union[str, bytes, None], field: str) -> bytes:
    if value is None:
        return b""
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    raise DecryptionError(f"Envelope field '{field}' must be a string, got {type(value).__name__}")


class CertificateDecryptor:
    """
    Decrypts AEAD envelopes with the merchant API v3 key.

    Used for platform certificate rotation and for callback ``resource``
    objects; both share the same envelope shape.
    """

    def __init__(self, identity: SigningIdentity):
        self._identity = identity

    def decrypt(
        self,
        associated_data: Union[str, bytes, None],
        nonce: Union[str, bytes],
        ciphertext: str,
    ) -> bytes:
        key = self._identity.aes_key()

        try:
            blob = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise DecryptionError("Ciphertext is not valid base64") from e

        if len(blob) < TAG_LENGTH:
            raise DecryptionError(
                f"Ciphertext shorter than the {TAG_LENGTH}-byte authentication tag"
            )

        # blob is encrypted_data || tag; AESGCM verifies the trailing tag before returning.
        try:
            return AESGCM(key).decrypt(
                _as_bytes(nonce, "nonce"),
                blob,
                _as_bytes(associated_data, "associated_data"),
            )
        except InvalidTag as e:
            logger.warning("AES-GCM tag mismatch (associated_data=%r)", associated_data)
            raise DecryptionError("Authentication tag mismatch") from e
        except ValueError as e:
            raise DecryptionError(f"Malformed envelope: {e}") from e

    def decrypt_envelope(self, envelope: EncryptedEnvelope) -> bytes:
        if envelope.algorithm != AEADAlgorithm.AES_256_GCM.value:
            raise DecryptionError(f"Unsupported algorithm '{envelope.algorithm}'")
        return self.decrypt(envelope.associated_data, envelope.nonce, envelope.ciphertext)

    def decrypt_resource(self, resource: Dict[str, Any]) -> Dict[str, Any]:
        """Decrypt a callback ``resource`` object and parse its JSON plaintext."""
        try:
            envelope = EncryptedEnvelope.from_dict(resource)
        except (KeyError, TypeError, AttributeError) as e:
            raise DecryptionError(f"Malformed resource: missing or invalid field {e}") from e

        plaintext = self.decrypt_envelope(envelope)
        try:
            return json_loads(plaintext)
        except ValueError as e:
            raise DecryptionError("Decrypted resource is not valid JSON") from e

    def unwrap_certificates(self, response_body: Optional[Dict[str, Any]]) -> List[PlatformCertificate]:
        """
        Decrypt every entry of a certificate-refresh response.

        Returns an empty list when ``data`` is missing or not a list. Any
        failing entry raises DecryptionError; the caller should keep using
        its previous certificate.
        """
        if not isinstance(response_body, dict):
            return []
        data = response_body.get("data")
        if not isinstance(data, list):
            return []

        certificates: List[PlatformCertificate] = []
        for item in data:
            try:
                envelope = EncryptedEnvelope.from_dict(item["encrypt_certificate"])
            except (KeyError, TypeError, AttributeError) as e:
                raise DecryptionError("Certificate entry missing encrypt_certificate") from e

            certificates.append(
                PlatformCertificate(
                    serial_no=item.get("serial_no", ""),
                    effective_time=item.get("effective_time"),
                    expire_time=item.get("expire_time"),
                    certificate=self.decrypt_envelope(envelope),
                )
            )

        logger.info("Unwrapped %d platform certificate(s)", len(certificates))
        return certificates
