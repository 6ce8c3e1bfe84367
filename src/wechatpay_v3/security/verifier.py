"""
Callback (webhook) signature verification.

Fail-closed: every problem, including malformed input, yields ``False``.
The two cases are told apart only in log records.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Mapping, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from wechatpay_v3.core.identity import SigningIdentity
from wechatpay_v3.protocol.errors import ConfigurationError
from wechatpay_v3.security.canonical import Body, callback_string

logger = logging.getLogger(__name__)

HEADER_TIMESTAMP = "Wechatpay-Timestamp"
HEADER_NONCE = "Wechatpay-Nonce"
HEADER_SIGNATURE = "Wechatpay-Signature"
HEADER_SERIAL = "Wechatpay-Serial"


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


class CallbackVerifier:
    """
    Verifies inbound notifications against the platform certificate.

    Usage:
        verifier = CallbackVerifier(identity)
        if not verifier.verify_headers(request.headers, raw_body):
            return 401
    """

    def __init__(self, identity: SigningIdentity):
        self._identity = identity

    def is_authentic_notification(
        self,
        timestamp: str,
        nonce: str,
        body: Body,
        signature: str,
    ) -> bool:
        try:
            decoded = base64.b64decode(signature, validate=True)
            message = callback_string(timestamp, nonce, body).encode("utf-8")
            public_key = self._identity.platform_public_key()
        except (binascii.Error, ValueError, TypeError) as e:
            logger.warning("Callback rejected: malformed input (%s)", type(e).__name__)
            return False
        except ConfigurationError as e:
            logger.warning("Callback rejected: %s", e)
            return False

        try:
            public_key.verify(decoded, message, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            logger.warning("Callback rejected: signature mismatch nonce=%s", nonce)
            return False
        except Exception as e:
            logger.warning("Callback rejected: verification error (%s)", type(e).__name__)
            return False
        return True

    def verify_headers(self, headers: Mapping[str, str], body: Body) -> bool:
        """Verify using the Wechatpay-* headers of an inbound request."""
        timestamp = _header(headers, HEADER_TIMESTAMP)
        nonce = _header(headers, HEADER_NONCE)
        signature = _header(headers, HEADER_SIGNATURE)
        if not (timestamp and nonce and signature):
            logger.warning("Callback rejected: missing Wechatpay-* headers")
            return False

        serial = _header(headers, HEADER_SERIAL)
        expected_serial = self._identity.platform_serial
        if serial and expected_serial and serial.upper() != expected_serial:
            logger.warning(
                "Callback rejected: serial %s does not match platform certificate %s",
                serial,
                expected_serial,
            )
            return False

        return self.is_authentic_notification(timestamp, nonce, body, signature)
