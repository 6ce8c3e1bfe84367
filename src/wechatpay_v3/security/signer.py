"""
Outbound signing for WeChat Pay API v3.

Signature scheme: SHA-256 digest, RSASSA-PKCS1-v1_5, base64 of the raw
signature ("WECHATPAY2-SHA256-RSA2048").

- RequestSigner: Authorization header for every API call
- PaySignBuilder: paySign for the client-side payment widget

Both draw a fresh timestamp and nonce on every call.
"""

from __future__ import annotations

import base64
import logging
from typing import Callable, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from wechatpay_v3.core.identity import SigningIdentity
from wechatpay_v3.protocol.enums import SignType
from wechatpay_v3.protocol.errors import SigningError
from wechatpay_v3.protocol.models import (
    AuthorizationHeader,
    ClientPaymentParams,
    SignatureEnvelope,
)
from wechatpay_v3.security.canonical import Body, pay_sign_string, request_string
from wechatpay_v3.utils.nonce import new_nonce, unix_timestamp

logger = logging.getLogger(__name__)

Clock = Callable[[], int]
NonceFactory = Callable[[], str]


def rsa_sign(private_key: RSAPrivateKey, message: str) -> str:
    """Sign a canonical string and return the base64 signature."""
    if not isinstance(private_key, RSAPrivateKey):
        raise SigningError(
            f"Merchant private key must be RSA, got {type(private_key).__name__}"
        )
    try:
        signature = private_key.sign(
            message.encode("utf-8"),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
    except Exception as e:
        raise SigningError(f"RSA signing failed: {type(e).__name__}") from e
    return base64.b64encode(signature).decode("ascii")


class _FreshSigner:
    """Shared plumbing: identity plus timestamp/nonce sources."""

    def __init__(
        self,
        identity: SigningIdentity,
        clock: Optional[Clock] = None,
        nonce_factory: Optional[NonceFactory] = None,
    ):
        self._identity = identity
        self._clock = clock or unix_timestamp
        self._nonce_factory = nonce_factory or new_nonce

    @property
    def identity(self) -> SigningIdentity:
        return self._identity


class RequestSigner(_FreshSigner):
    """
    Signs outbound API requests.

    Usage:
        signer = RequestSigner(identity)
        header = signer.authorization_header("POST", "/v3/pay/transactions/jsapi", body)
        session.post(url, data=body, headers={"Authorization": str(header)})

    ``body`` must be the exact bytes that go on the wire.
    """

    def sign(self, method: str, url_path: str, body: Body = "") -> SignatureEnvelope:
        private_key = self._identity.require("private_key")

        timestamp = self._clock()
        nonce = self._nonce_factory()
        try:
            message = request_string(method, url_path, timestamp, nonce, body)
        except UnicodeDecodeError as e:
            raise SigningError("Request body is not valid UTF-8") from e

        signature = rsa_sign(private_key, message)
        logger.debug("Signed %s %s nonce=%s", method.upper(), url_path, nonce)
        return SignatureEnvelope(signature=signature, timestamp=timestamp, nonce=nonce)

    def authorization_header(self, method: str, url_path: str, body: Body = "") -> AuthorizationHeader:
        mch_id = self._identity.require("mch_id")
        serial_no = self._identity.require("private_key_serial")

        envelope = self.sign(method, url_path, body)
        return AuthorizationHeader(
            mch_id=mch_id,
            nonce_str=envelope.nonce,
            serial_no=serial_no,
            signature=envelope.signature,
            timestamp=envelope.timestamp,
        )


class PaySignBuilder(_FreshSigner):
    """
    Builds the signed parameter set for invoking payment on the client.

    The result is handed to the client SDK as-is and never re-signed.
    """

    def build_client_payment_params(self, prepay_id: str) -> ClientPaymentParams:
        if not prepay_id:
            raise ValueError("prepay_id cannot be empty")

        app_id = self._identity.require("app_id")
        private_key = self._identity.require("private_key")

        timestamp = str(self._clock())
        nonce = self._nonce_factory()
        message = pay_sign_string(app_id, timestamp, nonce, prepay_id)

        return ClientPaymentParams(
            timestamp=timestamp,
            nonce=nonce,
            package=f"prepay_id={prepay_id}",
            pay_sign=rsa_sign(private_key, message),
            sign_type=SignType.RSA.value,
        )
