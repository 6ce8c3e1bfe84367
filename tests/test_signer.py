"""
Tests for RequestSigner and PaySignBuilder.
"""

import base64
import re

import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding

from wechatpay_v3.core.identity import SigningIdentity
from wechatpay_v3.protocol.errors import ConfigurationError, SigningError
from wechatpay_v3.security.canonical import pay_sign_string, request_string
from wechatpay_v3.security.signer import PaySignBuilder, RequestSigner, rsa_sign


HEADER_RE = re.compile(
    r'^WECHATPAY2-SHA256-RSA2048 '
    r'mchid="(?P<mchid>[^"]*)",'
    r'nonce_str="(?P<nonce_str>[^"]*)",'
    r'serial_no="(?P<serial_no>[^"]*)",'
    r'signature="(?P<signature>[^"]*)",'
    r'timestamp="(?P<timestamp>[^"]*)"$'
)


def _verify(public_key, signature_b64, message):
    public_key.verify(
        base64.b64decode(signature_b64),
        message.encode("utf-8"),
        padding.PKCS1v15(),
        hashes.SHA256(),
    )


class TestRequestSigner:
    """Tests for the Authorization header."""

    def test_header_format(self, identity):
        """All five parameters present, quoted, comma-joined, in fixed order."""
        header = RequestSigner(identity).authorization_header("GET", "/v3/certificates")

        match = HEADER_RE.match(str(header))
        assert match is not None
        assert match["mchid"] == "1230000109"
        assert match["serial_no"] == "1DDE55AD98ED71D6EDD4A4A16996DE7B47773A8C"
        assert len(match["nonce_str"]) == 32
        assert match["timestamp"].isdigit()
        assert ", " not in str(header)

    def test_header_signature_verifies(self, identity, merchant_key):
        """Canonical string rebuilt from the header verifies with the public key."""
        body = '{"a":1}'
        path = "/v3/pay/transactions/jsapi"
        header = RequestSigner(identity).authorization_header("POST", path, body)
        match = HEADER_RE.match(header.value)

        expected = request_string("POST", path, int(match["timestamp"]), match["nonce_str"], body)
        _verify(merchant_key.public_key(), match["signature"], expected)

    def test_exact_canonical_string(self, identity, merchant_key):
        """POST canonical string carries method, path, ts, nonce, body, trailing newline."""
        signer = RequestSigner(identity, clock=lambda: 1554208460, nonce_factory=lambda: "593BEC0C930BF1AFEB40B4A08C8FB242")
        envelope = signer.sign("POST", "/v3/pay/transactions/jsapi", '{"a":1}')

        expected = (
            "POST\n/v3/pay/transactions/jsapi\n1554208460\n"
            '593BEC0C930BF1AFEB40B4A08C8FB242\n{"a":1}\n'
        )
        _verify(merchant_key.public_key(), envelope.signature, expected)

    def test_get_signs_empty_body(self, identity, merchant_key):
        """GET signs an empty body line, still newline-terminated."""
        signer = RequestSigner(identity, clock=lambda: 100, nonce_factory=lambda: "n")
        envelope = signer.sign("GET", "/v3/certificates")

        _verify(merchant_key.public_key(), envelope.signature, "GET\n/v3/certificates\n100\nn\n\n")

    def test_bytes_body_signed_verbatim(self, identity, merchant_key):
        body = '{"description":"Image形象店"}'.encode("utf-8")
        signer = RequestSigner(identity, clock=lambda: 1, nonce_factory=lambda: "abc")
        envelope = signer.sign("POST", "/v3/x", body)

        _verify(merchant_key.public_key(), envelope.signature, "POST\n/v3/x\n1\nabc\n" + body.decode("utf-8") + "\n")

    def test_tampered_body_does_not_verify(self, identity, merchant_key):
        signer = RequestSigner(identity, clock=lambda: 1, nonce_factory=lambda: "abc")
        envelope = signer.sign("POST", "/v3/x", '{"a":1}')

        with pytest.raises(InvalidSignature):
            _verify(merchant_key.public_key(), envelope.signature, 'POST\n/v3/x\n1\nabc\n{"a":2}\n')

    def test_fresh_nonce_each_call(self, identity):
        """Identical inputs give different nonce and signature."""
        signer = RequestSigner(identity)
        first = signer.sign("POST", "/v3/x", "{}")
        second = signer.sign("POST", "/v3/x", "{}")

        assert first.nonce != second.nonce
        assert first.signature != second.signature

    def test_missing_private_key(self, identity):
        ident = SigningIdentity(mch_id="1", private_key_serial="S")
        with pytest.raises(ConfigurationError, match="private_key"):
            RequestSigner(ident).authorization_header("GET", "/v3/x")

    def test_missing_serial(self, merchant_key):
        ident = SigningIdentity(mch_id="1", private_key=merchant_key)
        with pytest.raises(ConfigurationError, match="private_key_serial"):
            RequestSigner(ident).authorization_header("GET", "/v3/x")

    def test_non_rsa_key_raises_signing_error(self):
        ident = SigningIdentity(
            mch_id="1",
            private_key=ec.generate_private_key(ec.SECP256R1()),
            private_key_serial="S",
        )
        with pytest.raises(SigningError):
            RequestSigner(ident).authorization_header("GET", "/v3/x")

    def test_invalid_utf8_body(self, identity):
        with pytest.raises(SigningError):
            RequestSigner(identity).sign("POST", "/v3/x", b"\xff\xfe")


class TestPaySignBuilder:
    """Tests for client-side payment parameters."""

    def test_params_shape(self, identity):
        params = PaySignBuilder(identity).build_client_payment_params("wx201410272009395522657a690389285100")
        data = params.to_dict()

        assert set(data) == {"timeStamp", "nonceStr", "package", "paySign", "signType"}
        assert data["package"] == "prepay_id=wx201410272009395522657a690389285100"
        assert data["signType"] == "RSA"
        assert data["timeStamp"].isdigit()
        assert all(isinstance(v, str) for v in data.values())

    def test_pay_sign_verifies(self, identity, merchant_key):
        params = PaySignBuilder(identity).build_client_payment_params("wx2014")
        expected = pay_sign_string(identity.app_id, params.timestamp, params.nonce, "wx2014")

        _verify(merchant_key.public_key(), params.pay_sign, expected)

    def test_pay_sign_canonical_lines(self, identity, merchant_key):
        builder = PaySignBuilder(identity, clock=lambda: 1414561699, nonce_factory=lambda: "5K8264ILTKCH16CQ2502SI8ZNMTM67VS")
        params = builder.build_client_payment_params("wx2014")

        expected = "wxd678efh567hg6787\n1414561699\n5K8264ILTKCH16CQ2502SI8ZNMTM67VS\nprepay_id=wx2014\n"
        _verify(merchant_key.public_key(), params.pay_sign, expected)

    def test_independent_of_request_signer(self, identity):
        header = RequestSigner(identity).authorization_header("POST", "/v3/pay/transactions/jsapi", "{}")
        params = PaySignBuilder(identity).build_client_payment_params("wx2014")

        assert params.nonce != header.nonce_str

    def test_empty_prepay_id(self, identity):
        with pytest.raises(ValueError, match="prepay_id"):
            PaySignBuilder(identity).build_client_payment_params("")

    def test_missing_app_id(self, merchant_key):
        with pytest.raises(ConfigurationError, match="app_id"):
            PaySignBuilder(SigningIdentity(private_key=merchant_key)).build_client_payment_params("wx1")


def test_rsa_sign_is_base64(merchant_key):
    signature = rsa_sign(merchant_key, "payload\n")
    assert len(base64.b64decode(signature, validate=True)) == 256
