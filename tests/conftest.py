"""Shared fixtures: throwaway RSA keys, a self-signed platform certificate, identities."""

import datetime as dt
import os

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from wechatpay_v3.core.identity import SigningIdentity


def _rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _self_signed(private_key, serial: int) -> x509.Certificate:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Tenpay.com Root CA")])
    now = dt.datetime.now(dt.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(serial)
        .not_valid_before(now - dt.timedelta(days=1))
        .not_valid_after(now + dt.timedelta(days=365))
        .sign(private_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def merchant_key():
    return _rsa_key()


@pytest.fixture(scope="session")
def platform_key():
    return _rsa_key()


@pytest.fixture(scope="session")
def platform_cert(platform_key):
    return _self_signed(platform_key, 0x5157F09EFDC096DE15EBE81A47057A72)


@pytest.fixture(scope="session")
def platform_cert_pem(platform_cert):
    return platform_cert.public_bytes(serialization.Encoding.PEM)


@pytest.fixture(scope="session")
def merchant_key_pem(merchant_key):
    return merchant_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def mch_key():
    return os.urandom(32)


@pytest.fixture
def identity(merchant_key, platform_cert, mch_key):
    return SigningIdentity(
        app_id="wxd678efh567hg6787",
        mch_id="1230000109",
        mch_key=mch_key,
        private_key=merchant_key,
        private_key_serial="1DDE55AD98ED71D6EDD4A4A16996DE7B47773A8C",
        platform_certificate=platform_cert,
    )
