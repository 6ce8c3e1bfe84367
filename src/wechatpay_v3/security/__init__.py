"""
Signing core.

- canonical: canonical-string builders
- signer: request Authorization header and client paySign
- verifier: callback signature verification
- aes_gcm: AEAD field and certificate decryption
"""

from .canonical import request_string, pay_sign_string, callback_string
from .signer import RequestSigner, PaySignBuilder, rsa_sign
from .verifier import CallbackVerifier
from .aes_gcm import CertificateDecryptor

__all__ = [
    "request_string",
    "pay_sign_string",
    "callback_string",
    "RequestSigner",
    "PaySignBuilder",
    "rsa_sign",
    "CallbackVerifier",
    "CertificateDecryptor",
]
