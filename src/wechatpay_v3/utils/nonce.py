import secrets
import time

NONCE_BYTES = 16


def new_nonce() -> str:
    """32 hex chars from the OS CSPRNG."""
    return secrets.token_hex(NONCE_BYTES)


def unix_timestamp() -> int:
    return int(time.time())
