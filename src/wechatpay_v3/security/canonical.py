"""
Canonical strings for WeChat Pay API v3.

Each variant has its own builder. Fields are joined in protocol order, every
line (the last included) ends with a single newline, nothing is trimmed.
"""

from __future__ import annotations

from typing import Union

Body = Union[str, bytes, None]


def _text(body: Body) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8")
    return body


def request_string(method: str, url_path: str, timestamp: int, nonce: str, body: Body = "") -> str:
    """METHOD, URL path (with query), timestamp, nonce, body."""
    return f"{method.upper()}\n{url_path}\n{timestamp}\n{nonce}\n{_text(body)}\n"


def pay_sign_string(app_id: str, timestamp: Union[int, str], nonce: str, prepay_id: str) -> str:
    """appid, timestamp, nonce, ``prepay_id=<id>``."""
    return f"{app_id}\n{timestamp}\n{nonce}\nprepay_id={prepay_id}\n"


def callback_string(timestamp: Union[int, str], nonce: str, body: Body) -> str:
    """timestamp, nonce, body. No method or path."""
    return f"{timestamp}\n{nonce}\n{_text(body)}\n"
