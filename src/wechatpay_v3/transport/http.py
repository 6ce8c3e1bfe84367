"""
Signed HTTP transport for WeChat Pay API v3.

Thin collaborator around the signing core:
- serializes the JSON body once and signs those exact bytes
- attaches the Authorization header
- raises on non-2xx responses

No endpoint knowledge, no retries.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from wechatpay_v3.core.identity import SigningIdentity
from wechatpay_v3.core.settings import DEFAULT_GATEWAY_URL, WechatPaySettings
from wechatpay_v3.protocol.errors import GatewayResponseError, TransportError
from wechatpay_v3.security.signer import RequestSigner
from wechatpay_v3.utils.json import json_body

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def build_query(params: Mapping[str, Any]) -> str:
    """Render GET parameters as ``k=v`` pairs sorted by key."""
    return "&".join(f"{key}={value}" for key, value in sorted(params.items()))


class SignedHTTPTransport:
    """
    Sends signed requests to the gateway.

    Usage:
        transport = SignedHTTPTransport(identity)
        resp = transport.request("POST", "/v3/pay/transactions/jsapi", body={...})
        prepay_id = resp.json()["prepay_id"]
    """

    def __init__(
        self,
        identity: SigningIdentity,
        base_url: str = DEFAULT_GATEWAY_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        signer: Optional[RequestSigner] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._signer = signer or RequestSigner(identity)

    @classmethod
    def from_settings(cls, identity: SigningIdentity, settings: WechatPaySettings) -> "SignedHTTPTransport":
        return cls(
            identity,
            base_url=settings.http.gateway_url,
            timeout=settings.http.http_timeout,
        )

    # ------------------------------------------------------------------
    # Main API
    # ------------------------------------------------------------------
    def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        params: Optional[Mapping[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        method = method.upper()

        url_path = path
        if params:
            url_path = f"{path}?{build_query(params)}"

        # The signed body and the transmitted body are the same bytes.
        if body is None:
            payload = b""
        elif isinstance(body, (bytes, str)):
            payload = body.encode("utf-8") if isinstance(body, str) else body
        else:
            payload = json_body(body)

        header = self._signer.authorization_header(method, url_path, payload)
        headers = {
            "Authorization": str(header),
            "Content-Type": "application/json" if payload else FORM_CONTENT_TYPE,
            "Accept": "application/json",
        }
        if extra_headers:
            headers.update(extra_headers)

        logger.debug("%s %s", method, url_path)
        try:
            response = self._session.request(
                method,
                f"{self._base_url}{url_path}",
                data=payload or None,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url_path} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.warning("%s %s -> HTTP %d", method, url_path, response.status_code)
            raise GatewayResponseError(response.status_code, response.text)

        return response

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> requests.Response:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any) -> requests.Response:
        return self.request("POST", path, body=body)
