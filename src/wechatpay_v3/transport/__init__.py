from .http import SignedHTTPTransport, build_query

__all__ = ["SignedHTTPTransport", "build_query"]
