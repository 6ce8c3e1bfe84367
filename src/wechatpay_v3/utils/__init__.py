from .json import json_body, json_dumps, json_loads
from .nonce import new_nonce, unix_timestamp

__all__ = ["json_body", "json_dumps", "json_loads", "new_nonce", "unix_timestamp"]
