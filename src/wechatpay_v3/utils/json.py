import json
from typing import Any, Union


def json_dumps(obj: Any) -> str:
    """Compact JSON, non-ASCII kept as-is (the gateway expects UTF-8)."""
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def json_body(obj: Any) -> bytes:
    return json_dumps(obj).encode("utf-8")


def json_loads(data: Union[str, bytes]) -> Any:
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return json.loads(data)
