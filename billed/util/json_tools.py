import json
from typing import Any


def compact_json(payload: Any) -> str:
    """Serialize ``payload`` the way the portal API expects it.

    No whitespace between tokens and non-ASCII characters kept as is, so
    ``{"foo": "bar"}`` becomes ``'{"foo":"bar"}'``.
    """

    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
