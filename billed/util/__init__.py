"""Small shared helpers."""

from billed.util.json_tools import compact_json

__all__ = ["compact_json"]
