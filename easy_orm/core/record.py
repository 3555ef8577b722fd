"""
Record - live, mutable data object

Records are what models hand back to callers: plain dicts underneath (so
they compare equal to dicts and serialize straight to JSON) with attribute
access layered on top.
"""

from typing import Any


class Record(dict):
    """
    Mutable record with both item and attribute access.

    Example:
        record = Record(name="x")
        record.name          # "x"
        record.set("age", 3)
        record["age"]        # 3
    """

    def __getattr__(self, key: str) -> Any:
        try:
            return self[key]
        except KeyError:
            raise AttributeError(f"{type(self).__name__} has no field '{key}'") from None

    def __setattr__(self, key: str, value: Any) -> None:
        self[key] = value

    def __delattr__(self, key: str) -> None:
        try:
            del self[key]
        except KeyError:
            raise AttributeError(key) from None

    def set(self, key: str, value: Any) -> Any:
        """Set a field and return the value."""
        self[key] = value
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict.__repr__(self)})"
