"""
Value classification for form serialization
"""

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Set

from .attachments import is_attachment
from .config import DEFAULT_CONFIG
from .errors import MaxDepthExceededError


class _Omit:
    """Sentinel for a field that should be left out of the form"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMIT"

    def __bool__(self) -> bool:
        return False


OMIT = _Omit()

SCALAR_TYPES = (str, bool, int, float, Decimal)
ARRAY_TYPES = (list, tuple)


class ValueKind(Enum):
    """Closed set of value kinds the traversal engine dispatches on"""

    OMITTED = "omitted"
    NULL = "null"
    SCALAR = "scalar"
    ATTACHMENT = "attachment"
    ARRAY = "array"
    OBJECT = "object"
    UNSUPPORTED = "unsupported"


def classify(value: Any) -> ValueKind:
    """
    Classify a value without touching its content

    Streams and responses are only recognized here, never read.
    """
    if value is OMIT:
        return ValueKind.OMITTED
    if value is None:
        return ValueKind.NULL
    # Strings are sequences, so scalars must be checked before arrays
    if isinstance(value, SCALAR_TYPES):
        return ValueKind.SCALAR
    if is_attachment(value):
        return ValueKind.ATTACHMENT
    if isinstance(value, ARRAY_TYPES):
        return ValueKind.ARRAY
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    return ValueKind.UNSUPPORTED


def to_field_string(value: Any) -> str:
    """Render a scalar the way form encoders expect"""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def has_attachment(value: Any, max_depth: Optional[int] = None) -> bool:
    """
    Check whether an attachment appears anywhere in a nested value

    Args:
        value: Body or nested value to search
        max_depth: Depth limit reported when the value contains itself;
            defaults to DEFAULT_CONFIG.max_depth

    Raises:
        MaxDepthExceededError: If an array or mapping contains itself
    """
    if max_depth is None:
        max_depth = DEFAULT_CONFIG.max_depth
    return _search_attachment(value, None, set(), max_depth)


def _search_attachment(
    value: Any, key: Optional[str], ancestors: Set[int], max_depth: int
) -> bool:
    kind = classify(value)
    if kind is ValueKind.ATTACHMENT:
        return True
    if kind is ValueKind.ARRAY:
        children = enumerate(value)
    elif kind is ValueKind.OBJECT:
        children = value.items()
    else:
        return False

    # A container reached again from inside itself would nest forever
    if id(value) in ancestors:
        raise MaxDepthExceededError(max_depth, key or "<body>")
    ancestors.add(id(value))
    try:
        for name, item in children:
            child_key = str(name) if key is None else f"{key}[{name}]"
            if _search_attachment(item, child_key, ancestors, max_depth):
                return True
        return False
    finally:
        ancestors.discard(id(value))
