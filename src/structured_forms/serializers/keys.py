"""
Field name composition for nested arrays and objects
"""

from typing import Callable, Optional, Union
from urllib.parse import quote

from .config import SerializationConfig

# Characters encodeURIComponent leaves untouched besides alphanumerics and -_.~
_SAFE_KEY_CHARACTERS = "!*'()"


def encode_key_segment(segment: Union[str, int]) -> str:
    """Percent-encode a single key segment"""
    return quote(str(segment), safe=_SAFE_KEY_CHARACTERS)


def format_key(
    parent_key: str,
    child: Union[str, int],
    *,
    is_array: bool,
    strategy: str,
    custom: Optional[Callable[[str, Union[str, int]], str]] = None,
    encode_keys: bool = False,
) -> str:
    """
    Compose the field name for an array element or object property

    Only the child token is encoded; the parent key is assumed to be encoded
    already by the previous step.

    Args:
        parent_key: Field name of the enclosing array or object
        child: Element index (arrays) or property name (objects)
        is_array: Whether the parent is an array
        strategy: Array or object strategy name
        custom: Formatter used by the "custom" strategy
        encode_keys: Percent-encode the child token

    Returns:
        The flattened field name
    """
    token = child if isinstance(child, int) else str(child)
    if encode_keys and not isinstance(token, int):
        token = encode_key_segment(token)

    if strategy == "custom":
        return custom(parent_key, token)

    if is_array:
        if strategy == "bracket-indexed":
            return f"{parent_key}[{token}]"
        if strategy == "repeat":
            return parent_key
        # bracket-empty, and the per-element fallback of comma-joined
        return f"{parent_key}[]"

    if strategy == "dot":
        return f"{parent_key}.{token}"
    if strategy == "underscore":
        return f"{parent_key}_{token}"
    return f"{parent_key}[{token}]"


class KeyFormatter:
    """Key composition bound to one SerializationConfig"""

    def __init__(self, config: SerializationConfig):
        self.config = config

    def array_key(self, parent_key: str, index: int) -> str:
        return format_key(
            parent_key,
            index,
            is_array=True,
            strategy=self.config.array_strategy,
            custom=self.config.custom_array_formatter,
            encode_keys=self.config.encode_keys,
        )

    def fallback_array_key(self, parent_key: str) -> str:
        """Key used when a comma-joined array cannot be joined"""
        return f"{parent_key}[]"

    def object_key(self, parent_key: str, property_name: str) -> str:
        return format_key(
            parent_key,
            property_name,
            is_array=False,
            strategy=self.config.object_strategy,
            custom=self.config.custom_object_formatter,
            encode_keys=self.config.encode_keys,
        )

    def top_level_key(self, key: str) -> str:
        return encode_key_segment(key) if self.config.encode_keys else str(key)
