"""
Error taxonomy for form serialization

Every error raised by the engine derives from FormSerializationError so callers
can catch the whole family, while each failure kind stays its own class.
"""

from typing import Any


class FormSerializationError(Exception):
    """Base class for all form serialization failures"""

    pass


class InvalidConfiguration(FormSerializationError, ValueError):
    """Raised when a SerializationConfig cannot be built"""

    pass


class NullValueRejected(FormSerializationError, TypeError):
    """Raised when None is given for a field"""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f'Received None for "{key}"; to pass null in form data, you must use '
            f"the string 'null'. Note: OMIT values are silently ignored."
        )


class MaxDepthExceededError(FormSerializationError):
    """Raised when nesting goes deeper than the configured max_depth"""

    def __init__(self, max_depth: int, key: str):
        self.max_depth = max_depth
        self.key = key
        super().__init__(
            f'Maximum nesting depth of {max_depth} exceeded for key "{key}"'
        )


class UnsupportedValueType(FormSerializationError, TypeError):
    """Raised for values that are not scalars, attachments, arrays or mappings"""

    def __init__(self, key: str, value: Any):
        self.key = key
        self.kind = type(value).__name__
        super().__init__(
            f'Invalid value given for "{key}": expected a str, number, bool, '
            f"mapping, list, tuple or attachment but got {self.kind} instead"
        )
