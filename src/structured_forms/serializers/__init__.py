"""
Serializers package for structured forms

This package flattens nested Python values into ordered multipart form fields.
"""

from .attachments import (
    PLACEHOLDER_FILENAME,
    AttachmentPayload,
    Blob,
    get_name,
    is_attachment,
    materialize_attachment,
)
from .base import FormSerializer, add_field_value, create_form, create_form_with_preset
from .config import DEFAULT_CONFIG, SerializationConfig
from .depth import check_depth
from .errors import (
    FormSerializationError,
    InvalidConfiguration,
    MaxDepthExceededError,
    NullValueRejected,
    UnsupportedValueType,
)
from .keys import KeyFormatter, encode_key_segment, format_key
from .multipart import force_wrap_as_multipart, maybe_wrap_as_multipart, requires_multipart
from .presets import PRESETS, describe_config, get_preset, resolve_config
from .sink import FieldSink
from .type_detection import OMIT, ValueKind, classify, has_attachment, to_field_string

__all__ = [
    # Core functions
    "FormSerializer",
    "create_form",
    "create_form_with_preset",
    "add_field_value",
    # Configuration
    "SerializationConfig",
    "DEFAULT_CONFIG",
    "PRESETS",
    "get_preset",
    "resolve_config",
    "describe_config",
    # Sink
    "FieldSink",
    # Attachments
    "Blob",
    "AttachmentPayload",
    "PLACEHOLDER_FILENAME",
    "get_name",
    "is_attachment",
    "materialize_attachment",
    # Type detection
    "OMIT",
    "ValueKind",
    "classify",
    "has_attachment",
    "to_field_string",
    # Keys and depth
    "KeyFormatter",
    "format_key",
    "encode_key_segment",
    "check_depth",
    # Multipart request options
    "maybe_wrap_as_multipart",
    "force_wrap_as_multipart",
    "requires_multipart",
    # Errors
    "FormSerializationError",
    "InvalidConfiguration",
    "NullValueRejected",
    "MaxDepthExceededError",
    "UnsupportedValueType",
]
