"""
Structured Forms Library

Flatten nested Python values, including file attachments, into multipart form fields.
"""

__version__ = "0.1.0"

from .logger import StructuredFormatter, configure_logging, get_logger, log_with_context
from .serializers import (
    DEFAULT_CONFIG,
    OMIT,
    PRESETS,
    AttachmentPayload,
    Blob,
    FieldSink,
    FormSerializationError,
    FormSerializer,
    InvalidConfiguration,
    MaxDepthExceededError,
    NullValueRejected,
    SerializationConfig,
    UnsupportedValueType,
    ValueKind,
    add_field_value,
    classify,
    create_form,
    create_form_with_preset,
    force_wrap_as_multipart,
    has_attachment,
    maybe_wrap_as_multipart,
    requires_multipart,
    resolve_config,
)

__all__ = [
    # Serialization
    "FormSerializer",
    "create_form",
    "create_form_with_preset",
    "add_field_value",
    "maybe_wrap_as_multipart",
    "force_wrap_as_multipart",
    "requires_multipart",
    "has_attachment",
    "classify",
    "ValueKind",
    "OMIT",
    # Configuration
    "SerializationConfig",
    "DEFAULT_CONFIG",
    "PRESETS",
    "resolve_config",
    # Values
    "FieldSink",
    "Blob",
    "AttachmentPayload",
    # Errors
    "FormSerializationError",
    "InvalidConfiguration",
    "NullValueRejected",
    "MaxDepthExceededError",
    "UnsupportedValueType",
    # Logging
    "get_logger",
    "configure_logging",
    "log_with_context",
    "StructuredFormatter",
]
