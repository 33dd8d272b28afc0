"""
Request option helpers that switch a JSON-style body to multipart fields
"""

from typing import Any, Dict, Mapping, TypeVar

from .base import FormSerializer
from .config import ConfigLike
from .presets import resolve_config
from .type_detection import has_attachment

RequestOptions = TypeVar("RequestOptions", bound=Mapping[str, Any])


def requires_multipart(body: Any, config: ConfigLike = None) -> bool:
    """Check if a request body needs multipart encoding"""
    return has_attachment(body, resolve_config(config).max_depth)


async def maybe_wrap_as_multipart(
    request_options: RequestOptions, config: ConfigLike = None
) -> RequestOptions:
    """
    Serialize the body into form fields only when it carries an attachment

    Returns ``request_options`` itself when no attachment is found anywhere
    in the body, otherwise a shallow copy whose ``body`` is a FieldSink.
    A body that contains itself raises MaxDepthExceededError.
    """
    resolved = resolve_config(config)
    if not requires_multipart(request_options.get("body"), resolved):
        return request_options
    return await force_wrap_as_multipart(request_options, resolved)


async def force_wrap_as_multipart(
    request_options: Mapping[str, Any], config: ConfigLike = None
) -> Dict[str, Any]:
    """Always serialize the body into form fields"""
    sink = await FormSerializer(config).create_form(request_options.get("body"))
    return {**request_options, "body": sink}
