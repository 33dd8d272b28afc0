"""
Recursive serializer that flattens nested values into form fields
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, List, Sequence, Tuple

from ..logger import get_logger, log_with_context
from .attachments import materialize_attachment
from .config import ConfigLike, SerializationConfig
from .depth import check_depth
from .errors import NullValueRejected, UnsupportedValueType
from .keys import KeyFormatter
from .presets import describe_config, resolve_config
from .sink import Field, FieldSink
from .type_detection import ValueKind, classify, to_field_string

# (key, value, depth) for one recursive step
Frame = Tuple[str, Any, int]

logger = get_logger("serializer")


class FormSerializer:
    """
    Flatten arbitrary nested values into an ordered list of form fields

    Each instance carries its own resolved configuration; instances share no
    state, and every call works on fields it owns until it succeeds.
    """

    def __init__(self, config: ConfigLike = None, **options: Any):
        self.config: SerializationConfig = resolve_config(config, **options)
        self.keys = KeyFormatter(self.config)
        if logger.isEnabledFor(logging.DEBUG):
            log_with_context(
                logger,
                "debug",
                "Resolved serialization config",
                config=describe_config(self.config),
            )

    def __repr__(self) -> str:
        return f"FormSerializer(config={self.config!r})"

    async def create_form(self, body: Any) -> FieldSink:
        """
        Serialize the top-level entries of ``body`` into a fresh FieldSink

        Args:
            body: Mapping of field names to nested values; falsy bodies
                produce an empty sink

        Returns:
            The populated FieldSink

        Raises:
            UnsupportedValueType: If body is not a mapping
        """
        sink = FieldSink()
        if not body:
            return sink
        if not isinstance(body, Mapping):
            raise UnsupportedValueType("<body>", body)

        fields = await self._collect_frames(
            [(self.keys.top_level_key(key), value, 0) for key, value in body.items()]
        )
        sink.extend(fields)

        log_with_context(
            logger,
            "debug",
            "Serialized form",
            field_count=len(sink),
            attachment_count=len(sink.attachments()),
            array_strategy=self.config.array_strategy,
            object_strategy=self.config.object_strategy,
        )
        return sink

    async def add_field_value(
        self, sink: FieldSink, key: str, value: Any, depth: int = 0
    ) -> None:
        """
        Serialize one value under ``key`` and append its fields to ``sink``

        Nothing is appended unless the whole value serializes successfully.
        """
        fields = await self._collect(key, value, depth)
        sink.extend(fields)

    async def serialize_value(self, key: str, value: Any, depth: int = 0) -> List[Field]:
        """Return the fields one value flattens into"""
        return await self._collect(key, value, depth)

    async def _collect_frames(self, frames: Sequence[Frame]) -> List[Field]:
        """Serialize sibling frames, keeping their fields in source order"""
        merged: List[Field] = []

        if not self.config.concurrent_siblings or len(frames) < 2:
            for key, value, depth in frames:
                merged.extend(await self._collect(key, value, depth))
            return merged

        tasks = [
            asyncio.ensure_future(self._collect(key, value, depth))
            for key, value, depth in frames
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # One failure aborts the whole run
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for fields in results:
            merged.extend(fields)
        return merged

    async def _collect(self, key: str, value: Any, depth: int) -> List[Field]:
        kind = classify(value)

        if kind is ValueKind.OMITTED:
            return []
        if kind is ValueKind.NULL:
            raise NullValueRejected(key)

        check_depth(depth, self.config.max_depth, key)

        if kind is ValueKind.SCALAR:
            return [(key, to_field_string(value))]
        if kind is ValueKind.ATTACHMENT:
            return [(key, await materialize_attachment(value))]
        if kind is ValueKind.ARRAY:
            return await self._collect_array(key, value, depth)
        if kind is ValueKind.OBJECT:
            return await self._collect_frames(
                [
                    (self.keys.object_key(key, str(name)), item, depth + 1)
                    for name, item in value.items()
                ]
            )
        raise UnsupportedValueType(key, value)

    async def _collect_array(self, key: str, items: Sequence[Any], depth: int) -> List[Field]:
        if not items:
            return [(key, "")] if self.config.include_empty_arrays else []

        if self.config.array_strategy == "comma-joined":
            if all(classify(item) is ValueKind.SCALAR for item in items):
                return [(self._comma_key(key, items), self._join(items))]
            # Composite or attachment elements cannot be joined into one string
            fallback_key = self.keys.fallback_array_key(key)
            frames = [(fallback_key, item, depth + 1) for item in items]
        else:
            frames = [
                (self.keys.array_key(key, index), item, depth + 1)
                for index, item in enumerate(items)
            ]
        return await self._collect_frames(frames)

    def _comma_key(self, key: str, items: Sequence[Any]) -> str:
        if self.config.comma_round_trip and len(items) == 1:
            return f"{key}[]"
        return key

    def _join(self, items: Sequence[Any]) -> str:
        return self.config.array_delimiter.join(to_field_string(item) for item in items)


async def create_form(body: Any, config: ConfigLike = None, **options: Any) -> FieldSink:
    """Serialize ``body`` with a fresh FormSerializer"""
    return await FormSerializer(config, **options).create_form(body)


async def create_form_with_preset(
    body: Any, preset: str, config: ConfigLike = None
) -> FieldSink:
    """Serialize ``body`` using a named preset from PRESETS"""
    return await FormSerializer(resolve_config(config, preset=preset)).create_form(body)


async def add_field_value(
    sink: FieldSink,
    key: str,
    value: Any,
    config: ConfigLike = None,
    depth: int = 0,
) -> None:
    """Serialize a single value into an existing sink"""
    await FormSerializer(config).add_field_value(sink, key, value, depth)
