"""
Ordered field collection produced by a serialization run
"""

from typing import Any, Iterable, Iterator, List, Optional, Tuple, Union

from aiohttp import FormData

from .attachments import AttachmentPayload

FieldValue = Union[str, AttachmentPayload]
Field = Tuple[str, FieldValue]


class FieldSink:
    """
    Append-only ordered multiset of (name, value) pairs

    Insertion order is preserved, so repeated names such as ``tags[]`` keep
    their source array order.
    """

    def __init__(self, fields: Optional[Iterable[Field]] = None):
        self._fields: List[Field] = []
        if fields is not None:
            self.extend(fields)

    def append(self, name: str, value: FieldValue) -> None:
        self._fields.append((name, value))

    def extend(self, fields: Iterable[Field]) -> None:
        self._fields.extend(fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return any(field_name == name for field_name, _ in self._fields)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldSink):
            return self._fields == other._fields
        return NotImplemented

    def __repr__(self) -> str:
        return f"FieldSink({self._fields!r})"

    def keys(self) -> List[str]:
        return [name for name, _ in self._fields]

    def items(self) -> List[Field]:
        return list(self._fields)

    def get(self, name: str, default: Any = None) -> Any:
        """First value stored under name"""
        for field_name, value in self._fields:
            if field_name == name:
                return value
        return default

    def get_all(self, name: str) -> List[FieldValue]:
        return [value for field_name, value in self._fields if field_name == name]

    def attachments(self) -> List[Tuple[str, AttachmentPayload]]:
        return [
            (name, value)
            for name, value in self._fields
            if isinstance(value, AttachmentPayload)
        ]

    def to_form_data(self, quote_fields: bool = True) -> FormData:
        """Build an aiohttp FormData with the fields in order"""
        form = FormData(quote_fields=quote_fields)
        for name, value in self._fields:
            if isinstance(value, AttachmentPayload):
                form.add_field(
                    name,
                    value.data,
                    content_type=value.content_type,
                    filename=value.filename,
                )
            else:
                form.add_field(name, value)
        return form
