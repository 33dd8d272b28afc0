"""
Tests for multipart request wrapping and the FieldSink
"""

import io

import pytest
from aiohttp import FormData

from structured_forms.serializers import (
    AttachmentPayload,
    Blob,
    FieldSink,
    MaxDepthExceededError,
    NullValueRejected,
    force_wrap_as_multipart,
    maybe_wrap_as_multipart,
)


class TestMaybeWrapAsMultipart:
    """Tests for maybe_wrap_as_multipart()"""

    @pytest.mark.asyncio
    async def test_plain_body_returns_same_object(self):
        options = {"method": "POST", "body": {"name": "Ann", "tags": ["a"]}}
        result = await maybe_wrap_as_multipart(options)
        assert result is options

    @pytest.mark.asyncio
    async def test_missing_body_returns_same_object(self):
        options = {"method": "GET"}
        assert await maybe_wrap_as_multipart(options) is options

    @pytest.mark.asyncio
    async def test_nested_attachment_wraps_body(self):
        body = {"purpose": "fine-tune", "meta": {"files": [Blob(b"{}", name="train.jsonl")]}}
        options = {"method": "POST", "path": "/files", "body": body}

        result = await maybe_wrap_as_multipart(options)

        assert result is not options
        assert options["body"] is body
        assert result["method"] == "POST"
        assert result["path"] == "/files"
        assert isinstance(result["body"], FieldSink)
        assert result["body"].keys() == ["purpose", "meta[files][]"]
        assert result["body"].get("meta[files][]").filename == "train.jsonl"

    @pytest.mark.asyncio
    async def test_uses_given_config(self):
        options = {"body": {"file": b"raw", "user": {"name": "Ann"}}}
        result = await maybe_wrap_as_multipart(options, {"object_strategy": "dot"})
        assert result["body"].keys() == ["file", "user.name"]

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        options = {"body": {"file": b"raw", "note": None}}
        with pytest.raises(NullValueRejected):
            await maybe_wrap_as_multipart(options)

    @pytest.mark.asyncio
    async def test_self_referencing_body_raises_depth_error(self):
        body = {"name": "x"}
        body["self"] = body
        with pytest.raises(MaxDepthExceededError):
            await maybe_wrap_as_multipart({"body": body})

    @pytest.mark.asyncio
    async def test_deep_plain_body_passes_through(self):
        body = {"level": "leaf"}
        for _ in range(30):
            body = {"level": body}
        options = {"body": body}
        assert await maybe_wrap_as_multipart(options) is options


class TestForceWrapAsMultipart:
    """Tests for force_wrap_as_multipart()"""

    @pytest.mark.asyncio
    async def test_always_serializes(self):
        options = {"method": "POST", "body": {"name": "Ann"}}
        result = await force_wrap_as_multipart(options)
        assert result is not options
        assert result["body"].items() == [("name", "Ann")]
        assert options["body"] == {"name": "Ann"}

    @pytest.mark.asyncio
    async def test_empty_body(self):
        result = await force_wrap_as_multipart({"method": "POST"})
        assert len(result["body"]) == 0


class TestFieldSink:
    """Tests for the ordered field collection"""

    def test_append_and_lookup(self):
        sink = FieldSink()
        sink.append("tags[]", "a")
        sink.append("name", "Ann")
        sink.append("tags[]", "b")

        assert len(sink) == 3
        assert "name" in sink
        assert "missing" not in sink
        assert sink.keys() == ["tags[]", "name", "tags[]"]
        assert sink.get("tags[]") == "a"
        assert sink.get("missing", "default") == "default"
        assert sink.get_all("tags[]") == ["a", "b"]

    def test_items_is_a_copy(self):
        sink = FieldSink([("a", "1")])
        items = sink.items()
        items.append(("b", "2"))
        assert len(sink) == 1

    def test_equality(self):
        assert FieldSink([("a", "1")]) == FieldSink([("a", "1")])
        assert FieldSink([("a", "1"), ("b", "2")]) != FieldSink([("b", "2"), ("a", "1")])

    def test_to_form_data_with_attachment(self):
        payload = AttachmentPayload(data=b"abc", filename="a.txt", content_type="text/plain")
        sink = FieldSink([("title", "Report"), ("file", payload)])

        form = sink.to_form_data()
        assert isinstance(form, FormData)
        assert form.is_multipart is True

    def test_to_form_data_without_attachment(self):
        form = FieldSink([("title", "Report"), ("tags[]", "a")]).to_form_data()
        assert isinstance(form, FormData)
        assert form.is_multipart is False

    def test_attachments(self):
        payload = AttachmentPayload(data=b"x", filename="x.bin")
        sink = FieldSink([("a", "1"), ("file", payload)])
        assert sink.attachments() == [("file", payload)]


@pytest.mark.asyncio
async def test_file_object_body_round_trip_to_form_data():
    options = {"body": {"upload": io.BytesIO(b"bytes"), "kind": "raw"}}
    result = await maybe_wrap_as_multipart(options)
    form = result["body"].to_form_data()
    assert form.is_multipart is True
