"""Tests for whisker.reactive.resolver — records, validation, file resolver."""

from __future__ import annotations

from pathlib import Path

import pytest

from whisker._errors import ResourceError, WhiskerError
from whisker.reactive.resolver import ResourceRecord, file_resolver, validate_resource


class TestResourceRecord:
    def test_wire_form(self) -> None:
        record = ResourceRecord(resource_url="a.js", contents="x")
        assert record.to_wire() == {"resourceURL": "a.js", "contents": "x"}

    def test_from_wire(self) -> None:
        record = ResourceRecord.from_wire({"type": "resource", "resourceURL": "a.js", "contents": "x"})
        assert record == ResourceRecord(resource_url="a.js", contents="x")

    def test_from_wire_rejects_missing_url(self) -> None:
        with pytest.raises(ResourceError):
            ResourceRecord.from_wire({"contents": "x"})


class TestValidateResource:
    """validate_resource() — resolver post-condition."""

    def test_record_passes_through(self) -> None:
        record = ResourceRecord(resource_url="a.js", contents="x")
        assert validate_resource(record) is record

    def test_mapping_normalized(self) -> None:
        assert validate_resource({"resourceURL": "a.css", "contents": "p{}"}) == ResourceRecord(
            resource_url="a.css", contents="p{}"
        )

    def test_empty_contents_allowed(self) -> None:
        assert validate_resource({"resourceURL": "empty.js", "contents": ""}).contents == ""

    @pytest.mark.parametrize(
        "bad",
        [
            {"contents": "x"},
            {"resourceURL": "", "contents": "x"},
            {"resourceURL": 5, "contents": "x"},
            ResourceRecord(resource_url="", contents="x"),
        ],
    )
    def test_missing_url(self, bad: object) -> None:
        with pytest.raises(ResourceError, match="expecting resourceURL"):
            validate_resource(bad)

    def test_missing_contents(self) -> None:
        with pytest.raises(ResourceError, match="expecting contents for a.js"):
            validate_resource({"resourceURL": "a.js"})

    def test_none_contents(self) -> None:
        with pytest.raises(ResourceError):
            validate_resource({"resourceURL": "a.js", "contents": None})

    @pytest.mark.parametrize("bad", [None, "a.js", 42, ["a.js", "x"]])
    def test_wrong_type(self, bad: object) -> None:
        with pytest.raises(ResourceError):
            validate_resource(bad)

    def test_is_whisker_error(self) -> None:
        with pytest.raises(WhiskerError):
            validate_resource(None)


class TestFileResolver:
    """file_resolver() — reads the file off the event loop."""

    @pytest.mark.asyncio
    async def test_reads_file(self, watched_root: Path) -> None:
        resolve = file_resolver(watched_root)
        assert await resolve("a.js") == ResourceRecord(resource_url="a.js", contents="x")

    @pytest.mark.asyncio
    async def test_nested_path(self, watched_root: Path) -> None:
        record = await file_resolver(watched_root)("lib/b.js")
        assert record.resource_url == "lib/b.js"
        assert "export" in record.contents

    @pytest.mark.asyncio
    async def test_missing_file_propagates(self, watched_root: Path) -> None:
        with pytest.raises(FileNotFoundError):
            await file_resolver(watched_root)("gone.js")
