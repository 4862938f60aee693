"""Resolvers — turn a changed path into a deliverable resource record.

A resolver is any async callable taking a root-relative posix path and
returning a ``ResourceRecord``.  The default reads the file from disk and
uses the relative path itself as the resource URL; build-step resolvers
(transpile, bundle, fingerprint) can be plugged in instead.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from whisker._errors import ResourceError

type Resolver = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ResourceRecord:
    """The unit of delivery: a URL-like identifier and its current contents.

    Attributes:
        resource_url: Identifier clients use to locate the resource.
        contents: Full text of the resource.

    """

    resource_url: str
    contents: str

    def to_wire(self) -> dict[str, str]:
        """The JSON object sent to clients."""
        return {"resourceURL": self.resource_url, "contents": self.contents}

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> ResourceRecord:
        """Build a record from its JSON object form, validating it."""
        return validate_resource(data)


def validate_resource(resource: object) -> ResourceRecord:
    """Check a resolver result and normalize it to a ResourceRecord.

    Accepts a ``ResourceRecord`` or a mapping with ``resourceURL`` and
    ``contents`` keys.  A missing or empty URL, or missing contents, is a
    contract violation by the resolver and raises ``ResourceError``.

    """
    if isinstance(resource, ResourceRecord):
        url, contents = resource.resource_url, resource.contents
    elif isinstance(resource, Mapping):
        url, contents = resource.get("resourceURL"), resource.get("contents")
    else:
        msg = f"expecting a resource record, got {type(resource).__name__}"
        raise ResourceError(msg)

    if not isinstance(url, str) or not url:
        msg = "expecting resourceURL"
        raise ResourceError(msg)
    if not isinstance(contents, str):
        msg = f"expecting contents for {url}"
        raise ResourceError(msg)

    if isinstance(resource, ResourceRecord):
        return resource
    return ResourceRecord(resource_url=url, contents=contents)


def file_resolver(root: Path) -> Resolver:
    """Default resolver: read the file and use its relative path as the URL.

    The read runs in a worker thread so the event loop keeps serving
    clients.  I/O and decoding errors propagate to the caller.

    """

    async def resolve(relative_path: str) -> ResourceRecord:
        path = root / relative_path
        contents = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return ResourceRecord(resource_url=relative_path, contents=contents)

    return resolve
