#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mht2html/models.py
"""Data containers passed between the decoder, the assembler and callers.

None of these objects is retained by the library between conversions; they
are plain values returned to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class MimePart:
    """A single MIME part split out of an archive, prior to body decoding.

    Parameters
    ----------
    headers : dict[str, str]
        Header values keyed by lowercased header name. Only the headers the
        decoder understands are present.
    raw_body : str
        Body text exactly as it appeared after the header separator.
    index : int
        Zero-based position of the part within the archive.

    """

    headers: dict[str, str] = field(default_factory=dict)
    raw_body: str = ""
    index: int = 0

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def location(self) -> str | None:
        return self.headers.get("content-location")

    @property
    def transfer_encoding(self) -> str | None:
        return self.headers.get("content-transfer-encoding")

    @property
    def charset(self) -> str | None:
        return self.headers.get("charset")


@dataclass(frozen=True)
class ResourceRecord:
    """A decoded archive resource that may be spliced into the page.

    Parameters
    ----------
    location : str or None
        Original ``Content-Location`` of the part.
    content_type : str
        MIME type, e.g. ``image/png``.
    content : str
        Decoded text, or base64 text when ``is_binary_base64`` is true.
    is_binary_base64 : bool
        True iff ``content`` still holds base64-encoded binary data.

    """

    location: str | None
    content_type: str
    content: str
    is_binary_base64: bool = False

    @property
    def filename(self) -> str:
        """Final path segment of the location (text after the last ``/``)."""
        return (self.location or "").split("/")[-1]

    def to_dict(self, include_content: bool = False) -> dict[str, Any]:
        """Return a JSON/YAML friendly summary of the record."""
        data: dict[str, Any] = {
            "location": self.location,
            "content_type": self.content_type,
            "is_binary_base64": self.is_binary_base64,
            "size": len(self.content),
        }
        if include_content:
            data["content"] = self.content
        return data


@dataclass
class DecodedArchive:
    """Result of decoding an archive.

    Parameters
    ----------
    html_body : str
        Decoded primary HTML document.
    resources : list[ResourceRecord]
        Every non-primary part that carried a ``Content-Location``, in archive order.
    boundary : str
        Boundary token the archive was split on.
    headers : str
        Raw outer header block (text before the first delimiter).

    """

    html_body: str
    resources: list[ResourceRecord] = field(default_factory=list)
    boundary: str = ""
    headers: str = ""


@dataclass
class ArchiveMetadata:
    """Descriptive metadata gathered from the archive headers and the page."""

    title: str | None = None
    author: str | None = None
    creation_date: str | None = None
    url: str | None = None
    language: str | None = None
    description: str | None = None
    keywords: list[str] = field(default_factory=list)
    creator: str | None = None
    resource_count: int = 0
    custom: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the populated fields as a dictionary, omitting empty values."""
        data: dict[str, Any] = {}
        for key in (
            "title",
            "author",
            "creation_date",
            "url",
            "language",
            "description",
            "keywords",
            "creator",
        ):
            value = getattr(self, key)
            if value:
                data[key] = value
        data["resource_count"] = self.resource_count
        if self.custom:
            data["custom"] = dict(self.custom)
        return data


@dataclass
class AssembledDocument:
    """Final self-contained HTML plus diagnostics about what was spliced in.

    Parameters
    ----------
    html : str
        The flattened HTML document.
    resources : list[ResourceRecord]
        Resources that replaced a reference or were inserted into the page.
    unreferenced : list[ResourceRecord]
        Resources that matched nothing and were left out.
    metadata : ArchiveMetadata or None
        Metadata attached by ``mht2html.api.convert``.

    """

    html: str
    resources: list[ResourceRecord] = field(default_factory=list)
    unreferenced: list[ResourceRecord] = field(default_factory=list)
    metadata: ArchiveMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a report-friendly summary (without the HTML itself)."""
        return {
            "metadata": self.metadata.to_dict() if self.metadata else {},
            "resources": [r.to_dict() for r in self.resources],
            "unreferenced": [r.to_dict() for r in self.unreferenced],
        }
