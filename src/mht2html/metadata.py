#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mht2html/metadata.py
"""Metadata extraction for decoded MHTML archives.

Browsers write descriptive headers (``Subject``, ``Date``,
``Snapshot-Content-Location``) above the first boundary, and the page itself
carries a ``<title>`` and ``<meta>`` tags. Both are collected into an
ArchiveMetadata record for reporting; none of it affects the converted HTML.
"""

from __future__ import annotations

import logging
from email import policy
from email.parser import HeaderParser

from bs4 import BeautifulSoup
from bs4.element import Tag

from mht2html.models import ArchiveMetadata, DecodedArchive

logger = logging.getLogger(__name__)


def _clean(value: object) -> str | None:
    text = str(value).strip() if value is not None else ""
    return text or None


def _apply_archive_headers(metadata: ArchiveMetadata, header_block: str) -> None:
    if not header_block.strip():
        return

    headers = HeaderParser(policy=policy.default).parsestr(header_block.lstrip("\r\n"))

    metadata.title = _clean(headers.get("Subject"))
    metadata.author = _clean(headers.get("From"))
    metadata.creation_date = _clean(headers.get("Date"))
    metadata.url = _clean(headers.get("Snapshot-Content-Location")) or _clean(headers.get("Content-Location"))
    metadata.creator = _clean(headers.get("X-Mailer"))

    message_id = _clean(headers.get("Message-ID"))
    if message_id:
        metadata.custom["message_id"] = message_id

    mime_version = _clean(headers.get("MIME-Version"))
    if mime_version:
        metadata.custom["mime_version"] = mime_version


def _apply_html_metadata(metadata: ArchiveMetadata, html: str) -> None:
    soup = BeautifulSoup(html, "html.parser")

    if not metadata.title:
        title_tag = soup.find("title")
        if isinstance(title_tag, Tag) and title_tag.string:
            metadata.title = str(title_tag.string).strip() or None

    html_tag = soup.find("html")
    if isinstance(html_tag, Tag) and html_tag.get("lang"):
        metadata.language = str(html_tag.get("lang")).strip() or None

    meta_keywords = soup.find("meta", attrs={"name": "keywords"})
    if isinstance(meta_keywords, Tag) and meta_keywords.get("content"):
        keywords_str = str(meta_keywords.get("content"))
        metadata.keywords = [k.strip() for k in keywords_str.split(",") if k.strip()]

    meta_description = soup.find("meta", attrs={"name": "description"})
    if isinstance(meta_description, Tag) and meta_description.get("content"):
        metadata.description = str(meta_description.get("content")).strip() or None


def extract_metadata(decoded: DecodedArchive) -> ArchiveMetadata:
    """Extract metadata from a decoded archive.

    Header values take precedence; the HTML ``<title>`` is used only when the
    archive has no ``Subject`` header.

    Parameters
    ----------
    decoded : DecodedArchive
        Output of the multipart decoder.

    Returns
    -------
    ArchiveMetadata
        Extracted metadata.

    """
    metadata = ArchiveMetadata(resource_count=len(decoded.resources))
    metadata.custom["boundary"] = decoded.boundary

    _apply_archive_headers(metadata, decoded.headers)
    _apply_html_metadata(metadata, decoded.html_body)

    logger.debug(f"Extracted metadata: {metadata.to_dict()}")
    return metadata
