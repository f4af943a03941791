#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mht2html/decoder.py
"""Multipart decoder that splits MHTML archives into an HTML body and resources.

This module provides the MultipartDecoder class. It locates the boundary
token, splits the archive on ``--<boundary>``, reads the headers of every
part and undoes the part's content-transfer-encoding. The first ``text/html``
part becomes the document body; every other part with a ``Content-Location``
becomes a ResourceRecord.

Parsing is deliberately regex based rather than a full MIME parse: the
boundary is taken from the first ``boundary="..."`` attribute anywhere in the
input, and headers are read line by line. Archives written by browsers all
follow this shape.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Optional

from mht2html.constants import (
    BOUNDARY_DELIMITER_PREFIX,
    CONTENT_TYPE_HTML,
    PART_HEADER_SEPARATOR,
    TEXT_CONTENT_TYPE_PREFIX,
    TRANSFER_ENCODING_BASE64,
    TRANSFER_ENCODING_QUOTED_PRINTABLE,
)
from mht2html.exceptions import BoundaryNotFoundError, NoHtmlContentError, PartDecodeError
from mht2html.models import DecodedArchive, MimePart, ResourceRecord
from mht2html.options import ConversionOptions
from mht2html.utils.encoding import get_charset_from_content_type, read_text_with_encoding_detection

logger = logging.getLogger(__name__)

_BOUNDARY_PATTERN = re.compile(r'boundary="([^"]+)"', re.IGNORECASE)

_CONTENT_TYPE_PATTERN = re.compile(r"Content-Type:\s*([^;\r\n]+)", re.IGNORECASE)
_CONTENT_TYPE_LINE_PATTERN = re.compile(r"Content-Type:\s*([^\r\n]+)", re.IGNORECASE)
_CONTENT_LOCATION_PATTERN = re.compile(r"Content-Location:\s*([^\r\n]+)", re.IGNORECASE)
_TRANSFER_ENCODING_PATTERN = re.compile(r"Content-Transfer-Encoding:\s*([^\r\n]+)", re.IGNORECASE)

_LINE_BREAK_PATTERN = re.compile(r"[\r\n]")
_BARE_LF_PATTERN = re.compile(r"(?<!\r)\n")

_QP_SOFT_BREAK_PATTERN = re.compile(r"=\r?\n")
_QP_ESCAPE_PATTERN = re.compile(r"=([0-9A-Fa-f]{2})")


def find_boundary(raw: str) -> str:
    """Return the first ``boundary="..."`` token found anywhere in ``raw``.

    Raises
    ------
    BoundaryNotFoundError
        If the input declares no boundary.

    """
    match = _BOUNDARY_PATTERN.search(raw)
    if not match:
        raise BoundaryNotFoundError()
    return match.group(1)


def normalize_line_endings(raw: str) -> str:
    """Convert bare LF line breaks to CRLF, leaving existing CRLF untouched."""
    return _BARE_LF_PATTERN.sub("\r\n", raw)


def decode_quoted_printable(body: str) -> str:
    """Decode a quoted-printable body and interpret the result as UTF-8.

    Soft line breaks (``=`` at the end of a line) are removed first. Each
    ``=XX`` escape then contributes the raw byte ``0xXX`` while literal
    characters contribute their UTF-8 encoding, so multi-byte sequences split
    across escapes reassemble into the right characters.

    Examples
    --------
    >>> decode_quoted_printable("caf=C3=A9")
    'café'
    >>> decode_quoted_printable("long =\\r\\nline")
    'long line'

    """
    unfolded = _QP_SOFT_BREAK_PATTERN.sub("", body)

    buffer = bytearray()
    position = 0
    for match in _QP_ESCAPE_PATTERN.finditer(unfolded):
        buffer += unfolded[position : match.start()].encode("utf-8")
        buffer.append(int(match.group(1), 16))
        position = match.end()
    buffer += unfolded[position:].encode("utf-8")

    try:
        return buffer.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning(f"Quoted-printable body is not valid UTF-8, replacing undecodable bytes: {e}")
        return buffer.decode("utf-8", errors="replace")


def parse_part(segment: str, index: int = 0) -> MimePart:
    """Split one boundary-delimited segment into headers and raw body.

    Parameters
    ----------
    segment : str
        Text between two boundary delimiters.
    index : int
        Position of the segment, used in diagnostics.

    Returns
    -------
    MimePart
        The part with its recognised headers.

    Raises
    ------
    PartDecodeError
        If the segment has no header separator or no Content-Type header.

    """
    header_end = segment.find(PART_HEADER_SEPARATOR)
    if header_end == -1:
        raise PartDecodeError(f"Part {index} has no header/body separator", part_index=index)

    header_block = segment[:header_end]
    raw_body = segment[header_end + len(PART_HEADER_SEPARATOR) :]

    content_type_match = _CONTENT_TYPE_PATTERN.search(header_block)
    if not content_type_match:
        raise PartDecodeError(f"Part {index} has no Content-Type header", part_index=index)

    headers = {"content-type": content_type_match.group(1).strip()}

    content_type_line = _CONTENT_TYPE_LINE_PATTERN.search(header_block)
    charset = get_charset_from_content_type(content_type_line.group(1)) if content_type_line else None
    if charset:
        headers["charset"] = charset

    location_match = _CONTENT_LOCATION_PATTERN.search(header_block)
    if location_match:
        headers["content-location"] = location_match.group(1).strip()

    encoding_match = _TRANSFER_ENCODING_PATTERN.search(header_block)
    if encoding_match:
        headers["content-transfer-encoding"] = encoding_match.group(1).strip().lower()

    return MimePart(headers=headers, raw_body=raw_body, index=index)


class MultipartDecoder:
    """Decode MHTML archive text into an HTML body and resource records.

    The decoder holds only its options; every call to :meth:`decode` is
    independent.

    Parameters
    ----------
    options : ConversionOptions or None
        Conversion options. Only ``normalize_line_endings`` and
        ``max_resource_size`` affect decoding.

    """

    def __init__(self, options: Optional[ConversionOptions] = None):
        """Initialize the decoder with options."""
        self.options: ConversionOptions = options or ConversionOptions()

    def decode(self, raw: str) -> DecodedArchive:
        """Decode archive text.

        Parameters
        ----------
        raw : str
            Complete archive content, already decoded from bytes.

        Returns
        -------
        DecodedArchive
            Primary HTML body plus every resource that carried a location.

        Raises
        ------
        BoundaryNotFoundError
            If no boundary attribute exists anywhere in the input.
        NoHtmlContentError
            If no part yielded a primary HTML body.

        """
        if self.options.normalize_line_endings:
            raw = normalize_line_endings(raw)

        boundary = find_boundary(raw)
        segments = raw.split(BOUNDARY_DELIMITER_PREFIX + boundary)
        logger.debug(f"Found boundary {boundary!r}; archive has {max(len(segments) - 2, 0)} candidate parts")

        html_body = ""
        resources: list[ResourceRecord] = []

        # The first segment is the preamble and the last is the closing marker
        for index, segment in enumerate(segments[1:-1]):
            try:
                part = parse_part(segment, index)
                content, is_binary_base64 = self._decode_body(part)
            except PartDecodeError as e:
                logger.warning(f"Skipping part: {e.message}")
                continue

            content_type = part.content_type or ""

            if content_type.startswith(CONTENT_TYPE_HTML) and not html_body:
                html_body = content
                logger.debug(f"Part {index} is the primary HTML document")
                continue

            if not part.location:
                logger.debug(f"Discarding part {index} ({content_type}): no Content-Location")
                continue

            if self.options.max_resource_size is not None and len(content) > self.options.max_resource_size:
                logger.warning(
                    f"Dropping resource {part.location}: {len(content)} characters exceeds "
                    f"max_resource_size={self.options.max_resource_size}"
                )
                continue

            resources.append(
                ResourceRecord(
                    location=part.location,
                    content_type=content_type,
                    content=content,
                    is_binary_base64=is_binary_base64,
                )
            )

        if not html_body:
            raise NoHtmlContentError()

        logger.debug(f"Decoded HTML body ({len(html_body)} characters) and {len(resources)} resources")
        return DecodedArchive(html_body=html_body, resources=resources, boundary=boundary, headers=segments[0])

    def _decode_body(self, part: MimePart) -> tuple[str, bool]:
        """Undo the part's transfer encoding.

        Returns
        -------
        tuple[str, bool]
            The decoded content and whether it is still base64 binary data.

        Raises
        ------
        PartDecodeError
            If a base64 text part cannot be decoded.

        """
        encoding = part.transfer_encoding
        content_type = part.content_type or ""

        if encoding == TRANSFER_ENCODING_BASE64:
            compact = _LINE_BREAK_PATTERN.sub("", part.raw_body)
            if not content_type.startswith(TEXT_CONTENT_TYPE_PREFIX):
                return compact, True
            compact = "".join(compact.split())
            try:
                payload = base64.b64decode(compact + "=" * (-len(compact) % 4), validate=True)
            except (binascii.Error, ValueError) as e:
                raise PartDecodeError(
                    f"Part {part.index} ({content_type}) has invalid base64 content: {e}",
                    part_index=part.index,
                    original_error=e,
                ) from e
            text = read_text_with_encoding_detection(
                payload, fallback_encodings=[part.charset, "utf-8", "latin-1"], use_chardet=False
            )
            return text, False

        if encoding == TRANSFER_ENCODING_QUOTED_PRINTABLE:
            return decode_quoted_printable(part.raw_body), False

        return part.raw_body, False


def decode(raw: str, options: Optional[ConversionOptions] = None) -> DecodedArchive:
    """Decode archive text with a one-off :class:`MultipartDecoder`."""
    return MultipartDecoder(options).decode(raw)
