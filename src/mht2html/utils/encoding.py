#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mht2html/utils/encoding.py
"""Character encoding detection for archive files and text parts.

MHTML archives arrive as bytes but the decoder works on text. These helpers
turn bytes into text using chardet where the encoding is unknown and an
ordered list of fallback codecs otherwise.
"""

from __future__ import annotations

import logging
from typing import IO

import chardet

from mht2html.constants import (
    DEFAULT_CHARDET_CONFIDENCE_THRESHOLD,
    DEFAULT_CHARDET_SAMPLE_SIZE,
    DEFAULT_FALLBACK_ENCODINGS,
)

logger = logging.getLogger(__name__)


def detect_encoding(
    data: bytes,
    sample_size: int = DEFAULT_CHARDET_SAMPLE_SIZE,
    confidence_threshold: float = DEFAULT_CHARDET_CONFIDENCE_THRESHOLD,
) -> str | None:
    """Detect character encoding of binary data using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of bytes to sample for detection (uses first N bytes)
    confidence_threshold : float, default 0.7
        Minimum confidence level (0.0-1.0) required to trust detection

    Returns
    -------
    str | None
        Detected encoding name, or None if detection fails or the
        confidence is below the threshold

    """
    if not data:
        return None

    sample = data[:sample_size] if len(data) > sample_size else data
    result = chardet.detect(sample)

    if not result or not result.get("encoding"):
        logger.debug("chardet: No encoding detected")
        return None

    encoding = result["encoding"]
    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")

    if confidence >= confidence_threshold:
        return encoding

    logger.debug(f"chardet confidence {confidence:.2f} below threshold {confidence_threshold}")
    return None


def read_text_with_encoding_detection(
    data: bytes,
    fallback_encodings: list[str | None] | None = None,
    use_chardet: bool = True,
    chardet_sample_size: int = DEFAULT_CHARDET_SAMPLE_SIZE,
    chardet_confidence_threshold: float = DEFAULT_CHARDET_CONFIDENCE_THRESHOLD,
) -> str:
    """Read binary data as text with automatic encoding detection.

    Attempts to decode binary data using multiple strategies:
    1. chardet-based detection (if enabled)
    2. Fallback encodings in order (None entries are ignored)
    3. Final fallback: utf-8 with error replacement

    Parameters
    ----------
    data : bytes
        Binary data to decode
    fallback_encodings : list[str] | None, default None
        Encodings to try in order. If None, uses
        ['utf-8', 'utf-8-sig', 'latin-1']
    use_chardet : bool, default True
        Whether to attempt chardet-based detection first
    chardet_sample_size : int, default 8192
        Number of bytes to sample for chardet detection
    chardet_confidence_threshold : float, default 0.7
        Minimum confidence for chardet detection

    Returns
    -------
    str
        Decoded text content

    Examples
    --------
    >>> read_text_with_encoding_detection(b"Hello, world!")
    'Hello, world!'

    >>> read_text_with_encoding_detection(b"caf\\xe9", fallback_encodings=["cp1252"], use_chardet=False)
    'café'

    """
    if fallback_encodings is None:
        fallback_encodings = list(DEFAULT_FALLBACK_ENCODINGS)

    if use_chardet:
        detected_encoding = detect_encoding(
            data,
            sample_size=chardet_sample_size,
            confidence_threshold=chardet_confidence_threshold,
        )
        if detected_encoding:
            try:
                return data.decode(detected_encoding)
            except (UnicodeDecodeError, LookupError) as e:
                logger.debug(f"Failed to decode with chardet-detected encoding {detected_encoding}: {e}")

    for encoding in fallback_encodings:
        if not encoding:
            continue
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as e:
            logger.debug(f"Failed to decode with {encoding}: {e}")
        except LookupError as e:
            logger.debug(f"Unknown encoding {encoding}: {e}")

    logger.warning("All encoding attempts failed, using utf-8 with error replacement")
    return data.decode("utf-8", errors="replace")


def get_charset_from_content_type(content_type: str | None) -> str | None:
    """Extract the charset parameter from a Content-Type header value.

    Examples
    --------
    >>> get_charset_from_content_type('text/html; charset="utf-8"')
    'utf-8'
    >>> get_charset_from_content_type('text/html') is None
    True

    """
    if not content_type:
        return None

    for part in content_type.split(";")[1:]:
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        if key.strip().lower() == "charset":
            return value.strip().strip("\"'").strip() or None

    return None


def normalize_stream_to_text(
    stream: IO[bytes] | IO[str],
    fallback_encodings: list[str | None] | None = None,
    use_chardet: bool = True,
) -> str:
    """Read a binary or text stream and return its content as text.

    Raises
    ------
    TypeError
        If ``stream.read()`` returns something other than bytes or str

    """
    content = stream.read()

    if isinstance(content, bytes):
        return read_text_with_encoding_detection(
            content,
            fallback_encodings=fallback_encodings,
            use_chardet=use_chardet,
        )
    elif isinstance(content, str):
        return content

    raise TypeError(f"Stream read() returned unexpected type {type(content).__name__}. Expected bytes or str.")
