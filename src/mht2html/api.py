"""The major exported API functions for MHTML conversion."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/mht2html/api.py
import logging
from pathlib import Path
from typing import IO, Any, Optional, Union

from mht2html.assembler import HTMLAssembler
from mht2html.constants import HTML_OUTPUT_SUFFIX, MHTML_EXTENSIONS
from mht2html.decoder import MultipartDecoder
from mht2html.exceptions import FileError, FormatError, ValidationError
from mht2html.metadata import extract_metadata
from mht2html.models import AssembledDocument
from mht2html.options import ConversionOptions
from mht2html.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection

logger = logging.getLogger(__name__)

ArchiveSource = Union[str, Path, bytes, IO[bytes], IO[str]]


def is_mhtml_filename(name: Union[str, Path]) -> bool:
    """Return True when ``name`` ends with ``.mht`` or ``.mhtml`` (any case)."""
    return Path(name).suffix.lower() in MHTML_EXTENSIONS


def html_output_name(name: Union[str, Path]) -> str:
    """Return the HTML filename for an archive name (``page.mhtml`` -> ``page.html``).

    Names without an archive extension get ``.html`` appended.
    """
    path = Path(name)
    if path.suffix.lower() in MHTML_EXTENSIONS:
        return path.stem + HTML_OUTPUT_SUFFIX
    return path.name + HTML_OUTPUT_SUFFIX


def _resolve_options(options: Optional[ConversionOptions], **kwargs: Any) -> ConversionOptions:
    """Merge keyword overrides into an options instance."""
    resolved = options or ConversionOptions()
    if not kwargs:
        return resolved

    unknown = set(kwargs) - ConversionOptions.field_names()
    if unknown:
        raise ValidationError(
            f"Unknown conversion option(s): {', '.join(sorted(unknown))}",
            parameter_name=sorted(unknown)[0],
            parameter_value=kwargs[sorted(unknown)[0]],
        )

    try:
        return resolved.create_updated(**kwargs)
    except ValueError as e:
        raise ValidationError(str(e), original_error=e) from e


def convert(raw: str, options: Optional[ConversionOptions] = None, **kwargs: Any) -> AssembledDocument:
    """Convert archive text into a self-contained HTML document.

    Parameters
    ----------
    raw : str
        Complete MHTML archive content as text.
    options : ConversionOptions, optional
        Conversion options. Defaults to ``ConversionOptions()``.
    kwargs : Any
        Individual option overrides, e.g. ``inline_scripts=False``.

    Returns
    -------
    AssembledDocument
        The flattened HTML, the resources spliced into it, the resources that
        matched nothing, and archive metadata.

    Raises
    ------
    BoundaryNotFoundError
        If the archive declares no multipart boundary.
    NoHtmlContentError
        If the archive holds no HTML part.
    ValidationError
        If a keyword override is unknown or invalid.

    Examples
    --------
    >>> result = convert(archive_text)
    >>> result.html.startswith("<!DOCTYPE html>")
    True
    >>> [r.location for r in result.resources]
    ['https://example.com/logo.png']

    """
    resolved = _resolve_options(options, **kwargs)

    decoded = MultipartDecoder(resolved).decode(raw)
    document = HTMLAssembler(resolved).assemble_document(decoded.html_body, decoded.resources)
    document.metadata = extract_metadata(decoded)

    return document


def load_archive_text(source: ArchiveSource) -> str:
    """Read an archive from a path, bytes, or stream and return its text.

    Paths must carry an ``.mht``/``.mhtml`` extension. Bytes are decoded with
    chardet-based detection.

    Raises
    ------
    FormatError
        If a path does not carry an archive extension.
    FileError
        If the file is missing or cannot be read.

    """
    if isinstance(source, bytes):
        return read_text_with_encoding_detection(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not is_mhtml_filename(path):
            raise FormatError(f"Please select a valid .mht or .mhtml file: {path.name}", file_path=str(path))
        if not path.is_file():
            raise FileError(f"File not found: {path}", file_path=str(path))
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FileError(f"Could not read {path}: {e}", file_path=str(path), original_error=e) from e
        logger.debug(f"Read {len(data)} bytes from {path}")
        return read_text_with_encoding_detection(data)

    if hasattr(source, "read"):
        return normalize_stream_to_text(source)

    raise ValidationError(
        f"Unsupported archive source type: {type(source).__name__}",
        parameter_name="source",
        parameter_value=type(source),
    )


def convert_file(
    source: ArchiveSource, options: Optional[ConversionOptions] = None, **kwargs: Any
) -> AssembledDocument:
    """Read an archive from ``source`` and convert it.

    Parameters
    ----------
    source : str, Path, bytes, or file-like
        A path to a ``.mht``/``.mhtml`` file, raw archive bytes, or an open
        binary or text stream.
    options : ConversionOptions, optional
        Conversion options.
    kwargs : Any
        Individual option overrides.

    Returns
    -------
    AssembledDocument
        See :func:`convert`.

    """
    raw = load_archive_text(source)
    document = convert(raw, options, **kwargs)
    if isinstance(source, (str, Path)) and document.metadata is not None:
        document.metadata.custom["source_path"] = str(source)
    return document
