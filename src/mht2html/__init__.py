"""mht2html - Flatten MHTML web archives into self-contained HTML.

An MHTML archive (``.mht``/``.mhtml``) stores a web page and its images,
stylesheets and scripts as MIME parts of one file. mht2html decodes those
parts and splices them back into the page, producing a single HTML document
that renders without any external fetches.

The pipeline has two stateless stages:

- :class:`~mht2html.decoder.MultipartDecoder` splits the archive on its
  boundary and undoes base64 / quoted-printable transfer encodings.
- :class:`~mht2html.assembler.HTMLAssembler` inlines images as ``data:``
  URIs and stylesheets/scripts as ``<style>``/``<script>`` blocks.

Examples
--------
Convert an archive on disk:

    >>> from mht2html import convert_file
    >>> result = convert_file("page.mhtml")
    >>> with open("page.html", "w", encoding="utf-8") as f:
    ...     f.write(result.html)

Work on text you already have:

    >>> from mht2html import decode, assemble
    >>> archive = decode(raw_text)
    >>> html = assemble(archive.html_body, archive.resources)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "mht2html requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from mht2html.api import convert, convert_file, html_output_name, is_mhtml_filename  # noqa: E402
from mht2html.assembler import HTMLAssembler, assemble, assemble_document  # noqa: E402
from mht2html.decoder import MultipartDecoder, decode  # noqa: E402
from mht2html.exceptions import (  # noqa: E402
    BoundaryNotFoundError,
    FileError,
    FormatError,
    Mht2HtmlError,
    NoHtmlContentError,
    ParsingError,
    ValidationError,
)
from mht2html.models import (  # noqa: E402
    ArchiveMetadata,
    AssembledDocument,
    DecodedArchive,
    MimePart,
    ResourceRecord,
)
from mht2html.options import ConversionOptions  # noqa: E402
from mht2html.session import ConversionSession  # noqa: E402

__all__ = [
    "__version__",
    # Conversion
    "convert",
    "convert_file",
    "decode",
    "assemble",
    "assemble_document",
    "MultipartDecoder",
    "HTMLAssembler",
    "ConversionSession",
    "ConversionOptions",
    # Helpers
    "is_mhtml_filename",
    "html_output_name",
    # Models
    "ArchiveMetadata",
    "AssembledDocument",
    "DecodedArchive",
    "MimePart",
    "ResourceRecord",
    # Errors
    "Mht2HtmlError",
    "ValidationError",
    "FileError",
    "FormatError",
    "ParsingError",
    "BoundaryNotFoundError",
    "NoHtmlContentError",
]
