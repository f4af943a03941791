"""MHTML test fixture generators for testing MHTML-to-HTML conversion.

This module provides functions to programmatically create MHTML archives
for testing decoding and assembly. Archives use CRLF line endings, as
browsers write them.
"""

import base64
import quopri
from pathlib import Path
from typing import Optional

from utils import MINIMAL_PNG_B64

CRLF = "\r\n"
DEFAULT_BOUNDARY = "----MultipartBoundary--001"


def build_part(headers: dict[str, str], body: str) -> str:
    """Render one MIME part (headers, blank line, body) with CRLF line endings."""
    header_block = CRLF.join(f"{name}: {value}" for name, value in headers.items())
    return header_block + CRLF + CRLF + body + CRLF


def build_mhtml(
    parts: list[str],
    boundary: str = DEFAULT_BOUNDARY,
    extra_headers: Optional[dict[str, str]] = None,
) -> str:
    """Assemble rendered parts into a complete archive.

    Parameters
    ----------
    parts : list[str]
        Parts rendered with :func:`build_part`.
    boundary : str
        Boundary token.
    extra_headers : dict[str, str], optional
        Additional outer headers placed before ``MIME-Version``.

    Returns
    -------
    str
        Archive text.

    """
    outer = dict(extra_headers or {})
    outer["MIME-Version"] = "1.0"
    preamble = CRLF.join(f"{name}: {value}" for name, value in outer.items())
    preamble += CRLF + f'Content-Type: multipart/related;{CRLF}\ttype="text/html";{CRLF}\tboundary="{boundary}"'
    preamble += CRLF + CRLF

    delimiter = f"--{boundary}"
    body = "".join(f"{delimiter}{CRLF}{part}{CRLF}" for part in parts)
    return preamble + body + f"{delimiter}--{CRLF}"


def html_part(html: str, location: Optional[str] = "https://example.com/page.html") -> str:
    """Create an HTML part in plain 7bit encoding."""
    headers = {"Content-Type": 'text/html; charset="utf-8"'}
    if location:
        headers["Content-Location"] = location
    return build_part(headers, html)


def image_part(location: str, payload_b64: str = MINIMAL_PNG_B64, content_type: str = "image/png") -> str:
    """Create a base64 image part, wrapping the payload at 76 columns."""
    wrapped = CRLF.join(payload_b64[i : i + 76] for i in range(0, len(payload_b64), 76))
    return build_part(
        {
            "Content-Type": content_type,
            "Content-Transfer-Encoding": "base64",
            "Content-Location": location,
        },
        wrapped,
    )


def css_part(location: str, css: str, encoding: str = "7bit") -> str:
    """Create a stylesheet part, optionally base64 encoded."""
    body = base64.b64encode(css.encode("utf-8")).decode("ascii") if encoding == "base64" else css
    return build_part(
        {
            "Content-Type": "text/css",
            "Content-Transfer-Encoding": encoding,
            "Content-Location": location,
        },
        body,
    )


def script_part(location: str, script: str, content_type: str = "application/javascript") -> str:
    """Create a JavaScript part."""
    return build_part({"Content-Type": content_type, "Content-Location": location}, script)


def quoted_printable_html_part(html: str, location: str = "https://example.com/page.html") -> str:
    """Create an HTML part encoded as quoted-printable from UTF-8 bytes."""
    encoded = quopri.encodestring(html.encode("utf-8")).decode("ascii").replace("\n", CRLF)
    return build_part(
        {
            "Content-Type": 'text/html; charset="utf-8"',
            "Content-Transfer-Encoding": "quoted-printable",
            "Content-Location": location,
        },
        encoded,
    )


SIMPLE_PAGE = (
    "<!DOCTYPE html>\r\n"
    '<html lang="en">\r\n'
    "<head>\r\n"
    "<title>Test MHTML Document</title>\r\n"
    '<meta name="description" content="A page saved for testing">\r\n'
    '<meta name="keywords" content="mhtml, archive, test">\r\n'
    "</head>\r\n"
    "<body>\r\n"
    "<h1>Test MHTML Document</h1>\r\n"
    "<p>Simple content with <strong>bold</strong> text.</p>\r\n"
    "</body>\r\n"
    "</html>"
)

ASSET_PAGE = (
    "<!DOCTYPE html>\r\n"
    "<html>\r\n"
    "<head>\r\n"
    "<title>Page With Assets</title>\r\n"
    '<link rel="stylesheet" href="https://example.com/css/site.css">\r\n'
    '<script src="https://example.com/js/app.js"></script>\r\n'
    "</head>\r\n"
    "<body>\r\n"
    '<img src="https://example.com/images/logo.png" alt="logo">\r\n'
    '<img src="thumb.png" alt="relative thumbnail">\r\n'
    "</body>\r\n"
    "</html>"
)


def create_simple_mhtml() -> str:
    """Create an archive with a single HTML part and descriptive outer headers."""
    return build_mhtml(
        [html_part(SIMPLE_PAGE)],
        extra_headers={
            "From": "<Saved by Blink>",
            "Snapshot-Content-Location": "https://example.com/page.html",
            "Subject": "Archived Example Page",
            "Date": "Tue, 14 Jan 2025 10:15:00 -0000",
        },
    )


def create_mhtml_with_assets() -> str:
    """Create an archive with an image, a relative image, a stylesheet and a script."""
    return build_mhtml(
        [
            html_part(ASSET_PAGE),
            image_part("https://example.com/images/logo.png"),
            image_part("https://example.com/gallery/thumb.png"),
            css_part("https://example.com/css/site.css", "body { color: #333; }", encoding="base64"),
            script_part("https://example.com/js/app.js", "console.log('loaded');"),
            image_part("https://example.com/images/unused.gif", content_type="image/gif"),
        ]
    )


def create_quoted_printable_mhtml() -> str:
    """Create an archive whose HTML part is quoted-printable with non-ASCII text."""
    page = "<html><head><title>Café</title></head><body><p>Crème brûlée – 日本語</p></body></html>"
    return build_mhtml([quoted_printable_html_part(page)])


def create_mhtml_without_html() -> str:
    """Create an archive that holds only an image part."""
    return build_mhtml([image_part("https://example.com/images/logo.png")])


def create_malformed_mhtml() -> str:
    """Create an archive with a part lacking Content-Type and one lacking a header separator."""
    return build_mhtml(
        [
            build_part({"Content-Location": "https://example.com/mystery"}, "who am I?"),
            "Content-Type: text/plain; header only",
            html_part("<html><head></head><body><p>Survivor</p></body></html>"),
        ]
    )


def create_mhtml_file(content: str, temp_dir: Path, filename: str = "test.mhtml") -> Path:
    """Write archive text to a file in ``temp_dir`` and return its path.

    The text is written as UTF-8 bytes so CRLF line endings are preserved.
    """
    mhtml_file = temp_dir / filename
    mhtml_file.write_bytes(content.encode("utf-8"))
    return mhtml_file
