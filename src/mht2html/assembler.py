#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mht2html/assembler.py
"""Splice decoded archive resources back into the primary HTML document.

Resources are matched against the markup with regular expressions built from
the escaped resource location, so tag shapes outside the matched references
are preserved exactly:

- images replace ``src="..."`` values with ``data:`` URIs, first by full
  location and then by bare filename;
- stylesheets replace ``<link href="...">`` tags with ``<style>`` blocks or
  are inserted before ``</head>``;
- scripts replace ``<script src="..."></script>`` tags with inline scripts or
  are inserted before ``</head>``.

A fixed style block marked with ``id="mht-converter-added-styles"`` keeps the
flattened page scrollable; it is added at most once.
"""

from __future__ import annotations

import base64
import logging
import re
from typing import Iterable, Optional

from mht2html.constants import (
    CONTENT_TYPE_CSS,
    HEAD_CLOSE_TAG,
    IMAGE_CONTENT_TYPE_PREFIX,
    JAVASCRIPT_CONTENT_TYPES,
    SCROLL_STYLES_BLOCK,
    SCROLL_STYLES_OPEN_TAG,
)
from mht2html.models import AssembledDocument, ResourceRecord
from mht2html.options import ConversionOptions

logger = logging.getLogger(__name__)


def build_data_uri(resource: ResourceRecord) -> str:
    """Return a ``data:`` URI holding the resource payload."""
    if resource.is_binary_base64:
        payload = resource.content
    else:
        payload = base64.b64encode(resource.content.encode("utf-8")).decode("ascii")
    return f"data:{resource.content_type};base64,{payload}"


def _src_pattern(value: str) -> re.Pattern[str]:
    return re.compile(r"""((?i:src)=["'])""" + re.escape(value) + r"""(["'])""")


def _link_pattern(location: str) -> re.Pattern[str]:
    return re.compile(r"""(?i:<link)[^>]+(?i:href)=["']""" + re.escape(location) + r"""["'][^>]*>""")


def _script_pattern(location: str) -> re.Pattern[str]:
    return re.compile(
        r"""(?i:<script)[^>]+(?i:src)=["']""" + re.escape(location) + r"""["'][^>]*>(?i:</script>)"""
    )


def _insert_before_head_close(html: str, block: str) -> tuple[str, bool]:
    if HEAD_CLOSE_TAG not in html:
        return html, False
    return html.replace(HEAD_CLOSE_TAG, block + HEAD_CLOSE_TAG, 1), True


def inject_scroll_styles(html: str) -> str:
    """Add the scroll-safety style block unless the marker is already present."""
    if SCROLL_STYLES_OPEN_TAG in html:
        return html
    if HEAD_CLOSE_TAG in html:
        return html.replace(HEAD_CLOSE_TAG, SCROLL_STYLES_BLOCK + HEAD_CLOSE_TAG, 1)
    return SCROLL_STYLES_BLOCK + html


class HTMLAssembler:
    """Produce a self-contained HTML document from a body and its resources.

    Parameters
    ----------
    options : ConversionOptions or None
        Conversion options controlling which resource kinds are inlined.

    """

    def __init__(self, options: Optional[ConversionOptions] = None):
        """Initialize the assembler with options."""
        self.options: ConversionOptions = options or ConversionOptions()

    def assemble(self, html_body: str, resources: Iterable[ResourceRecord]) -> str:
        """Return the flattened HTML for ``html_body`` and ``resources``."""
        return self.assemble_document(html_body, resources).html

    def assemble_document(self, html_body: str, resources: Iterable[ResourceRecord]) -> AssembledDocument:
        """Splice resources into the HTML and report which ones were used.

        Resources are applied in order, so when two resources share a
        location the later one is applied on top of the earlier result.

        Parameters
        ----------
        html_body : str
            Primary HTML document.
        resources : iterable of ResourceRecord
            Decoded resources.

        Returns
        -------
        AssembledDocument
            Final HTML with the spliced and unreferenced resources listed.

        """
        html = html_body
        spliced: list[ResourceRecord] = []
        unreferenced: list[ResourceRecord] = []

        for resource in resources:
            html, used = self._splice(html, resource)
            (spliced if used else unreferenced).append(resource)

        if self.options.inject_scroll_styles:
            html = inject_scroll_styles(html)

        logger.debug(f"Spliced {len(spliced)} resources, {len(unreferenced)} unreferenced")
        return AssembledDocument(html=html, resources=spliced, unreferenced=unreferenced)

    def _splice(self, html: str, resource: ResourceRecord) -> tuple[str, bool]:
        content_type = resource.content_type
        if not resource.location:
            return html, False

        if content_type.startswith(IMAGE_CONTENT_TYPE_PREFIX):
            if not self.options.inline_images:
                return html, False
            return self._inline_image(html, resource)

        if content_type.startswith(CONTENT_TYPE_CSS):
            if not self.options.inline_stylesheets:
                return html, False
            block = f'<style data-origin="{resource.location}">{resource.content}</style>'
            return self._replace_or_insert(html, _link_pattern(resource.location), block, resource)

        if content_type.startswith(JAVASCRIPT_CONTENT_TYPES):
            if not self.options.inline_scripts:
                return html, False
            block = f'<script data-origin="{resource.location}">{resource.content}</script>'
            return self._replace_or_insert(html, _script_pattern(resource.location), block, resource)

        return html, False

    def _inline_image(self, html: str, resource: ResourceRecord) -> tuple[str, bool]:
        data_uri = build_data_uri(resource)

        def _substitute(match: re.Match[str]) -> str:
            return match.group(1) + data_uri + match.group(2)

        html, count = _src_pattern(resource.location).subn(_substitute, html)
        # A location ending in "/" has no filename; an empty pattern would hit every src=""
        if self.options.filename_fallback and resource.filename:
            html, filename_count = _src_pattern(resource.filename).subn(_substitute, html)
            count += filename_count

        if count:
            logger.debug(f"Inlined image {resource.location} at {count} reference(s)")
        return html, count > 0

    def _replace_or_insert(
        self, html: str, pattern: re.Pattern[str], block: str, resource: ResourceRecord
    ) -> tuple[str, bool]:
        if pattern.search(html):
            logger.debug(f"Replaced reference to {resource.location} with inline {resource.content_type}")
            return pattern.sub(lambda _match: block, html), True

        html, inserted = _insert_before_head_close(html, block)
        if inserted:
            logger.debug(f"Inserted inline {resource.content_type} for {resource.location} before </head>")
        return html, inserted


def assemble(
    html_body: str, resources: Iterable[ResourceRecord], options: Optional[ConversionOptions] = None
) -> str:
    """Assemble with a one-off :class:`HTMLAssembler` and return the HTML."""
    return HTMLAssembler(options).assemble(html_body, resources)


def assemble_document(
    html_body: str, resources: Iterable[ResourceRecord], options: Optional[ConversionOptions] = None
) -> AssembledDocument:
    """Assemble with a one-off :class:`HTMLAssembler` and return the full result."""
    return HTMLAssembler(options).assemble_document(html_body, resources)
