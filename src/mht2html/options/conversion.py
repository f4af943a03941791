#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/mht2html/options/conversion.py
"""Configuration options for MHTML decoding and HTML assembly.

The defaults reproduce the plain conversion behaviour: every supported
resource kind is inlined and the scroll-safety style block is injected.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mht2html.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ConversionOptions(CloneFrozenMixin):
    """Configuration options for MHTML-to-HTML conversion.

    Parameters
    ----------
    inline_images : bool, default True
        Replace ``src`` references to image parts with ``data:`` URIs.
    inline_stylesheets : bool, default True
        Embed ``text/css`` parts as ``<style>`` blocks.
    inline_scripts : bool, default True
        Embed JavaScript parts as ``<script>`` blocks.
    filename_fallback : bool, default True
        After matching an image on its full location, match again on the
        bare filename to catch relative references.
    inject_scroll_styles : bool, default True
        Add the marker style block that keeps the flattened page scrollable.
    normalize_line_endings : bool, default False
        Convert bare LF line breaks to CRLF before splitting, for archives
        that were saved with Unix newlines.
    max_resource_size : int or None, default None
        Drop resources whose decoded content is longer than this many
        characters. None disables the limit.

    """

    inline_images: bool = field(
        default=True,
        metadata={"help": "Inline image parts as data URIs", "cli_negated_name": "--no-inline-images"},
    )
    inline_stylesheets: bool = field(
        default=True,
        metadata={"help": "Embed CSS parts as <style> blocks", "cli_negated_name": "--no-inline-stylesheets"},
    )
    inline_scripts: bool = field(
        default=True,
        metadata={"help": "Embed JavaScript parts as <script> blocks", "cli_negated_name": "--no-inline-scripts"},
    )
    filename_fallback: bool = field(
        default=True,
        metadata={
            "help": "Also match image references by bare filename",
            "cli_negated_name": "--no-filename-fallback",
        },
    )
    inject_scroll_styles: bool = field(
        default=True,
        metadata={
            "help": "Inject the scroll/overflow safety style block",
            "cli_negated_name": "--no-scroll-styles",
        },
    )
    normalize_line_endings: bool = field(
        default=False,
        metadata={"help": "Convert bare LF line breaks to CRLF before splitting parts"},
    )
    max_resource_size: int | None = field(
        default=None,
        metadata={"help": "Drop resources whose decoded content exceeds this many characters"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.max_resource_size is not None and self.max_resource_size <= 0:
            raise ValueError(f"max_resource_size must be positive, got {self.max_resource_size}")
