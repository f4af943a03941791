#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for mht2html.

Constants are organized by category:
1. Type Definitions
2. Archive Recognition
3. HTML Assembly
4. Encoding Detection
5. Command Line
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ReportFormat = Literal["json", "yaml"]

# =============================================================================
# Archive Recognition
# =============================================================================

MHTML_EXTENSIONS = [".mht", ".mhtml"]

# Delimiter prefix placed before the boundary token on each part separator line
BOUNDARY_DELIMITER_PREFIX = "--"

# Separator between a part's header block and its body
PART_HEADER_SEPARATOR = "\r\n\r\n"

TRANSFER_ENCODING_BASE64 = "base64"
TRANSFER_ENCODING_QUOTED_PRINTABLE = "quoted-printable"

CONTENT_TYPE_HTML = "text/html"
CONTENT_TYPE_CSS = "text/css"
JAVASCRIPT_CONTENT_TYPES = ("text/javascript", "application/javascript")
IMAGE_CONTENT_TYPE_PREFIX = "image/"
TEXT_CONTENT_TYPE_PREFIX = "text/"

# =============================================================================
# HTML Assembly
# =============================================================================

HEAD_CLOSE_TAG = "</head>"

SCROLL_STYLES_MARKER_ID = "mht-converter-added-styles"
SCROLL_STYLES_OPEN_TAG = f'<style id="{SCROLL_STYLES_MARKER_ID}">'

SCROLL_STYLES_BLOCK = (
    SCROLL_STYLES_OPEN_TAG
    + """
                html, body {
                    height: 100%;
                    margin: 0;
                    padding: 0;
                    overflow-y: auto !important;
                }

                /* Ensure elements don't prevent scrolling */
                body > * {
                    max-width: 100%;
                    overflow-x: auto;
                }

                /* Fix for common overflow issues */
                img, table, iframe, video, object {
                    max-width: 100%;
                    height: auto;
                }
            </style>"""
)

# =============================================================================
# Encoding Detection
# =============================================================================

DEFAULT_FALLBACK_ENCODINGS = ["utf-8", "utf-8-sig", "latin-1"]
DEFAULT_CHARDET_SAMPLE_SIZE = 8192
DEFAULT_CHARDET_CONFIDENCE_THRESHOLD = 0.7

# =============================================================================
# Command Line
# =============================================================================

ENV_VAR_PREFIX = "MHT2HTML_"
HTML_OUTPUT_SUFFIX = ".html"
DEFAULT_REPORT_FORMAT: ReportFormat = "json"
