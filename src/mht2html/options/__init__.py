#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for mht2html conversions.

Options are frozen dataclasses; derive modified copies with
``create_updated`` instead of mutating them.
"""

from __future__ import annotations

from mht2html.options.base import CloneFrozenMixin
from mht2html.options.conversion import ConversionOptions

__all__ = ["CloneFrozenMixin", "ConversionOptions"]
