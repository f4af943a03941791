#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mht2html/session.py
"""Conversion session holding the state of one interactive conversion.

Front ends (the CLI, or any UI built on the library) keep the current input
file, the converted HTML and the extracted resources on a ConversionSession
instead of in module globals. The decoding core itself stays stateless.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from mht2html.api import convert_file, html_output_name, is_mhtml_filename
from mht2html.exceptions import FormatError, Mht2HtmlError, OutputWriteError
from mht2html.models import ArchiveMetadata, AssembledDocument, ResourceRecord
from mht2html.options import ConversionOptions

logger = logging.getLogger(__name__)


@dataclass
class ConversionSession:
    """State of a single archive conversion.

    Parameters
    ----------
    options : ConversionOptions
        Options applied to every conversion made through this session.

    Attributes
    ----------
    current_file : Path or None
        Archive most recently loaded.
    converted_html : str or None
        Flattened HTML of the current file.
    extracted_resources : list[ResourceRecord]
        Resources spliced into ``converted_html``.
    unreferenced_resources : list[ResourceRecord]
        Resources that matched nothing in the page.
    metadata : ArchiveMetadata or None
        Metadata of the current file.

    """

    options: ConversionOptions = field(default_factory=ConversionOptions)
    current_file: Optional[Path] = None
    converted_html: Optional[str] = None
    extracted_resources: list[ResourceRecord] = field(default_factory=list)
    unreferenced_resources: list[ResourceRecord] = field(default_factory=list)
    metadata: Optional[ArchiveMetadata] = None

    @property
    def has_result(self) -> bool:
        return self.converted_html is not None

    @property
    def output_name(self) -> str:
        """Filename the converted HTML is saved under by default."""
        if self.current_file is None:
            raise Mht2HtmlError("No file has been loaded")
        return html_output_name(self.current_file)

    def load(self, path: Union[str, Path]) -> AssembledDocument:
        """Convert ``path`` and keep the result on the session.

        The previous result is discarded first, so a failed load leaves the
        session empty rather than holding stale output.

        Raises
        ------
        FormatError
            If ``path`` is not a ``.mht``/``.mhtml`` file.
        ParsingError
            If the archive cannot be decoded.

        """
        self.reset()
        path = Path(path)
        if not is_mhtml_filename(path):
            raise FormatError(f"Please select a valid .mht or .mhtml file: {path.name}", file_path=str(path))

        document = convert_file(path, self.options)

        self.current_file = path
        self.converted_html = document.html
        self.extracted_resources = list(document.resources)
        self.unreferenced_resources = list(document.unreferenced)
        self.metadata = document.metadata
        logger.info(f"Converted {path.name} ({len(self.extracted_resources)} resources inlined)")
        return document

    def save(self, output: Union[str, Path, None] = None) -> Path:
        """Write the converted HTML and return the path written.

        Parameters
        ----------
        output : str, Path, or None
            Target file, or an existing directory to place ``output_name``
            in. When None the file is written next to the input archive.

        Raises
        ------
        Mht2HtmlError
            If nothing has been converted yet.
        OutputWriteError
            If the file cannot be written.

        """
        if self.converted_html is None or self.current_file is None:
            raise Mht2HtmlError("Nothing to save: no file has been converted")

        if output is None:
            target = self.current_file.parent / self.output_name
        else:
            target = Path(output)
            if target.is_dir():
                target = target / self.output_name

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.converted_html, encoding="utf-8", newline="")
        except OSError as e:
            raise OutputWriteError(str(target), original_error=e) from e

        logger.debug(f"Wrote {len(self.converted_html)} characters to {target}")
        return target

    def reset(self) -> None:
        """Forget the current file and its conversion result."""
        self.current_file = None
        self.converted_html = None
        self.extracted_resources = []
        self.unreferenced_resources = []
        self.metadata = None
