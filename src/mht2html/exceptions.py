#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the mht2html library.

This module defines specialized exception classes for the error conditions
that can occur while decoding MHTML archives and writing the flattened HTML.
These exceptions provide more specific error information than generic built-ins.

Exception Hierarchy
-------------------
- Mht2HtmlError (base exception)

  - ValidationError (parameter/option validation)

  - FileError (file access and I/O)
    - OutputWriteError (file write failures)

  - FormatError (input is not an MHTML archive)

  - ParsingError (archive parsing failures)
    - BoundaryNotFoundError (no multipart boundary declared)
    - NoHtmlContentError (no primary HTML part)
    - PartDecodeError (single malformed part, never escapes the decoder)

"""

from typing import Any


class Mht2HtmlError(Exception):
    """Base exception class for all mht2html-specific errors.

    Catching this will catch all library-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Mht2HtmlError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class FileError(Mht2HtmlError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the file that caused the error
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class OutputWriteError(FileError):
    """Exception raised when the converted HTML or a report cannot be written."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the output write error."""
        if message is None:
            message = f"Failed to write output file: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class FormatError(Mht2HtmlError):
    """Exception raised when an input is not an MHTML archive.

    Parameters
    ----------
    message : str
        Description of the format error
    file_path : str, optional
        Name of the rejected input

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the format error."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class ParsingError(Mht2HtmlError):
    """Exception raised when an archive cannot be parsed.

    Parameters
    ----------
    message : str
        Description of the parsing error
    parsing_stage : str, optional
        Stage of the pipeline where the failure occurred
        (e.g. "boundary_detection", "content_extraction", "part_decoding")
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class BoundaryNotFoundError(ParsingError):
    """Exception raised when no ``boundary="..."`` attribute exists in the input."""

    def __init__(self, message: str = "Boundary not found in MHT file", original_error: Exception | None = None):
        """Initialize the boundary error."""
        super().__init__(message, parsing_stage="boundary_detection", original_error=original_error)


class NoHtmlContentError(ParsingError):
    """Exception raised when every part was processed and none was usable HTML."""

    def __init__(self, message: str = "No HTML content found in MHT file", original_error: Exception | None = None):
        """Initialize the missing-HTML error."""
        super().__init__(message, parsing_stage="content_extraction", original_error=original_error)


class PartDecodeError(ParsingError):
    """Exception raised for a single malformed MIME part.

    The decoder catches this, logs it and skips the part; it never aborts
    a conversion.

    Parameters
    ----------
    message : str
        Description of the problem with the part
    part_index : int, optional
        Zero-based index of the part within the archive

    """

    def __init__(self, message: str, part_index: int | None = None, original_error: Exception | None = None):
        """Initialize the part decode error."""
        super().__init__(message, parsing_stage="part_decoding", original_error=original_error)
        self.part_index = part_index
