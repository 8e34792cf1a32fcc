# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for ExifLens

This module defines the error taxonomy shared by every format parser.
Hard errors (bad signature, unsupported or unimplemented format, nothing
found) escape parse_image(); local errors (truncation, decompression) are
raised by the low-level readers and caught inside the container walks.

Copyright 2025 DNAi inc.
"""

from typing import Any, Optional


class ExifLensError(Exception):
    """
    Base exception for all ExifLens errors.
    
    All ExifLens exceptions inherit from this class, allowing
    catch-all error handling for any ExifLens-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.
        
        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(ExifLensError):
    """
    Raised when metadata cannot be read from an image buffer.
    """
    pass


class InvalidSignatureError(MetadataReadError):
    """
    Raised when the leading magic bytes do not match the format a parser expects.
    
    The parse aborts immediately and no partial metadata is returned.
    """
    pass


class InvalidTIFFHeaderError(MetadataReadError):
    """
    Raised when a TIFF region does not start with an II or MM byte-order marker.
    """
    pass


class TruncatedDataError(MetadataReadError):
    """
    Raised when an offset or declared length points past the end of the buffer.
    
    Container walks catch this, stop at that point and keep whatever
    was decoded before it.
    """
    def __init__(self, message: str = "", offset: int = 0, length: int = 0, available: int = 0):
        self.offset = offset
        self.length = length
        self.available = available
        super().__init__(message)


class DecompressionError(MetadataReadError):
    """
    Raised when an inflate stream for a single text or profile field is invalid.
    """
    pass


class NoMetadataFoundError(MetadataReadError):
    """
    Raised when a walk finished (or stopped early) without extracting any field.
    
    Distinct from UnsupportedFormatError so a host can report
    "no metadata" rather than "can't read this file".
    """
    def __init__(self, message: str = "", image_format: Optional[Any] = None):
        self.format = image_format
        super().__init__(message)


class UnsupportedFormatError(ExifLensError):
    """
    Raised when the buffer matches no known container signature.
    """
    def __init__(self, message: str = "", image_format: Optional[Any] = None):
        self.format = image_format
        super().__init__(message)


class FormatNotImplementedError(ExifLensError, NotImplementedError):
    """
    Raised by parsers for formats that are recognized but not decoded (HEIF).
    """
    def __init__(self, message: str = "", image_format: Optional[Any] = None):
        self.format = image_format
        super().__init__(message)
