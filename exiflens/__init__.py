# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
ExifLens - embedded image metadata extraction

Reads camera/EXIF tags, text annotations, color-profile and animation
descriptors from JPEG, TIFF, PNG and WebP bytes without decoding pixels.
All parsing is done by directly reading binary file structures.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from exiflens.core import (
    get_parser,
    get_supported_formats,
    parse_image,
    read_file_metadata,
)
from exiflens.exceptions import (
    ExifLensError,
    MetadataReadError,
    InvalidSignatureError,
    InvalidTIFFHeaderError,
    TruncatedDataError,
    DecompressionError,
    NoMetadataFoundError,
    UnsupportedFormatError,
    FormatNotImplementedError,
)
from exiflens.exif_parser import parse_tiff
from exiflens.format_detector import ImageFormat, detect_format
from exiflens.metadata_utils import (
    get_metadata_summary,
    filter_metadata_by_prefix,
    has_metadata,
)
from exiflens.options import ParseOptions, available_options

__all__ = [
    "parse_image",
    "read_file_metadata",
    "get_parser",
    "get_supported_formats",
    "detect_format",
    "ImageFormat",
    "parse_tiff",
    "ParseOptions",
    "available_options",
    "get_metadata_summary",
    "filter_metadata_by_prefix",
    "has_metadata",
    "ExifLensError",
    "MetadataReadError",
    "InvalidSignatureError",
    "InvalidTIFFHeaderError",
    "TruncatedDataError",
    "DecompressionError",
    "NoMetadataFoundError",
    "UnsupportedFormatError",
    "FormatNotImplementedError",
]
