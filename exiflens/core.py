# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core ExifLens API

This module ties the format detector to the format parsers. The parser
registry is fixed: JPEG and TIFF share one parser, PNG, WebP and HEIF have
their own. Parsing is a pure function of the input bytes.

Copyright 2025 DNAi inc.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from exiflens.base_parser import ImageParser, MetadataMap
from exiflens.exceptions import UnsupportedFormatError
from exiflens.format_detector import ImageFormat, detect_format
from exiflens.heic_parser import HEICParser
from exiflens.jpeg_parser import JPEGParser
from exiflens.options import ParseOptions
from exiflens.png_parser import PNGParser
from exiflens.webp_parser import WebPParser

logger = logging.getLogger(__name__)

_JPEG_TIFF_PARSER = JPEGParser()

PARSERS: Dict[ImageFormat, ImageParser] = {
    ImageFormat.JPEG: _JPEG_TIFF_PARSER,
    ImageFormat.TIFF: _JPEG_TIFF_PARSER,
    ImageFormat.PNG: PNGParser(),
    ImageFormat.WEBP: WebPParser(),
    ImageFormat.HEIF: HEICParser(),
}

# Formats with a working parser, in the order hosts should list them
SUPPORTED_FORMATS = (ImageFormat.JPEG, ImageFormat.TIFF, ImageFormat.PNG, ImageFormat.WEBP)


def get_parser(image_format: ImageFormat) -> Optional[ImageParser]:
    """
    Look up the parser registered for a format.

    Returns:
        The parser, or None for ImageFormat.UNKNOWN
    """
    return PARSERS.get(image_format)


def get_supported_formats() -> List[str]:
    """Return the display names of formats that can actually be decoded."""
    return [image_format.display_name for image_format in SUPPORTED_FORMATS]


def parse_image(data: Union[bytes, bytearray, memoryview], options: Optional[ParseOptions] = None) -> MetadataMap:
    """
    Detect the format of an image buffer and extract its metadata.

    Args:
        data: Raw image bytes
        options: Optional parse options

    Returns:
        Mapping of field names to rendered string values

    Raises:
        UnsupportedFormatError: If no known signature matches
        InvalidSignatureError: If the selected parser rejects the signature
        NoMetadataFoundError: If the image carries no recognized metadata
        FormatNotImplementedError: For HEIF images

    Example:
        >>> metadata = parse_image(Path('photo.jpg').read_bytes())
        >>> metadata.get('Make')
        'Canon'
    """
    if not isinstance(data, bytes):
        data = bytes(data)

    image_format = detect_format(data)
    parser = get_parser(image_format)
    if parser is None:
        raise UnsupportedFormatError("Unsupported image format", image_format=image_format)

    logger.debug("Parsing %d bytes as %s", len(data), image_format.display_name)
    return parser.parse(data, options)


def read_file_metadata(file_path: Union[str, Path], options: Optional[ParseOptions] = None) -> MetadataMap:
    """
    Read an image file and extract its metadata.

    Raises:
        FileNotFoundError: If the file does not exist
        ExifLensError: As raised by parse_image()
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    return parse_image(path.read_bytes(), options)
