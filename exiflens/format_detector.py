# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Image format detector

This module classifies a byte buffer into one of a closed set of image
container kinds by looking at its leading magic bytes.

Copyright 2025 DNAi inc.
"""

from enum import IntEnum
from typing import Dict


class ImageFormat(IntEnum):
    """Container kinds recognized by the detector"""
    UNKNOWN = 0
    JPEG = 1
    TIFF = 2
    PNG = 3
    WEBP = 4
    HEIF = 5

    @property
    def display_name(self) -> str:
        return FORMAT_DISPLAY_NAMES[self]


FORMAT_DISPLAY_NAMES: Dict[ImageFormat, str] = {
    ImageFormat.UNKNOWN: 'Unknown',
    ImageFormat.JPEG: 'JPEG',
    ImageFormat.TIFF: 'TIFF',
    ImageFormat.PNG: 'PNG',
    ImageFormat.WEBP: 'WebP',
    ImageFormat.HEIF: 'HEIF',
}

JPEG_SIGNATURE = b'\xff\xd8\xff'
TIFF_SIGNATURES = (b'II*\x00', b'MM\x00*')
PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
RIFF_SIGNATURE = b'RIFF'
WEBP_FORM_TYPE = b'WEBP'
FTYP_BOX_TYPE = b'ftyp'

# JPEG needs only its 3-byte signature; every other check reads up to byte 11
MIN_SIGNATURE_LENGTH = 12


class FormatDetector:
    """
    Detects image container formats from file signatures.

    Signatures are checked in a fixed priority order and the first match
    wins. The signatures are mutually exclusive, so the order only matters
    for speed.
    """

    @classmethod
    def detect_format(cls, data: bytes) -> ImageFormat:
        """
        Detect the image format of a buffer.

        Args:
            data: Raw image bytes (only the first 12 are inspected)

        Returns:
            The detected ImageFormat, ImageFormat.UNKNOWN if nothing matches
            or the buffer is too short
        """
        if not data:
            return ImageFormat.UNKNOWN

        if data[:3] == JPEG_SIGNATURE:
            return ImageFormat.JPEG

        if len(data) < MIN_SIGNATURE_LENGTH:
            return ImageFormat.UNKNOWN

        if data[:4] in TIFF_SIGNATURES:
            return ImageFormat.TIFF

        if data[:8] == PNG_SIGNATURE:
            return ImageFormat.PNG

        if data[:4] == RIFF_SIGNATURE and data[8:12] == WEBP_FORM_TYPE:
            return ImageFormat.WEBP

        if data[4:8] == FTYP_BOX_TYPE:
            return ImageFormat.HEIF

        return ImageFormat.UNKNOWN


def detect_format(data: bytes) -> ImageFormat:
    """Detect the image format of a buffer. Never raises."""
    return FormatDetector.detect_format(data)
