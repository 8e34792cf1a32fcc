# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG metadata parser

JPEG files are a stream of marker segments. Metadata lives in the COM
segment and the APP0-APP15 application segments that precede the start of
scan; EXIF is an APP1 segment wrapping a TIFF structure. The same parser
also accepts bare TIFF input, which it hands straight to the EXIF parser.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Dict

from exiflens.base_parser import ImageParser, WalkResult
from exiflens.binary import unpack_from
from exiflens.exceptions import InvalidSignatureError
from exiflens.exif_parser import EXIF_HEADER, parse_embedded_exif, parse_tiff
from exiflens.format_detector import ImageFormat, TIFF_SIGNATURES
from exiflens.options import ParseOptions
from exiflens.text_decoding import decode_text
from exiflens.value_formatter import format_byte_count, format_presence

logger = logging.getLogger(__name__)

# Marker codes (second byte after 0xFF)
MARKER_SOI = 0xD8
MARKER_EOI = 0xD9
MARKER_SOS = 0xDA
MARKER_TEM = 0x01
MARKER_COM = 0xFE
MARKER_APP0 = 0xE0
MARKER_APP1 = 0xE1
MARKER_APP2 = 0xE2
MARKER_APP12 = 0xEC
MARKER_APP13 = 0xED
MARKER_APP14 = 0xEE
MARKER_APP15 = 0xEF

# Markers that stand alone without a length field
STANDALONE_MARKERS = frozenset([MARKER_TEM, MARKER_SOI] + list(range(0xD0, 0xD8)))

JFIF_HEADER = b'JFIF\x00'
JFXX_HEADER = b'JFXX\x00'
XMP_HEADER = b'http://ns.adobe.com/xap/1.0/\x00'
ICC_PROFILE_HEADER = b'ICC_PROFILE\x00'
FLASHPIX_HEADER = b'FPXR\x00\x00'
PHOTOSHOP_HEADER = b'Photoshop 3.0\x00'
ADOBE_HEADER = b'Adobe'


def is_printable(data: bytes, ratio: float = 0.8) -> bool:
    """Check whether at least `ratio` of the bytes are printable ASCII or common whitespace."""
    if not data:
        return False
    printable = sum(1 for b in data if 32 <= b <= 126 or b in (9, 10, 13))
    return printable / len(data) >= ratio


class JPEGParser(ImageParser):
    """
    Parser for JPEG marker segments, and for standalone TIFF/EXIF data.
    """

    FORMATS = frozenset([ImageFormat.JPEG, ImageFormat.TIFF])

    def walk(self, data: bytes, options: ParseOptions) -> WalkResult:
        metadata: Dict[str, str] = {}

        if data[:4] in TIFF_SIGNATURES:
            # Bare TIFF: the header is the whole story, so a bad one is fatal
            parse_tiff(data, metadata, options)
            return WalkResult(metadata, False)

        if data[:2] != b'\xff\xd8':
            raise InvalidSignatureError(f"Not a valid JPEG file (header: {data[:2].hex(' ').upper()})")

        stopped_early = False
        offset = 2  # Skip JPEG SOI marker
        while offset + 2 <= len(data):
            prefix, marker = data[offset], data[offset + 1]
            if prefix != 0xFF:
                # Not a marker; resync on the next pair
                offset += 2
                continue
            if marker == 0xFF:
                # Fill byte
                offset += 1
                continue
            offset += 2

            if marker in (MARKER_SOS, MARKER_EOI):
                # No metadata follows the start of scan
                break
            if marker in STANDALONE_MARKERS:
                continue

            if offset + 2 > len(data):
                logger.debug("JPEG segment length missing at offset %d", offset)
                stopped_early = True
                break
            length = unpack_from('>H', data, offset)[0]
            if length < 2 or offset + length > len(data):
                logger.debug("JPEG segment 0x%02X at offset %d declares %d bytes past the end",
                             marker, offset, length)
                stopped_early = True
                break

            # The length field counts itself
            segment = data[offset + 2:offset + length]
            offset += length
            self._parse_segment(marker, segment, metadata, options)

        return WalkResult(metadata, stopped_early)

    def _parse_segment(self, marker: int, segment: bytes, metadata: Dict[str, str], options: ParseOptions) -> None:
        if marker == MARKER_COM:
            metadata['JPEG_Comment'] = decode_text(segment)

        elif marker == MARKER_APP0:
            if segment.startswith(JFIF_HEADER) and len(segment) >= 7:
                metadata['JFIF_Version'] = f"{segment[5]}.{segment[6]:02d}"
            elif segment.startswith(JFXX_HEADER):
                metadata['JFXX_Extension'] = 'present'
            elif segment:
                metadata['APP0_Data'] = format_byte_count(len(segment))

        elif marker == MARKER_APP1:
            if segment.startswith(EXIF_HEADER):
                parse_embedded_exif(segment[len(EXIF_HEADER):], metadata, options)
            elif segment.startswith(XMP_HEADER):
                metadata['XMP_Metadata'] = decode_text(segment[len(XMP_HEADER):])
            elif segment:
                metadata['APP1_Data'] = format_byte_count(len(segment))

        elif marker == MARKER_APP2:
            if segment.startswith(ICC_PROFILE_HEADER) and len(segment) >= 14:
                metadata['ICC_Profile'] = format_presence(len(segment))
            elif segment.startswith(FLASHPIX_HEADER):
                metadata['FlashPix'] = 'present'
            elif segment:
                metadata['APP2_Data'] = format_byte_count(len(segment))

        elif MARKER_APP2 < marker <= MARKER_APP12 or marker == MARKER_APP15:
            self._parse_generic_app(marker, segment, metadata, options)

        elif marker == MARKER_APP13:
            if segment.startswith(PHOTOSHOP_HEADER):
                metadata['Photoshop_IRB'] = format_presence(len(segment))
            elif segment:
                metadata['APP13_Data'] = format_byte_count(len(segment))

        elif marker == MARKER_APP14:
            if segment.startswith(ADOBE_HEADER):
                metadata['Adobe_APP14'] = 'present'
            elif segment:
                metadata['APP14_Data'] = format_byte_count(len(segment))

    @staticmethod
    def _parse_generic_app(marker: int, segment: bytes, metadata: Dict[str, str], options: ParseOptions) -> None:
        key = f"APP{marker - MARKER_APP0}_Data"
        if is_printable(segment, options.get_option('PrintableRatio', 0.8)):
            metadata[key] = decode_text(segment)
        else:
            metadata[key] = f"({len(segment)} bytes binary)"
