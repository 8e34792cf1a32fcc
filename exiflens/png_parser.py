# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
PNG metadata parser

PNG files are a signature followed by length-prefixed chunks, each closed
by a CRC-32 over its type and data. Metadata lives in the header chunk,
the text chunks (tEXt, zTXt, iTXt), eXIf (a TIFF structure), and a few
ancillary chunks (pHYs, tIME, iCCP, sPLT, gAMA, sRGB).

Copyright 2025 DNAi inc.
"""

import logging
import zlib
from typing import Dict, Tuple

from exiflens.base_parser import ImageParser, WalkResult
from exiflens.binary import unpack_from
from exiflens.exceptions import DecompressionError, InvalidSignatureError, TruncatedDataError
from exiflens.exif_parser import parse_embedded_exif, strip_exif_header
from exiflens.format_detector import ImageFormat, PNG_SIGNATURE
from exiflens.options import ParseOptions
from exiflens.value_formatter import format_timestamp

logger = logging.getLogger(__name__)

CHUNK_HEADER_SIZE = 8
CHUNK_CRC_SIZE = 4

COLOR_TYPES = {
    0: 'Grayscale',
    2: 'RGB',
    3: 'Palette',
    4: 'Grayscale with Alpha',
    6: 'RGB with Alpha',
}

INTERLACE_METHODS = {
    0: 'None',
    1: 'Adam7',
}

PIXEL_UNITS = {
    0: 'aspect ratio',
    1: 'meter',
}

SRGB_RENDERING_INTENTS = {
    0: 'Perceptual',
    1: 'Relative Colorimetric',
    2: 'Saturation',
    3: 'Absolute Colorimetric',
}

# The only compression method defined for PNG (zlib deflate)
COMPRESSION_DEFLATE = 0


def split_keyword(data: bytes) -> Tuple[str, bytes]:
    """
    Split 'keyword\\0rest' into the Latin-1 keyword and the remaining bytes.

    Raises:
        ValueError: If there is no NUL separator or the keyword is empty
    """
    null_pos = data.find(b'\x00')
    if null_pos <= 0:
        raise ValueError("Missing keyword")
    return data[:null_pos].decode('latin-1'), data[null_pos + 1:]


def inflate(payload: bytes, max_size: int) -> bytes:
    """
    Decompress a zlib stream, refusing output larger than max_size.

    Raises:
        DecompressionError: If the stream is invalid, incomplete or too large
    """
    decompressor = zlib.decompressobj()
    try:
        output = decompressor.decompress(payload, max_size)
    except zlib.error as e:
        raise DecompressionError(f"Invalid deflate stream: {e}") from e
    if decompressor.unconsumed_tail:
        raise DecompressionError(f"Inflated text exceeds {max_size} bytes")
    if not decompressor.eof:
        raise DecompressionError("Deflate stream is incomplete")
    return output


class PNGParser(ImageParser):
    """
    Parser for PNG chunks.
    """

    FORMATS = frozenset([ImageFormat.PNG])

    def walk(self, data: bytes, options: ParseOptions) -> WalkResult:
        if data[:8] != PNG_SIGNATURE:
            raise InvalidSignatureError("Not a valid PNG file")

        metadata: Dict[str, str] = {}
        stopped_early = False
        verify_crc = options.get_option('VerifyCRC', True)

        offset = 8  # Skip PNG signature
        while offset < len(data):
            if offset + CHUNK_HEADER_SIZE > len(data):
                logger.debug("PNG chunk header truncated at offset %d", offset)
                stopped_early = True
                break

            chunk_length, chunk_type = unpack_from('>I4s', data, offset)
            data_start = offset + CHUNK_HEADER_SIZE
            data_end = data_start + chunk_length
            if data_end + CHUNK_CRC_SIZE > len(data):
                logger.debug("PNG chunk %r at offset %d declares %d bytes past the end",
                             chunk_type, offset, chunk_length)
                stopped_early = True
                break

            chunk_data = data[data_start:data_end]
            offset = data_end + CHUNK_CRC_SIZE

            if verify_crc:
                self._check_crc(chunk_type, chunk_data, unpack_from('>I', data, data_end)[0], metadata)

            if chunk_type == b'IEND':
                break

            try:
                self._parse_chunk(chunk_type, chunk_data, metadata, options)
            except (TruncatedDataError, DecompressionError, ValueError) as e:
                logger.debug("Skipping PNG chunk %r: %s", chunk_type, e)

        return WalkResult(metadata, stopped_early)

    @staticmethod
    def _check_crc(chunk_type: bytes, chunk_data: bytes, stored_crc: int, metadata: Dict[str, str]) -> None:
        computed_crc = zlib.crc32(chunk_type + chunk_data) & 0xFFFFFFFF
        if computed_crc != stored_crc:
            name = chunk_type.decode('latin-1')
            logger.warning("CRC mismatch in PNG chunk %s", name)
            metadata[f'PNG_CRCMismatch_{name}'] = (
                f"stored 0x{stored_crc:08X}, computed 0x{computed_crc:08X}"
            )

    def _parse_chunk(self, chunk_type: bytes, chunk_data: bytes, metadata: Dict[str, str], options: ParseOptions) -> None:
        if chunk_type == b'IHDR':
            self._parse_ihdr(chunk_data, metadata)
        elif chunk_type == b'tEXt':
            keyword, text = split_keyword(chunk_data)
            metadata[f'PNG_{keyword}'] = text.decode('latin-1')
        elif chunk_type == b'zTXt':
            self._parse_ztxt(chunk_data, metadata, options)
        elif chunk_type == b'iTXt':
            self._parse_itxt(chunk_data, metadata, options)
        elif chunk_type == b'eXIf':
            parse_embedded_exif(strip_exif_header(chunk_data), metadata, options)
        elif chunk_type == b'pHYs':
            self._parse_phys(chunk_data, metadata)
        elif chunk_type == b'tIME':
            metadata['PNG_ModifyTime'] = format_timestamp(*unpack_from('>HBBBBB', chunk_data, 0))
        elif chunk_type == b'iCCP':
            self._parse_iccp(chunk_data, metadata)
        elif chunk_type == b'sPLT':
            metadata['PNG_SuggestedPalette'] = chunk_data.split(b'\x00', 1)[0].decode('latin-1')
        elif chunk_type == b'gAMA':
            gamma = unpack_from('>I', chunk_data, 0)[0]
            metadata['PNG_Gamma'] = f"{gamma / 100000:.5f}"
        elif chunk_type == b'sRGB':
            intent = unpack_from('>B', chunk_data, 0)[0]
            metadata['PNG_SRGBRenderingIntent'] = SRGB_RENDERING_INTENTS.get(intent, str(intent))

    @staticmethod
    def _parse_ihdr(chunk_data: bytes, metadata: Dict[str, str]) -> None:
        """
        Parse the IHDR chunk.

        IHDR structure: width(4) + height(4) + bit_depth(1) + color_type(1) +
                        compression(1) + filter(1) + interlace(1)
        """
        width, height, bit_depth, color_type, compression, filter_method, interlace = unpack_from(
            '>IIBBBBB', chunk_data, 0
        )
        metadata['PNG_Width'] = str(width)
        metadata['PNG_Height'] = str(height)
        metadata['PNG_BitDepth'] = str(bit_depth)
        metadata['PNG_ColorType'] = COLOR_TYPES.get(color_type, str(color_type))
        metadata['PNG_Compression'] = str(compression)
        metadata['PNG_Filter'] = str(filter_method)
        metadata['PNG_Interlace'] = INTERLACE_METHODS.get(interlace, str(interlace))

    @staticmethod
    def _parse_ztxt(chunk_data: bytes, metadata: Dict[str, str], options: ParseOptions) -> None:
        # zTXt format: keyword (null-terminated), compression method (1 byte), compressed text
        keyword, rest = split_keyword(chunk_data)
        if not rest:
            raise ValueError("Missing compression method")
        if rest[0] != COMPRESSION_DEFLATE:
            logger.debug("Unsupported zTXt compression method %d", rest[0])
            return
        text = inflate(rest[1:], options.get_option('MaxInflateSize'))
        metadata[f'PNG_{keyword}'] = text.decode('latin-1')

    @staticmethod
    def _parse_itxt(chunk_data: bytes, metadata: Dict[str, str], options: ParseOptions) -> None:
        """
        Parse an iTXt chunk.

        iTXt format: keyword\\0 compression_flag(1) compression_method(1)
                     language_tag\\0 translated_keyword\\0 text
        """
        keyword, rest = split_keyword(chunk_data)
        if len(rest) < 2:
            raise ValueError("Missing compression fields")
        compression_flag, compression_method = rest[0], rest[1]
        fields = rest[2:].split(b'\x00', 2)
        if len(fields) < 3:
            raise ValueError("Missing language tag or translated keyword")
        language = fields[0].decode('ascii', errors='replace')
        translated = fields[1].decode('utf-8', errors='replace')
        text = fields[2]

        if compression_flag == 1 and compression_method == COMPRESSION_DEFLATE:
            text = inflate(text, options.get_option('MaxInflateSize'))

        details = []
        if language:
            details.append(f"lang={language}")
        if translated:
            details.append(f"translated={translated}")
        key = f'PNG_{keyword}'
        if details:
            key = f"{key} ({', '.join(details)})"
        metadata[key] = text.decode('utf-8', errors='replace')

    @staticmethod
    def _parse_phys(chunk_data: bytes, metadata: Dict[str, str]) -> None:
        pixels_x, pixels_y, unit = unpack_from('>IIB', chunk_data, 0)
        metadata['PNG_PixelsPerUnitX'] = str(pixels_x)
        metadata['PNG_PixelsPerUnitY'] = str(pixels_y)
        metadata['PNG_PixelUnit'] = PIXEL_UNITS.get(unit, f'Unknown ({unit})')

    @staticmethod
    def _parse_iccp(chunk_data: bytes, metadata: Dict[str, str]) -> None:
        # The profile itself stays compressed; only its presence is recorded
        profile_name, rest = split_keyword(chunk_data)
        if not rest:
            raise ValueError("Missing compression method")
        method = rest[0]
        metadata['ICC_Profile'] = f"present ({profile_name})"
        metadata['ICC_Profile_Compression'] = 'deflate' if method == COMPRESSION_DEFLATE else f'unknown ({method})'
