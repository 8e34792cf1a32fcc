# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
WebP metadata parser.

WebP stores metadata inside RIFF chunks (similar to WAV). EXIF data lives in an
`EXIF` chunk containing the familiar TIFF structure, while XMP data lives in an
`XMP ` chunk that carries the raw XMP packet. The `VP8X` extended header
carries feature flags and the canvas size, `ANIM` the animation parameters.
"""

import logging
from typing import Dict, Iterator, Tuple

from exiflens.base_parser import ImageParser, WalkResult
from exiflens.binary import unpack_from
from exiflens.exceptions import InvalidSignatureError, TruncatedDataError
from exiflens.exif_parser import parse_embedded_exif, strip_exif_header
from exiflens.format_detector import ImageFormat, RIFF_SIGNATURE, WEBP_FORM_TYPE
from exiflens.options import ParseOptions
from exiflens.text_decoding import decode_text
from exiflens.value_formatter import format_presence

logger = logging.getLogger(__name__)

RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8

# VP8X feature flag bits, in display order
VP8X_FLAGS = (
    (0x20, 'ICC'),
    (0x10, 'Alpha'),
    (0x08, 'EXIF'),
    (0x04, 'XMP'),
    (0x02, 'Animation'),
)


class WebPParser(ImageParser):
    """Parser that extracts EXIF/XMP and container metadata from WebP files."""

    FORMATS = frozenset([ImageFormat.WEBP])

    CHUNK_EXIF = b'EXIF'
    CHUNK_XMP = b'XMP '

    def walk(self, data: bytes, options: ParseOptions) -> WalkResult:
        if len(data) < RIFF_HEADER_SIZE or data[:4] != RIFF_SIGNATURE or data[8:12] != WEBP_FORM_TYPE:
            raise InvalidSignatureError("Not a valid WebP file")

        riff_size = unpack_from('<I', data, 4)[0]
        end = min(len(data), riff_size + 8)

        metadata: Dict[str, str] = {}
        frame_count = 0
        stopped_early = False
        try:
            for chunk_type, chunk_data in self._iterate_chunks(data, end):
                if chunk_type == b'ANMF':
                    frame_count += 1
                    continue
                try:
                    self._parse_chunk(chunk_type, chunk_data, metadata, options)
                except TruncatedDataError as e:
                    logger.debug("Skipping WebP chunk %r: %s", chunk_type, e.message)
        except TruncatedDataError as e:
            logger.debug("WebP walk stopped: %s", e.message)
            stopped_early = True

        if frame_count:
            metadata['WebP_Animation_FrameCount'] = str(frame_count)

        return WalkResult(metadata, stopped_early)

    @staticmethod
    def _iterate_chunks(data: bytes, end: int) -> Iterator[Tuple[bytes, bytes]]:
        """
        Yield (chunk_type, chunk_data) tuples from a RIFF container.

        Raises:
            TruncatedDataError: When a chunk header or payload runs past end
        """
        offset = RIFF_HEADER_SIZE  # Skip RIFF header and 'WEBP'
        while offset < end:
            if offset + CHUNK_HEADER_SIZE > end:
                raise TruncatedDataError(f"Chunk header truncated at offset {offset}", offset=offset)
            chunk_type = data[offset:offset + 4]
            chunk_size = unpack_from('<I', data, offset + 4)[0]
            offset += CHUNK_HEADER_SIZE
            if offset + chunk_size > end:
                raise TruncatedDataError(
                    f"Chunk {chunk_type!r} declares {chunk_size} bytes past the end",
                    offset=offset,
                    length=chunk_size,
                )
            yield chunk_type, data[offset:offset + chunk_size]
            offset += chunk_size
            if chunk_size % 2:
                offset += 1  # Chunks are padded to even sizes

    def _parse_chunk(self, chunk_type: bytes, chunk_data: bytes, metadata: Dict[str, str], options: ParseOptions) -> None:
        if chunk_type == self.CHUNK_EXIF:
            parse_embedded_exif(strip_exif_header(chunk_data), metadata, options)
        elif chunk_type == self.CHUNK_XMP:
            metadata['XMP_Metadata'] = decode_text(chunk_data)
        elif chunk_type == b'VP8X':
            self._parse_vp8x(chunk_data, metadata)
        elif chunk_type == b'ICCP':
            metadata['ICC_Profile'] = format_presence(len(chunk_data))
        elif chunk_type == b'ANIM':
            background, loop_count = unpack_from('<IH', chunk_data, 0)
            metadata['WebP_Animation_BgColor'] = f"0x{background:08X}"
            metadata['WebP_Animation_LoopCount'] = str(loop_count)
        elif chunk_type == b'VP8 ':
            metadata['WebP_Format'] = 'Lossy (VP8)'
        elif chunk_type == b'VP8L':
            metadata['WebP_Format'] = 'Lossless (VP8L)'

    @staticmethod
    def _parse_vp8x(chunk_data: bytes, metadata: Dict[str, str]) -> None:
        # Format: flags(1) + reserved(3) + width-1(3) + height-1(3)
        if len(chunk_data) < 10:
            raise TruncatedDataError("VP8X chunk shorter than 10 bytes", length=10, available=len(chunk_data))
        flags = chunk_data[0]
        features = [name for bit, name in VP8X_FLAGS if flags & bit]
        if features:
            metadata['WebP_Features'] = ' '.join(features)

        width = int.from_bytes(chunk_data[4:7], 'little') + 1
        height = int.from_bytes(chunk_data[7:10], 'little') + 1
        metadata['WebP_Canvas_Width'] = str(width)
        metadata['WebP_Canvas_Height'] = str(height)
