# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
HEIC/HEIF (High Efficiency Image Format) parser

HEIF files are recognized by their ftyp box but not decoded. The parser
exists so hosts can report "unsupported" instead of "broken".

Copyright 2025 DNAi inc.
"""

from exiflens.base_parser import ImageParser, WalkResult
from exiflens.exceptions import FormatNotImplementedError
from exiflens.format_detector import ImageFormat
from exiflens.options import ParseOptions


class HEICParser(ImageParser):
    """
    Placeholder parser for HEIC/HEIF images. Every parse fails.
    """

    FORMATS = frozenset([ImageFormat.HEIF])

    def walk(self, data: bytes, options: ParseOptions) -> WalkResult:
        raise FormatNotImplementedError("HEIF format not yet implemented", image_format=ImageFormat.HEIF)
