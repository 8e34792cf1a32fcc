# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Common parser interface

Each format parser exposes parse() and supports_format(). Parsers hold no
per-call state, so one instance serves every call and every thread.

Copyright 2025 DNAi inc.
"""

from typing import Dict, FrozenSet, NamedTuple, Optional

from exiflens.exceptions import NoMetadataFoundError
from exiflens.format_detector import ImageFormat
from exiflens.options import ParseOptions, resolve_options

MetadataMap = Dict[str, str]


class WalkResult(NamedTuple):
    """Fields collected by a container walk and whether it stopped before the end."""
    metadata: MetadataMap
    stopped_early: bool


class ImageParser:
    """
    Base class for the format parsers.

    Subclasses set FORMATS and implement walk(); parse() turns an empty
    walk into NoMetadataFoundError.
    """

    FORMATS: FrozenSet[ImageFormat] = frozenset()

    def supports_format(self, image_format: ImageFormat) -> bool:
        return image_format in self.FORMATS

    def walk(self, data: bytes, options: ParseOptions) -> WalkResult:
        raise NotImplementedError

    def parse(self, data: bytes, options: Optional[ParseOptions] = None) -> MetadataMap:
        """
        Extract metadata from an image buffer.

        Args:
            data: Raw image bytes; never modified
            options: Optional parse options (defaults apply when None)

        Returns:
            Mapping of field names to rendered string values

        Raises:
            InvalidSignatureError: If the buffer does not start with this format's signature
            NoMetadataFoundError: If the walk extracted no fields
        """
        result = self.walk(data, resolve_options(options))
        if not result.metadata:
            raise NoMetadataFoundError(
                f"No metadata found in {self.format_name} data",
                image_format=self.primary_format,
            )
        return result.metadata

    @property
    def primary_format(self) -> ImageFormat:
        return min(self.FORMATS) if self.FORMATS else ImageFormat.UNKNOWN

    @property
    def format_name(self) -> str:
        return self.primary_format.display_name
