# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF metadata parser

This module walks the TIFF structure that carries EXIF metadata. It is used
directly for standalone TIFF input and by the JPEG, PNG and WebP parsers for
the EXIF payloads they embed. All offsets inside a TIFF region are relative
to the start of that region's own header.

Copyright 2025 DNAi inc.
"""

import logging
from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from exiflens.binary import read_bytes, trim_nul, unpack_from
from exiflens.exceptions import InvalidTIFFHeaderError, TruncatedDataError
from exiflens.exif_tags import (
    EXIF_TAG_NAMES,
    GPS_TAG_NAMES,
    TAG_EXIF_IFD_POINTER,
    TAG_GPS_INFO_IFD_POINTER,
    TAG_USER_COMMENT,
    TAG_GPS_VERSION_ID,
    TAG_GPS_LATITUDE_REF,
    TAG_GPS_LATITUDE,
    TAG_GPS_LONGITUDE_REF,
    TAG_GPS_LONGITUDE,
    TAG_GPS_ALTITUDE_REF,
    TAG_GPS_ALTITUDE,
    TAG_GPS_TIMESTAMP,
    TAG_GPS_DATESTAMP,
)
from exiflens.options import ParseOptions, resolve_options
from exiflens.text_decoding import decode_text, decode_user_comment
from exiflens.value_formatter import (
    format_gps_coordinate,
    format_gps_timestamp,
    format_rational,
)

logger = logging.getLogger(__name__)


class ExifTagType(IntEnum):
    """EXIF tag data types"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    UNDEFINED = 7
    SLONG = 9
    SRATIONAL = 10


# EXIF tag sizes in bytes
TAG_SIZES = {
    ExifTagType.BYTE: 1,
    ExifTagType.ASCII: 1,
    ExifTagType.SHORT: 2,
    ExifTagType.LONG: 4,
    ExifTagType.RATIONAL: 8,
    ExifTagType.UNDEFINED: 1,
    ExifTagType.SLONG: 4,
    ExifTagType.SRATIONAL: 8,
}

TIFF_HEADER_SIZE = 8
IFD_ENTRY_SIZE = 12
TIFF_MAGIC = 42

# Prefix of EXIF payloads in JPEG APP1 (and some PNG/WebP writers)
EXIF_HEADER = b'Exif\x00\x00'

GPSValue = Union[str, List[int], List[Tuple[int, int]]]


class ExifParser:
    """
    Parser for one TIFF region holding EXIF metadata.

    An instance is bound to a single region for a single walk: the byte
    order and the set of visited IFDs are only meaningful for that region.
    Use parse_tiff() rather than keeping instances around.
    """

    def __init__(self, region: bytes, options: Optional[ParseOptions] = None):
        """
        Initialize the EXIF parser.

        Args:
            region: Bytes starting at the TIFF header (II/MM)
            options: Parse options (defaults apply when None)
        """
        self.data = region
        self.options = resolve_options(options)
        self.endian = '<'  # Default to little-endian
        self._visited_ifds = set()
        # Overlapping IFDs share entries; total reads across all IFDs stay within the region size
        self._entry_budget = len(region) // IFD_ENTRY_SIZE

    def parse_into(self, metadata: Dict[str, str]) -> None:
        """
        Walk IFD0 and its EXIF/GPS sub-directories, writing decoded tags into metadata.

        Args:
            metadata: Output map shared with the calling container parser

        Raises:
            InvalidTIFFHeaderError: If the region has no valid byte-order marker
        """
        first_ifd_offset = self._parse_tiff_header()
        self._parse_ifd(first_ifd_offset, metadata, depth=0)

    def _parse_tiff_header(self) -> int:
        """Determine the byte order and return the offset of IFD0."""
        if len(self.data) < TIFF_HEADER_SIZE:
            raise InvalidTIFFHeaderError("TIFF header too short")

        byte_order = self.data[:2]
        if byte_order == b'II':
            self.endian = '<'
        elif byte_order == b'MM':
            self.endian = '>'
        else:
            raise InvalidTIFFHeaderError("Invalid TIFF byte order")

        magic, first_ifd_offset = unpack_from(f'{self.endian}HI', self.data, 2)
        if magic != TIFF_MAGIC:
            # Some writers get this wrong; the directory layout is still usable
            logger.debug("Unexpected TIFF magic number %d", magic)
        return first_ifd_offset

    def _enter_ifd(self, ifd_offset: int, depth: int) -> bool:
        """Record an IFD visit; False if it was already walked or nests too deep."""
        if ifd_offset in self._visited_ifds:
            logger.debug("IFD at offset %d already visited", ifd_offset)
            return False
        if depth > self.options.get_option('MaxIFDDepth', 8):
            logger.debug("IFD at offset %d exceeds maximum nesting depth", ifd_offset)
            return False
        self._visited_ifds.add(ifd_offset)
        return True

    def _iter_entries(self, ifd_offset: int) -> Iterator[Tuple[int, int, int, int]]:
        """
        Yield (tag_id, tag_type, count, value_field_offset) for each entry of an IFD.

        Stops quietly at the first entry that does not fit in the region.
        """
        try:
            num_entries = unpack_from(f'{self.endian}H', self.data, ifd_offset)[0]
        except TruncatedDataError:
            logger.debug("IFD offset %d is outside the TIFF region", ifd_offset)
            return

        entry_offset = ifd_offset + 2
        for _ in range(num_entries):
            if entry_offset + IFD_ENTRY_SIZE > len(self.data):
                logger.debug("IFD at offset %d is truncated", ifd_offset)
                break
            if self._entry_budget <= 0:
                logger.debug("IFD entry limit reached at offset %d", ifd_offset)
                break
            self._entry_budget -= 1
            tag_id, tag_type, count = unpack_from(f'{self.endian}HHI', self.data, entry_offset)
            yield tag_id, tag_type, count, entry_offset + 8
            entry_offset += IFD_ENTRY_SIZE

    def _parse_ifd(self, ifd_offset: int, metadata: Dict[str, str], depth: int) -> None:
        """
        Parse an IFD (Image File Directory) structure.

        Args:
            ifd_offset: Offset to the IFD from the start of the TIFF region
            metadata: Output map
            depth: Sub-IFD nesting level (IFD0 is 0)
        """
        if not self._enter_ifd(ifd_offset, depth):
            return

        for tag_id, tag_type, count, value_field in self._iter_entries(ifd_offset):
            try:
                if tag_id == TAG_EXIF_IFD_POINTER:
                    self._parse_ifd(self._read_offset(value_field), metadata, depth + 1)
                    continue
                if tag_id == TAG_GPS_INFO_IFD_POINTER:
                    if self.options.get_option('DecodeGPS', True):
                        self._parse_gps_ifd(self._read_offset(value_field), metadata, depth + 1)
                    continue

                tag_name = EXIF_TAG_NAMES.get(tag_id)
                if tag_name is None:
                    continue

                value = self._read_tag_value(tag_id, tag_type, count, value_field)
                if value:
                    metadata[tag_name] = value
            except TruncatedDataError as e:
                logger.debug("Skipping tag 0x%04X: %s", tag_id, e.message)

    def _read_offset(self, value_field: int) -> int:
        return unpack_from(f'{self.endian}I', self.data, value_field)[0]

    def _value_location(self, tag_type: int, count: int, value_field: int) -> int:
        """Return where a value lives: inline in the entry when it fits in 4 bytes, else at the stored offset."""
        tag_size = TAG_SIZES.get(tag_type, 1)
        if tag_size * count <= 4:
            return value_field
        return self._read_offset(value_field)

    def _read_tag_value(self, tag_id: int, tag_type: int, count: int, value_field: int) -> Optional[str]:
        """
        Read and render the value of a scalar EXIF tag.

        Only ASCII strings, single SHORT/LONG/RATIONAL values and the
        UserComment UNDEFINED block are rendered; anything else yields None.
        """
        if tag_type == ExifTagType.ASCII:
            return self._read_ascii(count, value_field)

        if tag_type == ExifTagType.SHORT and count == 1:
            return str(unpack_from(f'{self.endian}H', self.data, value_field)[0])

        if tag_type == ExifTagType.LONG and count == 1:
            return str(unpack_from(f'{self.endian}I', self.data, value_field)[0])

        if tag_type == ExifTagType.RATIONAL and count == 1:
            numerator, denominator = unpack_from(
                f'{self.endian}II', self.data, self._read_offset(value_field)
            )
            return format_rational(numerator, denominator)

        if tag_type == ExifTagType.UNDEFINED and tag_id == TAG_USER_COMMENT and count > 8:
            payload = read_bytes(self.data, self._read_offset(value_field), count)
            return decode_user_comment(payload, self.endian)

        return None

    def _read_ascii(self, count: int, value_field: int) -> str:
        location = self._value_location(ExifTagType.ASCII, count, value_field)
        return decode_text(trim_nul(read_bytes(self.data, location, count)))

    def _read_array(self, tag_type: int, count: int, value_field: int) -> Optional[list]:
        """Read BYTE/SHORT/LONG values as ints and RATIONAL values as (numerator, denominator) pairs."""
        location = self._value_location(tag_type, count, value_field)
        if tag_type == ExifTagType.BYTE:
            return list(read_bytes(self.data, location, count))
        if tag_type == ExifTagType.SHORT:
            return list(unpack_from(f'{self.endian}{count}H', self.data, location))
        if tag_type == ExifTagType.LONG:
            return list(unpack_from(f'{self.endian}{count}I', self.data, location))
        if tag_type == ExifTagType.RATIONAL:
            flat = unpack_from(f'{self.endian}{count * 2}I', self.data, location)
            return list(zip(flat[0::2], flat[1::2]))
        return None

    def _parse_gps_ifd(self, ifd_offset: int, metadata: Dict[str, str], depth: int) -> None:
        """
        Parse the GPS IFD.

        GPS positions are stored as arrays (three rationals per coordinate)
        and their sign lives in a separate reference tag, so all entries are
        read first and rendered afterwards.
        """
        if not self._enter_ifd(ifd_offset, depth):
            return

        raw: Dict[int, GPSValue] = {}
        for tag_id, tag_type, count, value_field in self._iter_entries(ifd_offset):
            if tag_id not in GPS_TAG_NAMES or count == 0:
                continue
            try:
                if tag_type == ExifTagType.ASCII:
                    raw[tag_id] = self._read_ascii(count, value_field)
                else:
                    values = self._read_array(tag_type, count, value_field)
                    if values is not None:
                        raw[tag_id] = values
            except TruncatedDataError as e:
                logger.debug("Skipping GPS tag 0x%04X: %s", tag_id, e.message)

        self._render_gps(raw, metadata)

    def _render_gps(self, raw: Dict[int, GPSValue], metadata: Dict[str, str]) -> None:
        version = raw.get(TAG_GPS_VERSION_ID)
        if isinstance(version, list) and all(isinstance(v, int) for v in version):
            metadata[GPS_TAG_NAMES[TAG_GPS_VERSION_ID]] = '.'.join(str(v) for v in version)

        for ref_tag, coord_tag in ((TAG_GPS_LATITUDE_REF, TAG_GPS_LATITUDE),
                                   (TAG_GPS_LONGITUDE_REF, TAG_GPS_LONGITUDE)):
            ref = raw.get(ref_tag)
            if not isinstance(ref, str):
                ref = None
            if ref:
                metadata[GPS_TAG_NAMES[ref_tag]] = ref
            coordinate = raw.get(coord_tag)
            if isinstance(coordinate, list) and coordinate and isinstance(coordinate[0], tuple):
                rendered = format_gps_coordinate(coordinate, ref)
                if rendered is not None:
                    metadata[GPS_TAG_NAMES[coord_tag]] = rendered

        below_sea_level = False
        altitude_ref = raw.get(TAG_GPS_ALTITUDE_REF)
        if isinstance(altitude_ref, list) and altitude_ref:
            below_sea_level = altitude_ref[0] == 1
            metadata[GPS_TAG_NAMES[TAG_GPS_ALTITUDE_REF]] = (
                'Below Sea Level' if below_sea_level else 'Above Sea Level'
            )

        altitude = raw.get(TAG_GPS_ALTITUDE)
        if isinstance(altitude, list) and len(altitude) == 1 and isinstance(altitude[0], tuple):
            numerator, denominator = altitude[0]
            if denominator != 0:
                value = numerator / denominator
                metadata[GPS_TAG_NAMES[TAG_GPS_ALTITUDE]] = f"{-value if below_sea_level else value:.2f}"

        timestamp = raw.get(TAG_GPS_TIMESTAMP)
        if isinstance(timestamp, list) and timestamp and isinstance(timestamp[0], tuple):
            rendered = format_gps_timestamp(timestamp)
            if rendered is not None:
                metadata[GPS_TAG_NAMES[TAG_GPS_TIMESTAMP]] = rendered

        datestamp = raw.get(TAG_GPS_DATESTAMP)
        if isinstance(datestamp, str) and datestamp:
            metadata[GPS_TAG_NAMES[TAG_GPS_DATESTAMP]] = datestamp


def parse_tiff(region: bytes, metadata: Dict[str, str], options: Optional[ParseOptions] = None) -> None:
    """
    Decode the EXIF tags of a TIFF region into metadata.

    Args:
        region: Bytes starting at the TIFF header
        metadata: Output map; decoded fields overwrite existing keys
        options: Optional parse options

    Raises:
        InvalidTIFFHeaderError: If the region has no valid TIFF header
    """
    ExifParser(region, options).parse_into(metadata)


def strip_exif_header(payload: bytes) -> bytes:
    """Drop a leading 'Exif\\0\\0' marker if present."""
    if payload.startswith(EXIF_HEADER):
        return payload[len(EXIF_HEADER):]
    return payload


def parse_embedded_exif(payload: bytes, metadata: Dict[str, str], options: Optional[ParseOptions] = None) -> None:
    """
    Decode an EXIF payload found inside a container chunk or segment.

    A bad TIFF header is recorded as EXIF_ParseError instead of failing the
    surrounding container walk.
    """
    try:
        parse_tiff(payload, metadata, options)
    except InvalidTIFFHeaderError as e:
        logger.debug("Embedded EXIF rejected: %s", e.message)
        metadata['EXIF_ParseError'] = e.message
