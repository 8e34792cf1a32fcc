"""Builders for synthetic JPEG, TIFF, PNG and WebP byte streams."""

import struct
import zlib

import pytest

TYPE_BYTE = 1
TYPE_ASCII = 2
TYPE_SHORT = 3
TYPE_LONG = 4
TYPE_RATIONAL = 5
TYPE_UNDEFINED = 7

EXIF_POINTER = 0x8769
GPS_POINTER = 0x8825


class TiffBuilder:
    """Lays out IFD0 plus optional EXIF and GPS sub-IFDs in one TIFF region."""

    def __init__(self, endian='<'):
        self.endian = endian

    def ascii(self, tag, text):
        raw = text.encode('utf-8') + b'\x00'
        return (tag, TYPE_ASCII, len(raw), raw)

    def short(self, tag, value):
        return (tag, TYPE_SHORT, 1, struct.pack(self.endian + 'H', value))

    def long(self, tag, value):
        return (tag, TYPE_LONG, 1, struct.pack(self.endian + 'I', value))

    def rational(self, tag, *pairs):
        raw = b''.join(struct.pack(self.endian + 'II', n, d) for n, d in pairs)
        return (tag, TYPE_RATIONAL, len(pairs), raw)

    def byte(self, tag, *values):
        return (tag, TYPE_BYTE, len(values), bytes(values))

    def undefined(self, tag, raw):
        return (tag, TYPE_UNDEFINED, len(raw), raw)

    def raw_entry(self, tag, tag_type, count, value_field):
        """An entry whose 4-byte value field is given verbatim."""
        return (tag, tag_type, count, value_field, True)

    @staticmethod
    def _padded(raw):
        return raw + b'\x00' if len(raw) % 2 else raw

    def _ifd_size(self, entries):
        data = sum(len(self._padded(e[3])) for e in entries if len(e[3]) > 4 and len(e) == 4)
        return 2 + 12 * len(entries) + 4 + data

    def _layout(self, entries, start):
        e = self.endian
        data_start = start + 2 + 12 * len(entries) + 4
        table = struct.pack(e + 'H', len(entries))
        data = b''
        for entry in sorted(entries, key=lambda item: item[0]):
            tag, tag_type, count, raw = entry[:4]
            if len(entry) == 5 or len(raw) <= 4:
                value = raw.ljust(4, b'\x00')
            else:
                value = struct.pack(e + 'I', data_start + len(data))
                data += self._padded(raw)
            table += struct.pack(e + 'HHI', tag, tag_type, count) + value
        table += struct.pack(e + 'I', 0)
        return table + data

    def build(self, ifd0, exif=None, gps=None):
        e = self.endian
        ifd0 = list(ifd0)
        placeholder = b'\x00' * 4
        if exif is not None:
            ifd0.append((EXIF_POINTER, TYPE_LONG, 1, placeholder))
        if gps is not None:
            ifd0.append((GPS_POINTER, TYPE_LONG, 1, placeholder))

        exif_offset = 8 + self._ifd_size(ifd0)
        gps_offset = exif_offset + (self._ifd_size(exif) if exif is not None else 0)

        resolved = []
        for entry in ifd0:
            if entry[0] == EXIF_POINTER and entry[3] == placeholder:
                entry = (EXIF_POINTER, TYPE_LONG, 1, struct.pack(e + 'I', exif_offset))
            elif entry[0] == GPS_POINTER and entry[3] == placeholder:
                entry = (GPS_POINTER, TYPE_LONG, 1, struct.pack(e + 'I', gps_offset))
            resolved.append(entry)

        header = (b'II' if e == '<' else b'MM') + struct.pack(e + 'HI', 42, 8)
        out = header + self._layout(resolved, 8)
        if exif is not None:
            out += self._layout(exif, exif_offset)
        if gps is not None:
            out += self._layout(gps, gps_offset)
        return out


def jpeg_segment(marker, payload):
    return b'\xff' + bytes([marker]) + struct.pack('>H', len(payload) + 2) + payload


def build_jpeg(*segments, scan=True):
    out = b'\xff\xd8' + b''.join(segments)
    if scan:
        out += jpeg_segment(0xDA, b'\x01\x01\x00\x00\x3f\x00') + b'\x12\x34\x56' + b'\xff\xd9'
    return out


def png_chunk(chunk_type, data, crc=None):
    if crc is None:
        crc = zlib.crc32(chunk_type + data) & 0xFFFFFFFF
    return struct.pack('>I', len(data)) + chunk_type + data + struct.pack('>I', crc)


def png_ihdr(width=16, height=8, bit_depth=8, color_type=2, interlace=0):
    return png_chunk(b'IHDR', struct.pack('>IIBBBBB', width, height, bit_depth, color_type, 0, 0, interlace))


PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


def build_png(*chunks, end=True):
    out = PNG_SIGNATURE + b''.join(chunks)
    if end:
        out += png_chunk(b'IEND', b'')
    return out


def riff_chunk(fourcc, data):
    out = fourcc + struct.pack('<I', len(data)) + data
    if len(data) % 2:
        out += b'\x00'
    return out


def build_webp(*chunks, riff_size=None):
    body = b'WEBP' + b''.join(chunks)
    if riff_size is None:
        riff_size = len(body)
    return b'RIFF' + struct.pack('<I', riff_size) + body


def vp8x_payload(flags=0, width=1, height=1):
    return (bytes([flags]) + b'\x00\x00\x00'
            + (width - 1).to_bytes(3, 'little') + (height - 1).to_bytes(3, 'little'))


@pytest.fixture
def tiff_le():
    return TiffBuilder('<')


@pytest.fixture
def tiff_be():
    return TiffBuilder('>')


@pytest.fixture
def acme_tiff(tiff_le):
    """Minimal little-endian TIFF whose IFD0 holds only Make = 'Acme'."""
    return tiff_le.build([tiff_le.ascii(0x010F, 'Acme')])
