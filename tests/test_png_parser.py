import io
import struct
import zlib

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from exiflens.exceptions import DecompressionError, InvalidSignatureError, NoMetadataFoundError
from exiflens.options import ParseOptions
from exiflens.png_parser import PNGParser, inflate, split_keyword

from conftest import PNG_SIGNATURE, build_png, png_chunk, png_ihdr


@pytest.fixture
def parser():
    return PNGParser()


def test_header_fields(parser):
    assert parser.parse(build_png(png_ihdr(16, 8, 8, 2, 0))) == {
        'PNG_Width': '16',
        'PNG_Height': '8',
        'PNG_BitDepth': '8',
        'PNG_ColorType': 'RGB',
        'PNG_Compression': '0',
        'PNG_Filter': '0',
        'PNG_Interlace': 'None',
    }


def test_header_enumerations(parser):
    metadata = parser.parse(build_png(png_ihdr(color_type=6, interlace=1)))
    assert metadata['PNG_ColorType'] == 'RGB with Alpha'
    assert metadata['PNG_Interlace'] == 'Adam7'

    metadata = parser.parse(build_png(png_ihdr(color_type=7)))
    assert metadata['PNG_ColorType'] == '7'


def test_text_chunk(parser):
    data = build_png(png_chunk(b'tEXt', b'Author\x00Fran\xe7ois'))
    assert parser.parse(data) == {'PNG_Author': 'Fran\xe7ois'}


def test_crc_mismatch_is_recorded_and_chunk_still_read(parser):
    data = build_png(png_chunk(b'tEXt', b'Comment\x00Hello', crc=0))
    metadata = parser.parse(data)
    assert metadata['PNG_Comment'] == 'Hello'
    assert metadata['PNG_CRCMismatch_tEXt'].startswith('stored 0x00000000, computed 0x')


def test_crc_check_can_be_disabled(parser):
    data = build_png(png_chunk(b'tEXt', b'Comment\x00Hello', crc=0))
    assert parser.parse(data, ParseOptions(VerifyCRC=False)) == {'PNG_Comment': 'Hello'}


def test_compressed_text(parser):
    data = build_png(png_chunk(b'zTXt', b'Description\x00\x00' + zlib.compress(b'compressed text')))
    assert parser.parse(data) == {'PNG_Description': 'compressed text'}


def test_international_text(parser):
    data = build_png(
        png_chunk(b'iTXt', b'Title\x00\x00\x00en\x00Titel\x00' + 'Grüße'.encode('utf-8')),
        png_chunk(b'iTXt', b'Artist\x00\x01\x00\x00\x00' + zlib.compress('Zoë'.encode('utf-8'))),
    )
    assert parser.parse(data) == {
        'PNG_Title (lang=en, translated=Titel)': 'Grüße',
        'PNG_Artist': 'Zoë',
    }


@pytest.mark.parametrize('chunk', [
    png_chunk(b'zTXt', b'Broken\x00\x00not a zlib stream'),
    png_chunk(b'zTXt', b'Method\x00\x01' + zlib.compress(b'x')),
    png_chunk(b'tEXt', b'\x00no keyword'),
    png_chunk(b'tEXt', b'no separator'),
    png_chunk(b'iTXt', b'Short\x00\x00'),
    png_chunk(b'pHYs', b'\x00\x00'),
])
def test_malformed_chunk_is_skipped(parser, chunk):
    data = build_png(chunk, png_chunk(b'tEXt', b'After\x00ok'))
    assert parser.parse(data) == {'PNG_After': 'ok'}


def test_inflate_limit(parser):
    chunk = png_chunk(b'zTXt', b'Big\x00\x00' + zlib.compress(b'a' * 1000))
    assert parser.parse(build_png(chunk, png_ihdr()))['PNG_Big'] == 'a' * 1000

    metadata = parser.parse(build_png(chunk, png_ihdr()), ParseOptions(MaxInflateSize=100))
    assert 'PNG_Big' not in metadata
    assert metadata['PNG_Width'] == '16'


def test_ancillary_chunks(parser):
    data = build_png(
        png_chunk(b'pHYs', struct.pack('>IIB', 2835, 2835, 1)),
        png_chunk(b'tIME', struct.pack('>HBBBBB', 2024, 5, 1, 12, 30, 45)),
        png_chunk(b'iCCP', b'sRGB profile\x00\x00' + zlib.compress(b'profile')),
        png_chunk(b'sPLT', b'palette\x00\x08\x00\x00\x00\xff\x00\x01'),
        png_chunk(b'gAMA', struct.pack('>I', 45455)),
        png_chunk(b'sRGB', b'\x00'),
    )
    assert parser.parse(data) == {
        'PNG_PixelsPerUnitX': '2835',
        'PNG_PixelsPerUnitY': '2835',
        'PNG_PixelUnit': 'meter',
        'PNG_ModifyTime': '2024-05-01 12:30:45',
        'ICC_Profile': 'present (sRGB profile)',
        'ICC_Profile_Compression': 'deflate',
        'PNG_SuggestedPalette': 'palette',
        'PNG_Gamma': '0.45455',
        'PNG_SRGBRenderingIntent': 'Perceptual',
    }


@pytest.mark.parametrize('prefix', [b'', b'Exif\x00\x00'])
def test_exif_chunk(parser, acme_tiff, prefix):
    data = build_png(png_ihdr(), png_chunk(b'eXIf', prefix + acme_tiff))
    assert parser.parse(data)['Make'] == 'Acme'


def test_chunks_after_iend_are_ignored(parser):
    data = build_png(png_chunk(b'tEXt', b'Before\x00a')) + png_chunk(b'tEXt', b'After\x00b')
    assert parser.parse(data) == {'PNG_Before': 'a'}


def test_truncated_chunk_keeps_earlier_fields(parser):
    data = build_png(png_ihdr(), png_chunk(b'tEXt', b'Key\x00value'), end=False)[:-6]
    result = parser.walk(data, ParseOptions())
    assert result.stopped_early
    assert result.metadata['PNG_Width'] == '16'
    assert 'PNG_Key' not in result.metadata


def test_truncated_header_chunk_has_no_metadata(parser):
    with pytest.raises(NoMetadataFoundError):
        parser.parse(PNG_SIGNATURE + b'\x00\x00\x00\x0dIHDR\x00\x00\x00')


def test_invalid_signature(parser):
    with pytest.raises(InvalidSignatureError):
        parser.parse(b'\xff\xd8\xff\xe0' + b'\x00' * 8)


def test_split_keyword():
    assert split_keyword(b'Key\x00rest\x00more') == ('Key', b'rest\x00more')
    with pytest.raises(ValueError):
        split_keyword(b'\x00value')


def test_inflate_errors():
    with pytest.raises(DecompressionError):
        inflate(b'not zlib', 1024)
    with pytest.raises(DecompressionError):
        inflate(zlib.compress(b'abc' * 100)[:-4], 1024)
    with pytest.raises(DecompressionError):
        inflate(zlib.compress(b'a' * 1000), 10)


def test_pillow_written_png(parser):
    info = PngInfo()
    info.add_text('Software', 'exiflens tests')
    info.add_text('Comment', 'compressed comment', zip=True)
    buffer = io.BytesIO()
    Image.new('RGB', (4, 3)).save(buffer, 'PNG', pnginfo=info)

    metadata = parser.parse(buffer.getvalue())
    assert metadata['PNG_Width'] == '4'
    assert metadata['PNG_Height'] == '3'
    assert metadata['PNG_Software'] == 'exiflens tests'
    assert metadata['PNG_Comment'] == 'compressed comment'
    assert not any(key.startswith('PNG_CRCMismatch') for key in metadata)


def test_zero_inflate_limit_is_rejected():
    # zlib reads a max_length of 0 as "unlimited"
    with pytest.raises(ValueError):
        ParseOptions(MaxInflateSize=0)
