# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Text decoding for metadata byte strings.

Embedded text rarely declares its encoding. UTF-8 is tried first, then
the encoding guessed by chardet, then Latin-1 (which never fails).

Copyright 2025 DNAi inc.
"""

import logging

import chardet

from exiflens.binary import trim_nul

logger = logging.getLogger(__name__)

# chardet guesses below this confidence are ignored
MIN_DETECTION_CONFIDENCE = 0.5


def decode_text(raw: bytes) -> str:
    """
    Decode a byte string of unknown encoding.

    Args:
        raw: Text bytes as stored in the file

    Returns:
        Decoded text
    """
    if not raw:
        return ''

    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        pass

    detected = chardet.detect(raw)
    encoding = detected.get('encoding')
    confidence = detected.get('confidence') or 0.0
    if encoding and confidence > MIN_DETECTION_CONFIDENCE:
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug("Detected encoding %s did not decode %d bytes", encoding, len(raw))

    return raw.decode('latin-1')


def decode_user_comment(payload: bytes, endian: str) -> str:
    """
    Decode an EXIF UserComment value.

    The first 8 bytes name the character code (ASCII, JIS, UNICODE or all
    NULs for undefined); the rest is the comment. A character code other
    than ASCII or undefined is appended to the text as an annotation.

    Args:
        payload: Full tag value, character code included
        endian: '<' or '>' byte order of the enclosing TIFF region

    Returns:
        Rendered comment, or '' when the comment text is empty
    """
    charset = trim_nul(payload[:8]).decode('ascii', errors='replace').strip()
    body = payload[8:]

    if charset == 'UNICODE':
        codec = 'utf-16-le' if endian == '<' else 'utf-16-be'
        text = body.decode(codec, errors='replace').rstrip('\x00')
    else:
        text = decode_text(trim_nul(body))

    if not text:
        return ''
    if charset and charset != 'ASCII':
        return f"{text} (charset: {charset})"
    return text
