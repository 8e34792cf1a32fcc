# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Metadata utility functions for common operations.

This module derives host-facing views from a parsed metadata map:
a short photo summary, prefix filtering and a quick metadata check.

Copyright 2025 DNAi inc.
"""

from typing import Dict, Iterable

from exiflens.core import parse_image
from exiflens.exceptions import ExifLensError


def get_metadata_summary(metadata: Dict[str, str]) -> Dict[str, str]:
    """
    Build a short summary of the most useful photo fields.

    Keys are only present when their source fields are:
    - Camera: Make and/or Model
    - DateTaken: DateTimeOriginal, else DateTime
    - Exposure: ExposureTime, FNumber and ISO together
    - FocalLength: FocalLength in millimetres
    - GPS: GPSLatitude and GPSLongitude together

    Args:
        metadata: Map returned by parse_image()

    Returns:
        Summary dictionary (possibly empty)

    Example:
        >>> get_metadata_summary({'Make': 'Canon', 'Model': 'EOS R5'})
        {'Camera': 'Canon EOS R5'}
    """
    summary: Dict[str, str] = {}

    camera = ' '.join(v for v in (metadata.get('Make'), metadata.get('Model')) if v)
    if camera:
        summary['Camera'] = camera

    date_taken = metadata.get('DateTimeOriginal') or metadata.get('DateTime')
    if date_taken:
        summary['DateTaken'] = date_taken

    exposure_time = metadata.get('ExposureTime')
    f_number = metadata.get('FNumber')
    iso = metadata.get('ISO')
    if exposure_time and f_number and iso:
        summary['Exposure'] = f"{exposure_time}s, f/{f_number}, ISO {iso}"

    if metadata.get('FocalLength'):
        summary['FocalLength'] = f"{metadata['FocalLength']}mm"

    latitude = metadata.get('GPSLatitude')
    longitude = metadata.get('GPSLongitude')
    if latitude and longitude:
        summary['GPS'] = f"{latitude}, {longitude}"

    return summary


def filter_metadata_by_prefix(metadata: Dict[str, str], prefixes: Iterable[str]) -> Dict[str, str]:
    """Keep only the fields whose name starts with one of the prefixes (e.g. 'PNG_', 'GPS')."""
    prefixes = tuple(prefixes)
    return {key: value for key, value in metadata.items() if key.startswith(prefixes)}


def has_metadata(data: bytes) -> bool:
    """
    Check whether an image buffer yields any metadata.

    Returns:
        True if parse_image() succeeds, False on any ExifLens error
    """
    try:
        return bool(parse_image(data))
    except ExifLensError:
        return False
