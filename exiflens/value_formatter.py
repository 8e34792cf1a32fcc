# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Value formatter for decoded metadata

Every value in a metadata map is a string. This module holds the
rendering rules shared by the parsers.

Copyright 2025 DNAi inc.
"""

from typing import Optional, Sequence, Tuple

Rational = Tuple[int, int]


def format_rational(numerator: int, denominator: int, places: int = 2) -> Optional[str]:
    """
    Render numerator/denominator as a fixed-point decimal.

    Returns:
        Formatted value, or None when the denominator is zero
    """
    if denominator == 0:
        return None
    return f"{numerator / denominator:.{places}f}"


def rationals_to_degrees(values: Sequence[Rational]) -> Optional[float]:
    """
    Convert (degrees, minutes, seconds) rationals to decimal degrees.

    Returns:
        Decimal degrees, or None if any component has a zero denominator
    """
    if len(values) != 3:
        return None
    parts = []
    for numerator, denominator in values:
        if denominator == 0:
            return None
        parts.append(numerator / denominator)
    degrees, minutes, seconds = parts
    return degrees + minutes / 60.0 + seconds / 3600.0


def format_gps_coordinate(values: Sequence[Rational], ref: Optional[str]) -> Optional[str]:
    """Render a GPS latitude/longitude as signed decimal degrees ('S' and 'W' are negative)."""
    degrees = rationals_to_degrees(values)
    if degrees is None:
        return None
    if ref and ref.strip().upper() in ('S', 'W'):
        degrees = -degrees
    return f"{degrees:.6f}"


def format_gps_timestamp(values: Sequence[Rational]) -> Optional[str]:
    """Render a GPS time stamp (hour, minute, second rationals) as HH:MM:SS."""
    if len(values) != 3 or any(denominator == 0 for _, denominator in values):
        return None
    hours, minutes, seconds = (int(numerator / denominator) for numerator, denominator in values)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_timestamp(year: int, month: int, day: int, hour: int, minute: int, second: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}:{second:02d}"


def format_byte_count(size: int) -> str:
    return f"({size} bytes)"


def format_presence(size: int) -> str:
    return f"present ({size} bytes)"
