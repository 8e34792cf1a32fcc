from exiflens.value_formatter import (
    format_gps_coordinate,
    format_gps_timestamp,
    format_rational,
    rationals_to_degrees,
)


def test_format_rational():
    assert format_rational(1, 3) == '0.33'
    assert format_rational(1, 3, places=4) == '0.3333'
    assert format_rational(5, 0) is None


def test_degrees():
    assert rationals_to_degrees([(10, 1), (30, 1), (0, 1)]) == 10.5
    assert rationals_to_degrees([(10, 1), (30, 1)]) is None
    assert rationals_to_degrees([(10, 1), (30, 0), (0, 1)]) is None


def test_gps_coordinate_sign():
    values = [(48, 1), (51, 1), (2952, 100)]
    assert format_gps_coordinate(values, 'N') == '48.858200'
    assert format_gps_coordinate(values, 'W') == '-48.858200'
    assert format_gps_coordinate(values, None) == '48.858200'


def test_gps_timestamp():
    assert format_gps_timestamp([(23, 1), (59, 1), (5999, 100)]) == '23:59:59'
    assert format_gps_timestamp([(1, 0), (0, 1), (0, 1)]) is None
