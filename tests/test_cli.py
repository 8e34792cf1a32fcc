import json

import pytest

from exiflens import __version__
from exiflens.cli import format_output, main, parse_option_assignments

from conftest import build_jpeg, build_png, jpeg_segment, png_chunk


@pytest.fixture
def acme_file(tmp_path, acme_tiff):
    path = tmp_path / 'acme.jpg'
    path.write_bytes(build_jpeg(
        jpeg_segment(0xE1, b'Exif\x00\x00' + acme_tiff),
        jpeg_segment(0xFE, b'hello'),
    ))
    return path


def test_text_output(acme_file, capsys):
    assert main([str(acme_file)]) == 0
    assert capsys.readouterr().out == 'JPEG_Comment: hello\nMake: Acme\n'


def test_json_output(acme_file, capsys):
    assert main(['--json', str(acme_file)]) == 0
    assert json.loads(capsys.readouterr().out) == {'Make': 'Acme', 'JPEG_Comment': 'hello'}


def test_csv_output():
    assert format_output({'Note': 'say "hi"'}, 'csv') == 'Tag,Value\n"Note","say ""hi"""'


def test_tag_filter_and_summary(acme_file, capsys):
    main(['-t', 'Make', str(acme_file)])
    assert capsys.readouterr().out == 'Make: Acme\n'
    main(['--summary', str(acme_file)])
    assert capsys.readouterr().out == 'Camera: Acme\n'


def test_multiple_files_and_failures(acme_file, tmp_path, capsys):
    empty = tmp_path / 'empty.png'
    empty.write_bytes(build_png(png_chunk(b'IDAT', b'\x00')))
    missing = tmp_path / 'missing.jpg'

    assert main([str(acme_file), str(empty), str(missing)]) == 1
    captured = capsys.readouterr()
    assert f'======== {acme_file}' in captured.out
    assert f'======== {empty}' in captured.out
    assert 'No metadata found in PNG data' in captured.err
    assert f'Error: {missing}' in captured.err


def test_parse_options_from_command_line(tmp_path, tiff_le, capsys):
    t = tiff_le
    path = tmp_path / 'gps.tif'
    path.write_bytes(t.build([t.ascii(0x010F, 'Acme')], gps=[t.ascii(0x0001, 'N')]))

    main([str(path)])
    assert 'GPSLatitudeRef: N' in capsys.readouterr().out
    main(['-o', 'DecodeGPS=false', str(path)])
    assert capsys.readouterr().out == 'Make: Acme\n'


def test_parse_option_assignments():
    options = parse_option_assignments(['MaxIFDDepth = 2'])
    assert options.get_option('MaxIFDDepth') == 2
    with pytest.raises(ValueError):
        parse_option_assignments(['MaxIFDDepth'])
    with pytest.raises(ValueError):
        parse_option_assignments(['Nope=1'])


@pytest.mark.parametrize('argv', [[], ['-o', 'Nope=1', 'x.jpg']])
def test_usage_errors(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2


def test_list_options(capsys):
    assert main(['--list-options']) == 0
    out = capsys.readouterr().out
    assert 'DecodeGPS (bool, default True)' in out
    assert 'MaxInflateSize' in out


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(['--version'])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out
