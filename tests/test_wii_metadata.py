import io

import pytest

from discscan.common.exceptions import SerialNotFoundError
from discscan.wii.metadata import detect_serial_ascii_game, leading_serial_run


def test_game_id_at_start():
    data = b"RMCE01" + b"\x00" * 64
    assert detect_serial_ascii_game(io.BytesIO(data)) == "RMCE01"


def test_long_run_is_shortened_by_later_offsets():
    # "AB-1234XYZ" is 10 characters: offsets 0 and 1 are too long, offset 2 fits
    data = b"AB-1234XYZ" + b"\x80\x81\x82" * 8
    serial = detect_serial_ascii_game(io.BytesIO(data))
    assert serial == "-1234XYZ"
    assert 4 <= len(serial) <= 8


def test_runs_of_three_are_rejected():
    data = b"\x00ABC\x00" + b"\xff" * 40
    with pytest.raises(SerialNotFoundError):
        detect_serial_ascii_game(io.BytesIO(data))


def test_runs_of_nine_or_more_are_rejected_at_that_offset():
    data = b"ABCDEFGHI" + b"\x00" * 40
    # Offset 0 has 9 characters; offset 1 has 8 and is accepted
    assert detect_serial_ascii_game(io.BytesIO(data)) == "BCDEFGHI"


def test_lowercase_is_not_serial():
    with pytest.raises(SerialNotFoundError):
        detect_serial_ascii_game(io.BytesIO(b"\x00gale01\x00" + bytes(32)))


def test_scan_limit():
    data = bytes(50) + b"GALE01" + bytes(20)
    with pytest.raises(SerialNotFoundError):
        detect_serial_ascii_game(io.BytesIO(data), limit=50)
    assert detect_serial_ascii_game(io.BytesIO(data), limit=51) == "GALE01"


def test_leading_serial_run():
    assert leading_serial_run(b"GALE01\x00") == 6
    assert leading_serial_run(b"-A9z") == 3
    assert leading_serial_run(b"") == 0
    assert leading_serial_run(b"ABCDEFGHIJKLMNO") == 15
