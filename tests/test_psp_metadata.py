import io

import pytest

from discscan.common.exceptions import SerialNotFoundError
from discscan.psp.metadata import PSP_SERIAL_PREFIXES, detect_psp_game
from tests.helpers import RecordingStream


def test_prefix_table():
    assert len(PSP_SERIAL_PREFIXES) == 20
    assert b"ULUS-" in PSP_SERIAL_PREFIXES
    assert b"NPJG-" in PSP_SERIAL_PREFIXES
    assert all(len(p) == 5 and p.endswith(b"-") for p in PSP_SERIAL_PREFIXES)


def test_serial_at_offset_37_stops_scan():
    data = bytearray(4096)
    data[37:47] = b"ULUS-12345"
    stream = RecordingStream(bytes(data))
    assert detect_psp_game(stream) == "ULUS-12345"
    assert max(stream.seeks) == 37


def test_returns_ten_raw_bytes():
    data = b"\x00" * 10 + b"NPEH-00001XYZ" + bytes(100)
    assert detect_psp_game(io.BytesIO(data)) == "NPEH-00001"


def test_prefix_is_case_sensitive():
    data = b"ulus-12345" + bytes(100)
    with pytest.raises(SerialNotFoundError):
        detect_psp_game(io.BytesIO(data))


def test_unknown_prefix_is_ignored():
    data = b"SLUS-00594 " + b"UCES-00001" + bytes(32)
    assert detect_psp_game(io.BytesIO(data)) == "UCES-00001"


def test_serial_at_end_of_stream_is_short():
    # Fewer than 10 bytes remain after the prefix: whatever is there is returned
    data = bytes(20) + b"ULJM-0"
    assert detect_psp_game(io.BytesIO(data)) == "ULJM-0"


def test_scan_stops_at_short_read():
    stream = RecordingStream(bytes(64))
    with pytest.raises(SerialNotFoundError):
        detect_psp_game(stream)
    # Offsets 0..59 read a full prefix, offset 60 comes up short
    assert max(stream.seeks) == 60


def test_scan_limit():
    data = bytes(200) + b"ULES-00001" + bytes(16)
    with pytest.raises(SerialNotFoundError) as exc:
        detect_psp_game(io.BytesIO(data), limit=100)
    assert exc.value.limit == 100
    assert detect_psp_game(io.BytesIO(data), limit=201) == "ULES-00001"
