from memedit.coder import (
    convert_big5_to_utf8,
    convert_code,
    convert_from_utf8,
    convert_to_utf8,
)

BIG5 = bytes([0xBB, 0x4F, 0xC6, 0x57])
UTF8 = bytes([0xE8, 0x87, 0xBA, 0xE7, 0x81, 0xA3])


def test_convert_big5_to_utf8():
    assert convert_big5_to_utf8(BIG5) == UTF8


def test_input_stops_at_nul():
    assert convert_big5_to_utf8(BIG5 + b"\0junk") == UTF8


def test_convert_from_utf8_round_trip():
    assert convert_from_utf8(UTF8, "big5") == BIG5
    assert convert_to_utf8(convert_from_utf8(UTF8, "big5"), "big5") == UTF8


def test_convert_code_ascii_unchanged():
    assert convert_code(b"hello", "latin-1", "utf8") == b"hello"