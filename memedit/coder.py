"""Conversion of byte strings between character encodings."""


def convert_code(data: bytes, from_encoding: str, to_encoding: str) -> bytes:
    """Re-encode ``data`` from one encoding to another.

    Input stops at the first NUL byte; characters that cannot be decoded
    or encoded are substituted.
    """
    raw = bytes(data).split(b"\0", 1)[0]
    text = raw.decode(from_encoding, errors="replace")
    return text.encode(to_encoding, errors="replace")


def convert_big5_to_utf8(data: bytes) -> bytes:
    """Convert Big5 bytes to UTF-8 bytes."""
    return convert_code(data, "big5", "utf8")


def convert_to_utf8(data: bytes, from_encoding: str) -> bytes:
    """Convert bytes in ``from_encoding`` to UTF-8."""
    return convert_code(data, from_encoding, "utf8")


def convert_from_utf8(data: bytes, to_encoding: str) -> bytes:
    """Convert UTF-8 bytes to ``to_encoding``."""
    return convert_code(data, "utf8", to_encoding)