"""Small string helpers used by the scan parsers."""

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def trim(s: str) -> str:
    """Strip leading and trailing space characters (only ' ')."""
    return s.strip(" ")


def split(s: str, delim: str) -> list[str]:
    """Split on ``delim`` and trim every token.

    A trailing delimiter does not produce an empty final token and an
    empty string gives no tokens at all.
    """
    if not s:
        return []
    parts = s.split(delim)
    if parts[-1] == "":
        parts.pop()
    return [trim(part) for part in parts]


def to_lower(s: str) -> str:
    """Lower-case ASCII letters, leaving everything else untouched."""
    return s.translate(_ASCII_LOWER)


def replace(s: str, find: str, r: str) -> str:
    """Replace the first occurrence of ``find`` with ``r``."""
    if not find:
        return s
    return s.replace(find, r, 1)