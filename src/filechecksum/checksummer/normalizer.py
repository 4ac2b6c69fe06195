"""Cleanup of user-supplied checksum strings."""

# Separators people paste between hex groups
STRIP_CHARACTERS = frozenset("\t ,-.:")

_UPPER_HEX_TO_LOWER = str.maketrans("ABCDEF", "abcdef")


def normalize(raw: str) -> str:
    """Normalize a checksum string for comparison.

    Removes tab, space, comma, hyphen, period and colon, and lowercases the
    hex letters A-F. Every other character is kept as-is, so malformed input
    survives and simply fails to match instead of being coerced into a
    false match. Never raises, and normalize(normalize(s)) == normalize(s).

    Args:
        raw: Checksum text as typed or pasted by the user

    Returns:
        Normalized string (possibly empty)
    """
    kept = "".join(ch for ch in raw if ch not in STRIP_CHARACTERS)
    return kept.translate(_UPPER_HEX_TO_LOWER)
