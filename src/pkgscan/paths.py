from urllib.parse import unquote, urlsplit

from .errors import MalformedLocationError


SEPARATORS = ("/", "\\")


def strip_trailing_separator(s: str) -> str:
    """Remove one trailing ``/`` or ``\\``."""
    if s.endswith(SEPARATORS):
        s = s[:-1]
    return s


def strip_leading_separator(s: str) -> str:
    """Remove one leading ``/`` or ``\\``."""
    if s.startswith(SEPARATORS):
        s = s[1:]
    return s


def decode_location(uri: str) -> str:
    """
    Percent-decode a location URI using UTF-8.

    Raises
    ------
    MalformedLocationError
        If the string has no scheme or holds an escape sequence that is not
        valid UTF-8.
    """
    if not urlsplit(uri).scheme:
        raise MalformedLocationError(f"Location has no scheme: {uri!r}")
    try:
        return unquote(uri, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedLocationError(f"Cannot decode location {uri!r}: {e}") from e


def package_to_path(package: str) -> str:
    """
    Convert a dotted package name to a slash separated relative path.

    ``"org.example.scan"`` becomes ``"org/example/scan"``. The empty string
    maps to the empty path.
    """
    if package == "":
        return ""
    parts = package.split(".")
    if any(not p or p != p.strip() for p in parts):
        raise ValueError(f"Invalid package name: {package!r}")
    return "/".join(parts)
