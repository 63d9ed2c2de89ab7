# pkgdash/core/search.py
import re
from typing import Callable, Iterable, Optional, Pattern

class UnsafeRegexError(ValueError): ...

_NESTED_QUANTIFIER = re.compile(r"\([^)]*[+*][^)]*\)[+*{]")


def safe_regex(pattern: str | None, max_len: int = 128) -> Optional[Pattern[str]]:
    """Compile a user-supplied package search, case-insensitively.

    Returns None for an empty query. Patterns that are too long, too deeply
    grouped, or that nest quantifiers (``(a+)+``) are refused.
    """
    if not pattern or not pattern.strip():
        return None
    pattern = pattern.strip()
    if len(pattern) > max_len:
        raise UnsafeRegexError("search pattern too long")
    if pattern.count("(") > 16 or _NESTED_QUANTIFIER.search(pattern):
        raise UnsafeRegexError("search pattern too complex")
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise UnsafeRegexError(f"invalid search pattern: {e}")


def matcher(regex: Pattern[str] | None) -> Callable[[Iterable[str | None]], bool]:
    """Predicate that is true when any of the given fields matches."""
    if regex is None:
        return lambda fields: True
    return lambda fields: any(f and regex.search(f) for f in fields)
