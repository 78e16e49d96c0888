"""Field-resolution helpers for loosely shaped upstream payloads.

Upstream APIs drift in naming and omit fields freely, so the synthesizer reads
every value through :func:`dig` (safe nested access) and picks the first
usable candidate with :func:`first_non_empty`.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence, TypeVar

T = TypeVar("T")

_MISSING = object()


def is_empty(value: Any) -> bool:
    """Return True for ``None``, blank strings and empty containers."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def dig(source: Any, path: str, default: Any = None) -> Any:
    """Follow a dotted path through mappings and sequences.

    Integer segments index into lists (``"images.0.url"``). Any missing key,
    out-of-range index or non-container value along the way yields ``default``.
    """

    current: Any = source
    for segment in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return default
        else:
            return default
        if current is _MISSING or current is None:
            return default
    return current


def first_non_empty(*candidates: Any, default: T) -> Any:
    """Return the first candidate that is not empty, else ``default``."""

    for candidate in candidates:
        if not is_empty(candidate):
            return candidate
    return default


def as_list(value: Any) -> List[Any]:
    """Coerce a value into a list; scalars become one-element lists."""

    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def as_text_list(value: Any) -> List[str]:
    """Keep the non-blank string entries of a list-ish value."""

    return [item.strip() for item in as_list(value) if isinstance(item, str) and item.strip()]


def as_number(value: Any) -> Optional[float]:
    """Parse ints, floats and numeric strings; anything else is ``None``."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def first_number(*candidates: Any, default: float) -> float:
    """Return the first candidate that parses as a positive number."""

    for candidate in candidates:
        number = as_number(candidate)
        if number is not None and number > 0:
            return number
    return default


def mappings(value: Any) -> Iterable[Mapping[str, Any]]:
    """Yield only the mapping entries of a list-ish value."""

    return [item for item in as_list(value) if isinstance(item, Mapping)]


def first_text(*candidates: Any, default: T) -> Any:
    """Return the first candidate that is a non-blank string, else ``default``."""

    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate
    return default
