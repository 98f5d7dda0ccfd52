# =============================================================================
# core/encoders.py  —  Value Encoders
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   One pure function per ValueKind.  Each takes the catalog entry and the
#   raw value and returns exactly one backend token, or None when the value
#   carries no filter.
#
# TOKEN SHAPES (Shortcut search grammar):
#   name:bug                 bare value
#   name:"release notes"     quoted when whitespace, ':' or '"' appear
#   is:done / !is:done       flags, '!' negates
#   created:2024-03-01..     ranges use '..', either bound may be omitted
#   owner:amcd               user references are mention names
#
# A malformed value raises InvalidValueError (FormatError for dates) naming
# the field key.  Nothing here does I/O: resolving the current-user alias is
# the compiler's job, and encode_user() just receives the result.
# =============================================================================

import re
from datetime import date, datetime
from typing import Any, Callable, Optional

from core.errors import FormatError, InvalidValueError
from core.models import (
    BooleanHas,
    BooleanIs,
    CurrentUserAlias,
    DateKind,
    DateRange,
    EnumKind,
    FilterField,
    Identity,
    LiteralUser,
    NumberKind,
    StringKind,
    UserRef,
)

RANGE_SEPARATOR = ".."
OPEN_BOUND = "*"
DATE_KEYWORDS = frozenset({"today", "yesterday", "tomorrow"})

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NEEDS_QUOTES = re.compile(r'[\s:"]')


# -----------------------------------------------------------------------------
# String / Number
# -----------------------------------------------------------------------------
def quote_value(value: str) -> str:
    """Quote ``value`` if the search grammar would otherwise split it."""
    if not _NEEDS_QUOTES.search(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def encode_string(entry: FilterField, value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidValueError(entry.key, f"expected text, got {type(value).__name__}")
    if not value:
        raise InvalidValueError(entry.key, "value must not be empty")
    return f"{entry.token}:{quote_value(value)}"


def encode_number(entry: FilterField, value: Any) -> Optional[str]:
    if value is None:
        return None
    # bool is an int subclass; True is not a valid estimate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidValueError(entry.key, f"expected a number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidValueError(entry.key, f"expected a whole number, got {value!r}")
        value = int(value)
    return f"{entry.token}:{value}"


# -----------------------------------------------------------------------------
# Enum
# -----------------------------------------------------------------------------
def encode_enum(entry: FilterField, value: Any) -> Optional[str]:
    if value is None:
        return None
    allowed = entry.kind.allowed
    if not isinstance(value, str) or value not in allowed:
        options = ", ".join(sorted(allowed))
        raise InvalidValueError(entry.key, f"{value!r} is not one of: {options}")
    return f"{entry.token}:{value}"


# -----------------------------------------------------------------------------
# Tri-state flags
# -----------------------------------------------------------------------------
def _encode_flag(entry: FilterField, value: Any, prefix: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise InvalidValueError(entry.key, f"expected true or false, got {value!r}")
    token = f"{prefix}:{entry.kind.label}"
    return token if value else f"!{token}"


def encode_is(entry: FilterField, value: Any) -> Optional[str]:
    return _encode_flag(entry, value, "is")


def encode_has(entry: FilterField, value: Any) -> Optional[str]:
    return _encode_flag(entry, value, "has")


# -----------------------------------------------------------------------------
# Dates
# -----------------------------------------------------------------------------
def _parse_bound(key: str, raw: Any) -> Optional[str]:
    """Validate one side of a date expression; None, '' and '*' mean "open"."""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    if not isinstance(raw, str):
        raise FormatError(key, f"expected a date bound, got {type(raw).__name__}")
    bound = raw.strip()
    if bound in ("", OPEN_BOUND):
        return None
    if bound.lower() in DATE_KEYWORDS:
        return bound.lower()
    if not _ISO_DATE.match(bound):
        raise FormatError(key, f"{raw!r} is not a YYYY-MM-DD date")
    try:
        datetime.strptime(bound, "%Y-%m-%d")
    except ValueError:
        raise FormatError(key, f"{raw!r} is not a valid calendar date") from None
    return bound


def parse_date_expr(key: str, value: Any) -> DateRange | str:
    """Normalize a raw date value into a single date string or a DateRange."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, DateRange):
        start = _parse_bound(key, value.start)
        end = _parse_bound(key, value.end)
    elif isinstance(value, str):
        if RANGE_SEPARATOR not in value:
            single = _parse_bound(key, value)
            if single is None:
                raise FormatError(key, f"{value!r} is not a date")
            return single
        raw_start, sep, raw_end = value.partition(RANGE_SEPARATOR)
        if RANGE_SEPARATOR in raw_end:
            raise FormatError(key, f"{value!r} has more than one '{RANGE_SEPARATOR}'")
        start = _parse_bound(key, raw_start)
        end = _parse_bound(key, raw_end)
    else:
        raise FormatError(key, f"expected a date or date range, got {type(value).__name__}")

    if start is None and end is None:
        raise FormatError(key, "a date range needs at least one bound")
    return DateRange(start=start, end=end)


def encode_date(entry: FilterField, value: Any) -> Optional[str]:
    if value is None:
        return None
    parsed = parse_date_expr(entry.key, value)
    if isinstance(parsed, DateRange):
        return f"{entry.token}:{parsed.start or ''}{RANGE_SEPARATOR}{parsed.end or ''}"
    return f"{entry.token}:{parsed}"


# -----------------------------------------------------------------------------
# Users
# -----------------------------------------------------------------------------
def encode_user(entry: FilterField, ref: Optional[UserRef], identity: Optional[Identity] = None) -> Optional[str]:
    """Emit a user filter.

    ``identity`` must be supplied when ``ref`` is the current-user alias;
    literal references pass through as given (mention names never contain
    whitespace).
    """
    if ref is None:
        return None
    if isinstance(ref, CurrentUserAlias):
        if identity is None:
            raise InvalidValueError(entry.key, "current user has not been resolved")
        return f"{entry.token}:{identity.mention_name}"
    if isinstance(ref, LiteralUser):
        if not ref.value:
            raise InvalidValueError(entry.key, "value must not be empty")
        return f"{entry.token}:{ref.value}"
    raise InvalidValueError(entry.key, f"expected a user reference, got {ref!r}")


# -----------------------------------------------------------------------------
# Dispatch table for the synchronous kinds
# -----------------------------------------------------------------------------
ENCODERS: dict[type, Callable[[FilterField, Any], Optional[str]]] = {
    StringKind: encode_string,
    NumberKind: encode_number,
    EnumKind: encode_enum,
    BooleanIs: encode_is,
    BooleanHas: encode_has,
    DateKind: encode_date,
}
