# =============================================================================
# core/catalog.py  —  Field Catalogs
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares which filter keys a search accepts, the backend operator each
#   one maps to, and how its value is serialized.
#
# ORDER MATTERS:
#   The compiler emits tokens in catalog declaration order, never in the
#   order the caller happened to populate its parameters.  Reordering the
#   entries below changes the compiled strings (but not what they match).
#
# IMMUTABILITY:
#   A FieldCatalog is a tuple of frozen FilterFields plus a read-only index.
#   The two catalogs below are built once at import time and shared by every
#   compile call.  Tests build their own catalogs and pass them in.
# =============================================================================

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from core.errors import UnknownFieldError
from core.models import (
    BooleanHas,
    BooleanIs,
    DateKind,
    EnumKind,
    FilterField,
    NumberKind,
    StringKind,
    UserRefKind,
    ValueKind,
)


class FieldCatalog:
    """An ordered, read-only registry of filter fields."""

    def __init__(self, fields: Iterable[FilterField]):
        self._fields = tuple(fields)
        index = {}
        for entry in self._fields:
            if entry.key in index:
                raise ValueError(f"Duplicate catalog key: {entry.key}")
            index[entry.key] = entry
        self._index = MappingProxyType(index)

    def lookup(self, key: str) -> FilterField:
        """Return the field registered under ``key``.

        Raises:
            UnknownFieldError: if ``key`` is not part of this catalog.
        """
        try:
            return self._index[key]
        except KeyError:
            raise UnknownFieldError(key) from None

    def keys(self) -> tuple[str, ...]:
        return tuple(entry.key for entry in self._fields)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[FilterField]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)


# -----------------------------------------------------------------------------
# Entry helpers
# -----------------------------------------------------------------------------
# Backend operators are the key with underscores turned into hyphens
# ("skill_set" → "skill-set").  Flag labels drop the is_/has_ prefix
# ("is_done" → is:done, "has_pr" → has:pr).
# -----------------------------------------------------------------------------
def _token_for(key: str) -> str:
    return key.lower().replace("_", "-")


def _field(key: str, kind: ValueKind) -> FilterField:
    return FilterField(key=key, token=_token_for(key), kind=kind)


def _string(key: str) -> FilterField:
    return _field(key, StringKind())


def _number(key: str) -> FilterField:
    return _field(key, NumberKind())


def _enum(key: str, *allowed: str) -> FilterField:
    return _field(key, EnumKind(frozenset(allowed)))


def _user(key: str) -> FilterField:
    return _field(key, UserRefKind())


def _date(key: str) -> FilterField:
    return _field(key, DateKind())


def _is(key: str) -> FilterField:
    label = _token_for(key[len("is_"):])
    return FilterField(key=key, token=f"is:{label}", kind=BooleanIs(label))


def _has(key: str) -> FilterField:
    label = _token_for(key[len("has_"):])
    return FilterField(key=key, token=f"has:{label}", kind=BooleanHas(label))


STORY_TYPES = ("feature", "bug", "chore")
EPIC_STATES = ("unstarted", "started", "done")


# =============================================================================
# Story search
# =============================================================================
STORY_CATALOG = FieldCatalog([
    _number("id"),
    _string("name"),
    _string("description"),
    _string("comment"),
    _enum("type", *STORY_TYPES),
    _number("estimate"),
    _string("branch"),
    _string("commit"),
    _number("pr"),
    _number("project"),
    _number("epic"),
    _number("objective"),
    _string("state"),
    _string("label"),
    _user("owner"),
    _user("requester"),
    _string("team"),
    _string("skill_set"),
    _string("product_area"),
    _string("technical_area"),
    _string("priority"),
    _string("severity"),
    _is("is_done"),
    _is("is_started"),
    _is("is_unstarted"),
    _is("is_unestimated"),
    _is("is_overdue"),
    _is("is_archived"),
    _is("is_blocker"),
    _is("is_blocked"),
    _has("has_comment"),
    _has("has_label"),
    _has("has_deadline"),
    _has("has_owner"),
    _has("has_pr"),
    _has("has_commit"),
    _has("has_branch"),
    _has("has_epic"),
    _has("has_task"),
    _has("has_attachment"),
    _date("created"),
    _date("updated"),
    _date("completed"),
    _date("due"),
])


# =============================================================================
# Epic search
# =============================================================================
EPIC_CATALOG = FieldCatalog([
    _number("id"),
    _string("name"),
    _string("description"),
    _enum("state", *EPIC_STATES),
    _number("objective"),
    _user("owner"),
    _user("requester"),
    _string("team"),
    _string("comment"),
    _is("is_unstarted"),
    _is("is_started"),
    _is("is_done"),
    _is("is_archived"),
    _is("is_overdue"),
    _has("has_owner"),
    _has("has_comment"),
    _has("has_deadline"),
    _has("has_label"),
    _date("created"),
    _date("updated"),
    _date("completed"),
    _date("due"),
])
