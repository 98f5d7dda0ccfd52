# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of every piece of information that flows
# through the search-query compiler:
#
#   - ValueKind variants   → how a filter value is serialized
#   - FilterField          → one row of a field catalog
#   - DateRange            → a date predicate with optional bounds
#   - LiteralUser / CurrentUserAlias → who a user filter refers to
#   - Identity             → the acting Shortcut member
#   - StorySummary / EpicSummary     → search hits, trimmed for rendering
#   - StoryDetail / EpicDetail       → single-item lookups
#
# All of them are frozen: a catalog is built once at import time and shared
# by every compile call, and parameter values are never mutated after the
# tool layer builds them.
# =============================================================================

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union


# -----------------------------------------------------------------------------
# ValueKind — a closed set of variants, one per encoder
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class StringKind:
    """Free text, quoted when it contains whitespace or grammar characters."""


@dataclass(frozen=True)
class NumberKind:
    """Integer (or integral float) value such as an id or estimate."""


@dataclass(frozen=True)
class EnumKind:
    """One value out of a fixed set, emitted bare."""

    allowed: frozenset[str]


@dataclass(frozen=True)
class BooleanIs:
    """Tri-state flag rendered as ``is:<label>`` / ``!is:<label>``."""

    label: str


@dataclass(frozen=True)
class BooleanHas:
    """Tri-state flag rendered as ``has:<label>`` / ``!has:<label>``."""

    label: str


@dataclass(frozen=True)
class DateKind:
    """A single date or a date range."""


@dataclass(frozen=True)
class UserRefKind:
    """A member mention name, or the current-user alias."""


ValueKind = Union[StringKind, NumberKind, EnumKind, BooleanIs, BooleanHas, DateKind, UserRefKind]


# -----------------------------------------------------------------------------
# FilterField — one immutable catalog entry
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class FilterField:
    """A filter key, the backend operator it maps to, and its value kind."""

    key: str                           # Parameter name, e.g. "is_done"
    token: str                         # Backend operator, e.g. "created"
    kind: ValueKind


# -----------------------------------------------------------------------------
# Date expressions
# -----------------------------------------------------------------------------
# A bound is a datetime.date, an ISO date string ("2024-03-01"), or one of the relative
# keywords the search backend understands ("today", "yesterday", "tomorrow").
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class DateRange:
    """A date range; either bound may be omitted, but not both."""

    start: Optional[Union[str, date]] = None
    end: Optional[Union[str, date]] = None


DateExpr = Union[date, DateRange, str]


# -----------------------------------------------------------------------------
# User references
# -----------------------------------------------------------------------------
CURRENT_USER_ALIAS = "me"


@dataclass(frozen=True)
class LiteralUser:
    """A concrete member reference: a mention name or a member id."""

    value: str


@dataclass(frozen=True)
class CurrentUserAlias:
    """Refers to whoever is authenticated when the query is compiled."""


CURRENT_USER = CurrentUserAlias()

UserRef = Union[LiteralUser, CurrentUserAlias]


def parse_user_ref(value: Union[str, LiteralUser, CurrentUserAlias]) -> UserRef:
    """Turn a raw tool argument into a tagged user reference.

    The reserved alias ``"me"`` becomes ``CURRENT_USER``; any other string is
    taken literally.  Already-tagged values pass through unchanged.
    """
    if isinstance(value, (LiteralUser, CurrentUserAlias)):
        return value
    if value == CURRENT_USER_ALIAS:
        return CURRENT_USER
    return LiteralUser(value)


# -----------------------------------------------------------------------------
# Identity — the acting member, as returned by GET /member
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Identity:
    """The authenticated Shortcut member."""

    id: str
    mention_name: str
    name: str = ""


# -----------------------------------------------------------------------------
# CompiledQuery — the ordered tokens of one compile call
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CompiledQuery:
    """Tokens in catalog order; ``str()`` yields the backend query string."""

    tokens: tuple[str, ...] = ()

    def __str__(self) -> str:
        return " ".join(self.tokens)


# -----------------------------------------------------------------------------
# Search hits
# -----------------------------------------------------------------------------
# Only the fields the rendering layer prints.  The search endpoints return a
# lot more per record; the client drops the rest.
# -----------------------------------------------------------------------------
@dataclass
class StorySummary:
    """One story from a search response."""

    id: int
    name: str
    story_type: str = "feature"
    app_url: str = ""
    completed: bool = False
    started: bool = False
    archived: bool = False
    owner_ids: list[str] = field(default_factory=list)


@dataclass
class EpicSummary:
    """One epic from a search response."""

    id: int
    name: str
    app_url: str = ""
    completed: bool = False
    started: bool = False
    archived: bool = False


# -----------------------------------------------------------------------------
# Full records, for the single-item lookups
# -----------------------------------------------------------------------------
@dataclass
class Comment:
    author_id: str
    created_at: str
    text: str = ""


@dataclass
class StoryDetail:
    """One story as returned by GET /stories/{id}."""

    id: int
    name: str
    story_type: str = "feature"
    app_url: str = ""
    description: str = ""
    deadline: Optional[str] = None
    completed: bool = False
    started: bool = False
    archived: bool = False
    blocked: bool = False
    blocker: bool = False
    owner_ids: list[str] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)


@dataclass
class EpicStats:
    num_stories_total: int = 0
    num_stories_unstarted: int = 0
    num_stories_started: int = 0
    num_stories_done: int = 0
    num_points: int = 0
    num_points_done: int = 0


@dataclass
class EpicDetail:
    """One epic as returned by GET /epics/{id}."""

    id: int
    name: str
    app_url: str = ""
    description: str = ""
    deadline: Optional[str] = None
    group_id: Optional[str] = None
    milestone_id: Optional[int] = None
    completed: bool = False
    started: bool = False
    archived: bool = False
    stats: EpicStats = field(default_factory=EpicStats)
