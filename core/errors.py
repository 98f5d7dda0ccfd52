# =============================================================================
# core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Compilation is all-or-nothing.  The first failure aborts the whole call and
# surfaces exactly one of the CompileError subclasses below, carrying the
# filter key that caused it.  Translating these into user-facing messages is
# the tool layer's job (tools/mcp_server.py).
#
# The Shortcut client has its own, smaller family (ShortcutAPIError and
# friends) for transport failures.
# =============================================================================

import asyncio
from typing import Optional


class CompileError(Exception):
    """Base class for every failure raised while compiling a query."""

    def __init__(self, field_key: Optional[str], message: str):
        self.field_key = field_key
        self.message = message
        if field_key is None:
            super().__init__(message)
        else:
            super().__init__(f"{field_key}: {message}")


class UnknownFieldError(CompileError):
    """A parameter key is not registered in the catalog."""

    def __init__(self, field_key: str):
        super().__init__(field_key, "not a known search filter")


class InvalidValueError(CompileError):
    """A value reached an encoder in a form it cannot serialize."""


class FormatError(InvalidValueError):
    """A string failed to parse in the format its field requires (dates)."""


class ResolutionError(CompileError):
    """The current-user alias was used but no identity could be resolved."""


class CancellationError(CompileError, asyncio.CancelledError):
    """The caller was cancelled while the current user was being resolved.

    Also an ``asyncio.CancelledError`` so task cancellation keeps working.
    """


# -----------------------------------------------------------------------------
# Shortcut client errors
# -----------------------------------------------------------------------------
class ShortcutAPIError(Exception):
    """The Shortcut REST API answered with an error or could not be reached."""

    def __init__(self, status: Optional[int], message: str):
        self.status = status
        self.message = message
        super().__init__(f"Shortcut API error ({status}): {message}" if status else message)


class AuthenticationError(ShortcutAPIError):
    """The API token is missing, invalid, or lacks access."""


class SearchError(Exception):
    """A search request returned no usable result set."""

    def __init__(self, entity: str, query: str):
        self.entity = entity
        self.query = query
        super().__init__(f'Failed to search for {entity} matching your query: "{query}".')


class EntityNotFoundError(Exception):
    """A story or epic with the requested public id does not exist."""

    def __init__(self, entity: str, public_id: int):
        self.entity = entity
        self.public_id = public_id
        super().__init__(f"Failed to retrieve Shortcut {entity} with public ID: {public_id}.")
