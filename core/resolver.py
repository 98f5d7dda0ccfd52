# =============================================================================
# core/resolver.py  —  Current-User Resolution
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns the "me" alias into the authenticated member's identity.
#
#   - UserResolver         the capability the compiler depends on
#   - ShortcutUserResolver the live implementation (GET /member)
#   - CallScopedIdentity   a one-shot memo the compiler creates per call
#
# LIFETIME OF A RESOLVED IDENTITY:
#   One compile call.  The compiler builds a fresh CallScopedIdentity for
#   every call and drops it when the call returns; the resolver is asked
#   at most once per call and nothing is cached between calls.
# =============================================================================

import asyncio
import logging
from typing import Optional, Protocol

from core.errors import AuthenticationError, CancellationError, ResolutionError, ShortcutAPIError
from core.models import Identity

logger = logging.getLogger(__name__)


class UserResolver(Protocol):
    async def resolve_current_user(self) -> Identity:
        """Return the acting member or raise ResolutionError."""
        ...


class ShortcutUserResolver:
    """Resolves the current user through the Shortcut API token's owner."""

    def __init__(self, client):
        self._client = client

    async def resolve_current_user(self) -> Identity:
        try:
            identity = await self._client.get_current_user()
        except AuthenticationError as exc:
            raise ResolutionError(None, f"no authenticated session: {exc.message}") from exc
        except ShortcutAPIError as exc:
            raise ResolutionError(None, f"failed to retrieve current user: {exc.message}") from exc
        if identity is None:
            raise ResolutionError(None, "failed to retrieve current user")
        return identity


class CallScopedIdentity:
    """Resolves the current user on first use and reuses it for the same call."""

    def __init__(self, resolver: UserResolver):
        self._resolver = resolver
        self._identity: Optional[Identity] = None

    async def get(self, field_key: str) -> Identity:
        if self._identity is not None:
            return self._identity

        logger.debug("Resolving current user for '%s'", field_key)
        try:
            identity = await self._resolver.resolve_current_user()
        except CancellationError:
            raise
        except asyncio.CancelledError as exc:
            raise CancellationError(field_key, "cancelled while resolving the current user") from exc
        except ResolutionError as exc:
            raise ResolutionError(field_key, exc.message) from exc
        except Exception as exc:
            raise ResolutionError(field_key, f"failed to resolve current user: {exc}") from exc

        if identity is None:
            raise ResolutionError(field_key, "no authenticated user")
        self._identity = identity
        return identity
