# =============================================================================
# core/compiler.py  —  Search Query Compiler
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Compiles a mapping of filter parameters into one Shortcut search query.
#
# THE PIPELINE (one call, no shared state besides the catalog):
#   1. Reject any key the catalog does not know.
#   2. Walk the catalog in declaration order.
#   3. Skip keys that are absent or None.
#   4. Encode each present value; user fields that say "me" await the
#      current user through a CallScopedIdentity (resolved at most once).
#   5. Join the tokens with single spaces.
#
#   The first error aborts the call.  Callers never see a partial query.
# =============================================================================

import logging
from collections.abc import Mapping
from typing import Any

from core.catalog import FieldCatalog
from core.encoders import ENCODERS, encode_user
from core.errors import InvalidValueError
from core.models import CompiledQuery, CurrentUserAlias, LiteralUser, UserRefKind, parse_user_ref
from core.resolver import CallScopedIdentity, UserResolver

logger = logging.getLogger(__name__)


class QueryCompiler:
    """Compiles filter parameters against one catalog."""

    def __init__(self, catalog: FieldCatalog, resolver: UserResolver):
        self.catalog = catalog
        self.resolver = resolver

    async def compile_tokens(self, params: Mapping[str, Any]) -> CompiledQuery:
        for key in params:
            self.catalog.lookup(key)

        identity = CallScopedIdentity(self.resolver)
        tokens = []

        for entry in self.catalog:
            value = params.get(entry.key)
            if value is None:
                continue

            if isinstance(entry.kind, UserRefKind):
                if not isinstance(value, (str, LiteralUser, CurrentUserAlias)):
                    raise InvalidValueError(entry.key, f"expected a user reference, got {value!r}")
                ref = parse_user_ref(value)
                current = await identity.get(entry.key) if isinstance(ref, CurrentUserAlias) else None
                token = encode_user(entry, ref, current)
            else:
                token = ENCODERS[type(entry.kind)](entry, value)

            if token is not None:
                tokens.append(token)

        return CompiledQuery(tuple(tokens))

    async def compile(self, params: Mapping[str, Any]) -> str:
        """Return the query string for ``params`` ('' when nothing is set)."""
        query = str(await self.compile_tokens(params))
        logger.debug("Compiled %d parameter(s) into %r", len(params), query)
        return query


async def compile_query(catalog: FieldCatalog, params: Mapping[str, Any], resolver: UserResolver) -> str:
    """Shortcut for a single compile against ``catalog``."""
    return await QueryCompiler(catalog, resolver).compile(params)
