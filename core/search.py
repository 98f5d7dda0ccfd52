# =============================================================================
# core/search.py  —  Story & Epic Search (compile → execute → render)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The work behind the search tools, kept free of any MCP imports so it can
#   be tested with a fake client:
#
#     1. Drop parameters the caller left unset
#     2. Compile the rest against the story or epic catalog
#     3. Run the compiled query through the Shortcut client
#     4. Render the hits as a short text block
#
#   A new ShortcutUserResolver is created per search, so "me" is resolved
#   fresh for every request.
# =============================================================================

import logging
from collections.abc import Mapping
from typing import Any, Optional

from core.catalog import EPIC_CATALOG, STORY_CATALOG
from core.compiler import QueryCompiler
from core.errors import SearchError
from core.formatting import format_epic_list, format_story_list
from core.resolver import ShortcutUserResolver, UserResolver

logger = logging.getLogger(__name__)


def _present(params: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


async def search_stories(client, params: Mapping[str, Any], resolver: Optional[UserResolver] = None) -> str:
    """Find stories matching ``params`` and render the first page."""
    compiler = QueryCompiler(STORY_CATALOG, resolver or ShortcutUserResolver(client))
    query = await compiler.compile(_present(params))
    logger.info("Story search query: %r", query)

    stories, total = await client.search_stories(query)
    if stories is None:
        raise SearchError("stories", query)
    if not stories:
        return "Result: No stories found."

    users = await client.get_user_map([owner for story in stories for owner in story.owner_ids])
    return (
        f"Result (first {len(stories)} shown of {total} total stories found):\n"
        f"{format_story_list(stories, users)}"
    )


async def search_epics(client, params: Mapping[str, Any], resolver: Optional[UserResolver] = None) -> str:
    """Find epics matching ``params`` and render the first page."""
    compiler = QueryCompiler(EPIC_CATALOG, resolver or ShortcutUserResolver(client))
    query = await compiler.compile(_present(params))
    logger.info("Epic search query: %r", query)

    epics, total = await client.search_epics(query)
    if epics is None:
        raise SearchError("epics", query)
    if not epics:
        return "Result: No epics found."

    return (
        f"Result (first {len(epics)} shown of {total} total epics found):\n"
        f"{format_epic_list(epics)}"
    )
