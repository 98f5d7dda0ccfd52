# =============================================================================
# core/details.py  —  Single-Item Lookups (stories, epics, branch names)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The read-only tools that fetch one record by public id, or list every
#   epic, and render it for the agent.  Like core/search.py it takes the
#   client as an argument and never imports MCP.
#
#   Branch names follow "<mention_name>/sc-<id>/<slug>", cut to 50
#   characters, where the mention name is the current user's.
# =============================================================================

import logging
import re
from typing import Optional

from core.errors import EntityNotFoundError
from core.formatting import format_as_unordered_list, format_epic, format_story
from core.resolver import ShortcutUserResolver, UserResolver

logger = logging.getLogger(__name__)

MAX_BRANCH_NAME_LENGTH = 50


async def get_story(client, story_id: int) -> str:
    story = await client.get_story(story_id)
    if story is None:
        raise EntityNotFoundError("story", story_id)

    member_ids = list(story.owner_ids) + [comment.author_id for comment in story.comments if comment.author_id]
    users = await client.get_user_map(member_ids)
    return format_story(story, users)


async def get_epic(client, epic_id: int) -> str:
    epic = await client.get_epic(epic_id)
    if epic is None:
        raise EntityNotFoundError("epic", epic_id)
    return format_epic(epic)


async def list_epics(client) -> str:
    epics, total = await client.list_epics()
    if not epics:
        return "No epics found."
    items = [f"{epic.id}: {epic.name}" for epic in epics]
    return f"Found {total} epics:\n{format_as_unordered_list(items)}"


def slugify(name: str) -> str:
    """Lower-case, whitespace runs to '-', anything but word chars and '-' dropped."""
    slug = re.sub(r"\s+", "-", name.lower())
    return re.sub(r"[^\w\-]", "", slug)


async def get_story_branch_name(client, story_id: int, resolver: Optional[UserResolver] = None) -> str:
    """Suggest a git branch name for a story, owned by the current user."""
    identity = await (resolver or ShortcutUserResolver(client)).resolve_current_user()

    story = await client.get_story(story_id)
    if story is None:
        raise EntityNotFoundError("story", story_id)

    branch = f"{identity.mention_name}/sc-{story_id}/{slugify(story.name)}"[:MAX_BRANCH_NAME_LENGTH]
    logger.info("Branch name for sc-%s: %s", story_id, branch)
    return f"Branch name for story sc-{story_id}: {branch}"
