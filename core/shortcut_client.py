# =============================================================================
# core/shortcut_client.py  —  Shortcut REST API Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The few Shortcut v3 endpoints the search tools need:
#
#     GET /member           → the member who owns the API token
#     GET /members          → every member (for owner mention names)
#     GET /search/stories   → stories matching a compiled query
#     GET /search/epics     → epics matching a compiled query
#     GET /stories/{id}     → one story, with comments
#     GET /epics/{id}       → one epic, with story stats
#     GET /epics            → every epic in the workspace
#
# CONFIGURATION (environment, usually via .env):
#   SHORTCUT_API_TOKEN   required; sent as the Shortcut-Token header
#   SHORTCUT_API_URL     defaults to https://api.app.shortcut.com/api/v3
#   SHORTCUT_PAGE_SIZE   results per search, defaults to 25
#
# Requests are plain urllib calls run in a worker thread, so awaiting them
# does not block the event loop the MCP server runs on.
# =============================================================================

import asyncio
import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional

from core.errors import AuthenticationError, ShortcutAPIError
from core.models import Comment, EpicDetail, EpicStats, EpicSummary, Identity, StoryDetail, StorySummary

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.app.shortcut.com/api/v3"
DEFAULT_PAGE_SIZE = 25
REQUEST_TIMEOUT_SECONDS = 15


class ShortcutClient:
    """Thin async wrapper around the Shortcut REST API."""

    def __init__(self, api_token: str, base_url: str = DEFAULT_API_URL, page_size: int = DEFAULT_PAGE_SIZE):
        if not api_token:
            raise AuthenticationError(None, "SHORTCUT_API_TOKEN is not set")
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size

    @classmethod
    def from_env(cls) -> "ShortcutClient":
        """Build a client from SHORTCUT_* environment variables."""
        return cls(
            api_token=os.environ.get("SHORTCUT_API_TOKEN", ""),
            base_url=os.environ.get("SHORTCUT_API_URL", DEFAULT_API_URL),
            page_size=int(os.environ.get("SHORTCUT_PAGE_SIZE", DEFAULT_PAGE_SIZE)),
        )

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------
    def _request(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"

        req = urllib.request.Request(url, headers={
            "Content-Type": "application/json",
            "Shortcut-Token": self.api_token,
        })
        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(req, timeout=REQUEST_TIMEOUT_SECONDS) as response:
                return json.loads(response.read().decode())
        except urllib.error.HTTPError as exc:
            if exc.code in (401, 403):
                raise AuthenticationError(exc.code, "the API token was rejected") from exc
            if exc.code == 404:
                return None
            raise ShortcutAPIError(exc.code, exc.reason or "request failed") from exc
        except urllib.error.URLError as exc:
            raise ShortcutAPIError(None, f"could not reach Shortcut: {exc.reason}") from exc

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await asyncio.to_thread(self._request, path, params)

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------
    async def get_current_user(self) -> Optional[Identity]:
        data = await self._get("/member")
        if not data:
            return None
        return Identity(
            id=data["id"],
            mention_name=data["mention_name"],
            name=data.get("name") or "",
        )

    async def get_user_map(self, user_ids: list[str]) -> dict[str, Identity]:
        """Map the given member ids to identities; unknown ids are skipped."""
        wanted = set(user_ids)
        if not wanted:
            return {}
        members = await self._get("/members") or []
        users = {}
        for member in members:
            if member.get("id") not in wanted:
                continue
            profile = member.get("profile") or {}
            users[member["id"]] = Identity(
                id=member["id"],
                mention_name=profile.get("mention_name", ""),
                name=profile.get("name") or "",
            )
        return users

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------
    async def search_stories(self, query: str) -> tuple[Optional[list[StorySummary]], int]:
        data = await self._get("/search/stories", {"query": query, "page_size": self.page_size, "detail": "slim"})
        if data is None:
            return None, 0
        stories = [
            StorySummary(
                id=raw["id"],
                name=raw.get("name", ""),
                story_type=raw.get("story_type", "feature"),
                app_url=raw.get("app_url", ""),
                completed=bool(raw.get("completed")),
                started=bool(raw.get("started")),
                archived=bool(raw.get("archived")),
                owner_ids=list(raw.get("owner_ids") or []),
            )
            for raw in data.get("data") or []
        ]
        return stories, int(data.get("total") or 0)

    async def search_epics(self, query: str) -> tuple[Optional[list[EpicSummary]], int]:
        data = await self._get("/search/epics", {"query": query, "page_size": self.page_size, "detail": "slim"})
        if data is None:
            return None, 0
        epics = [
            EpicSummary(
                id=raw["id"],
                name=raw.get("name", ""),
                app_url=raw.get("app_url", ""),
                completed=bool(raw.get("completed")),
                started=bool(raw.get("started")),
                archived=bool(raw.get("archived")),
            )
            for raw in data.get("data") or []
        ]
        return epics, int(data.get("total") or 0)

    # -------------------------------------------------------------------------
    # Single items
    # -------------------------------------------------------------------------
    async def get_story(self, story_id: int) -> Optional[StoryDetail]:
        raw = await self._get(f"/stories/{story_id}")
        if not raw:
            return None
        return StoryDetail(
            id=raw["id"],
            name=raw.get("name", ""),
            story_type=raw.get("story_type", "feature"),
            app_url=raw.get("app_url", ""),
            description=raw.get("description") or "",
            deadline=raw.get("deadline"),
            completed=bool(raw.get("completed")),
            started=bool(raw.get("started")),
            archived=bool(raw.get("archived")),
            blocked=bool(raw.get("blocked")),
            blocker=bool(raw.get("blocker")),
            owner_ids=list(raw.get("owner_ids") or []),
            comments=[
                Comment(
                    author_id=comment.get("author_id") or "",
                    created_at=comment.get("created_at") or "",
                    text=comment.get("text") or "",
                )
                for comment in raw.get("comments") or []
                if not comment.get("deleted")
            ],
        )

    async def get_epic(self, epic_id: int) -> Optional[EpicDetail]:
        raw = await self._get(f"/epics/{epic_id}")
        if not raw:
            return None
        stats = raw.get("stats") or {}
        return EpicDetail(
            id=raw["id"],
            name=raw.get("name", ""),
            app_url=raw.get("app_url", ""),
            description=raw.get("description") or "",
            deadline=raw.get("deadline"),
            group_id=raw.get("group_id"),
            milestone_id=raw.get("milestone_id"),
            completed=bool(raw.get("completed")),
            started=bool(raw.get("started")),
            archived=bool(raw.get("archived")),
            stats=EpicStats(
                num_stories_total=int(stats.get("num_stories_total") or 0),
                num_stories_unstarted=int(stats.get("num_stories_unstarted") or 0),
                num_stories_started=int(stats.get("num_stories_started") or 0),
                num_stories_done=int(stats.get("num_stories_done") or 0),
                num_points=int(stats.get("num_points") or 0),
                num_points_done=int(stats.get("num_points_done") or 0),
            ),
        )

    async def list_epics(self) -> tuple[list[EpicSummary], int]:
        data = await self._get("/epics") or []
        epics = [
            EpicSummary(
                id=raw["id"],
                name=raw.get("name", ""),
                app_url=raw.get("app_url", ""),
                completed=bool(raw.get("completed")),
                started=bool(raw.get("started")),
                archived=bool(raw.get("archived")),
            )
            for raw in data
        ]
        return epics, len(epics)
