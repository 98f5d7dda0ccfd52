"""Tests for the Shortcut REST client (no network: urlopen is patched)."""

from __future__ import annotations

import io
import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from core.errors import AuthenticationError, ShortcutAPIError
from core.models import Comment, EpicStats, EpicSummary, Identity, StorySummary
from core.shortcut_client import DEFAULT_API_URL, ShortcutClient


def _response(payload) -> MagicMock:
    response = MagicMock()
    response.read.return_value = json.dumps(payload).encode()
    response.__enter__.return_value = response
    return response


def _http_error(code: int, reason: str) -> urllib.error.HTTPError:
    return urllib.error.HTTPError("https://example.test", code, reason, None, io.BytesIO(b""))


@pytest.fixture
def client() -> ShortcutClient:
    return ShortcutClient(api_token="token-123", base_url="https://example.test/api/v3/", page_size=10)


class TestConfiguration:
    def test_missing_token_is_rejected(self):
        with pytest.raises(AuthenticationError):
            ShortcutClient(api_token="")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SHORTCUT_API_TOKEN", "abc")
        monkeypatch.delenv("SHORTCUT_API_URL", raising=False)
        monkeypatch.setenv("SHORTCUT_PAGE_SIZE", "5")

        client = ShortcutClient.from_env()

        assert client.api_token == "abc"
        assert client.base_url == DEFAULT_API_URL
        assert client.page_size == 5


class TestRequests:
    @pytest.mark.asyncio
    async def test_get_current_user(self, client):
        payload = {"id": "u1", "mention_name": "amcd", "name": "A. McDonald"}
        with patch("urllib.request.urlopen", return_value=_response(payload)) as urlopen:
            identity = await client.get_current_user()

        assert identity == Identity(id="u1", mention_name="amcd", name="A. McDonald")
        request = urlopen.call_args.args[0]
        assert request.full_url == "https://example.test/api/v3/member"
        assert request.get_header("Shortcut-token") == "token-123"

    @pytest.mark.asyncio
    async def test_search_stories_sends_query(self, client):
        payload = {
            "data": [{"id": 9, "name": "Fix it", "story_type": "bug", "owner_ids": ["u1"], "started": True}],
            "total": 31,
        }
        with patch("urllib.request.urlopen", return_value=_response(payload)) as urlopen:
            stories, total = await client.search_stories('name:"release notes" !is:done')

        assert total == 31
        assert stories == [StorySummary(id=9, name="Fix it", story_type="bug", started=True, owner_ids=["u1"])]
        url = urlopen.call_args.args[0].full_url
        assert url.startswith("https://example.test/api/v3/search/stories?")
        assert "query=name%3A%22release+notes%22+%21is%3Adone" in url
        assert "page_size=10" in url

    @pytest.mark.asyncio
    async def test_get_user_map_filters_ids(self, client):
        payload = [
            {"id": "u1", "profile": {"mention_name": "amcd", "name": "A"}},
            {"id": "u2", "profile": {"mention_name": "jane", "name": "J"}},
        ]
        with patch("urllib.request.urlopen", return_value=_response(payload)):
            users = await client.get_user_map(["u2"])

        assert users == {"u2": Identity(id="u2", mention_name="jane", name="J")}

    @pytest.mark.asyncio
    async def test_get_user_map_without_ids_skips_request(self, client):
        with patch("urllib.request.urlopen") as urlopen:
            assert await client.get_user_map([]) == {}

        urlopen.assert_not_called()


class TestItems:
    @pytest.mark.asyncio
    async def test_get_story_keeps_live_comments(self, client):
        payload = {
            "id": 7,
            "name": "Fix login",
            "story_type": "bug",
            "description": "Users get logged out.",
            "deadline": "2024-04-01T00:00:00Z",
            "blocked": True,
            "owner_ids": ["u1"],
            "comments": [
                {"author_id": "u2", "created_at": "2024-03-02T10:00:00Z", "text": "Repro attached."},
                {"author_id": "u3", "created_at": "2024-03-03T10:00:00Z", "text": "", "deleted": True},
            ],
        }
        with patch("urllib.request.urlopen", return_value=_response(payload)) as urlopen:
            story = await client.get_story(7)

        assert urlopen.call_args.args[0].full_url == "https://example.test/api/v3/stories/7"
        assert story.story_type == "bug"
        assert story.blocked is True
        assert story.deadline == "2024-04-01T00:00:00Z"
        assert story.comments == [Comment(author_id="u2", created_at="2024-03-02T10:00:00Z", text="Repro attached.")]

    @pytest.mark.asyncio
    async def test_get_story_not_found(self, client):
        with patch("urllib.request.urlopen", side_effect=_http_error(404, "Not Found")):
            assert await client.get_story(7) is None

    @pytest.mark.asyncio
    async def test_get_epic_reads_stats(self, client):
        payload = {
            "id": 3,
            "name": "Onboarding",
            "group_id": "team-1",
            "stats": {"num_stories_total": 5, "num_stories_done": 2, "num_points": 8, "num_points_done": 3},
        }
        with patch("urllib.request.urlopen", return_value=_response(payload)):
            epic = await client.get_epic(3)

        assert epic.group_id == "team-1"
        assert epic.milestone_id is None
        assert epic.stats == EpicStats(num_stories_total=5, num_stories_done=2, num_points=8, num_points_done=3)

    @pytest.mark.asyncio
    async def test_list_epics(self, client):
        payload = [{"id": 3, "name": "Onboarding"}, {"id": 4, "name": "Billing", "archived": True}]
        with patch("urllib.request.urlopen", return_value=_response(payload)) as urlopen:
            epics, total = await client.list_epics()

        assert urlopen.call_args.args[0].full_url == "https://example.test/api/v3/epics"
        assert total == 2
        assert epics == [EpicSummary(id=3, name="Onboarding"), EpicSummary(id=4, name="Billing", archived=True)]


class TestErrors:
    @pytest.mark.asyncio
    async def test_unauthorized(self, client):
        with patch("urllib.request.urlopen", side_effect=_http_error(401, "Unauthorized")):
            with pytest.raises(AuthenticationError) as exc_info:
                await client.get_current_user()

        assert exc_info.value.status == 401

    @pytest.mark.asyncio
    async def test_not_found_is_none(self, client):
        with patch("urllib.request.urlopen", side_effect=_http_error(404, "Not Found")):
            assert await client.get_current_user() is None

    @pytest.mark.asyncio
    async def test_server_error(self, client):
        with patch("urllib.request.urlopen", side_effect=_http_error(500, "Internal Server Error")):
            with pytest.raises(ShortcutAPIError) as exc_info:
                await client.search_epics("is:done")

        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_unreachable(self, client):
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("no route")):
            with pytest.raises(ShortcutAPIError) as exc_info:
                await client.search_stories("is:done")

        assert exc_info.value.status is None
