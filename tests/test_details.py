"""Tests for the single-item lookups and branch names."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from core import details
from core.errors import EntityNotFoundError, ResolutionError
from core.models import Comment, EpicDetail, EpicSummary, StoryDetail
from tests.conftest import CountingResolver


@pytest.fixture
def client(identity):
    mock = MagicMock()
    mock.get_current_user = AsyncMock(return_value=identity)
    mock.get_story = AsyncMock(return_value=None)
    mock.get_epic = AsyncMock(return_value=None)
    mock.list_epics = AsyncMock(return_value=([], 0))
    mock.get_user_map = AsyncMock(return_value={})
    return mock


# ============================================================================
# Stories
# ============================================================================


class TestGetStory:
    @pytest.mark.asyncio
    async def test_renders_story(self, client):
        client.get_story.return_value = StoryDetail(
            id=7,
            name="Fix login",
            owner_ids=["u1"],
            comments=[Comment(author_id="u2", created_at="2024-03-02", text="Repro attached.")],
        )

        text = await details.get_story(client, 7)

        assert text.startswith("Story: sc-7\n")
        client.get_user_map.assert_awaited_once_with(["u1", "u2"])

    @pytest.mark.asyncio
    async def test_missing_story_raises(self, client):
        with pytest.raises(EntityNotFoundError) as exc_info:
            await details.get_story(client, 7)

        assert str(exc_info.value) == "Failed to retrieve Shortcut story with public ID: 7."


# ============================================================================
# Branch names
# ============================================================================


class TestBranchName:
    def test_slugify(self):
        assert details.slugify("Fix  the Login: page!") == "fix-the-login-page"
        assert details.slugify("Naïve café_v2") == "naïve-café_v2"

    @pytest.mark.asyncio
    async def test_branch_name(self, client, resolver):
        client.get_story.return_value = StoryDetail(id=42, name="Add CSV export")

        text = await details.get_story_branch_name(client, 42, resolver)

        assert text == "Branch name for story sc-42: amcd/sc-42/add-csv-export"
        assert resolver.calls == 1

    @pytest.mark.asyncio
    async def test_branch_name_is_truncated(self, client, resolver):
        client.get_story.return_value = StoryDetail(
            id=283926, name="We got a 404 when trying to fetch a user's avatar from the CDN"
        )

        text = await details.get_story_branch_name(client, 283926, resolver)

        branch = text.split(": ", 1)[1]
        assert branch == "amcd/sc-283926/we-got-a-404-when-trying-to-fetch-a"
        assert len(branch) == details.MAX_BRANCH_NAME_LENGTH

    @pytest.mark.asyncio
    async def test_default_resolver_uses_client(self, client):
        client.get_story.return_value = StoryDetail(id=1, name="x")

        await details.get_story_branch_name(client, 1)

        client.get_current_user.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unresolved_user_skips_story_lookup(self, client, failing_resolver):
        with pytest.raises(ResolutionError):
            await details.get_story_branch_name(client, 1, failing_resolver)

        client.get_story.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_story_raises(self, client):
        with pytest.raises(EntityNotFoundError):
            await details.get_story_branch_name(client, 1, CountingResolver(client.get_current_user.return_value))


# ============================================================================
# Epics
# ============================================================================


class TestEpics:
    @pytest.mark.asyncio
    async def test_get_epic(self, client):
        client.get_epic.return_value = EpicDetail(id=3, name="Onboarding")

        text = await details.get_epic(client, 3)

        assert text.startswith("Epic: 3\n")

    @pytest.mark.asyncio
    async def test_missing_epic_raises(self, client):
        with pytest.raises(EntityNotFoundError) as exc_info:
            await details.get_epic(client, 3)

        assert exc_info.value.entity == "epic"

    @pytest.mark.asyncio
    async def test_list_epics(self, client):
        client.list_epics.return_value = ([EpicSummary(id=3, name="Onboarding"), EpicSummary(id=4, name="Billing")], 2)

        assert await details.list_epics(client) == "Found 2 epics:\n- 3: Onboarding\n- 4: Billing"

    @pytest.mark.asyncio
    async def test_list_epics_empty(self, client):
        assert await details.list_epics(client) == "No epics found."
