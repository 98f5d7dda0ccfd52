# =============================================================================
# core/formatting.py  —  Plain-Text Rendering of Search Results
# =============================================================================
#
# The agent reads these strings.  Search results stay short, one line per
# hit; the single-item lookups print the full record.
# =============================================================================

from core.models import EpicDetail, EpicStats, EpicSummary, Identity, StoryDetail, StorySummary


def format_as_unordered_list(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _state_label(completed: bool, started: bool) -> str:
    if completed:
        return "Completed"
    if started:
        return "In Progress"
    return "Not Started"


def format_member_list(owner_ids: list[str], users: dict[str, Identity]) -> str:
    """Comma-separated @mentions; ids we could not resolve are shown raw."""
    if not owner_ids:
        return "[None]"
    names = []
    for owner_id in owner_ids:
        user = users.get(owner_id)
        names.append(f"@{user.mention_name}" if user and user.mention_name else owner_id)
    return ", ".join(names)


def format_story_list(stories: list[StorySummary], users: dict[str, Identity]) -> str:
    lines = []
    for story in stories:
        archived = " (archived)" if story.archived else ""
        lines.append(
            f"sc-{story.id}: {story.name}{archived} "
            f"(Type: {story.story_type}, State: {_state_label(story.completed, story.started)}, "
            f"Owners: {format_member_list(story.owner_ids, users)})"
        )
    return format_as_unordered_list(lines)


def format_epic_list(epics: list[EpicSummary]) -> str:
    lines = []
    for epic in epics:
        archived = " (archived)" if epic.archived else ""
        lines.append(f"{epic.id}: {epic.name}{archived} ({_state_label(epic.completed, epic.started)})")
    return format_as_unordered_list(lines)


# -----------------------------------------------------------------------------
# Single items
# -----------------------------------------------------------------------------
def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def format_story(story: StoryDetail, users: dict[str, Identity]) -> str:
    comments = "\n\n".join(
        f"- From: {format_member_list([comment.author_id], users)} on {comment.created_at}.\n{comment.text}"
        for comment in story.comments
    )
    return (
        f"Story: sc-{story.id}\n"
        f"URL: {story.app_url}\n"
        f"Name: {story.name}\n"
        f"Type: {story.story_type}\n"
        f"Archived: {_yes_no(story.archived)}\n"
        f"Completed: {_yes_no(story.completed)}\n"
        f"Started: {_yes_no(story.started)}\n"
        f"Blocked: {_yes_no(story.blocked)}\n"
        f"Blocking: {_yes_no(story.blocker)}\n"
        f"Due date: {story.deadline or '[Not set]'}\n"
        f"Owners: {format_member_list(story.owner_ids, users)}\n"
        f"\n"
        f"Description:\n{story.description}\n"
        f"\n"
        f"Comments:\n{comments or '[None]'}"
    )


def format_stats(stats: EpicStats) -> str:
    """Story counts for an epic; points only when any story is estimated."""
    lines = [
        f"Stories: {stats.num_stories_total} total, {stats.num_stories_unstarted} unstarted, "
        f"{stats.num_stories_started} started, {stats.num_stories_done} done"
    ]
    if stats.num_points:
        lines.append(f"Points: {stats.num_points_done} of {stats.num_points} done")
    return "\n".join(lines)


def format_epic(epic: EpicDetail) -> str:
    return (
        f"Epic: {epic.id}\n"
        f"URL: {epic.app_url}\n"
        f"Name: {epic.name}\n"
        f"Archived: {_yes_no(epic.archived)}\n"
        f"Completed: {_yes_no(epic.completed)}\n"
        f"Started: {_yes_no(epic.started)}\n"
        f"Due date: {epic.deadline or '[Not set]'}\n"
        f"Team: {epic.group_id or '[None]'}\n"
        f"Objective: {epic.milestone_id or '[None]'}\n"
        f"\n"
        f"{format_stats(epic.stats)}\n"
        f"\n"
        f"Description:\n{epic.description}"
    )
