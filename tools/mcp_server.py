# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes Shortcut story and epic search, plus a few read-only lookups, as
#   MCP tools.  Each tool is a thin wrapper around core/search.py or
#   core/details.py: it collects the typed arguments, hands them over, and
#   turns failures into error dicts the agent can read.
#
# HOW IT WORKS (the flow):
#   1. The agent calls "search_stories" with some filters
#   2. FastMCP validates the arguments against the signature below
#   3. core/search.py compiles them into a Shortcut query and runs it
#   4. The agent receives {"result": "..."} or {"error": ..., "field": ...}
#
# RUNNING THIS SERVER:
#   a) Standalone:  python -m tools.mcp_server
#   b) Spawned by the ADK agent over stdio (agent/shortcut_agent.py)
# =============================================================================

import json
import logging
import sys
from typing import Literal, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP

from core import details, search
from core.errors import CancellationError, CompileError, EntityNotFoundError, SearchError, ShortcutAPIError
from core.shortcut_client import ShortcutClient

load_dotenv()

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT is the MCP transport, so all logging goes to STDERR.
#   - CYAN for incoming requests
#   - GREEN for responses
#   - YELLOW for status messages
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with the parameters that were actually set."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    logging.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(result, separators=(',', ':'))}{_RESET}")
    return result


mcp = FastMCP("shortcut-search")

_client: Optional[ShortcutClient] = None


def _get_client() -> ShortcutClient:
    global _client
    if _client is None:
        _client = ShortcutClient.from_env()
    return _client


async def _run_tool(tool_name: str, handler, *args) -> dict:
    """Run a core handler against the shared client and map its failures to error dicts."""
    try:
        text = await handler(_get_client(), *args)
    except CancellationError:
        raise
    except CompileError as exc:
        _log_status(f"Could not build query: {exc}")
        return _log_response(tool_name, {"error": exc.message, "field": exc.field_key})
    except (SearchError, EntityNotFoundError, ShortcutAPIError) as exc:
        _log_status(f"Request failed: {exc}")
        return _log_response(tool_name, {"error": str(exc)})
    return _log_response(tool_name, {"result": text})


# =============================================================================
# TOOL 1: search_stories
# =============================================================================
@mcp.tool()
async def search_stories(
    id: Optional[int] = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
    comment: Optional[str] = None,
    type: Optional[Literal["feature", "bug", "chore"]] = None,
    estimate: Optional[int] = None,
    branch: Optional[str] = None,
    commit: Optional[str] = None,
    pr: Optional[int] = None,
    project: Optional[int] = None,
    epic: Optional[int] = None,
    objective: Optional[int] = None,
    state: Optional[str] = None,
    label: Optional[str] = None,
    owner: Optional[str] = None,
    requester: Optional[str] = None,
    team: Optional[str] = None,
    skill_set: Optional[str] = None,
    product_area: Optional[str] = None,
    technical_area: Optional[str] = None,
    priority: Optional[str] = None,
    severity: Optional[str] = None,
    is_done: Optional[bool] = None,
    is_started: Optional[bool] = None,
    is_unstarted: Optional[bool] = None,
    is_unestimated: Optional[bool] = None,
    is_overdue: Optional[bool] = None,
    is_archived: Optional[bool] = None,
    is_blocker: Optional[bool] = None,
    is_blocked: Optional[bool] = None,
    has_comment: Optional[bool] = None,
    has_label: Optional[bool] = None,
    has_deadline: Optional[bool] = None,
    has_owner: Optional[bool] = None,
    has_pr: Optional[bool] = None,
    has_commit: Optional[bool] = None,
    has_branch: Optional[bool] = None,
    has_epic: Optional[bool] = None,
    has_task: Optional[bool] = None,
    has_attachment: Optional[bool] = None,
    created: Optional[str] = None,
    updated: Optional[str] = None,
    completed: Optional[str] = None,
    due: Optional[str] = None,
) -> dict:
    """Find Shortcut stories.

    Every argument is an optional filter; only the ones you pass are applied.

    Args:
        id, estimate, pr, project, epic, objective: Numeric ids / values.
        name, description, comment, branch, commit, state, label, team,
        skill_set, product_area, technical_area, priority, severity: Text.
            team can be a team mention name or team name.
        type: "feature", "bug" or "chore".
        owner, requester: "me" for the current user, otherwise a mention name.
        is_*: true to require the state, false to exclude it
            (done, started, unstarted, unestimated, overdue, archived,
            blocker, blocked).
        has_*: true to require, false to exclude (comment, label, deadline,
            owner, pr, commit, branch, epic, task, attachment).
        created, updated, completed, due: "YYYY-MM-DD", "today",
            "yesterday", "tomorrow", or a range "START..END" where either
            side may be empty.

    Returns:
        {"result": <text list of up to 25 stories with the total count>}
        or {"error": <message>, "field": <offending filter>} when the filters
        could not be turned into a query.
    """
    params = dict(locals())
    _log_request("search_stories", **params)
    return await _run_tool("search_stories", search.search_stories, params)


# =============================================================================
# TOOL 2: search_epics
# =============================================================================
# is_archived defaults to False: archived epics are excluded unless asked for.
# =============================================================================
@mcp.tool()
async def search_epics(
    id: Optional[int] = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
    state: Optional[Literal["unstarted", "started", "done"]] = None,
    objective: Optional[int] = None,
    owner: Optional[str] = None,
    requester: Optional[str] = None,
    team: Optional[str] = None,
    comment: Optional[str] = None,
    is_unstarted: Optional[bool] = None,
    is_started: Optional[bool] = None,
    is_done: Optional[bool] = None,
    is_archived: Optional[bool] = False,
    is_overdue: Optional[bool] = None,
    has_owner: Optional[bool] = None,
    has_comment: Optional[bool] = None,
    has_deadline: Optional[bool] = None,
    has_label: Optional[bool] = None,
    created: Optional[str] = None,
    updated: Optional[str] = None,
    completed: Optional[str] = None,
    due: Optional[str] = None,
) -> dict:
    """Find Shortcut epics.

    Examples:
      - By name: {"name": "Project X"}
      - By state: {"state": "started"}
      - Created on a day: {"created": "2024-03-20"}
      - Created in a range: {"created": "2024-03-01..2024-03-31"}
      - By team: {"team": "team-name"}
    Criteria can be combined.

    Args:
        id, objective: Numeric ids.
        name, description, comment: Text.
        state: "unstarted", "started" or "done".
        owner, requester: "me" for the current user, otherwise a mention name.
        team: A team's mention name.
        is_*: true to require, false to exclude (unstarted, started, done,
            archived, overdue).  Archived epics are excluded by default.
        has_*: true to require, false to exclude (owner, comment, deadline,
            label).
        created, updated, completed, due: same date syntax as search_stories.

    Returns:
        {"result": <text list of up to 25 epics with the total count>}
        or {"error": <message>, "field": <offending filter>}.
    """
    params = dict(locals())
    _log_request("search_epics", **params)
    return await _run_tool("search_epics", search.search_epics, params)


# =============================================================================
# TOOLS 3-6: single-item lookups
# =============================================================================
@mcp.tool()
async def get_story(story_public_id: int) -> dict:
    """Get a Shortcut story by public id: state, owners, description and comments."""
    _log_request("get_story", story_public_id=story_public_id)
    return await _run_tool("get_story", details.get_story, story_public_id)


@mcp.tool()
async def get_story_branch_name(story_public_id: int) -> dict:
    """Get a git branch name for a story.

    The name has the form "<your mention name>/sc-<id>/<story-name>" and is
    cut to 50 characters.
    """
    _log_request("get_story_branch_name", story_public_id=story_public_id)
    return await _run_tool("get_story_branch_name", details.get_story_branch_name, story_public_id)


@mcp.tool()
async def get_epic(epic_public_id: int) -> dict:
    """Get a Shortcut epic by public id: state, team, story counts and description."""
    _log_request("get_epic", epic_public_id=epic_public_id)
    return await _run_tool("get_epic", details.get_epic, epic_public_id)


@mcp.tool()
async def list_epics() -> dict:
    """List every epic in the workspace by id and name."""
    _log_request("list_epics")
    return await _run_tool("list_epics", details.list_epics)


if __name__ == "__main__":
    mcp.run()
