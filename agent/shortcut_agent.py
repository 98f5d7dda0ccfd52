# =============================================================================
# agent/shortcut_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the ADK agent that answers questions about a Shortcut workspace
#   by calling the search tools in tools/mcp_server.py.
#
#   ┌──────────────────────────┐        stdio        ┌────────────────────┐
#   │  ADK Agent (LiteLlm)     │ ──────────────────▶ │  FastMCP server    │
#   │  prompt: agent/prompt.py │                     │  • search_stories  │
#   └──────────────────────────┘                     │  • search_epics    │
#                                                    │  • get_story, ...  │
#                                                    └─────────┬──────────┘
#                                                              ▼
#                                                    core/ (query compiler,
#                                                    Shortcut client)
#
# MODEL:
#   SHORTCUT_AGENT_MODEL picks the LiteLlm model string; the default routes
#   GPT-4o through OpenRouter (reads OPENROUTER_API_KEY from the environment).
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_shortcut_assistant_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def create_agent() -> Agent:
    """Create the Shortcut search assistant, wired to the MCP tool server."""
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    # "uv run" keeps the subprocess on the project's virtualenv
    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "python", "-m", "tools.mcp_server"],
            cwd=project_root,
        ),
    )

    return Agent(
        name="shortcut_search_assistant",
        model=LiteLlm(model=os.environ.get("SHORTCUT_AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_shortcut_assistant_prompt(),
        tools=[mcp_tools],
    )
