# =============================================================================
# agent/__init__.py
# =============================================================================
# The Google ADK agent: a system prompt (prompt.py) plus an MCP connection to
# the search tools (shortcut_agent.py).  No query logic lives here; filters
# are compiled in core/ and executed by the tool server.
# =============================================================================
