# =============================================================================
# main.py  —  Entry Point for the Shortcut Search Assistant
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads .env (SHORTCUT_API_TOKEN, OPENROUTER_API_KEY, ...)
#   2. Creates the ADK agent (agent/shortcut_agent.py), which spawns the
#      FastMCP search server as a subprocess
#   3. Reads questions from the terminal and streams the agent's answers,
#      echoing each tool call as a compact call expression, e.g.
#        search_stories(owner='me', is_done=False)
#      and any filter the tool server rejected
# =============================================================================

import asyncio
from typing import Any, Optional

from dotenv import load_dotenv

# LiteLlm and the Shortcut client read their keys from the environment
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.shortcut_agent import create_agent

APP_NAME = "shortcut_search"
USER_ID = "cli_user"


def format_tool_call(name: str, args: Optional[dict[str, Any]]) -> str:
    """Render a tool call with only the filters the model actually set."""
    set_args = ", ".join(f"{key}={value!r}" for key, value in (args or {}).items() if value is not None)
    return f"{name}({set_args})"


def tool_error(response: Any) -> Optional[str]:
    """Pull an error out of a tool response, naming the rejected filter if any."""
    if not isinstance(response, dict):
        return None
    payload = response.get("structuredContent") or response.get("result") or response
    if not isinstance(payload, dict) or "error" not in payload:
        return None
    field = payload.get("field")
    return f"{field}: {payload['error']}" if field else str(payload["error"])


async def ask(runner: Runner, session_id: str, text: str) -> str:
    """Send one question through the agent and return its final answer."""
    message = types.Content(role="user", parts=[types.Part(text=text)])
    final_response = ""

    async for event in runner.run_async(user_id=USER_ID, session_id=session_id, new_message=message):
        if not (event.content and event.content.parts):
            continue
        for part in event.content.parts:
            if getattr(part, "text", None):
                final_response = part.text

            call = getattr(part, "function_call", None)
            if call:
                print(f"  🔎 {format_tool_call(call.name, call.args)}")

            reply = getattr(part, "function_response", None)
            if reply:
                error = tool_error(reply.response)
                if error:
                    print(f"  ⚠️  {reply.name} rejected: {error}")

    return final_response


async def run_agent():
    """Run the assistant in an interactive terminal loop."""
    print("=" * 70)
    print("  SHORTCUT SEARCH ASSISTANT")
    print("  Powered by Google ADK + FastMCP")
    print("=" * 70)
    print("\n🔧 Initializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(agent=agent, app_name=APP_NAME, session_service=session_service)
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("✅ Agent initialized and ready!\n")
    print("💬 Ask about your stories and epics, e.g. \"what bugs do I own that aren't done?\"")
    print("   Look up one item with \"show me sc-1234\" or \"branch name for sc-1234\".")
    print("   (Type 'quit' to exit)\n")

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        print("-" * 70)
        answer = await ask(runner, session.id, user_input)
        print("-" * 70)
        if answer:
            print(f"\n🤖 Agent:\n\n{answer}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")


if __name__ == "__main__":
    asyncio.run(run_agent())
