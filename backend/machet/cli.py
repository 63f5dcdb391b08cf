"""
machet — interactive coding assistant in the terminal.

Run: machet --model ollama/qwen2.5-coder
     machet --model openai/gpt-4o      (needs OPENAI_API_KEY)

Type a task at the /USER/ prompt; /bye, /exit or /quit ends the session.
"""

import argparse
import asyncio
import logging
import sys
import threading
from typing import Optional

from machet.chat.controller import LoopState, SessionObserver, TurnController
from machet.chat.git import run_preflight
from machet.chat.history import Turn
from machet.chat.prompts import build_system_prompt
from machet.config import LOG_DATE_FORMAT, LOG_FORMAT
from machet.errors import ConfigError
from machet.inference import backend_from_config
from machet.profile import Profile, get_profile, reload_profile
from machet.tools import ToolRegistry

logger = logging.getLogger(__name__)

USER_PROMPT = "/USER/ "
STDIN_THREAD_NAME = "machet-stdin"


class ConsoleObserver(SessionObserver):
    """Prints the session to stdout, diagnostics to stderr."""

    def __init__(self, show_tool_output: bool = False):
        self.show_tool_output = show_tool_output

    def thinking(self):
        print("Thinking...")

    def assistant(self, turn: Turn):
        print(f"/ASSISTANT/ {turn.content}")

    def tool_output(self, text: str):
        if self.show_tool_output:
            print(f"/TOOL/ {text}")

    def farewell(self):
        print("Goodbye!")

    def error(self, message: str):
        print(f"Error getting response: {message}", file=sys.stderr)


def _resolve(future: asyncio.Future, line: Optional[str], error: Optional[BaseException]):
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(line)


async def read_user_line(prompt: str = USER_PROMPT) -> str:
    """Read one line without blocking the event loop. EOF counts as /bye.

    input() runs on a daemon thread rather than the loop's executor, so a
    Ctrl-C at the prompt does not wait on the blocked read during shutdown.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def read():
        line, error = None, None
        try:
            line = input(prompt)
        except EOFError:
            print()
            line = "/bye"
        except Exception as e:
            error = e
        try:
            loop.call_soon_threadsafe(_resolve, future, line, error)
        except RuntimeError:
            # Loop already closed; the session is over
            pass

    threading.Thread(target=read, name=STDIN_THREAD_NAME, daemon=True).start()
    return await future


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="machet",
        description="Interactive assistant that runs tools embedded in model replies",
    )
    parser.add_argument("--model", default=None,
                        help="Model to use, in format provider/model "
                             "(e.g. ollama/qwen2.5-coder or openai/gpt-4o)")
    parser.add_argument("--hostname", default=None,
                        help="Hostname for Ollama server (ignored for OpenAI models)")
    parser.add_argument("--port", type=int, default=None,
                        help="Port for Ollama server (ignored for OpenAI models)")
    parser.add_argument("--workspace", default=None,
                        help="Directory tool paths are resolved against")
    parser.add_argument("--profile", default=None,
                        help="Path to a machet.yaml profile")
    parser.add_argument("--no-preflight", action="store_true",
                        help="Skip the uncommitted-changes check")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default from profile)")
    return parser


def apply_overrides(profile: Profile, args: argparse.Namespace) -> Profile:
    """Command line flags win over the profile."""
    if args.model:
        profile.inference.model = args.model
    if args.hostname:
        profile.inference.hostname = args.hostname
    if args.port:
        profile.inference.port = args.port
    if args.workspace:
        profile.tools.workspace = args.workspace
    if args.no_preflight:
        profile.chat.preflight = False
    if args.log_level:
        profile.logging.level = args.log_level
    return profile


def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    profile = reload_profile(args.profile) if args.profile else get_profile()
    apply_overrides(profile, args)
    setup_logging(profile.logging.level)

    try:
        backend = backend_from_config(profile.inference)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    provider, _, model = profile.inference.model.partition("/")
    print(f"Using LLM Provider: {provider}")
    print(f"Using Model: {model}")

    if profile.chat.preflight:
        preflight = run_preflight(cwd=str(profile.workspace_path))
        if not preflight.proceed:
            return 0

    registry = ToolRegistry.default(profile.workspace_path)
    controller = TurnController(
        backend,
        build_system_prompt(registry, profile.system.name),
        registry,
        tool_errors=profile.chat.tool_errors,
        observer=ConsoleObserver(profile.chat.show_tool_output),
    )

    try:
        asyncio.run(controller.run(read_user_line))
    except KeyboardInterrupt:
        print("\nGoodbye!")

    print(f"Conversation history length: {len(controller.history)}")
    return 1 if controller.state is LoopState.ERROR else 0


if __name__ == "__main__":
    sys.exit(main())
