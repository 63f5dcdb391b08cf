"""
Tests for the machet command line entry point.
"""

import asyncio
import threading
import time

import pytest

import machet.cli as cli
import machet.profile as profile_mod
from machet.chat.git import PreflightResult
from machet.chat.history import Role, Turn
from machet.errors import ProviderError
from machet.profile import Profile


@pytest.fixture(autouse=True)
def _isolated_profile(monkeypatch, tmp_path):
    monkeypatch.setattr(profile_mod, "_profile", None)
    monkeypatch.setenv("MACHET_PROFILE", str(tmp_path / "absent.yaml"))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


def _script_input(monkeypatch, lines):
    queue = list(lines)

    async def read_line(prompt=cli.USER_PROMPT):
        return queue.pop(0)

    monkeypatch.setattr(cli, "read_user_line", read_line)


class TestArguments:
    """Flag parsing and profile overrides."""

    def test_defaults_leave_profile_alone(self):
        args = cli.build_parser().parse_args([])
        assert cli.apply_overrides(Profile(), args) == Profile()

    def test_flags_override_profile(self):
        args = cli.build_parser().parse_args([
            "--model", "openai/gpt-4o", "--hostname", "box", "--port", "9000",
            "--workspace", "/srv", "--no-preflight", "--log-level", "DEBUG",
        ])
        profile = cli.apply_overrides(Profile(), args)
        assert profile.inference.model == "openai/gpt-4o"
        assert profile.inference.hostname == "box"
        assert profile.inference.port == 9000
        assert profile.tools.workspace == "/srv"
        assert profile.chat.preflight is False
        assert profile.logging.level == "DEBUG"

    def test_bad_log_level_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["--log-level", "LOUD"])


class TestMain:
    """End-to-end runs with the provider and stdin faked."""

    def test_bad_model_spec_exits_2(self, capsys):
        assert cli.main(["--model", "nonsense", "--no-preflight"]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_missing_openai_key_exits_2(self):
        assert cli.main(["--model", "openai/gpt-4o", "--no-preflight"]) == 2

    def test_session_until_bye(self, monkeypatch, capsys, tmp_path, fake_backend):
        backend = fake_backend(["Hi! What shall we build?"])
        monkeypatch.setattr(cli, "backend_from_config", lambda cfg: backend)
        _script_input(monkeypatch, ["hello", "/bye"])

        code = cli.main(["--no-preflight", "--workspace", str(tmp_path)])

        out = capsys.readouterr().out
        assert code == 0
        assert "Using LLM Provider: ollama" in out
        assert "Using Model: qwen2.5-coder" in out
        assert "/ASSISTANT/ Hi! What shall we build?" in out
        assert "Goodbye!" in out
        assert "Conversation history length: 2" in out
        assert "You are machet" in backend.calls[0]["system_prompt"]

    def test_provider_error_exits_1(self, monkeypatch, capsys, tmp_path, fake_backend):
        backend = fake_backend([ProviderError("connection refused", "ollama")])
        monkeypatch.setattr(cli, "backend_from_config", lambda cfg: backend)
        _script_input(monkeypatch, ["hello"])

        code = cli.main(["--no-preflight", "--workspace", str(tmp_path)])

        assert code == 1
        assert "Error getting response: ollama: connection refused" in capsys.readouterr().err

    def test_declined_preflight_skips_session(self, monkeypatch, fake_backend, tmp_path):
        backend = fake_backend([])
        monkeypatch.setattr(cli, "backend_from_config", lambda cfg: backend)
        monkeypatch.setattr(cli, "run_preflight", lambda cwd=None: PreflightResult(proceed=False))

        assert cli.main(["--workspace", str(tmp_path)]) == 0
        assert backend.calls == []


class TestConsole:
    """Console observer and input handling."""

    def test_tool_output_hidden_by_default(self, capsys):
        cli.ConsoleObserver().tool_output("listing")
        assert capsys.readouterr().out == ""

    def test_tool_output_shown_when_enabled(self, capsys):
        cli.ConsoleObserver(show_tool_output=True).tool_output("listing")
        assert capsys.readouterr().out == "/TOOL/ listing\n"

    def test_assistant_prefix(self, capsys):
        cli.ConsoleObserver().assistant(Turn(Role.ASSISTANT, "hi"))
        assert capsys.readouterr().out == "/ASSISTANT/ hi\n"

    @pytest.mark.asyncio
    async def test_eof_means_bye(self, monkeypatch):
        def eof(prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", eof)
        assert await cli.read_user_line() == "/bye"

    @pytest.mark.asyncio
    async def test_reads_line(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt="": "write a script")
        assert await cli.read_user_line() == "write a script"

    @pytest.mark.asyncio
    async def test_input_errors_propagate(self, monkeypatch):
        def broken(prompt=""):
            raise OSError("stdin closed")

        monkeypatch.setattr("builtins.input", broken)
        with pytest.raises(OSError, match="stdin closed"):
            await cli.read_user_line()

    def test_interrupt_at_prompt_exits_promptly(self, monkeypatch):
        """A pending read must not hold up event loop shutdown."""
        release = threading.Event()

        def blocking_input(prompt=""):
            release.wait(10)
            return "too late"

        monkeypatch.setattr("builtins.input", blocking_input)

        async def interrupted_session():
            asyncio.ensure_future(cli.read_user_line())
            await asyncio.sleep(0.05)
            raise RuntimeError("interrupted")

        started = time.monotonic()
        try:
            with pytest.raises(RuntimeError, match="interrupted"):
                asyncio.run(interrupted_session())
            assert time.monotonic() - started < 2
            readers = [t for t in threading.enumerate() if t.name == cli.STDIN_THREAD_NAME]
            assert readers and all(t.daemon for t in readers)
        finally:
            release.set()
