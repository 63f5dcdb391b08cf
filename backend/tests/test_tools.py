"""
Tests for the built-in file tools, the registry and prompt assembly.
"""

import pytest

from machet.chat.prompts import build_system_prompt, get_tool_prompt
from machet.errors import ExecutionError
from machet.tools import ListTool, ReadTool, SaveTool, ToolRegistry, get_all_tools


class TestSaveTool:
    """save writes files and surfaces nothing."""

    def test_writes_file_and_returns_none(self, tmp_path):
        tool = SaveTool(tmp_path)
        assert tool.execute("hello.py", 'print("hi")') is None
        assert (tmp_path / "hello.py").read_text() == 'print("hi")\n'

    def test_creates_parent_directories(self, tmp_path):
        SaveTool(tmp_path).execute("a/b/c.txt", "deep")
        assert (tmp_path / "a" / "b" / "c.txt").exists()

    def test_overwrites(self, tmp_path):
        tool = SaveTool(tmp_path)
        tool.execute("f.txt", "one")
        tool.execute("f.txt", "two")
        assert (tmp_path / "f.txt").read_text() == "two\n"

    def test_empty_content_gives_empty_file(self, tmp_path):
        SaveTool(tmp_path).execute("empty.txt", "")
        assert (tmp_path / "empty.txt").read_text() == ""

    def test_absolute_path_ignores_workspace(self, tmp_path):
        target = tmp_path / "abs.txt"
        SaveTool(tmp_path / "elsewhere").execute(str(target), "x")
        assert target.read_text() == "x\n"

    def test_missing_path_fails(self, tmp_path):
        with pytest.raises(ExecutionError) as exc:
            SaveTool(tmp_path).execute(None, "content")
        assert exc.value.tool == "save"


class TestReadTool:
    """read surfaces file content in a labelled block."""

    def test_surfaces_content(self, tmp_path):
        (tmp_path / "main.py").write_text("x = 1\n")
        output = ReadTool(tmp_path).execute("main.py", "")
        assert output == "Content of `main.py`:\n```\nx = 1\n```"

    def test_missing_file_fails(self, tmp_path):
        with pytest.raises(ExecutionError, match="file not found"):
            ReadTool(tmp_path).execute("nope.txt", "")

    def test_directory_is_not_a_file(self, tmp_path):
        (tmp_path / "sub").mkdir()
        with pytest.raises(ExecutionError):
            ReadTool(tmp_path).execute("sub", "")

    def test_missing_parameter_fails(self, tmp_path):
        with pytest.raises(ExecutionError):
            ReadTool(tmp_path).execute(None, "")

    def test_large_file_truncated(self, tmp_path):
        (tmp_path / "big.txt").write_text("a" * 60000)
        output = ReadTool(tmp_path).execute("big.txt", "")
        assert "Truncated" in output
        assert len(output) < 51000


class TestListTool:
    """ls surfaces a sorted listing with directories marked."""

    def test_lists_sorted_with_dir_suffix(self, tmp_path):
        (tmp_path / "b.txt").write_text("")
        (tmp_path / "a.txt").write_text("")
        (tmp_path / "src").mkdir()
        output = ListTool(tmp_path).execute(None, "")
        assert output == "Entries of `.`:\na.txt\nb.txt\nsrc/"

    def test_lists_subdirectory(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "main.py").write_text("")
        assert ListTool(tmp_path).execute("src", "") == "Entries of `src`:\nmain.py"

    def test_empty_directory(self, tmp_path):
        assert ListTool(tmp_path).execute(None, "") == "Entries of `.`:\n(empty)"

    def test_not_a_directory_fails(self, tmp_path):
        (tmp_path / "f.txt").write_text("")
        with pytest.raises(ExecutionError, match="not a directory"):
            ListTool(tmp_path).execute("f.txt", "")


class TestToolRegistry:
    """Registry order, lookup and extension."""

    def test_default_order(self, tmp_path):
        registry = ToolRegistry.default(tmp_path)
        assert registry.indicators() == ["save", "read", "ls"]
        assert len(registry) == 3

    def test_tools_share_workspace(self, tmp_path):
        assert all(t.workspace == tmp_path for t in get_all_tools(tmp_path))

    def test_extra_tools_appended(self, tmp_path, make_tool):
        extra = make_tool("probe")
        registry = ToolRegistry.default(tmp_path, extra_tools=[extra])
        assert registry.indicators()[-1] == "probe"

    def test_matching_in_order(self, make_tool):
        a, b, c = make_tool("dup"), make_tool("other"), make_tool("dup")
        registry = ToolRegistry([a, b, c])
        assert registry.matching("dup") == [a, c]
        assert registry.matching("missing") == []

    def test_registry_is_fixed(self, make_tool):
        tools = [make_tool("a")]
        registry = ToolRegistry(tools)
        tools.append(make_tool("b"))
        assert len(registry) == 1

    def test_repr(self, tmp_path):
        assert repr(SaveTool(tmp_path)) == "SaveTool(indicator='save')"


class TestPrompts:
    """System prompt assembly from tool descriptions."""

    def test_every_tool_described(self, tmp_path):
        prompt = get_tool_prompt(get_all_tools(tmp_path))
        for indicator in ("save", "read", "ls"):
            assert f"```{indicator}" in prompt
        assert "# List of tools provided" in prompt

    def test_system_prompt_uses_name(self, tmp_path):
        prompt = build_system_prompt(ToolRegistry.default(tmp_path), name="Sparky")
        assert "You are Sparky" in prompt
        assert "## Save Tool" in prompt
        assert prompt.index("You are Sparky") < prompt.index("## Save Tool")
