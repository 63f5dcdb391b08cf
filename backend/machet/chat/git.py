"""
Pre-flight source control check — offers to commit pending changes before
the session starts, so tool writes are easy to tell apart from the user's
own edits.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Optional

from machet.errors import GitError

logger = logging.getLogger(__name__)


@dataclass
class PreflightStatus:
    has_changes: bool
    paths: list[str] = field(default_factory=list)


@dataclass
class PreflightResult:
    proceed: bool
    paths: list[str] = field(default_factory=list)


def _git(*args: str, cwd: str = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", *args], capture_output=True, text=True, timeout=30, cwd=cwd,
    )


def _parse_porcelain(output: str) -> list[str]:
    """Paths from `git status --porcelain -z`.

    Entries are NUL-terminated "XY path" with no quoting. A rename or copy
    entry is followed by one extra entry holding the source path.
    """
    paths = []
    entries = iter(output.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        paths.append(entry[3:])
        if {"R", "C"} & set(entry[:2]):
            next(entries, None)
    return paths


def check_uncommitted_changes(cwd: str = None) -> Optional[PreflightStatus]:
    """Return the working tree status, or None outside a git work tree
    (or when git is not installed)."""
    try:
        inside = _git("rev-parse", "--is-inside-work-tree", cwd=cwd)
        if inside.returncode != 0:
            return None
        status = _git("status", "--porcelain", "-z", cwd=cwd)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git unavailable: %s", e)
        return None
    if status.returncode != 0:
        return None

    paths = _parse_porcelain(status.stdout)
    return PreflightStatus(has_changes=bool(paths), paths=paths)


def commit_all_changes(message: str, cwd: str = None):
    """Stage everything and commit it.

    Raises:
        GitError: not a repository, or git add/commit failed.
    """
    if check_uncommitted_changes(cwd) is None:
        raise GitError("Not in a git repository")
    try:
        stage = _git("add", "--all", cwd=cwd)
        if stage.returncode != 0:
            raise GitError(stage.stderr.strip() or "git add failed")
        commit = _git("commit", "-m", message, cwd=cwd)
        if commit.returncode != 0:
            raise GitError(commit.stderr.strip() or commit.stdout.strip() or "git commit failed")
    except (OSError, subprocess.SubprocessError) as e:
        raise GitError(f"Failed to run git: {e}") from e
    logger.info("Committed pending changes: %s", message)


def run_preflight(ask: Callable[[str], str] = input,
                  say: Callable[[str], None] = print,
                  cwd: str = None) -> PreflightResult:
    """Ask whether to commit pending changes before the loop starts.

    y commits (asking for a message), n proceeds, x or anything else exits.
    """
    status = check_uncommitted_changes(cwd)
    if status is None or not status.has_changes:
        return PreflightResult(proceed=True)

    say("The following files have uncommitted changes:")
    for path in status.paths:
        say(f"  - {path}")
    answer = ask(
        "\nWould you like to commit these changes? "
        "(y: commit, n: proceed without committing, x: exit) "
    ).strip().lower()

    if answer == "y":
        message = ask("Enter commit message: ").strip()
        try:
            commit_all_changes(message, cwd)
            say("Changes committed successfully!")
        except GitError as e:
            say(f"Failed to commit changes: {e}")
        return PreflightResult(proceed=True, paths=status.paths)
    if answer == "n":
        say("Proceeding without committing changes.")
        return PreflightResult(proceed=True, paths=status.paths)
    if answer == "x":
        say("Exiting due to uncommitted changes.")
    else:
        say("Invalid option. Exiting.")
    return PreflightResult(proceed=False, paths=status.paths)
