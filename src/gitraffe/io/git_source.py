"""Upstream data source: the git repository behind the viewer.

Graph data always comes from `git log --graph`; when that cannot be produced
the source degrades to a flat `git log` stream. Repository info is read with
pygit2 and falls back to `git rev-parse`.

Everything here blocks, so it only ever runs in a worker thread. Results go
back to the render loop as events via execute_task().
"""

from __future__ import annotations

import logging
import os
import subprocess

import pygit2

from gitraffe.core.commit_store import DiffPayload, shorten_hash
from gitraffe.core.graph_parser import (
    GraphUnavailable,
    ParsedGraph,
    SourceUnavailable,
    parse_graph_lines,
    parse_simple_lines,
)
from gitraffe.event_types import (
    DiffLoaded,
    LoadDiffTask,
    LoadRepoTask,
    LoopEvent,
    RepoFailed,
    RepoInfo,
    RepoLoaded,
    Task,
)
from gitraffe.settings import Config

logger = logging.getLogger(__name__)

GRAPH_FORMAT = "--pretty=format:%H%x00%an%x00%at%x00%s%x00%P%x00%D"
SIMPLE_FORMAT = "--pretty=format:%H|%an|%at|%s|%P"


class GitSource:
    """Runs git for one repository path."""

    def __init__(self, config: Config):
        self._config = config
        self.repo_path = config.repo_path

    # ─── process plumbing ───────────────────────────────────────────────

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        cmd = [self._config.git_binary, *args]
        logger.debug("running %s", cmd)
        return subprocess.run(
            cmd,
            cwd=self.repo_path,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )

    def _log_args(self) -> list[str]:
        args = ["log", f"-n{self._config.max_commits}"]
        if self._config.all_refs:
            args.append("--all")
        return args

    # ─── repository info ────────────────────────────────────────────────

    def repo_name(self) -> str:
        path = os.path.abspath(self.repo_path)
        return os.path.basename(path.rstrip(os.sep)) or path

    def repo_info(self) -> RepoInfo:
        try:
            return self._repo_info_pygit2()
        except (pygit2.GitError, KeyError, ValueError, SourceUnavailable) as e:
            logger.info("pygit2 repository info unavailable (%s), using git CLI", e)
            return self._repo_info_cli()

    def _repo_info_pygit2(self) -> RepoInfo:
        discovered = pygit2.discover_repository(self.repo_path)
        if discovered is None:
            raise SourceUnavailable(f"not a git repository: {self.repo_path}")
        repo = pygit2.Repository(discovered)
        if repo.head_is_unborn:
            raise SourceUnavailable("HEAD is unborn")
        branch = "HEAD (detached)" if repo.head_is_detached else repo.head.shorthand
        return RepoInfo(
            name=self.repo_name(),
            branch=branch,
            head_short=shorten_hash(str(repo.head.target)),
        )

    def _repo_info_cli(self) -> RepoInfo:
        branch = "unknown"
        head = "unknown"
        try:
            result = self._run("rev-parse", "--abbrev-ref", "HEAD")
            if result.returncode == 0:
                branch = result.stdout.strip()
            result = self._run("rev-parse", "--short=7", "HEAD")
            if result.returncode == 0:
                head = result.stdout.strip()
        except OSError as e:
            logger.warning("git CLI unavailable for repository info: %s", e)
        return RepoInfo(name=self.repo_name(), branch=branch, head_short=head)

    # ─── commit streams ─────────────────────────────────────────────────

    def graph_lines(self) -> list[str]:
        try:
            result = self._run(*self._log_args(), "--graph", GRAPH_FORMAT)
        except OSError as e:
            raise GraphUnavailable(f"git log --graph failed: {e}") from e
        if result.returncode != 0:
            raise GraphUnavailable(
                f"git log --graph failed: exit {result.returncode} ({result.stderr.strip()})"
            )
        return result.stdout.split("\n")

    def simple_lines(self) -> list[str]:
        try:
            result = self._run(*self._log_args(), SIMPLE_FORMAT)
        except OSError as e:
            raise SourceUnavailable(f"git command failed: {e}") from e
        if result.returncode != 0:
            logger.error("git CLI error: exit %d, stderr: %s", result.returncode, result.stderr.strip())
            raise SourceUnavailable(f"git command failed: exit {result.returncode}")
        return result.stdout.split("\n")

    def load(self) -> ParsedGraph:
        """Parse the commit graph, degrading to simple mode when needed.

        Raises SourceUnavailable when neither mode works.
        """
        logger.info("loading graph data for %s", self.repo_path)
        try:
            return parse_graph_lines(self.graph_lines())
        except GraphUnavailable as graph_err:
            logger.warning("graph loading failed: %s, trying simple load", graph_err)
            try:
                return parse_simple_lines(self.simple_lines())
            except SourceUnavailable as simple_err:
                raise SourceUnavailable(f"graph: {graph_err}, fallback: {simple_err}") from simple_err

    # ─── diffs ──────────────────────────────────────────────────────────

    def load_diff(self, full_hash: str) -> DiffPayload:
        """Stat summary and patch body for one commit; empty parts on failure."""
        summary = ""
        body = ""
        truncated = False
        try:
            result = self._run("show", "--format=", "--stat", "--no-color", full_hash)
            if result.returncode == 0:
                summary = result.stdout.strip()
            result = self._run("show", "--format=", "--no-color", "-p", full_hash)
            if result.returncode == 0:
                body, truncated = cap_lines(result.stdout, self._config.diff_line_cap)
        except OSError as e:
            logger.warning("diff for %s unavailable: %s", full_hash, e)
        return DiffPayload(summary=summary, body=body, truncated=truncated)


def cap_lines(text: str, cap: int) -> tuple[str, bool]:
    """Keep at most `cap` lines; report whether anything was cut."""
    lines = text.split("\n")
    if len(lines) <= cap:
        return text, False
    return "\n".join(lines[:cap]), True


def execute_task(source, task: Task) -> LoopEvent:
    """Run one task to completion and describe the result as an event.

    `source` is anything with repo_info(), load() and load_diff(). Failures
    become data; nothing raised here reaches the render loop.
    """
    if isinstance(task, LoadRepoTask):
        info = source.repo_info()
        try:
            parsed = source.load()
        except SourceUnavailable as e:
            logger.error("repository load failed: %s", e)
            return RepoFailed(info=info, error=str(e))
        return RepoLoaded(info=info, parsed=parsed)

    if isinstance(task, LoadDiffTask):
        try:
            payload = source.load_diff(task.full_hash)
        except Exception:
            logger.exception("diff task for %s failed", task.full_hash)
            payload = DiffPayload()
        return DiffLoaded(commit_index=task.commit_index, payload=payload)

    raise TypeError(f"unknown task: {task!r}")
