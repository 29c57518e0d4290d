"""Pytest configuration and shared fixtures for gitraffe tests."""

import logging
import os
import shutil
import subprocess

import pytest

from gitraffe.io import logging_setup


@pytest.fixture
def fresh_logging(monkeypatch):
    """Let a test call logging_setup.configure(); undo it afterwards."""
    monkeypatch.setattr(logging_setup, "_LOG_PATH", None)
    logger = logging.getLogger("gitraffe")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point settings and env at a throwaway config dir for every test."""
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for name in list(os.environ):
        if name.startswith("GITRAFFE_"):
            monkeypatch.delenv(name, raising=False)
    return config_home


def _git(repo, *args, env=None):
    return subprocess.run(
        ["git", "-c", "user.name=Test User", "-c", "user.email=test@example.com",
         "-c", "commit.gpgsign=false", *args],
        cwd=repo, check=True, capture_output=True, text=True, env=env,
    )


@pytest.fixture
def git_repo(tmp_path):
    """A repository with a branch and a merge on `main`.

    Skipped when git is not installed.
    """
    if shutil.which("git") is None:
        pytest.skip("git not available")
    repo = tmp_path / "repo"
    repo.mkdir()
    env = dict(os.environ, GIT_AUTHOR_DATE="1700000000 +0000", GIT_COMMITTER_DATE="1700000000 +0000")
    _git(repo, "init", "-q", env=env)
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main", env=env)

    (repo / "a.txt").write_text("one\n")
    _git(repo, "add", "a.txt", env=env)
    _git(repo, "commit", "-q", "-m", "Initial commit", env=env)

    _git(repo, "checkout", "-q", "-b", "feature", env=env)
    (repo / "b.txt").write_text("feature\n")
    _git(repo, "add", "b.txt", env=env)
    _git(repo, "commit", "-q", "-m", "Feature work", env=env)

    _git(repo, "checkout", "-q", "main", env=env)
    (repo / "a.txt").write_text("one\ntwo\n")
    _git(repo, "commit", "-q", "-am", "Main work", env=env)
    _git(repo, "merge", "-q", "--no-ff", "-m", "Merge feature", "feature", env=env)
    return repo
