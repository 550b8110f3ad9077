import io
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from gitle.config import GitleSettings
from gitle.context import GitleContext
from gitle.model.dependency import GitDependency
from gitle.process import CommandResult


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("gitle")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture(autouse=True)
def no_github_token(monkeypatch):
    """Keep a GITHUB_TOKEN from the environment out of the generated URLs."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def settings() -> GitleSettings:
    return GitleSettings(command_timeout=60)


@pytest.fixture
def ctx(tmp_path, settings) -> GitleContext:
    """A context rooted in a temporary cache directory."""
    return GitleContext(settings, tmp_path / "cache")


@pytest.fixture
def online(monkeypatch):
    """Pretend the network is reachable."""
    monkeypatch.setattr(GitleContext, "is_online", lambda self: True)


@pytest.fixture
def offline(monkeypatch):
    """Pretend the network is unreachable."""
    monkeypatch.setattr(GitleContext, "is_online", lambda self: False)


# git fixtures


def git(*args: str, cwd: Path) -> str:
    result = subprocess.run(
        [
            "git",
            "-c",
            "user.name=gitle",
            "-c",
            "user.email=gitle@example.com",
            *args,
        ],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def origin_repo(tmp_path) -> Path:
    """A local repository with one commit on `main` and a `v1` tag."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "origin"
    repo.mkdir()
    git("init", "-q", "-b", "main", cwd=repo)
    (repo / "README.md").write_text("first\n")
    git("add", "README.md", cwd=repo)
    git("commit", "-q", "-m", "first", cwd=repo)
    git("tag", "v1", cwd=repo)
    return repo


@pytest.fixture
def local_clone_url(monkeypatch, origin_repo):
    """
    Make every dependency clone from `origin_repo`, whatever its URL says.

    Folder layout and identity still come from the dependency itself.
    """
    monkeypatch.setattr(
        GitDependency, "repository_url", property(lambda self: str(origin_repo))
    )
    return origin_repo


@pytest.fixture
def git_cli():
    """Run git in a directory and return its stdout."""
    return git


class FakeRunner:
    """Stands in for run_command, answering by command prefix."""

    def __init__(self):
        self.calls: List[Tuple[List[str], str]] = []
        self.results: Dict[Tuple[str, ...], CommandResult] = {}

    def respond(self, prefix, exit_code=0, stdout="", stderr=""):
        self.results[tuple(prefix)] = CommandResult(exit_code, stdout, stderr)

    def __call__(self, command, cwd, show_output=False, timeout=None):
        self.calls.append((list(command), str(cwd)))
        for prefix, result in self.results.items():
            if tuple(command[: len(prefix)]) == prefix:
                return result
        return CommandResult(0)

    @property
    def commands(self) -> List[List[str]]:
        return [command for command, _ in self.calls]


@pytest.fixture
def runner(monkeypatch) -> FakeRunner:
    """Record git and build commands instead of running them."""
    fake = FakeRunner()
    monkeypatch.setattr("gitle.git.operations.run_command", fake)
    return fake
