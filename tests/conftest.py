import io
import logging
from pathlib import Path
from typing import Optional, Sequence

import pytest
from git import Repo


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("gitsemver")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


# git fixtures


class RepoBuilder:
    """Helper class building small git histories for tests."""

    def __init__(self, path: Path):
        path.mkdir(parents=True, exist_ok=True)
        self.path = path
        self.repo = Repo.init(path)
        with self.repo.config_writer() as writer:
            writer.set_value("user", "name", "Test User")
            writer.set_value("user", "email", "test@example.com")
        # independent of the init.defaultBranch setting of the machine
        self.repo.git.symbolic_ref("HEAD", "refs/heads/main")
        self._counter = 0

    def commit(
        self,
        message: Optional[str] = None,
        parents: Optional[Sequence] = None,
        head: bool = True,
    ):
        """Append a line to a tracked file and commit it.

        With ``head=False`` the commit is created without moving HEAD, which
        builds side branches without any checkout.
        """
        self._counter += 1
        message = message or f"change {self._counter}"
        target = self.path / "file.txt"
        with open(target, "a") as f:
            f.write(f"{message}\n")
        self.repo.index.add(["file.txt"])
        return self.repo.index.commit(message, parent_commits=parents, head=head)

    def tag(self, name: str, commit=None, annotated: bool = False):
        ref = commit if commit is not None else self.repo.head.commit
        if annotated:
            return self.repo.create_tag(name, ref=ref, message=f"Release {name}")
        return self.repo.create_tag(name, ref=ref)

    def make_dirty(self):
        with open(self.path / "file.txt", "a") as f:
            f.write("uncommitted\n")


@pytest.fixture
def repo_builder(tmp_path) -> RepoBuilder:
    """Fixture providing an empty git repository on branch main."""
    return RepoBuilder(tmp_path / "repo")
