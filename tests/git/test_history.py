"""
Tests for the git history walker.

These tests build real repositories in a temporary directory with GitPython.
"""

import pytest
from git import Repo

from gitsemver.git.history import (
    collect_version_tags,
    open_repository,
    read_repository_state,
    walk_history,
)
from gitsemver.versioning.exceptions import GitRepositoryError
from gitsemver.versioning.naming import VersionNamingConfiguration
from gitsemver.versioning.strategy import (
    ConfigurableVersionStrategy,
    StrategySearchMode,
)


def make_strategy(mode=StrategySearchMode.STOP_AT_FIRST, depth=None):
    return ConfigurableVersionStrategy(
        VersionNamingConfiguration(), search_mode=mode, max_search_depth=depth
    )


@pytest.mark.integration
class TestOpenRepository:
    def test_not_a_repository(self, tmp_path):
        with pytest.raises(GitRepositoryError, match="Not a git repository"):
            open_repository(tmp_path)

    def test_missing_path(self, tmp_path):
        with pytest.raises(GitRepositoryError):
            open_repository(tmp_path / "missing")

    def test_repository_without_commits(self, tmp_path):
        Repo.init(tmp_path)
        with pytest.raises(GitRepositoryError, match="no commits"):
            open_repository(tmp_path)

    def test_subdirectory(self, repo_builder):
        repo_builder.commit()
        subdir = repo_builder.path / "sub"
        subdir.mkdir()
        repo = open_repository(subdir)
        assert repo.head.commit.hexsha == repo_builder.repo.head.commit.hexsha


@pytest.mark.integration
class TestRepositoryState:
    def test_clean_branch(self, repo_builder):
        repo_builder.commit()
        state = read_repository_state(repo_builder.repo)
        assert state.branch == "main"
        assert state.dirty is False
        assert state.detached is False

    def test_dirty(self, repo_builder):
        repo_builder.commit()
        repo_builder.make_dirty()
        assert read_repository_state(repo_builder.repo).dirty is True

    def test_untracked_files_do_not_count(self, repo_builder):
        repo_builder.commit()
        (repo_builder.path / "notes.txt").write_text("scratch\n")
        assert read_repository_state(repo_builder.repo).dirty is False

    def test_detached_head(self, repo_builder):
        first = repo_builder.commit()
        repo_builder.commit()
        repo_builder.repo.git.checkout(first.hexsha)

        state = read_repository_state(repo_builder.repo)
        assert state.detached is True
        assert state.branch is None

    def test_branch_override(self, repo_builder):
        repo_builder.commit()
        state = read_repository_state(repo_builder.repo, branch_override="release/2")
        assert state.branch == "release/2"


@pytest.mark.integration
class TestCollectVersionTags:
    def test_tag_kinds_and_object_ids(self, repo_builder):
        commit = repo_builder.commit()
        repo_builder.tag("v1.0.0", annotated=True)
        repo_builder.tag("v1.0.1")

        index = collect_version_tags(repo_builder.repo, make_strategy())
        annotated, light = index[commit.hexsha]

        assert [t.tag_name for t in annotated] == ["v1.0.0"]
        assert [t.tag_name for t in light] == ["v1.0.1"]
        assert annotated[0].name == "refs/tags/v1.0.0"
        assert annotated[0].object_id != commit.hexsha
        assert light[0].object_id == commit.hexsha

    def test_non_version_tags_are_ignored(self, repo_builder):
        repo_builder.commit()
        repo_builder.tag("nightly")
        repo_builder.tag("deploy-prod", annotated=True)

        assert collect_version_tags(repo_builder.repo, make_strategy()) == {}


@pytest.mark.integration
class TestWalkHistory:
    def test_no_tags_returns_root(self, repo_builder):
        root = repo_builder.commit()
        repo_builder.commit()
        head = repo_builder.commit()

        head_commit, parents = walk_history(repo_builder.repo, make_strategy())

        assert head_commit.sha == head.hexsha
        assert head_commit.head_distance == 0
        assert [(p.sha, p.head_distance) for p in parents] == [(root.hexsha, 2)]

    def test_tagged_head(self, repo_builder):
        head = repo_builder.commit()
        repo_builder.tag("v1.0.0", annotated=True)

        head_commit, parents = walk_history(repo_builder.repo, make_strategy())

        assert [p.sha for p in parents] == [head.hexsha]
        assert head_commit.annotated_tags == parents[0].annotated_tags

    def test_non_version_tag_is_not_a_candidate(self, repo_builder):
        root = repo_builder.commit()
        repo_builder.tag("v1.0.0")
        repo_builder.commit()
        repo_builder.tag("docs-published")

        _, parents = walk_history(repo_builder.repo, make_strategy())

        assert [p.sha for p in parents] == [root.hexsha]

    def test_stop_at_first(self, repo_builder):
        first = repo_builder.commit()
        repo_builder.tag("v1.0.0")
        repo_builder.commit()
        third = repo_builder.commit()
        repo_builder.tag("v2.0.0")
        repo_builder.commit()

        _, parents = walk_history(repo_builder.repo, make_strategy())

        assert [(p.sha, p.head_distance) for p in parents] == [(third.hexsha, 1)]
        assert first.hexsha not in [p.sha for p in parents]

    def test_depth_collects_all_within_limit(self, repo_builder):
        first = repo_builder.commit()
        repo_builder.tag("v1.0.0")
        repo_builder.commit()
        third = repo_builder.commit()
        repo_builder.tag("v2.0.0")
        repo_builder.commit()

        _, parents = walk_history(
            repo_builder.repo, make_strategy(StrategySearchMode.DEPTH, depth=10)
        )

        assert [p.sha for p in parents] == [third.hexsha, first.hexsha]

    def test_depth_limit_is_exceeded_until_a_tag_is_found(self, repo_builder):
        oldest = repo_builder.commit()
        repo_builder.tag("v0.1.0")
        tagged = repo_builder.commit()
        repo_builder.tag("v1.0.0")
        for _ in range(3):
            repo_builder.commit()

        _, parents = walk_history(
            repo_builder.repo, make_strategy(StrategySearchMode.DEPTH, depth=1)
        )

        assert [(p.sha, p.head_distance) for p in parents] == [(tagged.hexsha, 3)]
        assert oldest.hexsha not in [p.sha for p in parents]

    def test_merge_collects_both_branches(self, repo_builder):
        root = repo_builder.commit()
        side = repo_builder.commit("side", parents=[root], head=False)
        repo_builder.tag("v2.0.0", commit=side)
        main = repo_builder.commit("main", parents=[root])
        repo_builder.tag("v1.0.0", commit=main, annotated=True)
        merge = repo_builder.commit("merge", parents=[main, side])

        head_commit, parents = walk_history(repo_builder.repo, make_strategy())

        assert head_commit.sha == merge.hexsha
        assert {p.sha for p in parents} == {main.hexsha, side.hexsha}
        assert all(p.head_distance == 1 for p in parents)
