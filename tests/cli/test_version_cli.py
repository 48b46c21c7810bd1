"""Tests for the version and metadata CLI commands."""

import json

import pytest
from click.testing import CliRunner

from gitsemver import __version__
from gitsemver.cli.main import cli


@pytest.fixture
def tagged_repo(repo_builder):
    repo_builder.commit()
    repo_builder.tag("v0.4.0", annotated=True)
    repo_builder.commit()
    return repo_builder


@pytest.mark.short
def test_cli_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.integration
class TestVersionCommand:
    def test_prints_version(self, tagged_repo):
        result = CliRunner().invoke(cli, ["version", str(tagged_repo.path)])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "0.4.0-1"

    def test_pep440(self, tagged_repo):
        result = CliRunner().invoke(
            cli, ["version", str(tagged_repo.path), "--strategy", "maven", "--pep440"]
        )

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "0.4.1.dev0"

    def test_branch_from_environment(self, tagged_repo):
        result = CliRunner().invoke(
            cli,
            ["version", str(tagged_repo.path)],
            env={"GITSEMVER_BRANCH": "feature/ui"},
        )

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "0.4.0-feature_ui-1"

    def test_config_option(self, tagged_repo, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text("strategy: MAVEN\n")

        result = CliRunner().invoke(
            cli, ["version", str(tagged_repo.path), "--config", str(config)]
        )

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "0.4.1-SNAPSHOT"

    def test_debug_flag(self, tagged_repo):
        result = CliRunner().invoke(
            cli, ["--debug", "version", str(tagged_repo.path)]
        )
        assert result.exit_code == 0, result.output

    def test_not_a_repository(self, tmp_path):
        result = CliRunner().invoke(cli, ["version", str(tmp_path)])

        assert result.exit_code == 1
        assert "Not a git repository" in result.output

    def test_unknown_strategy(self, tagged_repo):
        result = CliRunner().invoke(
            cli, ["version", str(tagged_repo.path), "--strategy", "nope"]
        )

        assert result.exit_code == 1
        assert "unknown strategy" in result.output


@pytest.mark.integration
class TestMetadataCommand:
    def test_key_value_output(self, tagged_repo):
        result = CliRunner().invoke(cli, ["metadata", str(tagged_repo.path)])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "BASE_TAG=v0.4.0" in lines
        assert "BASE_TAG_TYPE=ANNOTATED" in lines
        assert "CALCULATED_VERSION=0.4.0-1" in lines
        assert lines == sorted(lines)

    def test_json_output(self, tagged_repo):
        result = CliRunner().invoke(cli, ["metadata", str(tagged_repo.path), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["BASE_VERSION"] == "0.4.0"
        assert data["COMMIT_DISTANCE"] == "1"
        assert data["BRANCH_NAME"] == "main"
        assert data["DIRTY"] == "false"
