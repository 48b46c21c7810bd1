"""cli commands computing versions and their metadata"""

import json
from functools import wraps
from pathlib import Path

import click

from gitsemver.calculator import GitVersionCalculator
from gitsemver.versioning.exceptions import VersioningError
from gitsemver.versioning.version import to_pep440

from .debug import add_debug_option


def repository_options(cmd):
    """Options shared by the commands reading a repository."""

    @click.argument(
        "path",
        type=click.Path(exists=True, file_okay=False, path_type=Path),
        default=".",
    )
    @click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Configuration file (defaults to .gitsemver.yaml at the repository root).",
        envvar="GITSEMVER_CONFIG",
    )
    @click.option(
        "--branch",
        "-b",
        type=str,
        help="Branch name to use instead of the checked out one.",
        envvar="GITSEMVER_BRANCH",
    )
    @click.option(
        "--strategy",
        "-s",
        type=str,
        help="Version strategy overriding the configured one (CONFIGURABLE, MAVEN).",
        envvar="GITSEMVER_STRATEGY",
    )
    @wraps(cmd)
    def wrapper(*args, **kwargs):
        return cmd(*args, **kwargs)

    return wrapper


def _compute(path, config_path, branch, strategy):
    try:
        calculator = GitVersionCalculator(
            path, config_path=config_path, branch=branch, strategy=strategy
        )
        return calculator.compute()
    except VersioningError as e:
        raise click.ClickException(str(e))


@add_debug_option
@click.command("version")
@repository_options
@click.option(
    "--pep440",
    is_flag=True,
    default=False,
    help="Print the version in PEP 440 form for Python packaging.",
)
def version(path, config_path, branch, strategy, pep440):
    """Print the version of the working tree at PATH."""
    result = _compute(path, config_path, branch, strategy)
    if pep440:
        try:
            click.echo(str(to_pep440(result.version)))
        except VersioningError as e:
            raise click.ClickException(str(e))
    else:
        click.echo(str(result.version))


@add_debug_option
@click.command("metadata")
@repository_options
@click.option("--json", "as_json", is_flag=True, help="Print metadata as JSON.")
def metadata(path, config_path, branch, strategy, as_json):
    """Print the metadata explaining the version of the working tree at PATH."""
    result = _compute(path, config_path, branch, strategy)
    values = {key.value: value for key, value in sorted(result.metadata.items())}
    if as_json:
        click.echo(json.dumps(values, indent=2))
    else:
        for key, value in values.items():
            click.echo(f"{key}={value}")
