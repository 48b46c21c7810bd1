"""gitsemver CLI"""

import click

from gitsemver import __version__
from gitsemver.cli.version import metadata, version

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="gitsemver")
@click.pass_context
def cli(ctx):
    """
    Compute semantic versions from git tags and history.
    """
    ctx.ensure_object(dict)


cli.add_command(version)
cli.add_command(metadata)

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
