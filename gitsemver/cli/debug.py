from functools import wraps

import click

from .utils.logging import configure_logging


def add_debug_option(cmd):
    """Decorator to add debug option to commands and groups"""
    if isinstance(cmd, click.Command):
        # For existing commands/groups
        if not any(param.name == "debug" for param in cmd.params):
            cmd.params.insert(
                0,
                click.Option(
                    ["--debug/--no-debug"],
                    is_eager=True,
                    expose_value=False,
                    callback=lambda ctx, param, value: _set_debug(ctx, value),
                    help="Enable debug mode",
                ),
            )
        return cmd

    # For functions that will become commands/groups
    @click.option(
        "--debug/--no-debug",
        is_eager=True,
        expose_value=False,
        callback=lambda ctx, param, value: _set_debug(ctx, value),
        help="Enable debug mode",
    )
    @wraps(cmd)
    def wrapper(*args, **kwargs):
        return cmd(*args, **kwargs)

    return wrapper


def _set_debug(ctx, value: bool):
    """Callback function for debug flag"""
    root_ctx = ctx.find_root()
    root_ctx.ensure_object(dict)

    # a subcommand may turn debug on, only the root may turn it back off
    if "DEBUG" not in root_ctx.obj:
        root_ctx.obj["DEBUG"] = False
    if value is True or ctx is root_ctx:
        root_ctx.obj["DEBUG"] = value

    configure_logging(root_ctx.obj["DEBUG"])
    return root_ctx.obj["DEBUG"]
