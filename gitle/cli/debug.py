"""The --debug option shared by the gitle group and its commands."""

import click

from gitle import __version__
from gitle.config import get_config_file

from .utils.logging import configure_logging, logger

DEBUG_ENV = "GITLE_DEBUG"


def add_debug_option(cmd: click.Command) -> click.Command:
    """Give `cmd` an eager --debug/--no-debug flag, also read from GITLE_DEBUG."""
    if any(param.name == "debug" for param in cmd.params):
        return cmd

    cmd.params.insert(
        0,
        click.Option(
            ["--debug/--no-debug"],
            default=False,
            envvar=DEBUG_ENV,
            is_eager=True,
            expose_value=False,
            callback=_set_debug,
            help="Log every git and build command gitle runs.",
        ),
    )
    return cmd


def _set_debug(ctx: click.Context, param: click.Parameter, value: bool) -> bool:
    root = ctx.find_root()
    root.ensure_object(dict)

    # `gitle check --debug` switches debug on, only `gitle --no-debug` switches it off
    if ctx.parent is None:
        debug = value
    else:
        debug = value or root.obj.get("debug", False)
    root.obj["debug"] = debug

    configure_logging(debug)
    if value:
        logger.debug(f"gitle {__version__}, config file {get_config_file()}")
    return debug
