"""gitle CLI"""

import click

from gitle import __version__
from gitle.cli.check import check
from gitle.cli.list import list_dependencies

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="gitle")
@click.pass_context
def cli(ctx):
    """
    gitle: use git repositories as build dependencies.
    """
    ctx.ensure_object(dict)


cli.add_command(add_debug_option(check))
cli.add_command(add_debug_option(list_dependencies))

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
