"""cli command describing the declared dependencies and their clones"""

import click
from rich.console import Console
from rich.table import Table

from gitle.cli.utils.manifest import load_context
from gitle.model.manifest import DEFAULT_MANIFEST
from gitle.project_type import detect_project_type


@click.command(name="list")
@click.argument(
    "manifest", type=click.Path(dir_okay=False), default=DEFAULT_MANIFEST
)
@click.option(
    "--root",
    type=click.Path(file_okay=False),
    default=None,
    envvar="GITLE_ROOT",
    help="Cache directory holding the clones. Default: ~/.cache/gitle",
)
def list_dependencies(manifest, root):
    """List the git dependencies declared in MANIFEST."""
    ctx = load_context(manifest, root)

    table = Table(title=f"Git dependencies ({ctx.root_dir})")
    table.add_column("Repository")
    table.add_column("Checkout")
    table.add_column("Policy")
    table.add_column("Folder")
    table.add_column("Cloned")
    table.add_column("Type")

    cloned = 0
    for dependency in ctx.registry:
        folder = ctx.folder_for(dependency)
        exists = folder.exists()
        cloned += exists
        project_type = detect_project_type(folder) if exists else None
        table.add_row(
            str(dependency),
            dependency.checkout or "-",
            ctx.policy_for(dependency).value,
            str(dependency.relative_folder),
            "yes" if exists else "no",
            project_type.name.lower() if project_type else "-",
        )

    Console().print(table)
    click.echo(f"{len(ctx.registry)} dependencies, {cloned} cloned")
