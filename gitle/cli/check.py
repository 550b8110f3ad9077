"""cli command running the refresh pass over the declared dependencies"""

import click

from gitle.cli.utils.logging import logger
from gitle.cli.utils.manifest import load_context, log_error_and_quit
from gitle.errors import GitleError
from gitle.git.operations import RefreshAction
from gitle.model.manifest import DEFAULT_MANIFEST
from gitle.model.policy import UpdatePolicy
from gitle.orchestrator import refresh


@click.command(name="check")
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
@click.option(
    "--offline",
    is_flag=True,
    default=False,
    envvar="GITLE_OFFLINE",
    help="Do not touch the network; clones fail, out-of-date checks are skipped.",
)
@click.option(
    "--show-output",
    is_flag=True,
    default=False,
    help="Stream git and build output. May print credentials or SSH host keys.",
)
@click.option(
    "-k",
    "--continue-on-error",
    is_flag=True,
    default=False,
    help="Go on with the next dependency if one fails.",
)
@click.option(
    "--timeout",
    type=str,
    default=None,
    help="A `human friendly` timeout for each git/build command. Example: 4h, 42m, 12s",
)
@click.option(
    "--policy",
    type=click.Choice([p.value for p in UpdatePolicy], case_sensitive=False),
    default=None,
    help="Update policy for dependencies that do not declare one.",
)
def check(manifest, root, offline, show_output, continue_on_error, timeout, policy):
    """Clone, update and publish the git dependencies declared in MANIFEST."""
    ctx = load_context(
        manifest,
        root,
        offline_mode=True if offline else None,
        show_output=True if show_output else None,
        continue_on_error=True if continue_on_error else None,
        command_timeout=timeout,
        default_update_policy=policy,
    )

    if ctx.settings.show_output:
        logger.warning(
            "Showing command output; credentials or host keys may be printed."
        )

    try:
        report = refresh(ctx)
    except GitleError as e:
        log_error_and_quit(logger, f"Refresh aborted: {e}")
        return

    logger.info(
        f"{report.count(RefreshAction.cloned)} cloned, "
        f"{report.count(RefreshAction.updated)} updated, "
        f"{report.count(RefreshAction.up_to_date)} up to date, "
        f"{report.count(RefreshAction.skipped)} skipped, "
        f"{len(report.failed)} failed"
    )

    if not report.ok:
        for dependency, error in report.failed:
            logger.error(f"  {dependency}: {error}")
        log_error_and_quit(logger, "Some dependencies could not be refreshed")
