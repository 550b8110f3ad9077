"""
Operations on a single git dependency.

All git work is delegated to the `git` client and all publishing to the
project's own build tool; only exit codes and text streams are consumed.
Every function takes the GitleContext explicitly.

Update policy state machine (`check_update`):

    IF_MISSING      clone and update when the folder is absent, otherwise nothing
    IF_OUT_OF_DATE  update when `git remote show origin` reports the clone is stale;
                    skipped (not failed) when offline
    time-based      update when no freshness marker exists, when the policy
                    interval has elapsed since the recorded timestamp, or when
                    the timestamp lies in the future; ALWAYS updates every call
"""

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import List

from gitle.context import GitleContext
from gitle.errors import (
    CheckoutFailedError,
    CloneFailedError,
    NoConnectivityError,
    PublishFailedError,
    StatusCheckFailedError,
    UpdateFailedError,
)
from gitle.model.dependency import GitDependency
from gitle.model.policy import UpdatePolicy
from gitle.process import CommandResult, run_command
from gitle.project_type import detect_project_type

from .marker import current_time_ms, marker_path, read_marker, write_marker

logger = logging.getLogger(__name__)

UP_TO_DATE_MARKERS = ("up to date",)
STALE_MARKERS = ("behind", "diverged", "out of date")


class RefreshAction(str, Enum):
    """What a refresh did to a dependency."""

    cloned = "cloned"
    updated = "updated"
    up_to_date = "up to date"
    skipped = "skipped"


def _run(
    ctx: GitleContext, command: List[str], folder: Path, capture: bool = False
) -> CommandResult:
    return run_command(
        command,
        folder,
        show_output=ctx.settings.show_output and not capture,
        timeout=ctx.settings.command_timeout,
    )


def clone(ctx: GitleContext, dependency: GitDependency) -> None:
    """
    Clone a dependency into its folder, replacing any previous clone.

    Raises:
        NoConnectivityError: if offline
        CloneFailedError: if `git clone` fails
        CheckoutFailedError: if the configured ref cannot be checked out
    """
    if not ctx.is_online():
        error = NoConnectivityError(str(dependency))
        logger.error(str(error))
        raise error

    folder = ctx.folder_for(dependency)
    logger.debug(f"Starting clone of '{dependency}' in '{folder.absolute()}'")
    if folder.exists():
        logger.debug(f"Deleting existing folder '{folder}'...")
        shutil.rmtree(folder)

    folder.mkdir(parents=True)
    logger.info(f"Cloning '{dependency}'...")

    result = _run(ctx, ["git", "clone", dependency.repository_url, "."], folder)
    if not result.ok:
        shutil.rmtree(folder, ignore_errors=True)
        error = CloneFailedError(str(dependency), result.exit_code, result.error_text)
        logger.error(str(error))
        raise error

    logger.info(f"Cloned '{dependency}'")

    if dependency.checkout is not None:
        checkout(ctx, dependency)


def checkout(ctx: GitleContext, dependency: GitDependency) -> None:
    """Check out the configured ref. Does nothing when no ref is configured."""
    ref = dependency.checkout
    if ref is None:
        logger.warning(f"No checkout specified for '{dependency}'")
        return

    logger.info(f"Checking out '{ref}'...")
    result = _run(ctx, ["git", "checkout", ref], ctx.folder_for(dependency))
    if not result.ok:
        error = CheckoutFailedError(
            str(dependency), result.exit_code, result.error_text, detail=f"at '{ref}'"
        )
        logger.error(str(error))
        raise error

    logger.info(f"Checked out '{ref}'")


def _is_detached(ctx: GitleContext, folder: Path) -> bool:
    # symbolic-ref exits 1 when HEAD points at a commit instead of a branch
    result = _run(ctx, ["git", "symbolic-ref", "-q", "HEAD"], folder, capture=True)
    return result.exit_code == 1


def update(ctx: GitleContext, dependency: GitDependency) -> None:
    """
    Pull the latest changes, restore the configured ref and publish.

    A clone pinned to a tag or commit has a detached HEAD, which `git pull`
    refuses; such clones are fetched instead.

    Raises:
        UpdateFailedError: if pulling/fetching fails
        CheckoutFailedError, PublishFailedError: from the follow-up steps
    """
    folder = ctx.folder_for(dependency)
    logger.info(f"Updating '{dependency}'...")

    if _is_detached(ctx, folder):
        command = ["git", "fetch", "--tags", "origin"]
    else:
        command = ["git", "pull"]

    result = _run(ctx, command, folder)
    if not result.ok:
        error = UpdateFailedError(str(dependency), result.exit_code, result.error_text)
        logger.error(str(error))
        raise error

    if dependency.checkout is not None:
        checkout(ctx, dependency)

    logger.info(f"Updated '{dependency}', publishing...")
    publish(ctx, dependency)


def is_up_to_date(ctx: GitleContext, dependency: GitDependency) -> bool:
    """
    Ask the remote whether the local clone is current.

    Scans `git remote show origin` line by line: "up to date" means current,
    "behind", "diverged" or "out of date" mean stale. Ambiguous output counts
    as stale.

    Raises:
        StatusCheckFailedError: if the command failed and printed no status
    """
    result = _run(
        ctx, ["git", "remote", "show", "origin"], ctx.folder_for(dependency), capture=True
    )

    for line in result.stdout.splitlines():
        if any(marker in line for marker in UP_TO_DATE_MARKERS):
            return True
        if any(marker in line for marker in STALE_MARKERS):
            return False

    if not result.ok:
        raise StatusCheckFailedError(
            str(dependency), result.exit_code, result.error_text
        )

    return False


def publish(ctx: GitleContext, dependency: GitDependency) -> None:
    """
    Install the cloned project into the local artifact cache.

    Projects of unknown type are skipped with a warning.

    Raises:
        PublishFailedError: if the build tool fails
    """
    folder = ctx.folder_for(dependency)
    project_type = detect_project_type(folder)
    if project_type is None:
        logger.warning(f"No project type found for '{dependency}'")
        return

    command = project_type.publish_command()
    logger.info(f"Publishing '{dependency}' with `{' '.join(command)}`...")

    result = _run(ctx, command, folder)
    if not result.ok:
        error = PublishFailedError(str(dependency), result.exit_code, result.error_text)
        logger.error(str(error))
        raise error

    logger.info(f"Published project '{dependency}'")


def check_update(ctx: GitleContext, dependency: GitDependency) -> RefreshAction:
    """
    Apply the dependency's update policy.

    Returns:
        The action taken
    """
    policy = ctx.policy_for(dependency)
    folder = ctx.folder_for(dependency)

    if policy is UpdatePolicy.IF_MISSING:
        if folder.exists():
            logger.debug(f"'{dependency}' is present, not checking for updates")
            return RefreshAction.skipped

        logger.debug(f"'{dependency}' is missing, cloning...")
        clone(ctx, dependency)
        update(ctx, dependency)
        return RefreshAction.cloned

    if not folder.exists():
        logger.debug(f"'{dependency}' has not been cloned yet, cloning...")
        clone(ctx, dependency)
        publish(ctx, dependency)
        return RefreshAction.cloned

    if policy is UpdatePolicy.IF_OUT_OF_DATE:
        if not ctx.is_online():
            logger.error(
                f"Failed to check if '{dependency}' is out of date: No internet connection"
            )
            return RefreshAction.skipped

        logger.debug(f"Checking if '{dependency}' is out of date...")
        if is_up_to_date(ctx, dependency):
            logger.debug(f"'{dependency}' is up to date")
            return RefreshAction.up_to_date

        logger.debug(f"'{dependency}' is out of date")
        update(ctx, dependency)
        return RefreshAction.updated

    marker = marker_path(folder, dependency.identity_hash)
    last_updated = read_marker(marker)
    if last_updated is None:
        logger.debug(f"No last updated file found for '{dependency}'")
        update(ctx, dependency)
        write_marker(marker)
        return RefreshAction.updated

    elapsed = current_time_ms() - last_updated
    if elapsed < 0:
        # written by a clock ahead of ours
        logger.warning(f"Freshness marker of '{dependency}' is in the future")
        update(ctx, dependency)
        write_marker(marker)
        return RefreshAction.updated

    if policy is UpdatePolicy.ALWAYS or policy.interval_ms <= elapsed:
        update(ctx, dependency)
        if ctx.settings.rewrite_marker:
            write_marker(marker)
        return RefreshAction.updated

    logger.debug(
        f"'{dependency}' was updated {elapsed // 1000}s ago, "
        f"next update due in {(policy.interval_ms - elapsed) // 1000}s"
    )
    return RefreshAction.up_to_date
