"""
The refresh pass run before a build consumes its git dependencies.

Dependencies are processed one at a time, in registration order. A folder
that does not exist yet is always cloned and published, whatever its update
policy; existing clones go through the policy state machine.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from filelock import FileLock

from gitle.context import GitleContext
from gitle.errors import GitleError
from gitle.git.operations import RefreshAction, check_update, clone, publish
from gitle.layout import lock_path
from gitle.model.dependency import GitDependency

logger = logging.getLogger(__name__)


@dataclass
class RefreshReport:
    """Outcome of one refresh pass."""

    refreshed: List[Tuple[GitDependency, RefreshAction]] = field(default_factory=list)
    failed: List[Tuple[GitDependency, GitleError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def count(self, action: RefreshAction) -> int:
        return sum(1 for _, a in self.refreshed if a is action)


def refresh_dependency(ctx: GitleContext, dependency: GitDependency) -> RefreshAction:
    """Bring one dependency up to date according to its policy."""
    folder = ctx.folder_for(dependency)
    folder.parent.mkdir(parents=True, exist_ok=True)

    # guards against a concurrent build racing on the same clone
    with FileLock(lock_path(folder)):
        if not folder.exists():
            logger.info(f"Cloning '{dependency}'...")
            clone(ctx, dependency)
            publish(ctx, dependency)
            return RefreshAction.cloned

        return check_update(ctx, dependency)


def refresh(
    ctx: GitleContext, continue_on_error: Optional[bool] = None
) -> RefreshReport:
    """
    Run one refresh pass over every registered dependency.

    Args:
        ctx: The build context
        continue_on_error: Record failures and go on with the next dependency
            instead of raising the first error. Defaults to the setting.

    Raises:
        GitleError: the first failure, unless continuing on error
    """
    if continue_on_error is None:
        continue_on_error = ctx.settings.continue_on_error

    dependencies = ctx.registry.dependencies
    logger.info(f"Checking {len(dependencies)} git dependencies")

    report = RefreshReport()
    for dependency in dependencies:
        try:
            action = refresh_dependency(ctx, dependency)
        except GitleError as e:
            if not continue_on_error:
                raise
            logger.error(f"Skipping '{dependency}': {e}")
            report.failed.append((dependency, e))
            continue

        logger.debug(f"'{dependency}': {action.value}")
        report.refreshed.append((dependency, action))

    if report.failed:
        logger.warning(
            f"Refreshed {len(report.refreshed)}/{len(dependencies)} dependencies, "
            f"{len(report.failed)} failed"
        )
    else:
        logger.info(f"Refreshed {len(report.refreshed)} dependencies")

    return report
