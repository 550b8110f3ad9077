"""Turn a manifest path and CLI overrides into a GitleContext."""

import sys
from pathlib import Path
from typing import Any, Optional

from gitle.config import get_root_dir, load_settings
from gitle.context import GitleContext
from gitle.errors import GitleError
from gitle.model.manifest import Manifest

from .logging import logger


def log_error_and_quit(logger, error):
    logger.error(error)
    sys.exit(1)


def load_context(
    manifest_path: str, root: Optional[str] = None, **overrides: Any
) -> GitleContext:
    """
    Build the context of a CLI invocation.

    Settings are layered: config file, then the manifest's `settings:` block,
    then the non-None `overrides` given on the command line. Exits with
    status 1 on any manifest or settings error.
    """
    path = Path(manifest_path)
    if not path.is_file():
        log_error_and_quit(logger, f"Manifest not found: {manifest_path}")

    try:
        manifest = Manifest.from_file(path)
        settings = manifest.apply(load_settings()).merged(**overrides)
        root_dir = Path(root).expanduser() if root else get_root_dir()
        ctx = GitleContext(settings, root_dir)
        ctx.registry.add_all(*manifest.build_dependencies())
    except (GitleError, ValueError) as e:
        log_error_and_quit(logger, f"Failed to load {manifest_path}: {e}")

    logger.debug(f"Loaded {len(ctx.registry)} dependencies from {manifest_path}")
    return ctx
