"""
Deterministic on-disk layout of cloned dependencies.

Layout:
    <root>/<transport>/<folder-name>/<checkout or "default">/

Different checkouts of one repository land in sibling folders, so several
refs of the same repository can coexist in the cache.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from gitle.model.dependency import GitDependency

DEFAULT_CHECKOUT = "default"


def relative_folder(
    transport: str, folder_name: str, checkout: Optional[str] = None
) -> Path:
    """
    Build the folder of a dependency relative to the cache root.

    Args:
        transport: Transport folder segment (e.g. "https", "github")
        folder_name: Transport-specific folder name (e.g. "example.com-user-repo")
        checkout: Branch, tag or commit; None maps to "default"

    Returns:
        Relative path `<transport>/<folder_name>/<checkout or "default">`
    """
    return Path(transport) / folder_name / (checkout or DEFAULT_CHECKOUT)


def resolve_folder(root: Union[str, Path], dependency: "GitDependency") -> Path:
    """Absolute folder of `dependency` under the cache `root`."""
    return Path(root) / dependency.relative_folder


def lock_path(folder: Path) -> Path:
    """Lock file guarding a dependency folder, stored next to it."""
    # with_suffix() would eat dotted refs such as "v1.0"
    return folder.parent / f"{folder.name}.lock"
