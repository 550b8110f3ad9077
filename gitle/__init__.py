"""gitle: git repositories as build dependencies."""

__version__ = "0.1.0"

from gitle.context import GitleContext  # noqa: E402
from gitle.model import (  # noqa: E402
    GitDependency,
    UpdatePolicy,
    bitbucket,
    github,
    gitlab,
    http,
    https,
    parse_dependency,
    ssh,
)
from gitle.orchestrator import RefreshReport, refresh  # noqa: E402

__all__ = [
    "__version__",
    "GitleContext",
    "GitDependency",
    "UpdatePolicy",
    "RefreshReport",
    "bitbucket",
    "github",
    "gitlab",
    "http",
    "https",
    "parse_dependency",
    "refresh",
    "ssh",
]
