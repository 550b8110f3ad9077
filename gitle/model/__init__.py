"""Data model for git dependencies."""

from gitle.model.policy import UpdatePolicy
from gitle.model.transport import TRANSPORT_RULES, Transport, TransportRule
from gitle.model.dependency import GitDependency
from gitle.model.factories import (
    bitbucket,
    github,
    gitlab,
    http,
    https,
    parse_dependency,
    ssh,
)

__all__ = [
    "UpdatePolicy",
    "Transport",
    "TransportRule",
    "TRANSPORT_RULES",
    "GitDependency",
    "bitbucket",
    "github",
    "gitlab",
    "http",
    "https",
    "parse_dependency",
    "ssh",
]
