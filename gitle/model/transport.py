"""
Transport kinds and the dispatch table mapping each kind to its URL and
folder naming rules.

Every git dependency carries a `Transport` tag plus a small payload
(host, slug, user, credentials). Transport-specific behaviour is looked up in
`TRANSPORT_RULES` rather than spread over a class hierarchy.
"""

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, NamedTuple, Optional

if TYPE_CHECKING:
    from .dependency import GitDependency


class Transport(str, Enum):
    """Transport kinds. The value doubles as the top-level cache folder."""

    ssh = "ssh"
    http = "http"
    https = "https"
    github = "github"
    gitlab = "gitlab"
    bitbucket = "bitbucket"


GITHUB_HOST = "github.com"
GITLAB_HOST = "gitlab.com"
BITBUCKET_HOST = "bitbucket.org"

# Transports cloned over HTTPS that may embed credentials in the URL
HTTPS_FAMILY = frozenset(
    {Transport.https, Transport.github, Transport.gitlab, Transport.bitbucket}
)


class TransportRule(NamedTuple):
    repository_url: Callable[["GitDependency"], str]
    folder_name: Callable[["GitDependency"], str]


def _userinfo(credentials: Optional[str]) -> str:
    if credentials is None or not credentials.strip():
        return ""
    return f"{credentials}@"


def _ssh_url(dep: "GitDependency") -> str:
    return f"ssh://{dep.user}@{dep.host}/{dep.slug}.git"


def _http_url(dep: "GitDependency") -> str:
    return f"http://{dep.host}/{dep.slug}.git"


def _https_url(dep: "GitDependency") -> str:
    return f"https://{_userinfo(dep.credentials)}{dep.host}/{dep.slug}.git"


def _ssh_folder(dep: "GitDependency") -> str:
    return f"{dep.host}-{dep.user}-{dep.slug.replace('/', '-')}"


def _host_slug_folder(dep: "GitDependency") -> str:
    return f"{dep.host}-{dep.slug.replace('/', '-')}"


def _owner_repo_folder(dep: "GitDependency") -> str:
    owner, _, repo = dep.slug.partition("/")
    return f"{owner}-{repo}"


def _server_project_folder(dep: "GitDependency") -> str:
    # project ids keep their '/', so nested groups nest on disk as well
    return f"{dep.host}-{dep.slug}"


TRANSPORT_RULES: Dict[Transport, TransportRule] = {
    Transport.ssh: TransportRule(_ssh_url, _ssh_folder),
    Transport.http: TransportRule(_http_url, _host_slug_folder),
    Transport.https: TransportRule(_https_url, _host_slug_folder),
    Transport.github: TransportRule(_https_url, _owner_repo_folder),
    Transport.gitlab: TransportRule(_https_url, _server_project_folder),
    Transport.bitbucket: TransportRule(_https_url, _owner_repo_folder),
}
