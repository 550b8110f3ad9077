"""
Factory functions building git dependencies from URLs or their components.

Supported inputs:
    ssh://user@host:group/repo[.git], user@host:group/repo[.git], ssh://user@host/group/repo[.git]
    http://host/group/repo[.git]                       (deprecated)
    https://[credentials@]host/group/repo[.git]        (scheme optional)

HTTPS URLs pointing at github.com, gitlab.com or bitbucket.org are routed to
the matching specialisation.

All factories raise `InvalidUrlError` on malformed input instead of guessing.
"""

import logging
import os
import re
import warnings
from typing import Optional, Union
from urllib.parse import urlparse

from pydantic import ValidationError

from gitle.errors import InvalidUrlError

from .dependency import GitDependency
from .policy import UpdatePolicy
from .transport import BITBUCKET_HOST, GITHUB_HOST, GITLAB_HOST, Transport

logger = logging.getLogger(__name__)

PolicyLike = Optional[Union[UpdatePolicy, str]]

GITHUB_TOKEN_ENV = "GITHUB_TOKEN"

_SCP_LIKE = re.compile(r"^[^/@:]+@[^/:]+:")


def _strip_git_suffix(path: str) -> str:
    path = path.strip().rstrip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    return path


def _strip_scheme(url: str, scheme: str) -> str:
    """Remove `scheme://` from url, rejecting any other scheme."""
    value = url.strip()
    if "://" in value and not value.startswith(f"{scheme}://"):
        raise InvalidUrlError(url, f"expected a {scheme}:// URL")
    return value.removeprefix(f"{scheme}://")


def _parse_policy(update_policy: PolicyLike) -> Optional[UpdatePolicy]:
    if update_policy is None:
        return None
    return UpdatePolicy.parse(update_policy)


def _build(
    transport: Transport,
    host: str,
    slug: str,
    source: str,
    user: Optional[str] = None,
    credentials: Optional[str] = None,
    checkout: Optional[str] = None,
    update_policy: PolicyLike = None,
) -> GitDependency:
    try:
        return GitDependency(
            transport=transport,
            host=host,
            slug=slug,
            user=user,
            credentials=credentials or None,
            checkout=checkout,
            update_policy=_parse_policy(update_policy),
        )
    except ValidationError as e:
        raise InvalidUrlError(source, str(e)) from e


def _split_owner_repo(source: str, owner: str, repo_name: Optional[str]):
    if repo_name is None:
        owner, sep, repo_name = owner.partition("/")
        if not sep:
            raise InvalidUrlError(source, "expected 'owner/repository'")
    repo_name = _strip_git_suffix(repo_name)
    if not owner or not repo_name or "/" in repo_name:
        raise InvalidUrlError(source, "expected 'owner/repository'")
    return owner, repo_name


def ssh(
    target: Union[str, GitDependency],
    user: Optional[str] = None,
    slug: Optional[str] = None,
    checkout: Optional[str] = None,
    update_policy: PolicyLike = None,
) -> GitDependency:
    """
    Create a dependency cloned over SSH.

    Accepts a full URL (`ssh://user@host:slug`, `user@host:slug`), explicit
    `host, user, slug` components, or a GitHub/GitLab/Bitbucket dependency
    which is converted to its SSH counterpart using the `git` user.

    Raises:
        InvalidUrlError: if the URL uses another scheme or lacks `user@`
    """
    if isinstance(target, GitDependency):
        if target.transport not in (
            Transport.github,
            Transport.gitlab,
            Transport.bitbucket,
        ):
            raise InvalidUrlError(
                str(target),
                "only GitHub, GitLab and Bitbucket dependencies convert to SSH",
            )
        return _build(
            Transport.ssh,
            target.host,
            target.slug,
            source=str(target),
            user="git",
            checkout=target.checkout if checkout is None else checkout,
            update_policy=target.update_policy
            if update_policy is None
            else update_policy,
        )

    if user is not None or slug is not None:
        if user is None or slug is None:
            raise InvalidUrlError(target, "host, user and slug are all required")
        return _build(
            Transport.ssh,
            target,
            _strip_git_suffix(slug),
            source=f"{user}@{target}:{slug}",
            user=user,
            checkout=checkout,
            update_policy=update_policy,
        )

    value = _strip_scheme(target, "ssh")
    if "@" not in value:
        raise InvalidUrlError(target, "missing 'user@' before the host")

    user, _, rest = value.partition("@")
    colon = rest.find(":")
    slash = rest.find("/")
    if colon != -1 and (slash == -1 or colon < slash):
        host, _, path = rest.partition(":")
    elif slash != -1:
        host, _, path = rest.partition("/")
    else:
        raise InvalidUrlError(target, "missing repository path")

    path = _strip_git_suffix(path.lstrip("/"))
    if not user or not host or not path:
        raise InvalidUrlError(target, "expected 'user@host:path'")

    return _build(
        Transport.ssh,
        host,
        path,
        source=target,
        user=user,
        checkout=checkout,
        update_policy=update_policy,
    )


def http(
    url: str,
    checkout: Optional[str] = None,
    update_policy: PolicyLike = None,
) -> GitDependency:
    """
    Create a dependency cloned over plain HTTP.

    Deprecated: traffic, including credentials, is unencrypted. Use `https`.
    """
    warnings.warn(
        "HTTP dependencies are deprecated, use https() instead",
        DeprecationWarning,
        stacklevel=2,
    )
    logger.warning(f"Using insecure HTTP protocol for dependency: {url}")

    value = _strip_git_suffix(_strip_scheme(url, "http"))
    host, sep, path = value.partition("/")
    if not sep or not host or not path:
        raise InvalidUrlError(url, "missing repository path")
    if "@" in host:
        raise InvalidUrlError(url, "credentials are not supported over HTTP")

    return _build(
        Transport.http,
        host,
        path,
        source=url,
        checkout=checkout,
        update_policy=update_policy,
    )


def https(
    target: str,
    slug: Optional[str] = None,
    credentials: Optional[str] = None,
    checkout: Optional[str] = None,
    update_policy: PolicyLike = None,
) -> GitDependency:
    """
    Create a dependency cloned over HTTPS.

    With a single argument, `target` is a URL (scheme and `.git` optional) and
    may embed credentials (`user:token@host/...`). github.com, gitlab.com and
    bitbucket.org URLs return the matching specialised dependency.

    With `slug`, `target` is taken as the host and no routing happens.
    """
    if slug is not None:
        return _build(
            Transport.https,
            target,
            _strip_git_suffix(slug),
            source=f"{target}/{slug}",
            credentials=credentials,
            checkout=checkout,
            update_policy=update_policy,
        )

    value = _strip_git_suffix(_strip_scheme(target, "https"))
    authority, sep, path = value.partition("/")
    if not sep or not authority or not path:
        raise InvalidUrlError(target, "missing repository path")

    userinfo, at, host = authority.rpartition("@")
    if at:
        credentials = userinfo
    if not host:
        raise InvalidUrlError(target, "missing host")

    host_name = host.lower()
    if host_name == GITHUB_HOST:
        return github(
            path,
            access_token=credentials,
            checkout=checkout,
            update_policy=update_policy,
        )
    if host_name == GITLAB_HOST:
        login_username, token = None, None
        if credentials:
            login_username, colon, token = credentials.partition(":")
            token = token if colon else None
        return gitlab(
            path,
            login_username=login_username,
            token=token,
            checkout=checkout,
            update_policy=update_policy,
        )
    if host_name == BITBUCKET_HOST:
        return bitbucket(
            path,
            credentials=credentials,
            checkout=checkout,
            update_policy=update_policy,
        )

    return _build(
        Transport.https,
        host,
        path,
        source=target,
        credentials=credentials,
        checkout=checkout,
        update_policy=update_policy,
    )


def github(
    target: str,
    repo_name: Optional[str] = None,
    access_token: Optional[str] = None,
    checkout: Optional[str] = None,
    update_policy: PolicyLike = None,
) -> GitDependency:
    """
    Create a GitHub dependency, cloned over HTTPS.

    `target` is either `owner/repository` or the owner when `repo_name` is
    given. Without an access token the `GITHUB_TOKEN` environment variable is
    used; if that is unset the repository is cloned anonymously.
    """
    owner, repo_name = _split_owner_repo(target, target, repo_name)
    token = access_token or os.environ.get(GITHUB_TOKEN_ENV) or None
    return _build(
        Transport.github,
        GITHUB_HOST,
        f"{owner}/{repo_name}",
        source=f"{GITHUB_HOST}/{owner}/{repo_name}",
        credentials=token,
        checkout=checkout,
        update_policy=update_policy,
    )


def gitlab(
    target: str,
    project_id: Optional[str] = None,
    login_username: Optional[str] = None,
    token: Optional[str] = None,
    checkout: Optional[str] = None,
    update_policy: PolicyLike = None,
) -> GitDependency:
    """
    Create a GitLab dependency, cloned over HTTPS.

    `target` is the project path on gitlab.com, or the server when
    `project_id` is also given:

        gitlab("group/project")
        gitlab("gitlab.example.com", "group/subgroup/project")

    A token requires a login username.
    """
    if project_id is None:
        server, project_id = GITLAB_HOST, target
    else:
        server = target

    server = server.strip().removeprefix("https://").rstrip("/")
    project_id = _strip_git_suffix(project_id).strip("/")

    if "/" not in project_id:
        raise InvalidUrlError(project_id, "expected a 'group/project' path")
    if "." not in server or urlparse(f"https://{server}").hostname is None:
        raise InvalidUrlError(server, "invalid GitLab server")
    if token and not login_username:
        raise InvalidUrlError(
            f"{server}/{project_id}", "a token requires a login username"
        )

    if login_username and token:
        credentials = f"{login_username}:{token}"
    else:
        credentials = login_username

    return _build(
        Transport.gitlab,
        server,
        project_id,
        source=f"{server}/{project_id}",
        credentials=credentials,
        checkout=checkout,
        update_policy=update_policy,
    )


def bitbucket(
    target: str,
    repo_name: Optional[str] = None,
    credentials: Optional[str] = None,
    checkout: Optional[str] = None,
    update_policy: PolicyLike = None,
) -> GitDependency:
    """Create a Bitbucket dependency, cloned over HTTPS."""
    owner, repo_name = _split_owner_repo(target, target, repo_name)
    return _build(
        Transport.bitbucket,
        BITBUCKET_HOST,
        f"{owner}/{repo_name}",
        source=f"{BITBUCKET_HOST}/{owner}/{repo_name}",
        credentials=credentials,
        checkout=checkout,
        update_policy=update_policy,
    )


def parse_dependency(
    url: str,
    checkout: Optional[str] = None,
    update_policy: PolicyLike = None,
) -> GitDependency:
    """
    Create a dependency from a URL of any supported transport.

    `ssh://` and scp-like `user@host:path` URLs go over SSH, `http://` URLs
    over (deprecated) HTTP, and everything else over HTTPS.
    """
    value = url.strip() if url else ""
    if not value:
        raise InvalidUrlError(url, "empty URL")

    if value.startswith("ssh://") or _SCP_LIKE.match(value):
        return ssh(value, checkout=checkout, update_policy=update_policy)
    if value.startswith("http://"):
        return http(value, checkout=checkout, update_policy=update_policy)
    return https(value, checkout=checkout, update_policy=update_policy)
