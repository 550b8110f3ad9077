"""
Exception classes for gitle.
"""

from typing import Optional


class GitleError(Exception):
    """Base exception for all gitle errors."""

    pass


class InvalidUrlError(GitleError, ValueError):
    """Raised when a dependency URL or slug cannot be parsed."""

    def __init__(self, value: str, reason: str = ""):
        self.value = value
        if reason:
            super().__init__(f"Invalid URL '{value}': {reason}")
        else:
            super().__init__(f"Invalid URL '{value}'")


class ManifestError(GitleError):
    """Raised when a dependency manifest cannot be loaded."""

    pass


class NoConnectivityError(GitleError):
    """Raised when a clone is attempted without network access."""

    def __init__(self, repository_url: str):
        self.repository_url = repository_url
        super().__init__(f"Failed to clone '{repository_url}': No internet connection")


class CommandFailedError(GitleError):
    """Raised when an external git or build command exits with a non-zero code."""

    action = "run command for"

    def __init__(
        self,
        repository_url: str,
        exit_code: int,
        stderr: str = "",
        detail: Optional[str] = None,
    ):
        self.repository_url = repository_url
        self.exit_code = exit_code
        self.stderr = stderr
        target = f"'{repository_url}'"
        if detail:
            target = f"{target} {detail}"
        message = f"Failed to {self.action} {target} (exit code {exit_code})"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)


class CloneFailedError(CommandFailedError):
    action = "clone repository"


class CheckoutFailedError(CommandFailedError):
    action = "checkout"


class UpdateFailedError(CommandFailedError):
    action = "update repository"


class PublishFailedError(CommandFailedError):
    action = "publish"


class StatusCheckFailedError(CommandFailedError):
    action = "determine if repository was up to date:"
