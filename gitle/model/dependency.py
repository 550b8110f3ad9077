"""The git dependency entity."""

import hashlib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from gitle.layout import DEFAULT_CHECKOUT, relative_folder

from .policy import UpdatePolicy
from .transport import HTTPS_FAMILY, TRANSPORT_RULES, Transport


def validate_non_empty_string(v: str) -> str:
    """Validate that a string is not empty."""
    if not v or not v.strip():
        raise ValueError("must be a non-empty string")
    return v


class GitDependency(BaseModel):
    """
    A dependency downloaded from a git repository.

    Instances are immutable: the transport, identity, checkout and update
    policy are fixed at construction. The clone on disk is the only mutable
    state, and it is advanced through `gitle.git.operations`.

    Use the factory functions in `gitle.model.factories` rather than
    constructing this class directly.
    """

    model_config = ConfigDict(frozen=True)

    transport: Transport = Field(..., description="Transport kind")
    host: str = Field(..., description="Host (or GitLab server) of the repository")
    slug: str = Field(..., description="Path of the repository on the host")
    user: Optional[str] = Field(None, description="SSH user")
    credentials: Optional[str] = Field(
        None, description="Credentials embedded in HTTPS URLs", repr=False
    )
    checkout: Optional[str] = Field(None, description="Branch, tag or commit")
    update_policy: Optional[UpdatePolicy] = Field(
        None, description="Update policy, None uses the configured default"
    )

    @field_validator("host", "slug")
    @classmethod
    def validate_identity(cls, v: str) -> str:
        return validate_non_empty_string(v)

    @field_validator("checkout")
    @classmethod
    def validate_checkout(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_payload(self) -> "GitDependency":
        if self.transport == Transport.ssh and not self.user:
            raise ValueError("SSH dependencies need a user")
        if self.credentials and self.transport not in HTTPS_FAMILY:
            raise ValueError(
                f"Credentials are not supported over {self.transport.value}"
            )
        return self

    @property
    def repository_url(self) -> str:
        """Fully qualified clone URL."""
        return TRANSPORT_RULES[self.transport].repository_url(self)

    @property
    def display_url(self) -> str:
        """Clone URL with any embedded credentials masked."""
        if not self.credentials:
            return self.repository_url
        return self.model_copy(update={"credentials": "***"}).repository_url

    @property
    def folder_parent(self) -> str:
        return self.transport.value

    @property
    def folder_name(self) -> str:
        return TRANSPORT_RULES[self.transport].folder_name(self)

    @property
    def relative_folder(self) -> Path:
        """Folder relative to the cache root."""
        return relative_folder(self.folder_parent, self.folder_name, self.checkout)

    @property
    def identity_hash(self) -> str:
        """Stable digest of the repository URL and checkout ref."""
        repr = f"{self.repository_url}@{self.checkout or DEFAULT_CHECKOUT}"
        return hashlib.sha256(repr.encode("utf-8")).hexdigest()

    # GitHub / Bitbucket views

    @property
    def username(self) -> str:
        return self.slug.partition("/")[0]

    @property
    def repo_name(self) -> str:
        return self.slug.partition("/")[2]

    @property
    def access_token(self) -> Optional[str]:
        return self.credentials

    # GitLab views

    @property
    def server(self) -> str:
        return self.host

    @property
    def project_id(self) -> str:
        return self.slug

    @property
    def login_username(self) -> Optional[str]:
        if not self.credentials:
            return None
        return self.credentials.partition(":")[0]

    @property
    def token(self) -> Optional[str]:
        if not self.credentials or ":" not in self.credentials:
            return None
        return self.credentials.partition(":")[2]

    def __str__(self) -> str:
        return self.display_url
