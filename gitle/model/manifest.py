"""YAML manifest declaring the git dependencies of a build."""

from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from gitle.config import GitleSettings
from gitle.errors import GitleError, ManifestError

from .dependency import GitDependency
from .factories import bitbucket, github, gitlab, http, https, parse_dependency, ssh
from .policy import UpdatePolicy

DEFAULT_MANIFEST = "gitle.yaml"

_SOURCES = ("url", "github", "gitlab", "bitbucket", "ssh", "http")


class DependencyEntry(BaseModel):
    """A dependency declared as a mapping."""

    model_config = ConfigDict(extra="forbid")

    url: Optional[str] = Field(None, description="Repository URL of any transport")
    github: Optional[str] = Field(None, description="GitHub 'owner/repository'")
    gitlab: Optional[str] = Field(None, description="GitLab 'group/project'")
    bitbucket: Optional[str] = Field(None, description="Bitbucket 'owner/repository'")
    ssh: Optional[str] = Field(None, description="SSH URL 'user@host:path'")
    http: Optional[str] = Field(None, description="Plain HTTP URL (deprecated)")
    server: Optional[str] = Field(None, description="Custom GitLab server")
    checkout: Optional[str] = Field(None, description="Branch, tag or commit")
    update_policy: Optional[str] = Field(None, description="Update policy name")

    @model_validator(mode="after")
    def validate_single_source(self) -> "DependencyEntry":
        given = [name for name in _SOURCES if getattr(self, name) is not None]
        if len(given) != 1:
            raise ValueError(
                f"exactly one of {', '.join(_SOURCES)} is required, got {len(given)}"
            )
        if self.server is not None and self.gitlab is None:
            raise ValueError("'server' only applies to gitlab dependencies")
        if self.update_policy is not None:
            UpdatePolicy.parse(self.update_policy)
        return self

    def to_dependency(self) -> GitDependency:
        options = dict(checkout=self.checkout, update_policy=self.update_policy)
        if self.github is not None:
            return github(self.github, **options)
        if self.gitlab is not None:
            if self.server is not None:
                return gitlab(self.server, self.gitlab, **options)
            return gitlab(self.gitlab, **options)
        if self.bitbucket is not None:
            return bitbucket(self.bitbucket, **options)
        if self.ssh is not None:
            return ssh(self.ssh, **options)
        if self.http is not None:
            return http(self.http, **options)
        return parse_dependency(self.url, **options)


class ManifestSettings(BaseModel):
    """Settings a manifest may override; unset values keep the configured ones."""

    model_config = ConfigDict(extra="forbid")

    offline_mode: Optional[bool] = None
    show_output: Optional[bool] = None
    default_update_policy: Optional[str] = None
    command_timeout: Optional[Union[float, str]] = None
    continue_on_error: Optional[bool] = None
    rewrite_marker: Optional[bool] = None


class Manifest(BaseModel):
    """
    Dependencies of a build, loaded from YAML.

    Example:
        settings:
          default_update_policy: every_day
        dependencies:
          - https://github.com/CodeMC/API
          - github: gmitch215/gitle
            checkout: main
    """

    model_config = ConfigDict(extra="forbid")

    settings: ManifestSettings = Field(default_factory=ManifestSettings)
    dependencies: List[Union[str, DependencyEntry]] = Field(default_factory=list)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "Manifest":
        try:
            data: Any = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ManifestError(f"Invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ManifestError("A manifest must be a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ManifestError(f"Invalid manifest:\n{e}") from e

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Manifest":
        path = Path(path)
        try:
            text = path.read_text()
        except OSError as e:
            raise ManifestError(f"Could not read manifest {path}: {e}") from e
        return cls.from_yaml(text)

    def build_dependencies(self) -> List[GitDependency]:
        """
        Turn every entry into a GitDependency.

        Raises:
            ManifestError: naming the first entry that cannot be built
        """
        built = []
        for index, entry in enumerate(self.dependencies):
            try:
                if isinstance(entry, str):
                    built.append(parse_dependency(entry))
                else:
                    built.append(entry.to_dependency())
            except (GitleError, ValueError) as e:
                raise ManifestError(f"Dependency #{index + 1}: {e}") from e
        return built

    def apply(self, settings: GitleSettings) -> GitleSettings:
        """Overlay the manifest settings on top of `settings`."""
        try:
            return settings.merged(**self.settings.model_dump())
        except ValidationError as e:
            raise ManifestError(f"Invalid manifest settings:\n{e}") from e
