"""The context threaded through every gitle operation."""

import logging
from pathlib import Path
from typing import Optional

from gitle.config import GitleSettings, get_root_dir, load_settings
from gitle.layout import resolve_folder
from gitle.model.dependency import GitDependency
from gitle.model.policy import UpdatePolicy
from gitle.network import is_online
from gitle.registry import DependencyRegistry

logger = logging.getLogger(__name__)


class GitleContext:
    """
    Settings, cache root and dependency registry of one build.

    Created once at configuration time and passed explicitly to the
    orchestrator and to every dependency operation.
    """

    def __init__(
        self,
        settings: GitleSettings,
        root_dir: Path,
        registry: Optional[DependencyRegistry] = None,
    ):
        self.settings = settings
        self.root_dir = Path(root_dir)
        self.registry = registry if registry is not None else DependencyRegistry()

        self.root_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def create(
        cls,
        settings: Optional[GitleSettings] = None,
        root_dir: Optional[Path] = None,
    ) -> "GitleContext":
        """Build a context, filling anything not given from the config file."""
        if settings is None:
            settings = load_settings()
        if root_dir is None:
            root_dir = get_root_dir()
        return cls(settings, Path(root_dir).expanduser())

    def folder_for(self, dependency: GitDependency) -> Path:
        return resolve_folder(self.root_dir, dependency)

    def policy_for(self, dependency: GitDependency) -> UpdatePolicy:
        if dependency.update_policy is None:
            return self.settings.default_update_policy
        return dependency.update_policy

    def is_online(self) -> bool:
        return is_online(
            offline=self.settings.offline_mode,
            url=self.settings.probe_url,
            timeout=self.settings.probe_timeout,
        )
