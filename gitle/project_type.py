"""Detection of the build tool used by a cloned project."""

import os
import platform
from enum import Enum
from pathlib import Path
from typing import List, Optional


def _is_windows() -> bool:
    return platform.system() == "Windows"


class ProjectType(Enum):
    """
    Build tools gitle knows how to publish to the local artifact cache.

    Detection follows declaration order; the first type with a marker file
    present in the project folder wins.
    """

    MAVEN = (
        "pom.xml",
        "dependency-reduced-pom.xml",
    )
    GRADLE = (
        "build.gradle",
        "build.gradle.kts",
        "gradlew",
        "gradlew.bat",
        "settings.gradle",
        "settings.gradle.kts",
        "gradle.properties",
    )

    @property
    def marker_files(self) -> List[str]:
        return list(self.value)

    def publish_command(self, windows: Optional[bool] = None) -> List[str]:
        """Command installing the project into the local artifact cache."""
        if windows is None:
            windows = _is_windows()

        if self is ProjectType.MAVEN:
            return ["mvn.cmd" if windows else "mvn", "install"]

        wrapper = "gradlew.bat" if windows else "gradlew"
        return [os.path.join(".", wrapper), "publishToMavenLocal"]


def detect_project_type(folder: Path) -> Optional[ProjectType]:
    """
    Classify a project folder by the marker files it contains.

    Returns:
        The first matching ProjectType, or None if the folder is missing or
        no marker file is present
    """
    folder = Path(folder)
    if not folder.is_dir():
        return None

    for project_type in ProjectType:
        if any((folder / name).exists() for name in project_type.marker_files):
            return project_type

    return None
