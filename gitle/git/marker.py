"""Freshness markers recording when a dependency was last updated."""

import logging
import time
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def current_time_ms() -> int:
    return int(time.time() * 1000)


def marker_path(folder: Path, identity_hash: str) -> Path:
    """Marker file of a dependency, stored inside its folder."""
    return folder / f"gitle-{identity_hash}.lastUpdated"


def read_marker(path: Path) -> Optional[int]:
    """
    Read the millisecond timestamp stored in a marker.

    Returns None when the marker is missing or unreadable, which callers
    treat as "never updated".
    """
    if not path.exists():
        return None

    try:
        return int(path.read_text().strip())
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable freshness marker {path}: {e}")
        return None


def write_marker(path: Path, timestamp_ms: Optional[int] = None) -> None:
    if timestamp_ms is None:
        timestamp_ms = current_time_ms()
    path.write_text(str(timestamp_ms))
