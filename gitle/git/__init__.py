"""
Git operations for gitle dependencies.

`operations` drives the external `git` client and the project build tools
for one dependency; `marker` persists the freshness timestamps used by the
time-based update policies.
"""

from .operations import (
    RefreshAction,
    check_update,
    checkout,
    clone,
    is_up_to_date,
    publish,
    update,
)

__all__ = [
    "RefreshAction",
    "check_update",
    "checkout",
    "clone",
    "is_up_to_date",
    "publish",
    "update",
]
