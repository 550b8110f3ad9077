"""Update policies deciding when a cloned dependency gets refreshed."""

from enum import Enum
from typing import Union

_HOUR_MS = 60 * 60 * 1000


class UpdatePolicy(str, Enum):
    """Update policy for a git dependency."""

    ALWAYS = "always"
    IF_MISSING = "if_missing"
    IF_OUT_OF_DATE = "if_out_of_date"
    EVERY_HOUR = "every_hour"
    EVERY_DAY = "every_day"
    EVERY_WEEK = "every_week"

    @property
    def interval_ms(self) -> int:
        """Refresh interval in milliseconds, `-1` when the policy is not time-based."""
        return _INTERVALS_MS.get(self, -1)

    @property
    def is_time_based(self) -> bool:
        return self.interval_ms >= 0

    @classmethod
    def default(cls) -> "UpdatePolicy":
        return cls.IF_OUT_OF_DATE

    @classmethod
    def parse(cls, value: Union["UpdatePolicy", str]) -> "UpdatePolicy":
        """
        Resolve a policy from an enum member or a case-insensitive name.

        Both `IF_MISSING` and `if-missing` resolve to `UpdatePolicy.IF_MISSING`.

        Raises:
            ValueError: if the name is not a known policy
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(
                f"Unknown update policy '{value}'. Expected one of: {choices}"
            )


_INTERVALS_MS = {
    UpdatePolicy.ALWAYS: 0,
    UpdatePolicy.EVERY_HOUR: _HOUR_MS,
    UpdatePolicy.EVERY_DAY: 24 * _HOUR_MS,
    UpdatePolicy.EVERY_WEEK: 7 * 24 * _HOUR_MS,
}
