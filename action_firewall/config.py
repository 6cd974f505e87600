"""
Configuration for the action firewall.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_MAX_DURATION = 300  # seconds
DEFAULT_MAX_ACTIONS = 500


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


@dataclass
class FirewallConfig:
    """Budgets and executor behaviour applied when a task does not override them."""

    default_max_duration: int = DEFAULT_MAX_DURATION
    default_max_actions: int = DEFAULT_MAX_ACTIONS
    verify_reads: bool = True
    type_delay_ms: int = 50

    def __post_init__(self):
        if self.default_max_duration <= 0:
            raise ValueError("default_max_duration must be positive")
        if self.default_max_actions <= 0:
            raise ValueError("default_max_actions must be positive")
        if self.type_delay_ms < 0:
            raise ValueError("type_delay_ms cannot be negative")

    @classmethod
    def from_env(cls, base: Optional["FirewallConfig"] = None) -> "FirewallConfig":
        """Build a config from ``FIREWALL_*`` environment variables."""
        base = base or cls()
        return cls(
            default_max_duration=_env_int("FIREWALL_MAX_DURATION", base.default_max_duration),
            default_max_actions=_env_int("FIREWALL_MAX_ACTIONS", base.default_max_actions),
            verify_reads=_env_bool("FIREWALL_VERIFY_READS", base.verify_reads),
            type_delay_ms=_env_int("FIREWALL_TYPE_DELAY_MS", base.type_delay_ms),
        )
