"""DTOs for setup status."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SetupStatus:
    setup_complete: bool
    owner_exists: bool
