"""Application configuration singleton entity."""

from dataclasses import dataclass


@dataclass
class AppConfigEntity:
    """Singleton record; setup_complete is written true by owner bootstrap."""

    id: str
    setup_complete: bool = False
