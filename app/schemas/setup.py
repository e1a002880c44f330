"""Setup status schema."""

from app.schemas.base import CamelModel


class SetupStatusResponse(CamelModel):
    setup_complete: bool
    owner_exists: bool
