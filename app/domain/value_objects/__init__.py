"""Domain value objects."""

from app.domain.value_objects.phone import PhoneNumber, is_valid_e164

__all__ = ["PhoneNumber", "is_valid_e164"]
