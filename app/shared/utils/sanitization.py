"""Input sanitization for display names and record identifiers."""

import re
from typing import ClassVar

import nh3


class InputSanitizer:
    """
    Sanitize user inputs shown to other people (names in team lists and
    WhatsApp messages) and validate identifiers that reach store paths.
    """

    ALLOWED_TAGS: ClassVar[set[str]] = set()
    RECORD_ID_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[a-zA-Z0-9_]{1,64}$")
    WHITESPACE_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"\s+")

    @classmethod
    def sanitize_display_text(cls, value: str) -> str:
        """Strip all HTML with nh3 and collapse whitespace.

        Args:
            value: Raw user-provided text.

        Returns:
            Plain text safe to show in the UI or a message body.
        """
        if not value:
            return value
        cleaned = nh3.clean(value, tags=cls.ALLOWED_TAGS, attributes={})
        return cls.WHITESPACE_PATTERN.sub(" ", cleaned).strip()

    @classmethod
    def sanitize_record_id(cls, value: str) -> str:
        """Allow only record-id characters (alphanumeric and underscore).

        Raises:
            ValueError: If format is invalid.
        """
        if not value or not cls.RECORD_ID_PATTERN.match(value):
            raise ValueError("Invalid identifier format")
        return value


def sanitize_display_text(value: str) -> str:
    return InputSanitizer.sanitize_display_text(value)


def validate_record_id(value: str) -> str:
    """Validate and return a record id; raises ValueError if invalid."""
    return InputSanitizer.sanitize_record_id(value)
