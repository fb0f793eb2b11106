"""Privacy levels applied to interpolated log values."""
from enum import Enum
from typing import Any


class PrivacyLevel(str, Enum):
    """Privacy level of a single value inside a log message.

    PUBLIC values are rendered verbatim, PRIVATE values are replaced by the
    redaction marker and HASHED values are replaced by their SHA-256 digest,
    which keeps repeated values correlatable across log lines.
    """

    PUBLIC = "public"
    PRIVATE = "private"
    HASHED = "hashed"

    @property
    def is_public(self) -> bool:
        return self is PrivacyLevel.PUBLIC

    @property
    def is_private(self) -> bool:
        return self is PrivacyLevel.PRIVATE

    @property
    def is_hashed(self) -> bool:
        return self is PrivacyLevel.HASHED

    @property
    def is_not_public(self) -> bool:
        return not self.is_public

    @classmethod
    def coerce(cls, value: Any) -> "PrivacyLevel":
        """Normalize a privacy tag.

        A missing tag (None) is PUBLIC. Strings match either the member
        name or its value, case-insensitively.

        Raises
        ------
            ValueError: If a string or object does not name a privacy level

        """
        if value is None:
            return cls.PUBLIC
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if normalized in (member.value, member.name.lower()):
                    return member
        raise ValueError(f"Unknown privacy level: {value!r}")
