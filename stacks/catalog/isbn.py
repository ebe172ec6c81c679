"""
Isbn Value Object

Immutable, validated ISBN as entered by a cataloguer (hyphens allowed).
"""

import re
from dataclasses import dataclass

from stacks.errors import InvalidArgument

_ISBN_CHARS = re.compile(r"[0-9\-]+")


@dataclass(frozen=True)
class Isbn:
    """
    ISBN-10 or ISBN-13, with or without hyphens.

    Checksums are not verified; only the shape of the value is.
    """

    value: str

    def __post_init__(self):
        """Validate the raw ISBN."""
        raw = self.value
        if raw is None or not raw.strip():
            raise InvalidArgument("ISBN cannot be null or empty", field="isbn")
        if not _ISBN_CHARS.fullmatch(raw):
            raise InvalidArgument("ISBN can only contain digits and hyphens", field="isbn")
        if len(raw) > 17:
            raise InvalidArgument("ISBN length cannot exceed 17 characters including hyphens", field="isbn")
        if raw.count("-") > 4:
            raise InvalidArgument("ISBN cannot contain more than 4 hyphens", field="isbn")
        if "--" in raw:
            raise InvalidArgument("ISBN cannot contain consecutive hyphens", field="isbn")
        if raw.startswith("-") or raw.endswith("-"):
            raise InvalidArgument("ISBN cannot start or end with a hyphen", field="isbn")
        if len(raw) < 10:
            raise InvalidArgument("ISBN length must be at least 10 characters", field="isbn")

    def normalized(self) -> str:
        """Digits only, used for storage and duplicate detection."""
        return self.value.replace("-", "")

    def __str__(self) -> str:
        return self.value
