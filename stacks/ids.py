"""
Identifier value objects.

Each module's identities get their own type so a shelf id can never be passed
where a bookcase id is expected. Two identifiers are equal only when both the
type and the wrapped value match: ``ShelfId(1) != BookcaseId(1)``.
"""

from dataclasses import dataclass

from .errors import InvalidArgument


@dataclass(frozen=True, order=True)
class Identifier:
    """Immutable positive integer identity."""

    value: int

    def __post_init__(self):
        """Validate the wrapped value."""
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidArgument(
                f"{type(self).__name__} must wrap an integer, got {self.value!r}",
                field=type(self).__name__,
            )
        if self.value < 1:
            raise InvalidArgument(
                f"{type(self).__name__} must be positive, got {self.value}",
                field=type(self).__name__,
            )

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


class BookcaseId(Identifier):
    pass


class ShelfId(Identifier):
    pass


class BookId(Identifier):
    pass


class AuthorId(Identifier):
    pass
