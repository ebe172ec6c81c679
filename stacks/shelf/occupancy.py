"""
ShelfOccupancy Value Object

How full a shelf is, derived from its live book count and its capacity.
"""

from enum import Enum


class ShelfOccupancy(str, Enum):
    """
    Occupancy of a single shelf.

    Placements move a shelf towards FULL and removals move it towards EMPTY.
    A FULL shelf rejects further placements.
    """

    EMPTY = "empty"
    PARTIAL = "partial"
    FULL = "full"

    @classmethod
    def of(cls, book_count: int, capacity: int) -> "ShelfOccupancy":
        """
        Classify a shelf.

        Args:
            book_count: Books currently on the shelf
            capacity: Maximum books the shelf holds

        Returns:
            ShelfOccupancy instance
        """
        if book_count >= capacity:
            return cls.FULL
        if book_count == 0:
            return cls.EMPTY
        return cls.PARTIAL

    def accepts_placement(self) -> bool:
        return self is not ShelfOccupancy.FULL

    def can_transition_to(self, new_state: "ShelfOccupancy", placing: bool) -> bool:
        """
        Check if a placement or removal may move the shelf to new_state.

        Args:
            new_state: Target state
            placing: True for a placement, False for a removal

        Returns:
            True if transition is allowed
        """
        if placing:
            valid_transitions = {
                ShelfOccupancy.EMPTY: {ShelfOccupancy.PARTIAL, ShelfOccupancy.FULL},
                ShelfOccupancy.PARTIAL: {ShelfOccupancy.PARTIAL, ShelfOccupancy.FULL},
                ShelfOccupancy.FULL: set(),
            }
        else:
            valid_transitions = {
                ShelfOccupancy.EMPTY: set(),
                ShelfOccupancy.PARTIAL: {ShelfOccupancy.PARTIAL, ShelfOccupancy.EMPTY},
                ShelfOccupancy.FULL: {ShelfOccupancy.PARTIAL, ShelfOccupancy.EMPTY},
            }

        return new_state in valid_transitions.get(self, set())
