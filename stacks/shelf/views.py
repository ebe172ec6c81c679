from dataclasses import dataclass

from stacks.ids import BookcaseId, ShelfId
from .occupancy import ShelfOccupancy


@dataclass(frozen=True)
class ShelfOption:
    """A shelf offered as a placement target, with its live occupancy"""
    shelf_id: ShelfId
    bookcase_id: BookcaseId
    position: int
    label: str
    capacity: int
    current_count: int

    @property
    def has_space(self) -> bool:
        return self.current_count < self.capacity


@dataclass(frozen=True)
class ShelfSummary:
    shelf_id: ShelfId
    position: int
    label: str
    capacity: int
    book_count: int

    @property
    def occupancy(self) -> ShelfOccupancy:
        return ShelfOccupancy.of(self.book_count, self.capacity)
