"""Adapter that implements the bookcase module's ShelfAccessPort.

The dependency arrow points from the shelf module to the bookcase module's
port, so the bookcase module never sees a Shelf.
"""

from typing import List

from stacks.bookcase.ports import ShelfAccessPort, ShelfSlot
from stacks.ids import BookcaseId, ShelfId
from .service import ShelfService


class ShelfAccessAdapter(ShelfAccessPort):

    def __init__(self, shelf_service: ShelfService):
        self.shelf_service = shelf_service

    def create_shelf(self, bookcase_id: BookcaseId, position: int, label: str, capacity: int) -> ShelfId:
        return self.shelf_service.create_shelf(bookcase_id, position, label, capacity)

    def delete_all_shelves_in_bookcase(self, bookcase_id: BookcaseId) -> int:
        return self.shelf_service.delete_all_shelves_in_bookcase(bookcase_id)

    def shelf_slots(self, bookcase_id: BookcaseId) -> List[ShelfSlot]:
        return [
            ShelfSlot(
                shelf_id=summary.shelf_id,
                position=summary.position,
                label=summary.label,
                capacity=summary.capacity,
                book_count=summary.book_count,
            )
            for summary in self.shelf_service.shelf_summaries(bookcase_id)
        ]
