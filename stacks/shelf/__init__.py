# stacks/shelf/__init__.py
from .models import Shelf
from .occupancy import ShelfOccupancy
from .ports import BookAccessPort, BriefBibliographicRecord
from .repositories import ShelfRepository
from .views import ShelfOption, ShelfSummary
from .service import ShelfService, BookDisposal
from .placement import PlacementService
from .adapters import ShelfAccessAdapter

__all__ = [
    'Shelf',
    'ShelfOccupancy',
    'BookAccessPort',
    'BriefBibliographicRecord',
    'ShelfRepository',
    'ShelfOption',
    'ShelfSummary',
    'ShelfService',
    'BookDisposal',
    'PlacementService',
    'ShelfAccessAdapter'
]
