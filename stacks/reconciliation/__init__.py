# stacks/reconciliation/__init__.py
from .models import CascadeJournal, CascadeStatus
from .journal import CascadeJournalRepository
from .reconciler import Reconciler, ReconciliationReport, DanglingReference

__all__ = [
    'CascadeJournal',
    'CascadeStatus',
    'CascadeJournalRepository',
    'Reconciler',
    'ReconciliationReport',
    'DanglingReference'
]
