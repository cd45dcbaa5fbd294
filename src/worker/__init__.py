"""Background workers for the points engine"""
from .slab_evaluator import SlabEvaluatorWorker
from .credit_overdue import CreditOverdueWorker
from .ledger_reconciler import LedgerReconcilerWorker

__all__ = ["SlabEvaluatorWorker", "CreditOverdueWorker", "LedgerReconcilerWorker"]
