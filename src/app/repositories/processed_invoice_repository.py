"""Processed Invoice Repository Interface

Defines the contract for invoice idempotency records and the purchase
history queries built on them.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.processed_invoice import ProcessedInvoice


class ProcessedInvoiceRepository(ABC):

    @abstractmethod
    async def get_by_external_id(self, external_invoice_id: str) -> Optional[ProcessedInvoice]:
        """
        Retrieve processed invoice by its external invoice id

        Used to check if the invoice was already awarded (idempotency check).
        """
        pass

    @abstractmethod
    async def create(self, invoice: ProcessedInvoice) -> ProcessedInvoice:
        """
        Record a processed invoice

        Raises:
            IntegrityError: If external_invoice_id already exists
        """
        pass

    @abstractmethod
    async def get_total_between(self, account_id: int, start: date, end: date) -> Decimal:
        """Sum of invoice_total for invoices dated within [start, end]"""
        pass

    @abstractmethod
    async def get_oldest_self_billed(
        self, account_id: int, after: Optional[date] = None
    ) -> Optional[ProcessedInvoice]:
        """
        Retrieve the earliest-dated self-billed invoice

        Args:
            account_id: Account ID
            after: Only consider invoices dated strictly after this day

        Returns:
            ProcessedInvoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_account_id(
        self, account_id: int, limit: int = 50, offset: int = 0
    ) -> Tuple[List[ProcessedInvoice], int]:
        """Page of an account's processed invoices, newest first, with total count"""
        pass
