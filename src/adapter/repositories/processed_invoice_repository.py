"""SQLAlchemy implementation of ProcessedInvoiceRepository

Idempotency enforcement via unique constraint on external_invoice_id.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.processed_invoice_repository import ProcessedInvoiceRepository
from src.domain.base import round_points
from src.domain.processed_invoice import ProcessedInvoice, BillingType


class SqlAlchemyProcessedInvoiceRepository(ProcessedInvoiceRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_external_id(self, external_invoice_id: str) -> Optional[ProcessedInvoice]:
        stmt = select(ProcessedInvoice).where(
            ProcessedInvoice.external_invoice_id == external_invoice_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, invoice: ProcessedInvoice) -> ProcessedInvoice:
        """
        Record a processed invoice

        Raises:
            IntegrityError: If external_invoice_id already exists (concurrent duplicate)
        """
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_total_between(self, account_id: int, start: date, end: date) -> Decimal:
        stmt = (
            select(func.coalesce(func.sum(ProcessedInvoice.invoice_total), 0))
            .where(ProcessedInvoice.account_id == account_id)
            .where(ProcessedInvoice.invoice_date >= start)
            .where(ProcessedInvoice.invoice_date <= end)
        )
        result = await self.session.execute(stmt)
        return round_points(result.scalar() or 0)

    async def get_oldest_self_billed(
        self, account_id: int, after: Optional[date] = None
    ) -> Optional[ProcessedInvoice]:
        stmt = (
            select(ProcessedInvoice)
            .where(ProcessedInvoice.account_id == account_id)
            .where(ProcessedInvoice.billing_type == BillingType.SELF)
            .where(ProcessedInvoice.invoice_date.is_not(None))
        )
        if after is not None:
            stmt = stmt.where(ProcessedInvoice.invoice_date > after)

        stmt = stmt.order_by(ProcessedInvoice.invoice_date.asc(), ProcessedInvoice.id.asc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_account_id(
        self, account_id: int, limit: int = 50, offset: int = 0
    ) -> Tuple[List[ProcessedInvoice], int]:
        count_stmt = select(func.count()).select_from(ProcessedInvoice).where(
            ProcessedInvoice.account_id == account_id
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar() or 0

        stmt = (
            select(ProcessedInvoice)
            .where(ProcessedInvoice.account_id == account_id)
            .order_by(ProcessedInvoice.processed_at.desc(), ProcessedInvoice.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
