"""SQLAlchemy implementation of ProductPointRateRepository"""

from typing import Dict, Iterable
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.product_point_rate_repository import ProductPointRateRepository
from src.domain.product_point_rate import ProductPointRate


class SqlAlchemyProductPointRateRepository(ProductPointRateRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_by_item_ids(self, item_ids: Iterable[str]) -> Dict[str, ProductPointRate]:
        item_ids = list(set(item_ids))
        if not item_ids:
            return {}

        stmt = (
            select(ProductPointRate)
            .where(ProductPointRate.item_id.in_(item_ids))
            .where(ProductPointRate.is_active == True)  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return {rate.item_id: rate for rate in result.scalars().all()}
