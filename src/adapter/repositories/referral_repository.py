"""SQLAlchemy implementation of ReferralRepository"""

from datetime import datetime
from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.referral_repository import ReferralRepository
from src.domain.referral import ReferralRelationship, ReferralStatus


class SqlAlchemyReferralRepository(ReferralRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_by_referred_id(
        self, referred_id: int, for_update: bool = False
    ) -> Optional[ReferralRelationship]:
        stmt = (
            select(ReferralRelationship)
            .where(ReferralRelationship.referred_id == referred_id)
            .where(ReferralRelationship.status == ReferralStatus.ACTIVE)
            .order_by(ReferralRelationship.id)
            .limit(1)
        )

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def update(self, referral: ReferralRelationship) -> ReferralRelationship:
        referral.updated_at = datetime.utcnow()
        self.session.add(referral)
        await self.session.flush()
        return referral
