"""Referral Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.referral import ReferralRelationship


class ReferralRepository(ABC):

    @abstractmethod
    async def get_active_by_referred_id(
        self, referred_id: int, for_update: bool = False
    ) -> Optional[ReferralRelationship]:
        """
        Retrieve the active relationship in which the account is the referred party

        Args:
            referred_id: Referred account ID
            for_update: If True, lock the row so bill counts cannot race

        Returns:
            ReferralRelationship if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, referral: ReferralRelationship) -> ReferralRelationship:
        pass
