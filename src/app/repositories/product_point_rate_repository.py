"""Product Point Rate Repository Interface"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable
from src.domain.product_point_rate import ProductPointRate


class ProductPointRateRepository(ABC):

    @abstractmethod
    async def get_active_by_item_ids(self, item_ids: Iterable[str]) -> Dict[str, ProductPointRate]:
        """
        Retrieve active rates for the given catalog items

        Returns:
            Mapping of item_id to rate; items without an active rate are absent
        """
        pass
