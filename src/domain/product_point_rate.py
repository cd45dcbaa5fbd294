"""Product Point Rate Domain Entity

Per catalog item earning configuration. Maintained by admins; read-only
to the points engine.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Boolean, Numeric, String
from src.domain.base import BaseModel, BigIntId


class ProductPointRate(BaseModel, table=True):
    """
    Product Point Rate - earning rule for one catalog item

    Domain Rules:
    - item_id is unique
    - regular_points_per_unit applies per unit sold (customer billing only)
    - annual_pct applies to line revenue when annual_eligible is set
    - Inactive rates are ignored
    """

    __tablename__ = "product_point_rates"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    item_id: str = Field(
        sa_column=Column(String(100), nullable=False, unique=True, index=True),
        description="Catalog item id from the invoicing system"
    )

    item_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    regular_points_per_unit: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
    )

    annual_eligible: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
    )

    annual_pct: Decimal = Field(
        default=Decimal("1.00"),
        sa_column=Column(Numeric(5, 2), nullable=False, default=Decimal("1.00")),
        description="Percent of line revenue awarded to the annual pool"
    )

    category: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
    )

    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
    )

    updated_at: datetime = Field(default_factory=datetime.utcnow)
